"""
In-process Adapters
===================

Common ground for the programmatic PDF writers: raster image loading,
inline error markers for unusable images and thread offloading.
"""

from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
import asyncio
import io

from PIL import Image

from pdf_harness.core.rendering.adapters.base import GeneratedDocument, GenerationAdapter
from pdf_harness.core.rendering.template_resolver import (
    RASTER_ASSETS,
    VECTOR_ASSETS,
    Asset,
    AssetPolicy,
)
from pdf_harness.models.schemas import RenderRequest

TITLE = "Prescription Document"
PAGE_MARGIN = 20
IMAGE_BOX = 150
SVG_SKIPPED_NOTE = "SVG assets skipped (no native SVG support)"


@dataclass(frozen=True)
class RasterImage:
    """A raster asset ready to place, or the error marker that replaces it."""

    label: str
    asset: Optional[Asset] = None
    width: int = 0
    height: int = 0
    error: Optional[str] = None

    def fit(self, box: int = IMAGE_BOX) -> Tuple[float, float]:
        """Scale to fit inside a square box, keeping the aspect ratio."""
        scale = min(box / self.width, box / self.height)
        return self.width * scale, self.height * scale


def document_lines(request: RenderRequest) -> List[Tuple[str, str]]:
    """
    Flatten the request into ``(kind, text)`` rows shared by every writer.

    Kinds: ``field`` (plain line), ``heading``, ``medication``.
    """
    return [
        ("field", f"Date: {request.date}"),
        ("heading", "Patient Information"),
        ("field", f"Name: {request.patient_name}"),
        ("field", f"DOB: {request.patient_dob}"),
        ("heading", "Prescription Details"),
        ("medication", request.medication_name),
        ("field", f"Dosage: {request.dosage}"),
        ("field", f"Instructions: {request.instructions}"),
    ]


class InProcessAdapter(GenerationAdapter):
    """Adapter that writes the document itself instead of printing markup."""

    asset_policy = AssetPolicy.MARK
    library_label: str
    summary: str

    def skipped_vectors(self) -> List[str]:
        """Vector assets present in the asset directory that the writer cannot place."""
        skipped: List[str] = []
        for name in VECTOR_ASSETS:
            asset = self.resolver.load_asset(name)
            if asset is not None and asset.is_vector:
                skipped.append(name)
        return skipped

    def notes(self, skipped: List[str]) -> str:
        if not skipped:
            return f"{self.summary}. {SVG_SKIPPED_NOTE}"
        return f"{self.summary}. {SVG_SKIPPED_NOTE}: {', '.join(skipped)}"

    async def generate(self, request: RenderRequest) -> GeneratedDocument:
        images = self.load_images()
        skipped = self.skipped_vectors()
        if skipped:
            self.logger.debug("Vector assets skipped", assets=skipped)
        pdf_bytes = await asyncio.to_thread(self.build, request, images)
        return GeneratedDocument(pdf_bytes, self.notes(skipped))

    def load_images(self) -> List[RasterImage]:
        images: List[RasterImage] = []
        for name in RASTER_ASSETS:
            label = Path(name).suffix.lstrip(".").upper()
            asset = self.resolver.resolve_asset(name, self.asset_policy)
            if asset is None:
                path = self.resolver.asset_path(name)
                images.append(RasterImage(label, error=f"{label} Error: file not found at {path}"))
                continue

            try:
                with Image.open(io.BytesIO(asset.data)) as image:
                    width, height = image.size
            except OSError as e:
                self.logger.warning("Image unreadable", asset=name, error=str(e))
                images.append(RasterImage(label, error=f"{label} Error: {e}"))
                continue

            images.append(RasterImage(label, asset=asset, width=width, height=height))
        return images

    @abstractmethod
    def build(self, request: RenderRequest, images: List[RasterImage]) -> bytes:
        """Write the complete PDF. Runs in a worker thread."""
        pass
