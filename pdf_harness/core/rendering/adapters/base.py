"""
Adapter Base
============

Shared timing and failure handling for every generation adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional, Union
import time

from pdf_harness.config.logging import get_logger
from pdf_harness.core.rendering.template_resolver import AssetPolicy, TemplateResolver
from pdf_harness.models.schemas import AdapterId, RenderFailure, RenderRequest, RenderSuccess

logger = get_logger(__name__)


class GeneratedDocument(NamedTuple):
    pdf_bytes: bytes
    notes: Optional[str] = None


def elapsed_ms_since(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class GenerationAdapter(ABC):
    """Abstract base class for generation adapters."""

    adapter_id: AdapterId
    asset_policy: AssetPolicy = AssetPolicy.SKIP
    method: str = "programmatic"

    def __init__(self, resolver: TemplateResolver):
        self.resolver = resolver
        self.logger: Any = logger.bind(adapter=self.name)

    @property
    def name(self) -> str:
        return self.adapter_id.value

    async def render(self, request: RenderRequest) -> Union[RenderSuccess, RenderFailure]:
        """
        Produce a PDF for the request.

        Never raises for generation problems: every failure is returned as a
        RenderFailure carrying the elapsed time and the exception class name.
        """
        start = time.monotonic()
        try:
            document = await self.generate(request)
            if not document.pdf_bytes:
                raise ValueError("Generator returned an empty document")
        except Exception as e:
            elapsed = elapsed_ms_since(start)
            self.logger.error(
                "Render failed", error=str(e), error_type=type(e).__name__, elapsed_ms=elapsed
            )
            return RenderFailure(
                library=self.name,
                reason=str(e) or type(e).__name__,
                elapsed_ms=elapsed,
                error_type=type(e).__name__,
            )

        elapsed = elapsed_ms_since(start)
        self.logger.info("Render completed", elapsed_ms=elapsed, byte_length=len(document.pdf_bytes))
        return RenderSuccess(
            library=self.name,
            pdf_bytes=document.pdf_bytes,
            elapsed_ms=elapsed,
            method=self.method,
            notes=document.notes,
        )

    @abstractmethod
    async def generate(self, request: RenderRequest) -> GeneratedDocument:
        """Build the PDF. Implementations raise on failure."""
        pass
