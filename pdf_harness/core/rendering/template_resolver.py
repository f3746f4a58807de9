"""
Template Resolver
=================

Turn a render request into final prescription markup.
Loads image assets from the asset directory, either inlined as base64 data
URIs or referenced by relative path under a ``<base href>``.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
import base64

import jinja2

from pdf_harness.config.logging import get_logger
from pdf_harness.core.errors import AssetNotFound
from pdf_harness.models.schemas import RenderRequest

logger = get_logger(__name__)


class AssetPolicy(str, Enum):
    """What a caller does when an asset is missing."""

    SKIP = "skip"
    MARK = "mark"
    FAIL = "fail"


MIME_TYPES = {
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

# Template variable -> asset file name
TEMPLATE_ASSETS: Dict[str, str] = {
    "testSvgSvgDataUri": "test-svg-svg.svg",
    "testSvgLogoDataUri": "test-svg-logo.svg",
    "testImagePngDataUri": "test-image-png.png",
    "testImageJpgDataUri": "test-image-jpg.jpg",
}

RASTER_ASSETS = ("test-image-png.png", "test-image-jpg.jpg")
VECTOR_ASSETS = ("test-svg-svg.svg", "test-svg-logo.svg")


@dataclass(frozen=True)
class Asset:
    """An asset file read into memory."""

    name: str
    path: Path
    mime_type: str
    data: bytes

    @property
    def is_vector(self) -> bool:
        return self.mime_type == "image/svg+xml"

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class TemplateResolver:
    """Jinja2-based prescription template renderer."""

    EMBEDDED_TEMPLATE = "prescription.html"
    BASE_URL_TEMPLATE = "prescription-baseurl.html"

    def __init__(self, assets_path: Path):
        self.assets_path = Path(assets_path).resolve()
        self.logger: Any = logger.bind(component="template_resolver")
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.assets_path)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
        )

    @property
    def base_href(self) -> str:
        """File URL of the asset directory with a trailing slash."""
        return self.assets_path.as_uri() + "/"

    def asset_path(self, name: str) -> Path:
        return self.assets_path / name

    def load_asset(self, name: str) -> Optional[Asset]:
        """
        Read an asset by file name.

        Returns:
            The asset, or None when the file does not exist
        """
        path = self.asset_path(name)
        if not path.is_file():
            return None

        mime_type = MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")
        return Asset(name=name, path=path, mime_type=mime_type, data=path.read_bytes())

    def resolve_asset(self, name: str, policy: AssetPolicy) -> Optional[Asset]:
        """
        Load an asset and apply the caller's missing-asset policy.

        Raises:
            AssetNotFound: If the asset is missing and the policy is FAIL
        """
        asset = self.load_asset(name)
        if asset is not None:
            return asset

        path = self.asset_path(name)
        if policy is AssetPolicy.FAIL:
            raise AssetNotFound(name, str(path))

        self.logger.warning("Asset missing", asset=name, path=str(path), policy=policy.value)
        return None

    def render_embedded(
        self, request: RenderRequest, policy: AssetPolicy = AssetPolicy.SKIP
    ) -> str:
        """Render markup with every available asset inlined as a data URI."""
        variables: Dict[str, Any] = request.template_variables()
        for variable, name in TEMPLATE_ASSETS.items():
            asset = self.resolve_asset(name, policy)
            variables[variable] = asset.data_uri() if asset else ""

        return self.env.get_template(self.EMBEDDED_TEMPLATE).render(**variables)

    def render_base_url(
        self, request: RenderRequest, policy: AssetPolicy = AssetPolicy.SKIP
    ) -> str:
        """Render markup that references assets by path relative to the asset directory."""
        available: List[str] = []
        for name in TEMPLATE_ASSETS.values():
            if self.resolve_asset(name, policy) is not None:
                available.append(name)

        variables: Dict[str, Any] = request.template_variables()
        variables["baseHref"] = self.base_href
        variables["available"] = available
        return self.env.get_template(self.BASE_URL_TEMPLATE).render(**variables)
