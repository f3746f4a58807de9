"""
Engine-backed Adapters
======================

Render the prescription template in a shared Chromium session and print it.
"""

from pathlib import Path
import tempfile

from pdf_harness.core.rendering.adapters.base import GeneratedDocument, GenerationAdapter
from pdf_harness.core.rendering.session import RendererSessionManager
from pdf_harness.core.rendering.template_resolver import AssetPolicy, TemplateResolver
from pdf_harness.models.schemas import AdapterFamily, AdapterId, AssetMode, RenderRequest

EMBEDDED_NOTES = "Using base64 data URIs - assets embedded in HTML"
BASE_URL_NOTES = "Using file paths with baseURL - assets resolved against the asset directory"


class EngineAdapter(GenerationAdapter):
    """Adapter that borrows a rendering context from its engine's session manager."""

    asset_policy = AssetPolicy.SKIP

    def __init__(
        self,
        adapter_id: AdapterId,
        resolver: TemplateResolver,
        session_manager: RendererSessionManager,
    ):
        if adapter_id.family is not AdapterFamily.ENGINE:
            raise ValueError(f"{adapter_id.value} is not an engine-backed adapter")
        if session_manager.engine.kind is not adapter_id.engine:
            raise ValueError(
                f"{adapter_id.value} needs a {adapter_id.engine.value} session manager, "
                f"got {session_manager.engine.kind.value}"
            )

        self.adapter_id = adapter_id
        self.session_manager = session_manager
        super().__init__(resolver)

    @property
    def method(self) -> str:  # type: ignore[override]
        if self.adapter_id.asset_mode is AssetMode.EMBEDDED:
            return "base64 (data URIs)"
        return "baseURL (file paths)"

    async def generate(self, request: RenderRequest) -> GeneratedDocument:
        if self.adapter_id.asset_mode is AssetMode.EMBEDDED:
            return await self._generate_embedded(request)
        return await self._generate_from_file(request)

    async def _generate_embedded(self, request: RenderRequest) -> GeneratedDocument:
        markup = self.resolver.render_embedded(request, self.asset_policy)

        async with self.session_manager.rendering_context() as context:
            await context.load_html(markup)
            pdf_bytes = await context.print_pdf()

        return GeneratedDocument(pdf_bytes, EMBEDDED_NOTES)

    async def _generate_from_file(self, request: RenderRequest) -> GeneratedDocument:
        markup = self.resolver.render_base_url(request, self.asset_policy)

        with tempfile.NamedTemporaryFile(
            "w", suffix=".html", prefix=f"{self.name}-", encoding="utf-8", delete=False
        ) as handle:
            handle.write(markup)
        temp_path = Path(handle.name)

        try:
            async with self.session_manager.rendering_context() as context:
                await context.goto(temp_path.as_uri())
                pdf_bytes = await context.print_pdf()
        finally:
            temp_path.unlink(missing_ok=True)

        return GeneratedDocument(pdf_bytes, BASE_URL_NOTES)
