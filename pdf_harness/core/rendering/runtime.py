"""
Rendering Runtime
=================

Composition root for rendering: owns one session manager per engine, the
template resolver and the adapter registry. The API and CLI each hold a
single runtime for their process lifetime and shut it down on exit.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio

from pdf_harness.config.logging import get_logger
from pdf_harness.config.settings import Settings, get_settings
from pdf_harness.core.rendering.engines import create_engine, find_chromium_executable
from pdf_harness.core.rendering.registry import AdapterRegistry, build_registry
from pdf_harness.core.rendering.session import RendererSessionManager
from pdf_harness.core.rendering.template_resolver import TemplateResolver
from pdf_harness.models.schemas import (
    AdapterId,
    EngineKind,
    RenderFailure,
    RenderRequest,
    RenderSuccess,
    SessionHealth,
)

logger = get_logger(__name__)


class RenderingRuntime:
    """Process-wide rendering collaborators."""

    def __init__(
        self,
        session_managers: Dict[EngineKind, RendererSessionManager],
        resolver: TemplateResolver,
        registry: Optional[AdapterRegistry] = None,
        output_path: Optional[Path] = None,
        persist_outputs: bool = True,
    ):
        self.session_managers = session_managers
        self.resolver = resolver
        self.registry = registry or build_registry(resolver, session_managers)
        self.output_path = output_path
        self.persist_outputs = persist_outputs and output_path is not None
        self.logger: Any = logger.bind(component="runtime")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RenderingRuntime":
        settings = settings or get_settings()
        executable_path = find_chromium_executable(settings.chromium_executable_path)

        session_managers = {
            kind: RendererSessionManager.from_settings(
                create_engine(kind, settings.playwright_headless, executable_path), settings
            )
            for kind in EngineKind
        }
        return cls(
            session_managers,
            TemplateResolver(settings.assets_path),
            output_path=settings.output_path,
            persist_outputs=settings.persist_outputs,
        )

    async def generate(
        self, adapter_id: AdapterId, request: RenderRequest
    ) -> Union[RenderSuccess, RenderFailure]:
        """Run one adapter and persist its output on success."""
        result = await self.registry.get(adapter_id).render(request)
        if isinstance(result, RenderSuccess) and self.persist_outputs:
            result = await self._persist(result)
        return result

    async def generate_all(
        self, request: RenderRequest
    ) -> List[Union[RenderSuccess, RenderFailure]]:
        """Run every adapter in registry order, one after another."""
        results = []
        for adapter in self.registry:
            results.append(await self.generate(adapter.adapter_id, request))
        return results

    async def health_checks(self) -> List[SessionHealth]:
        return [await manager.health_check() for manager in self.session_managers.values()]

    async def shutdown(self) -> None:
        for manager in self.session_managers.values():
            await manager.shutdown()
        self.logger.info("Rendering runtime shut down")

    async def _persist(self, result: RenderSuccess) -> RenderSuccess:
        assert self.output_path is not None
        target = self.output_path / f"{result.library}-output.pdf"
        try:
            await asyncio.to_thread(self._write, target, result.pdf_bytes)
        except OSError as e:
            self.logger.warning("Could not persist output", path=str(target), error=str(e))
            return result
        return result.model_copy(update={"output_path": str(target)})

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
