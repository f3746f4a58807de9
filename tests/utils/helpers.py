"""
Test Helpers
============

Builders for runtimes wired to fake engines or fake adapters.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional

from pdf_harness.core.rendering.registry import AdapterRegistry
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.core.rendering.session import RendererSessionManager
from pdf_harness.core.rendering.template_resolver import TemplateResolver
from pdf_harness.models.schemas import AdapterId, EngineKind

from .mocks import FakeAdapter, FakeEngine


def make_session_manager(
    engine: FakeEngine,
    max_concurrent_contexts: int = 4,
    context_acquire_timeout: float = 1.0,
    launch_timeout: float = 1.0,
    render_timeout: float = 1.0,
) -> RendererSessionManager:
    """Session manager with short bounds suited to tests."""
    return RendererSessionManager(
        engine,
        max_concurrent_contexts=max_concurrent_contexts,
        context_acquire_timeout=context_acquire_timeout,
        launch_timeout=launch_timeout,
        load_timeout_ms=1000,
        render_timeout=render_timeout,
        settle_delay_ms=0,
    )


def make_runtime(
    engines: Dict[EngineKind, FakeEngine],
    resolver: TemplateResolver,
    output_path: Optional[Path] = None,
    persist_outputs: bool = True,
) -> RenderingRuntime:
    """Runtime with the standard adapter set on top of fake engines."""
    managers = {kind: make_session_manager(engine) for kind, engine in engines.items()}
    return RenderingRuntime(
        managers, resolver, output_path=output_path, persist_outputs=persist_outputs
    )


def make_fake_registry(failing: Iterable[AdapterId] = ()) -> AdapterRegistry:
    """Registry where every adapter is a FakeAdapter; ``failing`` ones always fail."""
    failing = set(failing)
    return AdapterRegistry(
        {adapter_id: FakeAdapter(adapter_id, fail=adapter_id in failing) for adapter_id in AdapterId}
    )
