"""
Adapter Registry
================

Exhaustive mapping from AdapterId to adapter instance.
"""

from typing import Dict, Iterator, List, Mapping

from pdf_harness.core.errors import UnknownAdapter
from pdf_harness.core.rendering.adapters import (
    EngineAdapter,
    FPDFAdapter,
    GenerationAdapter,
    ReportLabCanvasAdapter,
    ReportLabPlatypusAdapter,
)
from pdf_harness.core.rendering.session import RendererSessionManager
from pdf_harness.core.rendering.template_resolver import TemplateResolver
from pdf_harness.models.schemas import AdapterFamily, AdapterId, EngineKind, LibraryInfo


class AdapterRegistry:
    """Every AdapterId must map to an adapter; lookups by name are validated."""

    def __init__(self, adapters: Mapping[AdapterId, GenerationAdapter]):
        missing = [adapter_id.value for adapter_id in AdapterId if adapter_id not in adapters]
        if missing:
            raise ValueError(f"No adapter registered for: {', '.join(missing)}")

        self._adapters: Dict[AdapterId, GenerationAdapter] = {
            adapter_id: adapters[adapter_id] for adapter_id in AdapterId
        }

    @staticmethod
    def parse(name: str) -> AdapterId:
        """
        Resolve a library name.

        Raises:
            UnknownAdapter: If the name is not registered
        """
        try:
            return AdapterId(name)
        except ValueError:
            raise UnknownAdapter(name, AdapterId.names())

    def get(self, adapter_id: AdapterId) -> GenerationAdapter:
        return self._adapters[adapter_id]

    def __iter__(self) -> Iterator[GenerationAdapter]:
        return iter(self._adapters.values())

    def __len__(self) -> int:
        return len(self._adapters)

    def describe(self) -> List[LibraryInfo]:
        return [
            LibraryInfo(name=adapter_id.value, description=adapter_id.description, family=adapter_id.family)
            for adapter_id in self._adapters
        ]


def build_registry(
    resolver: TemplateResolver, session_managers: Mapping[EngineKind, RendererSessionManager]
) -> AdapterRegistry:
    """Wire the standard adapter set onto the given resolver and session managers."""
    adapters: Dict[AdapterId, GenerationAdapter] = {}
    for adapter_id in AdapterId:
        if adapter_id.family is AdapterFamily.ENGINE:
            adapters[adapter_id] = EngineAdapter(
                adapter_id, resolver, session_managers[adapter_id.engine]
            )

    adapters[AdapterId.REPORTLAB_CANVAS] = ReportLabCanvasAdapter(resolver)
    adapters[AdapterId.REPORTLAB_PLATYPUS] = ReportLabPlatypusAdapter(resolver)
    adapters[AdapterId.FPDF2] = FPDFAdapter(resolver)
    return AdapterRegistry(adapters)
