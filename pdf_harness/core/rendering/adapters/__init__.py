"""
Generation Adapters
===================

One adapter per registered library, all behind the same
``render(request) -> RenderResult`` contract.
"""

from .base import GenerationAdapter, GeneratedDocument
from .browser import EngineAdapter
from .fpdf_writer import FPDFAdapter
from .in_process import InProcessAdapter, RasterImage
from .reportlab_canvas import ReportLabCanvasAdapter
from .reportlab_platypus import ReportLabPlatypusAdapter

__all__ = [
    "GenerationAdapter",
    "GeneratedDocument",
    "EngineAdapter",
    "FPDFAdapter",
    "InProcessAdapter",
    "RasterImage",
    "ReportLabCanvasAdapter",
    "ReportLabPlatypusAdapter",
]
