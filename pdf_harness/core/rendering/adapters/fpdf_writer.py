"""
fpdf2 Adapter
=============

Page-level writer built on fpdf2 cells, in points on an A4 page.
"""

from typing import List
import io

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from pdf_harness.core.rendering.adapters.in_process import (
    PAGE_MARGIN,
    TITLE,
    InProcessAdapter,
    RasterImage,
    document_lines,
)
from pdf_harness.models.schemas import AdapterId, RenderRequest

FONT = "Helvetica"


def _latin1(text: str) -> str:
    """Core PDF fonts only cover Latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


class FPDFAdapter(InProcessAdapter):
    adapter_id = AdapterId.FPDF2
    library_label = "fpdf2"
    summary = "Lightweight low-level page API, native PNG/JPG support"

    def build(self, request: RenderRequest, images: List[RasterImage]) -> bytes:
        pdf = FPDF(unit="pt", format="A4")
        pdf.set_title(TITLE)
        pdf.set_margins(PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN)
        pdf.set_auto_page_break(auto=True, margin=PAGE_MARGIN)
        pdf.add_page()

        def write(text: str, style: str = "", size: int = 12, height: float = 18, align="L"):
            pdf.set_font(FONT, style=style, size=size)
            pdf.cell(0, height, _latin1(text), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        write(TITLE, size=24, height=36, align="C")
        for kind, text in document_lines(request):
            if kind == "heading":
                pdf.ln(6)
                write(text, style="U", size=18, height=26)
            elif kind == "medication":
                write(text, style="B", size=14, height=20)
            else:
                write(text)

        pdf.ln(6)
        write(f"Image Support ({self.library_label})", style="U", size=18, height=26)

        for image in images:
            if image.asset is None:
                pdf.set_text_color(255, 0, 0)
                write(image.error or f"{image.label} Error", size=10, height=16)
                pdf.set_text_color(0, 0, 0)
                continue

            write(f"{image.label} Image:")
            width, height = image.fit()
            pdf.image(io.BytesIO(image.asset.data), w=width, h=height)
            pdf.ln(12)

        return bytes(pdf.output())
