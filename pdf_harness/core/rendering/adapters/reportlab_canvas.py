"""
ReportLab Canvas Adapter
========================

Low-level drawing with the ReportLab canvas: every string and image is
placed at explicit coordinates from the top of an A4 page.
"""

from typing import List
import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pdf_harness.core.rendering.adapters.in_process import (
    PAGE_MARGIN,
    TITLE,
    InProcessAdapter,
    RasterImage,
    document_lines,
)
from pdf_harness.models.schemas import AdapterId, RenderRequest

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


class ReportLabCanvasAdapter(InProcessAdapter):
    adapter_id = AdapterId.REPORTLAB_CANVAS
    library_label = "ReportLab canvas"
    summary = "Native PNG/JPG support via drawImage, manual layout"

    def build(self, request: RenderRequest, images: List[RasterImage]) -> bytes:
        buffer = io.BytesIO()
        page_width, page_height = A4
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(TITLE)

        y = page_height - PAGE_MARGIN

        def write(text: str, font: str = FONT, size: int = 12, gap: float = 6, underline=False):
            nonlocal y
            y -= size
            pdf.setFont(font, size)
            pdf.drawString(PAGE_MARGIN, y, text)
            if underline:
                text_width = pdf.stringWidth(text, font, size)
                pdf.line(PAGE_MARGIN, y - 2, PAGE_MARGIN + text_width, y - 2)
            y -= gap

        y -= 24
        pdf.setFont(FONT, 24)
        pdf.drawCentredString(page_width / 2, y, TITLE)
        y -= 18

        for kind, text in document_lines(request):
            if kind == "heading":
                y -= 6
                write(text, size=18, gap=10, underline=True)
            elif kind == "medication":
                write(text, font=BOLD_FONT, size=14)
            else:
                write(text)

        y -= 6
        write(f"Image Support ({self.library_label})", size=18, gap=10, underline=True)

        for image in images:
            if image.asset is None:
                pdf.setFillColor(colors.red)
                write(image.error or f"{image.label} Error", size=10, gap=10)
                pdf.setFillColor(colors.black)
                continue

            write(f"{image.label} Image:", gap=4)
            width, height = image.fit()
            y -= height
            pdf.drawImage(
                ImageReader(io.BytesIO(image.asset.data)), PAGE_MARGIN, y, width=width, height=height
            )
            y -= 12

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()
