"""
ReportLab Platypus Adapter
==========================

Declarative document built from Platypus flowables; layout and page
flow are left to the document template.
"""

from typing import Any, List
from xml.sax.saxutils import escape
import io

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer

from pdf_harness.core.rendering.adapters.in_process import (
    PAGE_MARGIN,
    TITLE,
    InProcessAdapter,
    RasterImage,
    document_lines,
)
from pdf_harness.models.schemas import AdapterId, RenderRequest


def _styles() -> dict:
    sample = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("PrescriptionTitle", parent=sample["Title"], alignment=TA_CENTER),
        "heading": ParagraphStyle("PrescriptionHeading", parent=sample["Heading2"], spaceBefore=12),
        "medication": ParagraphStyle(
            "PrescriptionMedication", parent=sample["Normal"], fontName="Helvetica-Bold", fontSize=14,
            leading=18,
        ),
        "field": sample["Normal"],
        "error": ParagraphStyle(
            "PrescriptionError", parent=sample["Normal"], fontSize=10, textColor=colors.red
        ),
    }


class ReportLabPlatypusAdapter(InProcessAdapter):
    adapter_id = AdapterId.REPORTLAB_PLATYPUS
    library_label = "ReportLab Platypus"
    summary = "Declarative flowable layout, native PNG/JPG support"

    def build(self, request: RenderRequest, images: List[RasterImage]) -> bytes:
        buffer = io.BytesIO()
        document = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=TITLE,
        )
        styles = _styles()

        # Paragraph parses inline markup, so user text is escaped
        story: List[Any] = [Paragraph(TITLE, styles["title"])]
        for kind, text in document_lines(request):
            story.append(Paragraph(escape(text), styles[kind]))

        story.append(Paragraph(f"Image Support ({self.library_label})", styles["heading"]))
        for image in images:
            if image.asset is None:
                story.append(Paragraph(escape(image.error or ""), styles["error"]))
                continue

            width, height = image.fit()
            story.append(Paragraph(f"{image.label} Image:", styles["field"]))
            story.append(
                Image(io.BytesIO(image.asset.data), width=width, height=height, hAlign="LEFT")
            )
            story.append(Spacer(1, 12))

        document.build(story)
        return buffer.getvalue()
