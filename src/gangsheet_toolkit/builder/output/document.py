"""
Module: builder.output.document

Purpose:
    Default document generator built on ReportLab. Wraps the rendered
    raster into a single PDF page sized to the physical sheet.

Key Classes:
    - ReportLabDocumentRenderer: DocumentRenderer implementation

Dependencies:
    - reportlab: PDF generation
    - core.units: px_to_pt()

Used By:
    - builder.output.exporter: Document export
"""

from __future__ import annotations

import io
import logging

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from gangsheet_toolkit.core.models import Project
from gangsheet_toolkit.core.units import px_to_pt

from .services import DocumentRenderer, RendererUnavailable

logger = logging.getLogger(__name__)


class ReportLabDocumentRenderer(DocumentRenderer):
    """Single-page PDF with the raster drawn edge to edge."""

    def __init__(self, *, title: str = "Gang sheet") -> None:
        self.title = title

    def render(self, raster: bytes, project: Project) -> bytes:
        sheet = project.sheet
        width_px, height_px = sheet.export_size(project.export_dpi)
        width_pt = px_to_pt(width_px, project.export_dpi)
        height_pt = px_to_pt(height_px, project.export_dpi)

        try:
            reader = ImageReader(io.BytesIO(raster))
        except Exception as e:
            raise RendererUnavailable(f"Raster could not be read for PDF: {e}") from e

        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(width_pt, height_pt))
        c.setTitle(self.title)
        # PDF origin is bottom-left; the raster covers the whole page
        c.drawImage(reader, 0, 0, width=width_pt, height=height_pt, mask="auto")
        c.showPage()
        c.save()

        logger.info(f"Rendered PDF page {width_pt:.1f}x{height_pt:.1f}pt")
        return buf.getvalue()
