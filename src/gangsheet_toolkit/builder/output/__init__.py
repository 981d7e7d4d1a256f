"""
Module: builder.output

Purpose:
    Export of a Project snapshot to SVG, PNG (Pillow) and PDF (ReportLab),
    with graceful degradation when a renderer is unavailable.

Key Functions:
    - render_svg(): Vector output
    - default_exporter(): Exporter wired to the bundled services

Dependencies:
    - PIL: Raster composition
    - reportlab: PDF generation

Used By:
    - builder.controller: export()
"""

from .services import DocumentRenderer, RasterRenderer, RendererUnavailable
from .vector import item_transform, render_svg
from .raster import PillowRasterRenderer
from .document import ReportLabDocumentRenderer
from .exporter import (
    ExportArtifact,
    ExportFormat,
    Exporter,
    default_exporter,
    export_filename,
)

__all__ = [
    "DocumentRenderer",
    "RasterRenderer",
    "RendererUnavailable",
    "item_transform",
    "render_svg",
    "PillowRasterRenderer",
    "ReportLabDocumentRenderer",
    "ExportArtifact",
    "ExportFormat",
    "Exporter",
    "default_exporter",
    "export_filename",
]
