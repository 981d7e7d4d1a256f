"""
Unit tests for the export chain and its format fallback.
"""

import io

import pytest
from pypdf import PdfReader

from gangsheet_toolkit.builder.output import (
    DocumentRenderer,
    ExportFormat,
    Exporter,
    PillowRasterRenderer,
    RasterRenderer,
    RendererUnavailable,
    ReportLabDocumentRenderer,
    default_exporter,
    export_filename,
)
from gangsheet_toolkit.core.models import Project, Sheet, ViewState

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class BrokenRaster(RasterRenderer):
    def render(self, project, *, scale, background):
        raise RuntimeError("boom")


class OfflineDocument(DocumentRenderer):
    @property
    def available(self):
        return False

    def render(self, raster, project):
        raise AssertionError("must not be called when unavailable")


class RefusingDocument(DocumentRenderer):
    def render(self, raster, project):
        raise RendererUnavailable("no fonts")


class RecordingRaster(PillowRasterRenderer):
    def __init__(self):
        super().__init__()
        self.calls = []

    def render(self, project, *, scale, background):
        self.calls.append((scale, background))
        return super().render(project, scale=scale, background=background)


@pytest.fixture
def project(pixel_sheet, make_item):
    return Project(sheet=pixel_sheet, items=(make_item("a", x=10, y=10),), export_dpi=72, revision=4)


class TestExportFilename:
    def test_when_timestamp_given_then_prefixed_name(self):
        assert export_filename(ExportFormat.PNG, 1700000000000) == "gangsheet-1700000000000.png"

    def test_when_no_timestamp_then_current_time(self):
        name = export_filename(ExportFormat.SVG)
        assert name.startswith("gangsheet-") and name.endswith(".svg")


class TestExporterFullServices:
    def test_when_pdf_requested_then_single_page_at_physical_size(self, project):
        # Act
        artifact = default_exporter().export(project, ExportFormat.PDF, timestamp_ms=1)

        # Assert
        assert artifact.format is ExportFormat.PDF
        assert not artifact.degraded
        assert artifact.filename == "gangsheet-1.pdf"
        assert artifact.mime_type == "application/pdf"
        reader = PdfReader(io.BytesIO(artifact.data))
        assert len(reader.pages) == 1
        box = reader.pages[0].mediabox
        assert (float(box.width), float(box.height)) == pytest.approx((400, 300))

    def test_when_png_requested_then_png_bytes(self, project):
        artifact = default_exporter().export(project, "png")
        assert artifact.format is ExportFormat.PNG
        assert artifact.data.startswith(PNG_MAGIC)

    def test_when_svg_requested_then_svg_text(self, project):
        artifact = default_exporter().export(project, ExportFormat.SVG)
        assert artifact.data.startswith(b"<?xml")

    def test_artifact_carries_snapshot_revision(self, project):
        assert default_exporter().export(project, ExportFormat.SVG).revision == 4

    def test_when_unknown_format_then_raises(self, project):
        with pytest.raises(ValueError):
            default_exporter().export(project, "tiff")


class TestExporterFallback:
    def test_when_no_document_service_then_pdf_degrades_to_png(self, project):
        artifact = Exporter(PillowRasterRenderer(), None).export(project, ExportFormat.PDF)
        assert artifact.requested is ExportFormat.PDF
        assert artifact.format is ExportFormat.PNG
        assert artifact.degraded
        assert artifact.filename.endswith(".png")

    def test_when_document_unavailable_then_not_called(self, project):
        artifact = Exporter(PillowRasterRenderer(), OfflineDocument()).export(project, ExportFormat.PDF)
        assert artifact.format is ExportFormat.PNG

    def test_when_document_refuses_then_png(self, project):
        artifact = Exporter(PillowRasterRenderer(), RefusingDocument()).export(project, ExportFormat.PDF)
        assert artifact.format is ExportFormat.PNG

    def test_when_no_raster_service_then_pdf_degrades_to_svg(self, project):
        artifact = Exporter(None, ReportLabDocumentRenderer()).export(project, ExportFormat.PDF)
        assert artifact.format is ExportFormat.SVG
        assert artifact.data.startswith(b"<?xml")

    def test_when_raster_fails_then_png_degrades_to_svg(self, project, caplog):
        artifact = Exporter(BrokenRaster()).export(project, ExportFormat.PNG)
        assert artifact.format is ExportFormat.SVG
        assert "Raster renderer failed" in caplog.text

    def test_when_transparent_then_raster_gets_no_background(self, pixel_sheet):
        raster = RecordingRaster()
        project = Project(sheet=pixel_sheet, view=ViewState(transparent=True))
        Exporter(raster).export(project, ExportFormat.PNG)
        assert raster.calls == [(1.0, None)]

    def test_when_inch_sheet_then_raster_scale_is_dpi_ratio(self):
        raster = RecordingRaster()
        project = Project(sheet=Sheet("tiny", 1, 1, "inch"), export_dpi=48)
        Exporter(raster).export(project, ExportFormat.PNG)
        assert raster.calls == [(0.5, "#ffffff")]
