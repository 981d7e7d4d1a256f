"""
Unit tests for the Pillow raster renderer.
"""

import io

import pytest
from PIL import Image

from gangsheet_toolkit.builder.output import PillowRasterRenderer, RendererUnavailable
from gangsheet_toolkit.builder.output import raster as raster_module
from gangsheet_toolkit.core.models import Project, Sheet

RED = (255, 0, 0, 255)


def _render(project, scale=1.0, background="#ffffff") -> Image.Image:
    data = PillowRasterRenderer().render(project, scale=scale, background=background)
    return Image.open(io.BytesIO(data)).convert("RGBA")


class TestPillowRasterRenderer:
    def test_when_rendered_then_canvas_is_sheet_size_times_scale(self, pixel_sheet):
        img = _render(Project(sheet=pixel_sheet), scale=0.5)
        assert img.size == (200, 150)

    def test_when_item_placed_then_pixels_drawn_at_position(self, pixel_sheet, make_item):
        # Arrange
        project = Project(sheet=pixel_sheet, items=(make_item("a", width=40, height=20, x=10, y=10),))

        # Act
        img = _render(project)

        # Assert
        assert img.getpixel((30, 20)) == RED
        assert img.getpixel((300, 200)) == (255, 255, 255, 255)

    def test_when_transparent_then_background_alpha_zero(self, pixel_sheet, make_item):
        project = Project(sheet=pixel_sheet, items=(make_item("a", x=10, y=10),))
        img = _render(project, background=None)
        assert img.getpixel((300, 200))[3] == 0
        assert img.getpixel((30, 20)) == RED

    def test_when_rotated_90_then_footprint_turns_about_center(self, pixel_sheet, make_item):
        # 40x20 item centered at (120, 110); rotated it covers x 110..130, y 90..130
        item = make_item("a", width=40, height=20, x=100, y=100, rotation=90)
        img = _render(Project(sheet=pixel_sheet, items=(item,)))
        assert img.getpixel((120, 95)) == RED
        assert img.getpixel((104, 110)) == (255, 255, 255, 255)

    def test_when_scaled_export_then_item_scaled(self, pixel_sheet, make_item):
        project = Project(sheet=pixel_sheet, items=(make_item("a", width=40, height=20, x=10, y=10),))
        img = _render(project, scale=2.0)
        assert img.getpixel((95, 55)) == RED
        assert img.getpixel((105, 65)) == (255, 255, 255, 255)

    def test_when_hidden_item_then_not_drawn(self, pixel_sheet, make_item):
        project = Project(sheet=pixel_sheet, items=(make_item("a", x=10, y=10, visible=False),))
        assert _render(project).getpixel((30, 20)) == (255, 255, 255, 255)

    def test_when_source_unreadable_then_item_skipped(self, pixel_sheet, make_item, caplog):
        broken = make_item("broken", source="data:image/png;base64,!!!")
        good = make_item("good", x=10, y=10)
        img = _render(Project(sheet=pixel_sheet, items=(broken, good)))
        assert img.getpixel((30, 20)) == RED
        assert "Skipping broken" in caplog.text

    def test_when_canvas_too_large_then_unavailable(self, monkeypatch):
        monkeypatch.setattr(raster_module, "MAX_CANVAS_PIXELS", 100)
        with pytest.raises(RendererUnavailable):
            PillowRasterRenderer().render(Project(sheet=Sheet("px", 20, 20, "pixel")), scale=1.0, background=None)
