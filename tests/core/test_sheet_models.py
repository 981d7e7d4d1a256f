"""
Unit tests for Sheet and sheet presets.
"""

import pytest

from gangsheet_toolkit.core.models import (
    DEFAULT_PRESET,
    SHEET_PRESETS,
    Sheet,
    default_sheet,
    get_preset,
)


class TestSheetInit:
    """Tests for Sheet construction."""

    def test_init_when_valid_then_normalizes_unit(self):
        sheet = Sheet("custom", 10, 5, "in")
        assert sheet.unit == "inch"

    def test_init_when_zero_width_then_raises(self):
        with pytest.raises(ValueError, match="width"):
            Sheet("bad", 0, 5)

    def test_init_when_negative_height_then_raises(self):
        with pytest.raises(ValueError, match="height"):
            Sheet("bad", 5, -1)

    def test_init_when_unknown_unit_then_raises(self):
        with pytest.raises(ValueError, match="Unknown unit"):
            Sheet("bad", 5, 5, "yard")


class TestSheetDimensions:
    """Tests for pixel and export sizes."""

    def test_when_22x24_inch_then_display_pixels_2112x2304(self):
        sheet = get_preset("22x24")
        assert sheet.pixel_size == (2112, 2304)

    def test_when_export_at_300_dpi_then_physical_size_times_dpi(self):
        sheet = get_preset("22x24")
        assert sheet.export_size(300) == (6600, 7200)

    def test_when_pixel_sheet_then_export_size_equals_pixel_size(self):
        sheet = Sheet("px", 400, 300, "pixel")
        assert sheet.export_size(300) == (400, 300)

    def test_when_centimeter_preset_then_converts(self):
        sheet = get_preset("A3")
        # 29.7cm / 2.54 * 96 = 1122.52 -> 1123
        assert sheet.pixel_width == 1123

    def test_contains_when_box_on_edge_then_true(self):
        sheet = Sheet("px", 100, 100, "pixel")
        assert sheet.contains(50, 50, 50, 50)
        assert not sheet.contains(51, 50, 50, 50)


class TestPresets:
    """Tests for preset lookup."""

    def test_when_default_then_22x24(self):
        assert DEFAULT_PRESET == "22x24"
        assert default_sheet() is SHEET_PRESETS["22x24"]

    def test_when_unknown_preset_then_key_error(self):
        with pytest.raises(KeyError, match="Unknown sheet preset"):
            get_preset("nope")

    def test_when_round_trip_dict_then_equal(self):
        sheet = get_preset("22x60")
        assert Sheet.from_dict(sheet.to_dict()) == sheet
