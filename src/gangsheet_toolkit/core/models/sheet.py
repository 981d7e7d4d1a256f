"""
Module: sheet

Purpose:
    Provides the Sheet dataclass - the fixed-size print substrate items
    are arranged within - and the built-in sheet presets.

Key Functions:
    - Sheet.pixel_width / pixel_height: Size at display resolution
    - Sheet.export_size(dpi): Size at an export resolution
    - get_preset(name): Look up a preset by name

Dependencies:
    - dataclasses (std)
    - core.units: Unit conversion

Used By:
    - builder.collection: Placement bounds
    - builder.layout: Layout bounds
    - builder.output: Export dimensions
    - builder.persistence: Payload encoding
"""

from __future__ import annotations

from dataclasses import dataclass

from ..units import CENTIMETER, DISPLAY_DPI, INCH, PIXEL, normalize_unit, to_pixels


@dataclass(frozen=True, slots=True)
class Sheet:
    """
    Print sheet specification.

    Physical size plus the fixed display resolution used for on-screen
    editing geometry. The export resolution is NOT part of the sheet; it
    lives on the project and is only used when producing output.

    Attributes:
        name: Preset name or "custom"
        width: Width in ``unit``
        height: Height in ``unit``
        unit: "inch", "centimeter" or "pixel"
        display_dpi: Editing resolution (pixels per inch)

    Example:
        >>> sheet = Sheet("22x24", 22, 24, "inch")
        >>> (sheet.pixel_width, sheet.pixel_height)
        (2112, 2304)
    """

    name: str
    width: float
    height: float
    unit: str = INCH
    display_dpi: int = DISPLAY_DPI

    def __post_init__(self) -> None:
        """Validate sheet on construction."""
        if self.width <= 0:
            raise ValueError(f"width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"height must be positive: {self.height}")
        if self.display_dpi <= 0:
            raise ValueError(f"display_dpi must be positive: {self.display_dpi}")
        # Frozen + slots: go through object.__setattr__ to canonicalise
        object.__setattr__(self, "unit", normalize_unit(self.unit))

    @property
    def pixel_width(self) -> int:
        """Width in editor pixels."""
        return to_pixels(self.width, self.unit, self.display_dpi)

    @property
    def pixel_height(self) -> int:
        """Height in editor pixels."""
        return to_pixels(self.height, self.unit, self.display_dpi)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (self.pixel_width, self.pixel_height)

    def export_size(self, dpi: int) -> tuple[int, int]:
        """
        Pixel size at an export resolution.

        Args:
            dpi: Export pixels per inch

        Returns:
            (width, height) in export pixels
        """
        return (
            to_pixels(self.width, self.unit, dpi),
            to_pixels(self.height, self.unit, dpi),
        )

    def contains(self, x: float, y: float, width: float, height: float) -> bool:
        """Check a box lies fully inside the sheet (editor pixels)."""
        return (
            x >= 0
            and y >= 0
            and x + width <= self.pixel_width
            and y + height <= self.pixel_height
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Sheet:
        return cls(
            name=data.get("name", "custom"),
            width=data["width"],
            height=data["height"],
            unit=data.get("unit", INCH),
        )


SHEET_PRESETS: dict[str, Sheet] = {
    "22x24": Sheet("22x24", 22, 24, INCH),
    "22x60": Sheet("22x60", 22, 60, INCH),
    "22x120": Sheet("22x120", 22, 120, INCH),
    "11x17": Sheet("11x17", 11, 17, INCH),
    "A3": Sheet("A3", 29.7, 42, CENTIMETER),
    "2000px": Sheet("2000px", 2000, 2000, PIXEL),
}

DEFAULT_PRESET = "22x24"


def get_preset(name: str) -> Sheet:
    """
    Look up a built-in sheet preset.

    Raises:
        KeyError: If no preset has that name
    """
    try:
        return SHEET_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown sheet preset: {name!r} (available: {sorted(SHEET_PRESETS)})"
        ) from None


def default_sheet() -> Sheet:
    return SHEET_PRESETS[DEFAULT_PRESET]
