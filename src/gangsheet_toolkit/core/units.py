"""
Module: core.units

Purpose:
    Convert between physical units and pixel space at a resolution.
    Pure functions, no state.

Key Functions:
    - to_pixels(): Physical value -> whole pixels
    - from_pixels(): Pixels -> physical value (display-stable rounding)
    - normalize_unit(): Accept unit aliases
    - px_to_pt(): Pixels -> PDF points

Dependencies:
    - math (std)

Used By:
    - core.models.sheet: Sheet pixel sizes
    - builder.output: Export dimensions
"""

from __future__ import annotations

import math

INCH = "inch"
CENTIMETER = "centimeter"
PIXEL = "pixel"

UNITS = (INCH, CENTIMETER, PIXEL)

# Fixed on-screen editing density; export density is chosen per project
DISPLAY_DPI = 96
CM_PER_INCH = 2.54
POINTS_PER_INCH = 72.0

_ALIASES = {
    "in": INCH,
    "inch": INCH,
    "inches": INCH,
    '"': INCH,
    "cm": CENTIMETER,
    "centimeter": CENTIMETER,
    "centimeters": CENTIMETER,
    "centimetre": CENTIMETER,
    "centimetres": CENTIMETER,
    "px": PIXEL,
    "pixel": PIXEL,
    "pixels": PIXEL,
}

# Decimal places kept by from_pixels() so repeated round-trips stay stable
_DISPLAY_PRECISION = {INCH: 3, CENTIMETER: 2}


def normalize_unit(unit: str) -> str:
    """
    Resolve a unit name or alias to its canonical form.

    Args:
        unit: Unit name like "in", "cm", "pixels"

    Returns:
        One of "inch", "centimeter", "pixel"

    Raises:
        ValueError: If the unit is not recognised
    """
    key = str(unit).strip().lower()
    if key not in _ALIASES:
        raise ValueError(f"Unknown unit: {unit!r} (expected one of {UNITS})")
    return _ALIASES[key]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_pixels(value: float, unit: str, resolution: float) -> int:
    """
    Convert a physical measurement to pixels.

    Args:
        value: Measurement in ``unit``
        unit: "inch", "centimeter" or "pixel"
        resolution: Pixels per inch

    Returns:
        Nearest whole pixel count

    Example:
        >>> to_pixels(22, "inch", 96)
        2112
        >>> to_pixels(2.54, "centimeter", 300)
        300
    """
    unit = normalize_unit(unit)
    if unit == PIXEL:
        return _round_half_up(value)
    if unit == INCH:
        return _round_half_up(value * resolution)
    return _round_half_up(value / CM_PER_INCH * resolution)


def from_pixels(pixels: float, unit: str, resolution: float) -> float:
    """
    Convert pixels back to a physical measurement.

    Inches keep 3 decimal places and centimeters 2, so values shown to
    the user don't drift under repeated conversions.

    Args:
        pixels: Pixel count
        unit: Target unit
        resolution: Pixels per inch

    Returns:
        Measurement in ``unit``
    """
    unit = normalize_unit(unit)
    if unit == PIXEL:
        return pixels
    if resolution <= 0:
        raise ValueError(f"resolution must be positive: {resolution}")
    inches = pixels / resolution
    if unit == INCH:
        return round(inches, _DISPLAY_PRECISION[INCH])
    return round(inches * CM_PER_INCH, _DISPLAY_PRECISION[CENTIMETER])


def px_to_pt(px: float, dpi: float) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * POINTS_PER_INCH / dpi
