"""
Module: builder.pricing

Purpose:
    Price quotes by printed area: physical inches at the print resolution
    times a per-square-inch rate.

Key Functions:
    - quote_image(): Quote a single image from its pixel size
    - quote_sheet(): Quote a whole sheet from its physical size

Used By:
    - builder.controller: quote()
    - cli: build summary
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from gangsheet_toolkit.core.models import Sheet
from gangsheet_toolkit.core.units import CM_PER_INCH, CENTIMETER, INCH

PRICE_PER_SQUARE_INCH = 10
PRINT_DPI = 300


@dataclass(frozen=True)
class PriceQuote:
    """
    Printed size and price (immutable).

    Attributes:
        width_in: Printed width in inches
        height_in: Printed height in inches
        total: Price rounded to cents
    """

    width_in: float
    height_in: float
    total: Decimal

    @property
    def area(self) -> float:
        return self.width_in * self.height_in


def _to_cents(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def quote_image(
    width_px: int,
    height_px: int,
    *,
    dpi: int = PRINT_DPI,
    rate: float = PRICE_PER_SQUARE_INCH,
) -> PriceQuote:
    """
    Quote an image printed at ``dpi``.

    Example:
        >>> quote_image(600, 300).total
        Decimal('20.00')
    """
    if dpi <= 0:
        raise ValueError(f"dpi must be positive: {dpi}")
    width_in = width_px / dpi
    height_in = height_px / dpi
    return PriceQuote(width_in, height_in, _to_cents(width_in * height_in * rate))


def quote_sheet(sheet: Sheet, *, rate: float = PRICE_PER_SQUARE_INCH, dpi: int = PRINT_DPI) -> PriceQuote:
    """
    Quote a whole sheet.

    Physical sheets use their real size; pixel sheets are measured at
    ``dpi``.
    """
    if sheet.unit == INCH:
        width_in, height_in = sheet.width, sheet.height
    elif sheet.unit == CENTIMETER:
        width_in, height_in = sheet.width / CM_PER_INCH, sheet.height / CM_PER_INCH
    else:
        return quote_image(round(sheet.width), round(sheet.height), dpi=dpi, rate=rate)
    return PriceQuote(width_in, height_in, _to_cents(width_in * height_in * rate))
