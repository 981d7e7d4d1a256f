"""
Module: builder.geometry

Purpose:
    Bounds helpers shared by every component that places items: keep a
    scaled bounding box inside the sheet.

Key Functions:
    - clamp_position(): Clamp a top-left corner for a box size
    - fit_to_sheet(): Shrink and clamp an item so it lies on the sheet
    - snap(): Round a coordinate to a grid pitch

Used By:
    - builder.collection: Upload, duplicate placement
    - builder.layout: Final pass of every strategy
    - builder.interaction.drag: Drag commit
"""

from __future__ import annotations

from dataclasses import replace

from gangsheet_toolkit.core.models import Item, Sheet


def clamp_position(
    x: float,
    y: float,
    width: float,
    height: float,
    sheet: Sheet,
) -> tuple[float, float]:
    """
    Clamp a top-left corner so the box stays inside the sheet.

    x is clamped to [0, sheetW - width] and y to [0, sheetH - height].
    When the box is larger than the sheet on an axis, that axis clamps
    to 0.

    Example:
        >>> clamp_position(-50, 5000, 100, 100, sheet)  # 2112x2304 sheet
        (0, 2204)
    """
    max_x = sheet.pixel_width - width
    max_y = sheet.pixel_height - height
    x = 0 if max_x <= 0 else min(max(x, 0), max_x)
    y = 0 if max_y <= 0 else min(max(y, 0), max_y)
    return x, y


def fit_to_sheet(item: Item, sheet: Sheet) -> Item:
    """
    Make an item lie fully on the sheet.

    Scale is reduced only when the scaled box is larger than the sheet;
    then the position is clamped. Items already inside are returned
    unchanged.
    """
    scale = min(
        item.scale,
        sheet.pixel_width / item.width,
        sheet.pixel_height / item.height,
    )
    x, y = clamp_position(
        item.x, item.y, item.width * scale, item.height * scale, sheet
    )
    if scale == item.scale and x == item.x and y == item.y:
        return item
    return replace(item, x=x, y=y, scale=scale)


def snap(value: float, grid_size: int) -> float:
    """Round a coordinate to the nearest multiple of grid_size."""
    return round(value / grid_size) * grid_size
