"""
Module: builder.layout.grid

Purpose:
    Arrange items in square grid cells, insertion order, row-major.

Algorithm:
    columns = ceil(sqrt(n)) regardless of item sizes
    cell    = floor((sheetW - 2 * margin) / columns)
    item i  -> column i % columns, row i // columns
    scale   = min(1, cell / intrinsicWidth)  (never upscales)

Dependencies:
    - builder.layout.config: LayoutConfig
    - builder.geometry: fit_to_sheet

Used By:
    - builder.layout.engine: apply_auto_layout()
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence

from gangsheet_toolkit.core.models import Item, Sheet

from ..geometry import fit_to_sheet
from .config import LayoutConfig

logger = logging.getLogger(__name__)


def grid_columns(count: int) -> int:
    """Number of grid columns for ``count`` items (at least 1)."""
    return max(1, math.ceil(math.sqrt(max(count, 1))))


def layout_grid(
    items: Sequence[Item],
    sheet: Sheet,
    config: Optional[LayoutConfig] = None,
) -> list[Item]:
    """
    Place items into a square-cell grid.

    Args:
        items: Items in insertion order
        sheet: Target sheet
        config: Layout configuration

    Returns:
        New list of items with positions and scales rewritten

    Example:
        >>> placed = layout_grid(four_items, sheet)
        >>> [(i.x, i.y) for i in placed]  # margin=20, cell=1036
        [(20, 20), (1056, 20), (20, 1056), (1056, 1056)]
    """
    config = config or LayoutConfig()
    if not items:
        return []

    margin = config.grid_margin
    columns = grid_columns(len(items))
    cell = max(1, (sheet.pixel_width - 2 * margin) // columns)

    placed: list[Item] = []
    for i, item in enumerate(items):
        col = i % columns
        row = i // columns
        scale = min(1.0, cell / item.width)
        moved = replace(
            item,
            x=margin + col * cell,
            y=margin + row * cell,
            scale=scale,
        )
        placed.append(fit_to_sheet(moved, sheet))

    logger.info(f"Grid layout: {len(items)} items in {columns} columns, cell {cell}px")
    return placed
