"""
Module: builder.layout.compact

Purpose:
    Single-pass left-to-right shelf fill, wrapping to a new row when the
    next item would run past the sheet's right edge.

Algorithm:
    1. Scale each item by min(1, (sheetW - 2m) / (w * fit_factor))
    2. Place at the cursor; advance x by width + m
    3. If the item would exceed the sheet width, wrap:
       y = row top + tallest item in row + m, x = m

Dependencies:
    - builder.layout.config: LayoutConfig
    - builder.geometry: fit_to_sheet

Used By:
    - builder.layout.engine: apply_auto_layout()
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from gangsheet_toolkit.core.models import Item, Sheet

from ..geometry import fit_to_sheet
from .config import LayoutConfig

logger = logging.getLogger(__name__)


def layout_compact(
    items: Sequence[Item],
    sheet: Sheet,
    config: Optional[LayoutConfig] = None,
) -> list[Item]:
    """
    Fill rows left-to-right in insertion order.

    Args:
        items: Items in insertion order
        sheet: Target sheet
        config: Layout configuration

    Returns:
        New list of items with positions and scales rewritten
    """
    config = config or LayoutConfig()
    margin = config.compact_margin
    usable_width = max(1, sheet.pixel_width - 2 * margin)

    x = margin
    row_top = margin
    row_height = 0.0
    rows = 1
    placed: list[Item] = []

    for item in items:
        scale = min(1.0, usable_width / (item.width * config.compact_fit_factor))
        width = item.width * scale
        height = item.height * scale

        # Wrap unless this is the first item on the row
        if x + width > sheet.pixel_width - margin and x > margin:
            row_top = row_top + row_height + margin
            x = margin
            row_height = 0.0
            rows += 1

        placed.append(fit_to_sheet(replace(item, x=x, y=row_top, scale=scale), sheet))
        x += width + margin
        row_height = max(row_height, height)

    if row_top + row_height > sheet.pixel_height:
        logger.warning(
            f"Compact layout overflowed sheet height ({row_top + row_height:.0f}px > "
            f"{sheet.pixel_height}px); bottom rows were clamped onto the sheet"
        )
    logger.info(f"Compact layout: {len(placed)} items in {rows} rows")
    return placed
