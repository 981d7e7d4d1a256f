"""
Module: builder.layout.engine

Purpose:
    Dispatch an auto-layout mode to its strategy.

Key Functions:
    - apply_auto_layout(): Run the strategy for a LayoutMode
    - check_bounds(): List items that fall outside the sheet

Used By:
    - builder.controller: Auto-layout action
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from gangsheet_toolkit.core.models import Item, LayoutMode, Sheet

from .compact import layout_compact
from .config import LayoutConfig
from .grid import layout_grid
from .smart_pack import layout_smart_pack

logger = logging.getLogger(__name__)

LayoutStrategy = Callable[[Sequence[Item], Sheet, Optional[LayoutConfig]], list[Item]]

STRATEGIES: dict[LayoutMode, LayoutStrategy] = {
    LayoutMode.GRID: layout_grid,
    LayoutMode.COMPACT: layout_compact,
    LayoutMode.SMART: layout_smart_pack,
}


def apply_auto_layout(
    items: Sequence[Item],
    sheet: Sheet,
    mode: LayoutMode | str,
    config: Optional[LayoutConfig] = None,
) -> list[Item]:
    """
    Arrange items with the strategy for ``mode``.

    Freeform returns the items unchanged. No strategy touches ids,
    intrinsic sizes or rotation.

    Args:
        items: Current items in z-order
        sheet: Target sheet
        mode: LayoutMode or its string value
        config: Layout configuration

    Returns:
        New list of items

    Raises:
        ValueError: If mode is not a known layout mode
    """
    mode = LayoutMode(mode)
    if mode is LayoutMode.FREEFORM:
        return list(items)

    strategy = STRATEGIES[mode]
    result = strategy(items, sheet, config)

    outside = check_bounds(result, sheet)
    if outside:
        logger.warning(f"{mode.value} layout left {len(outside)} items outside the sheet: {outside}")
    return result


def check_bounds(items: Sequence[Item], sheet: Sheet, tolerance: float = 1e-6) -> list[str]:
    """Return ids of items whose scaled box leaves the sheet."""
    return [
        item.id
        for item in items
        if not (
            item.x >= -tolerance
            and item.y >= -tolerance
            and item.x + item.scaled_width <= sheet.pixel_width + tolerance
            and item.y + item.scaled_height <= sheet.pixel_height + tolerance
        )
    ]
