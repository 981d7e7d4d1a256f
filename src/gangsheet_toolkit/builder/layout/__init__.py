"""
Module: builder.layout

Purpose:
    Automatic arrangement of items on a sheet.
    Every strategy is a pure function (items, sheet, config) -> items'.

Key Functions:
    - apply_auto_layout(): Main entry point, dispatches on LayoutMode
    - layout_grid(): Square-cell grid
    - layout_compact(): Left-to-right shelf fill
    - layout_smart_pack(): Sorted shelf bin-packing

Key Classes:
    - LayoutConfig: Margins, padding and scaling factors

Used By:
    - builder.controller: Auto-layout action
"""

from .config import LayoutConfig
from .grid import grid_columns, layout_grid
from .compact import layout_compact
from .smart_pack import Shelf, layout_smart_pack, pack_order
from .engine import STRATEGIES, apply_auto_layout, check_bounds

__all__ = [
    # Config
    "LayoutConfig",
    # Strategies
    "grid_columns",
    "layout_grid",
    "layout_compact",
    "Shelf",
    "layout_smart_pack",
    "pack_order",
    # Dispatch
    "STRATEGIES",
    "apply_auto_layout",
    "check_bounds",
]
