"""
Module: builder.layout.smart_pack

Purpose:
    Deterministic shelf bin-packing. Packs the biggest items first into
    horizontal bands ("shelves"), scaling later items to the height of the
    shelf that takes them.

Algorithm:
    1. Sort by max(w, h) desc, then area desc, then original index
    2. For each item, try shelves top-to-bottom. A shelf accepts the item
       if, scaled to (shelf height - padding), it fits the shelf's
       remaining width. First accepting shelf wins.
    3. Otherwise open a new shelf below all others:
       height = min(item height, remaining sheet height), floored at
       min_shelf_height when space is scarce. The item is scaled to fit
       that height and the sheet width.
    4. Write positions back by id, in the caller's order.

    Sizes are intrinsic pixel sizes, so the result doesn't depend on the
    scales left over from a previous layout. Items joining an existing
    shelf are scaled up or down to match it; a new shelf never upscales.

Dependencies:
    - builder.layout.config: LayoutConfig
    - builder.geometry: fit_to_sheet

Used By:
    - builder.layout.engine: apply_auto_layout()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from gangsheet_toolkit.core.models import Item, Sheet

from ..geometry import fit_to_sheet
from .config import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass
class Shelf:
    """
    A horizontal packing band.

    Attributes:
        top: Y offset of the band
        height: Band height
        cursor: X where the next item goes (padding + used width)
    """

    top: float
    height: float
    cursor: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


def pack_order(items: Sequence[Item]) -> list[Item]:
    """
    Sort items for packing.

    Biggest max-dimension first; ties by larger area; remaining ties keep
    original order.
    """
    indexed = list(enumerate(items))
    indexed.sort(
        key=lambda pair: (
            -max(pair[1].width, pair[1].height),
            -(pair[1].width * pair[1].height),
            pair[0],
        )
    )
    return [item for _, item in indexed]


def layout_smart_pack(
    items: Sequence[Item],
    sheet: Sheet,
    config: Optional[LayoutConfig] = None,
) -> list[Item]:
    """
    Pack items onto shelves.

    Args:
        items: Items in insertion order
        sheet: Target sheet
        config: Layout configuration

    Returns:
        Items in the same order as given, with positions/scales rewritten.
        Identical input always gives identical output.
    """
    config = config or LayoutConfig()
    pad = config.pack_padding
    sheet_w = sheet.pixel_width
    sheet_h = sheet.pixel_height
    usable_width = max(1, sheet_w - 2 * pad)

    shelves: list[Shelf] = []
    packed: dict[str, Item] = {}

    for item in pack_order(items):
        placement = _place_on_existing(item, shelves, pad, sheet_w)
        if placement is None:
            shelf = _open_shelf(item, shelves, config, sheet_h)
            scale = min(1.0, shelf.height / item.height, usable_width / item.width)
            placement = (shelf.cursor, shelf.top, scale)
            shelf.cursor += item.width * scale + pad
            shelves.append(shelf)

        x, y, scale = placement
        packed[item.id] = fit_to_sheet(replace(item, x=x, y=y, scale=scale), sheet)

    logger.info(f"Smart pack: {len(packed)} items on {len(shelves)} shelves")

    # Ids not in the packed set pass through unchanged
    return [packed.get(item.id, item) for item in items]


def _place_on_existing(
    item: Item,
    shelves: list[Shelf],
    pad: int,
    sheet_w: int,
) -> Optional[tuple[float, float, float]]:
    """Try each shelf top-to-bottom; return (x, y, scale) or None."""
    for shelf in shelves:
        target_height = shelf.height - pad
        if target_height <= 0:
            continue
        scale = target_height / item.height
        width = item.width * scale
        if shelf.cursor + width <= sheet_w - pad:
            placement = (shelf.cursor, shelf.top, scale)
            shelf.cursor += width + pad
            return placement
    return None


def _open_shelf(
    item: Item,
    shelves: list[Shelf],
    config: LayoutConfig,
    sheet_h: int,
) -> Shelf:
    """Open a new shelf below all existing ones."""
    pad = config.pack_padding
    top = shelves[-1].bottom + pad if shelves else pad
    remaining = sheet_h - top - pad
    height = min(item.height, remaining)

    if height < config.min_shelf_height:
        height = min(config.min_shelf_height, sheet_h)
        top = max(0, min(top, sheet_h - height))
        logger.warning(
            f"Sheet space exhausted packing {item.id}; "
            f"opening a {height}px shelf at y={top:.0f}"
        )

    return Shelf(top=top, height=height, cursor=pad)
