"""
Module: builder.collection

Purpose:
    The mutable collection of placed items. Items themselves are frozen;
    every operation swaps in a new tuple so a reader never observes a
    half-applied change.

Key Classes:
    - ItemCollection: Ordered items (z-order) + selection + revision

Dependencies:
    - core.models: Item, Sheet
    - builder.geometry: clamp_position

Used By:
    - builder.controller: Workspace state
    - builder.interaction.drag: Position commits
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Optional

from gangsheet_toolkit.core.models import MUTABLE_FIELDS, Item, Sheet, new_item_id

from .geometry import clamp_position

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_OFFSET = 12
DEFAULT_AUTOFILL_LIMIT = 2500


class AutofillLimitExceeded(ValueError):
    """Autofill would create more tiles than the collection allows."""
    pass


class ItemCollection:
    """
    Ordered collection of items on one sheet.

    Insertion order is z-order. ``revision`` increases on every change and
    is what export uses to detect stale snapshots.

    Example:
        >>> items = ItemCollection(sheet)
        >>> items.add(item)
        >>> [c.id for c in items.duplicate(item.id, 2)]
        ['item-…', 'item-…']
    """

    def __init__(
        self,
        sheet: Sheet,
        items: Iterable[Item] = (),
        *,
        duplicate_offset: int = DEFAULT_DUPLICATE_OFFSET,
        autofill_gap: int = 0,
        autofill_limit: int = DEFAULT_AUTOFILL_LIMIT,
    ) -> None:
        self.sheet = sheet
        self.duplicate_offset = duplicate_offset
        self.autofill_gap = autofill_gap
        self.autofill_limit = autofill_limit
        self._items: tuple[Item, ...] = ()
        self.selected_id: Optional[str] = None
        self.revision = 0
        self.replace_all(items)

    # ─────────────────────────────────────────────────────────────────────────
    # Query
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def selected(self) -> Optional[Item]:
        return self.get(self.selected_id) if self.selected_id else None

    def get(self, item_id: str) -> Optional[Item]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ─────────────────────────────────────────────────────────────────────────
    # CRUD
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, item: Item) -> Item:
        """
        Append an item (top of z-order).

        Raises:
            ValueError: If the id is already used
        """
        if item.id in self:
            raise ValueError(f"Duplicate item id: {item.id}")
        self._commit(self._items + (item,))
        logger.debug(f"Added {item!r}")
        return item

    def update(self, item_id: str, patch: Mapping[str, Any]) -> Optional[Item]:
        """
        Replace only the fields named in ``patch``.

        Unknown ids are a no-op (returns None). Identity and intrinsic
        fields (id, source, width, height) can't be patched.

        Raises:
            ValueError: If patch names a field that isn't editable, or the
                new values are invalid (e.g. scale <= 0)
        """
        rejected = set(patch) - MUTABLE_FIELDS
        if rejected:
            raise ValueError(f"Fields cannot be updated: {sorted(rejected)}")

        for index, item in enumerate(self._items):
            if item.id == item_id:
                updated = replace(item, **patch)
                self._commit(self._items[:index] + (updated,) + self._items[index + 1:])
                return updated
        return None

    def remove(self, item_id: str) -> bool:
        """Delete an item; clears the selection if it pointed at it."""
        remaining = tuple(item for item in self._items if item.id != item_id)
        if len(remaining) == len(self._items):
            return False
        if self.selected_id == item_id:
            self.selected_id = None
        self._commit(remaining)
        return True

    def select(self, item_id: Optional[str]) -> None:
        if item_id is not None and item_id not in self:
            raise KeyError(f"No item with id {item_id!r}")
        self.selected_id = item_id

    def clear(self) -> None:
        """Remove every item."""
        self.selected_id = None
        self._commit(())

    def replace_all(self, items: Iterable[Item]) -> None:
        """
        Swap in a whole new item list (layout results, project load).

        Raises:
            ValueError: If ids are not unique
        """
        new_items = tuple(items)
        ids = [item.id for item in new_items]
        if len(ids) != len(set(ids)):
            raise ValueError("item ids must be unique")
        if self.selected_id not in ids:
            self.selected_id = None
        self._commit(new_items)

    def set_sheet(self, sheet: Sheet) -> None:
        self.sheet = sheet
        self.revision += 1

    # ─────────────────────────────────────────────────────────────────────────
    # Copies
    # ─────────────────────────────────────────────────────────────────────────

    def duplicate(self, item_id: str, count: int = 1) -> list[Item]:
        """
        Clone an item ``count`` times.

        Copy k (1-based) lands at source position + offset * k, clamped
        onto the sheet. The newest copy becomes selected.

        Returns:
            The new items (empty if the id is unknown)

        Raises:
            ValueError: If count < 1
        """
        if count < 1:
            raise ValueError(f"count must be >= 1: {count}")
        source = self.get(item_id)
        if source is None:
            logger.debug(f"duplicate: no item {item_id}")
            return []

        clones = []
        for k in range(1, count + 1):
            offset = self.duplicate_offset * k
            x, y = clamp_position(
                source.x + offset,
                source.y + offset,
                source.scaled_width,
                source.scaled_height,
                self.sheet,
            )
            clones.append(replace(source, id=new_item_id(), x=x, y=y))

        self._commit(self._items + tuple(clones))
        self.selected_id = clones[-1].id
        logger.info(f"Duplicated {item_id} x{count}")
        return clones

    def autofill(self, item_id: str) -> list[Item]:
        """
        Tile copies of an item across the sheet, row-major from the origin.

        Cell size is the item's current scaled bounding box plus the gap.
        Only whole cells are filled; partial cells at the right/bottom
        edges are skipped. The original item is left untouched.

        Returns:
            The new tiles (empty if the id is unknown or nothing fits)

        Raises:
            AutofillLimitExceeded: If more than ``autofill_limit`` tiles
                would be created; nothing is added
        """
        source = self.get(item_id)
        if source is None:
            logger.debug(f"autofill: no item {item_id}")
            return []

        cell_w = source.scaled_width
        cell_h = source.scaled_height
        step_x = cell_w + self.autofill_gap
        step_y = cell_h + self.autofill_gap

        tiles = []
        y = 0.0
        while y + cell_h <= self.sheet.pixel_height:
            x = 0.0
            while x + cell_w <= self.sheet.pixel_width:
                if len(tiles) >= self.autofill_limit:
                    raise AutofillLimitExceeded(
                        f"Autofill of {item_id} needs more than {self.autofill_limit} tiles"
                    )
                tiles.append(replace(source, id=new_item_id(), x=x, y=y))
                x += step_x
            y += step_y

        if tiles:
            self._commit(self._items + tuple(tiles))
        logger.info(f"Autofilled {len(tiles)} tiles of {item_id}")
        return tiles

    # ─────────────────────────────────────────────────────────────────────────
    # Internal
    # ─────────────────────────────────────────────────────────────────────────

    def _commit(self, items: tuple[Item, ...]) -> None:
        self._items = items
        self.revision += 1
