"""
Module: builder.interaction.drag

Purpose:
    Pointer-driven drag state machine. One DragSession per active pointer
    id, kept in an arena so concurrent multi-touch drags on different
    items never interfere.

States:
    Idle --pointer_down(on item body)--> Dragging(session)
    Dragging --pointer_move(same pointer)--> Dragging (position committed)
    Dragging --pointer_up / pointer_cancel(same pointer)--> Idle

    Each move computes its delta from the session's start snapshot, never
    from the previous move, so moves can't accumulate drift.

Key Classes:
    - DragSession: Immutable drag-start snapshot
    - DragController: Session arena + interaction mode signal
    - InteractionMode: Signal values for the presentation layer

Dependencies:
    - builder.collection: ItemCollection.update()
    - builder.geometry: clamp_position, snap

Used By:
    - builder.controller: Workspace pointer handlers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from gangsheet_toolkit.core.models import Item

from ..geometry import clamp_position, snap

if TYPE_CHECKING:
    from gangsheet_toolkit.core.models import Sheet, ViewState
    from ..collection import ItemCollection

logger = logging.getLogger(__name__)

# Sub-regions of an item's surface that never start a drag
NO_DRAG_REGIONS = frozenset({"toolbar", "handle", "menu"})

Point = tuple[float, float]


class InteractionMode(str, Enum):
    """Global interaction hint for the presentation layer."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True, slots=True)
class DragSession:
    """
    Snapshot taken when a drag starts.

    Attributes:
        item_id: Item being dragged
        pointer_id: Pointer that owns (has captured) this drag
        start_pointer: Pointer position at pointer-down (screen px)
        start_item: Item top-left at pointer-down (sheet px)
    """

    item_id: str
    pointer_id: int
    start_pointer: Point
    start_item: Point


class DragController:
    """
    Arena of drag sessions keyed by pointer id.

    The controller reads the sheet and view lazily through callables so
    preset, zoom and snap changes apply to drags already in progress.

    Example:
        >>> drags = DragController(collection, lambda: sheet, lambda: view)
        >>> drags.pointer_down(1, "item-a", (100, 100))
        >>> drags.pointer_move(1, (150, 120))
        >>> drags.pointer_up(1)
    """

    def __init__(
        self,
        collection: ItemCollection,
        sheet: Callable[[], Sheet],
        view: Callable[[], ViewState],
        *,
        no_drag_regions: frozenset[str] = NO_DRAG_REGIONS,
    ) -> None:
        self._collection = collection
        self._sheet = sheet
        self._view = view
        self._no_drag_regions = no_drag_regions
        self._sessions: dict[int, DragSession] = {}
        self._listeners: list[Callable[[InteractionMode], None]] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Query
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> InteractionMode:
        return InteractionMode.DRAGGING if self._sessions else InteractionMode.IDLE

    @property
    def sessions(self) -> dict[int, DragSession]:
        """Copy of the active sessions."""
        return dict(self._sessions)

    def is_captured(self, pointer_id: int) -> bool:
        """True while ``pointer_id`` owns a drag."""
        return pointer_id in self._sessions

    def dragging(self, item_id: str) -> bool:
        return any(s.item_id == item_id for s in self._sessions.values())

    def subscribe(self, listener: Callable[[InteractionMode], None]) -> Callable[[], None]:
        """
        Register an interaction-mode listener.

        Returns:
            Function that unsubscribes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer events
    # ─────────────────────────────────────────────────────────────────────────

    def pointer_down(
        self,
        pointer_id: int,
        item_id: str,
        position: Point,
        region: str = "body",
    ) -> Optional[DragSession]:
        """
        Start a drag if the pointer went down on an item's body.

        Returns:
            The new session, or None when no drag starts (no-drag region,
            unknown item, pointer already dragging, item already held by
            another pointer)
        """
        if region in self._no_drag_regions:
            return None
        if pointer_id in self._sessions:
            logger.debug(f"Pointer {pointer_id} already dragging; ignoring pointer_down")
            return None
        item = self._collection.get(item_id)
        if item is None:
            return None
        if self.dragging(item_id):
            logger.debug(f"{item_id} already captured by another pointer")
            return None

        was_idle = not self._sessions
        session = DragSession(
            item_id=item_id,
            pointer_id=pointer_id,
            start_pointer=(float(position[0]), float(position[1])),
            start_item=(item.x, item.y),
        )
        self._sessions[pointer_id] = session
        self._collection.select(item_id)
        logger.debug(f"Drag start: pointer {pointer_id} on {item_id}")

        if was_idle:
            self._emit(InteractionMode.DRAGGING)
        return session

    def pointer_move(self, pointer_id: int, position: Point) -> Optional[Item]:
        """
        Move the dragged item for a captured pointer.

        Events from pointers without a session are ignored.

        Returns:
            The updated item, or None if the event was ignored
        """
        session = self._sessions.get(pointer_id)
        if session is None:
            return None

        item = self._collection.get(session.item_id)
        if item is None:
            # Item deleted mid-drag
            self._end(pointer_id)
            return None

        x, y = self.candidate_position(session, item, position)
        return self._collection.update(item.id, {"x": x, "y": y})

    def pointer_up(self, pointer_id: int) -> Optional[DragSession]:
        """End the drag owned by ``pointer_id`` (if any)."""
        return self._end(pointer_id)

    def pointer_cancel(self, pointer_id: int) -> Optional[DragSession]:
        """Same as pointer_up; the last committed position stays."""
        return self._end(pointer_id)

    def cancel_all(self) -> None:
        """End every session (project reset/load)."""
        for pointer_id in list(self._sessions):
            self._end(pointer_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def candidate_position(self, session: DragSession, item: Item, position: Point) -> Point:
        """
        Compute the committed position for a pointer position.

        delta = (pointer - start pointer) / zoom, then optional grid snap,
        then clamp so the scaled box stays on the sheet.
        """
        view = self._view()
        dx = (position[0] - session.start_pointer[0]) / view.zoom
        dy = (position[1] - session.start_pointer[1]) / view.zoom
        x = session.start_item[0] + dx
        y = session.start_item[1] + dy

        if view.snap_to_grid:
            x = snap(x, view.grid_size)
            y = snap(y, view.grid_size)

        return clamp_position(x, y, item.scaled_width, item.scaled_height, self._sheet())

    # ─────────────────────────────────────────────────────────────────────────
    # Internal
    # ─────────────────────────────────────────────────────────────────────────

    def _end(self, pointer_id: int) -> Optional[DragSession]:
        session = self._sessions.pop(pointer_id, None)
        if session is None:
            return None
        logger.debug(f"Drag end: pointer {pointer_id} released {session.item_id}")
        if not self._sessions:
            self._emit(InteractionMode.IDLE)
        return session

    def _emit(self, mode: InteractionMode) -> None:
        for listener in list(self._listeners):
            listener(mode)
