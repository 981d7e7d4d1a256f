"""
Module: project

Purpose:
    View state and the immutable Project snapshot read by export and
    persistence.

Key Classes:
    - LayoutMode: Auto-layout strategy names
    - ViewState: Editing ergonomics (zoom, grid, background)
    - Project: Frozen snapshot of sheet + items + settings

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.controller: Builds snapshots
    - builder.output: Export input
    - builder.persistence: Payload encoding
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .items import Item
from .sheet import Sheet, default_sheet

DEFAULT_EXPORT_DPI = 300
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class LayoutMode(str, Enum):
    """Auto-layout strategy."""

    FREEFORM = "freeform"
    GRID = "grid"
    COMPACT = "compact"
    SMART = "smart"


@dataclass(frozen=True, slots=True)
class ViewState:
    """
    Editing ergonomics (immutable).

    None of these fields changes exported geometry. Background and
    transparency only choose the fill of the output.

    Attributes:
        zoom: On-screen magnification (> 0)
        grid_size: Snap grid pitch in sheet pixels (> 0)
        snap_to_grid: Whether drags snap to the grid
        background: Hex background color
        transparent: Skip the background fill on export
        layout_mode: Chosen auto-layout strategy
    """

    zoom: float = 1.0
    grid_size: int = 20
    snap_to_grid: bool = False
    background: str = "#ffffff"
    transparent: bool = False
    layout_mode: LayoutMode = LayoutMode.FREEFORM

    def __post_init__(self) -> None:
        """Validate view state on construction."""
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive: {self.zoom}")
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive: {self.grid_size}")
        if not _HEX_COLOR.match(self.background):
            raise ValueError(f"background must be a hex color: {self.background!r}")
        object.__setattr__(self, "layout_mode", LayoutMode(self.layout_mode))

    def to_dict(self) -> dict:
        return {
            "zoom": self.zoom,
            "gridSize": self.grid_size,
            "snapToGrid": self.snap_to_grid,
            "background": self.background,
            "transparent": self.transparent,
            "layoutMode": self.layout_mode.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> ViewState:
        data = data or {}
        return cls(
            zoom=data.get("zoom", 1.0),
            grid_size=data.get("gridSize", 20),
            snap_to_grid=data.get("snapToGrid", False),
            background=data.get("background", "#ffffff"),
            transparent=data.get("transparent", False),
            layout_mode=LayoutMode(data.get("layoutMode", LayoutMode.FREEFORM.value)),
        )


@dataclass(frozen=True)
class Project:
    """
    Snapshot of a whole project (immutable).

    Attributes:
        sheet: Sheet configuration
        items: Items in z-order (first drawn first)
        export_dpi: Resolution used only when exporting
        view: Editing view state
        revision: Workspace revision the snapshot was taken at

    Example:
        >>> project = Project()
        >>> project.sheet.pixel_size
        (2112, 2304)
    """

    sheet: Sheet = field(default_factory=default_sheet)
    items: tuple[Item, ...] = ()
    export_dpi: int = DEFAULT_EXPORT_DPI
    view: ViewState = field(default_factory=ViewState)
    revision: int = 0

    def __post_init__(self) -> None:
        """Validate project on construction."""
        if self.export_dpi <= 0:
            raise ValueError(f"export_dpi must be positive: {self.export_dpi}")
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("item ids must be unique within a project")

    @property
    def visible_items(self) -> tuple[Item, ...]:
        return tuple(item for item in self.items if item.visible)

    @property
    def export_scale(self) -> float:
        """
        Multiplier from display pixels to export pixels.

        export_dpi / display_dpi for physical units; 1.0 for pixel sheets,
        whose export size is their pixel size.
        """
        export_width, _ = self.sheet.export_size(self.export_dpi)
        return export_width / self.sheet.pixel_width
