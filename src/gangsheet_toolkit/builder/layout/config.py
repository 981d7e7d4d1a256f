"""
Module: builder.layout.config

Purpose:
    Configuration for the auto-layout engine.
    Defines margins, padding and scaling factors for each strategy.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.grid
    - builder.layout.compact
    - builder.layout.smart_pack
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for auto-layout (immutable).

    All distances are sheet pixels at display resolution.

    Attributes:
        grid_margin: Outer margin of the grid layout
        compact_margin: Outer margin and gap of the compact shelf-fill
        compact_fit_factor: Headroom factor when scaling compact items
        pack_padding: Gap between shelves/items in smart-pack
        min_shelf_height: Smallest shelf opened when space is scarce

    Example:
        >>> LayoutConfig().compact_margin
        8
    """

    grid_margin: int = 20
    compact_margin: int = 8
    compact_fit_factor: float = 1.2
    pack_padding: int = 8
    min_shelf_height: int = 20

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.grid_margin < 0:
            raise ValueError(f"grid_margin must be non-negative: {self.grid_margin}")
        if self.compact_margin < 0:
            raise ValueError(f"compact_margin must be non-negative: {self.compact_margin}")
        if self.compact_fit_factor <= 0:
            raise ValueError(f"compact_fit_factor must be positive: {self.compact_fit_factor}")
        if self.pack_padding < 0:
            raise ValueError(f"pack_padding must be non-negative: {self.pack_padding}")
        if self.min_shelf_height <= 0:
            raise ValueError(f"min_shelf_height must be positive: {self.min_shelf_height}")
