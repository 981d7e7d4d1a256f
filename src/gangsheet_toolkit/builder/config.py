"""
Module: builder.config

Purpose:
    Configuration dataclass for the sheet builder. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Placement defaults, export and storage settings

Dependencies:
    - dataclasses (std)

Used By:
    - builder.collection: Duplicate/autofill offsets
    - builder.controller: Upload placement, storage keys
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gangsheet_toolkit.core.models import DEFAULT_EXPORT_DPI, DEFAULT_PRESET

from .layout.config import LayoutConfig


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for the sheet builder (immutable).

    Attributes:
        default_preset: Sheet preset used on load and reset
        default_export_dpi: Export resolution used on load and reset
        initial_position: Where a freshly uploaded item lands (sheet px)
        base_scale_cap: Upper bound on an upload's starting scale
        base_scale_fit_factor: Headroom factor in the base-scale rule
        duplicate_offset: Per-copy (dx, dy) step for duplicates (sheet px)
        autofill_gap: Spacing between autofill tiles (sheet px)
        max_autofill_tiles: Most tiles one autofill may create
        storage_key: Default key for saving projects
        share_param: Query parameter carrying share payloads
        layout: Auto-layout tuning

    Example:
        >>> config = BuilderConfig()
        >>> config.duplicate_offset
        12
    """

    default_preset: str = DEFAULT_PRESET
    default_export_dpi: int = DEFAULT_EXPORT_DPI

    # Upload placement
    initial_position: tuple[float, float] = (20.0, 20.0)
    base_scale_cap: float = 0.45
    base_scale_fit_factor: float = 1.2

    # Copies
    duplicate_offset: int = 12
    autofill_gap: int = 0
    max_autofill_tiles: int = 2500

    # Persistence
    storage_key: str = "gangsheet-project"
    share_param: str = "design"

    layout: LayoutConfig = field(default_factory=LayoutConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.default_export_dpi <= 0:
            raise ValueError(f"default_export_dpi must be positive: {self.default_export_dpi}")
        if self.base_scale_cap <= 0:
            raise ValueError(f"base_scale_cap must be positive: {self.base_scale_cap}")
        if self.base_scale_fit_factor <= 0:
            raise ValueError(f"base_scale_fit_factor must be positive: {self.base_scale_fit_factor}")
        if self.autofill_gap < 0:
            raise ValueError(f"autofill_gap must be non-negative: {self.autofill_gap}")
        if self.max_autofill_tiles < 1:
            raise ValueError(f"max_autofill_tiles must be >= 1: {self.max_autofill_tiles}")
        if not self.share_param:
            raise ValueError("share_param must be non-empty")

    def base_scale(self, width: int, height: int, sheet_width: int, sheet_height: int) -> float:
        """
        Starting scale for a freshly uploaded image.

        min(cap, min(sheetW / (w * k), sheetH / (h * k))) with k the fit
        factor, so a new upload never covers the whole sheet.
        """
        k = self.base_scale_fit_factor
        return min(
            self.base_scale_cap,
            min(sheet_width / (width * k), sheet_height / (height * k)),
        )
