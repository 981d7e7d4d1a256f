"""
Core package: units, immutable models, payload schema and serialization.
"""

from .units import DISPLAY_DPI, from_pixels, normalize_unit, to_pixels
from .models import Item, LayoutMode, Project, Sheet, ViewState

__all__ = [
    "DISPLAY_DPI",
    "from_pixels",
    "normalize_unit",
    "to_pixels",
    "Item",
    "LayoutMode",
    "Project",
    "Sheet",
    "ViewState",
]
