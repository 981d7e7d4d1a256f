"""
Core Models Package

Immutable, validated data models shared by every builder component.

All models in this package are frozen dataclasses. Mutation happens by
building a replacement (``dataclasses.replace``), so a reader never sees
a half-updated item or project.
"""

from .sheet import Sheet, SHEET_PRESETS, DEFAULT_PRESET, get_preset, default_sheet
from .items import Item, MUTABLE_FIELDS, new_item_id
from .project import DEFAULT_EXPORT_DPI, LayoutMode, Project, ViewState

__all__ = [
    "Sheet",
    "SHEET_PRESETS",
    "DEFAULT_PRESET",
    "get_preset",
    "default_sheet",
    "Item",
    "MUTABLE_FIELDS",
    "new_item_id",
    "DEFAULT_EXPORT_DPI",
    "LayoutMode",
    "Project",
    "ViewState",
]
