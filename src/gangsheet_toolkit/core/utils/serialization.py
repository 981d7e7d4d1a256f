"""
Serialization Utilities

Provides to/from payload utilities for the project snapshot, plus an
explicit structural copy for plain data.

- `project_to_payload()` builds the JSON-shaped dict that persistence and
  share links store: ``{items, sheetPreset, dpi, unit, view}``.
- `payload_to_project()` validates then rebuilds a Project, filling every
  missing field with its default (default preset, dpi 300, unit of the
  default preset).
- `structural_copy()` deep-copies plain containers; anything it cannot
  copy is returned through a shallow copy instead.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..models.items import Item
from ..models.project import DEFAULT_EXPORT_DPI, Project, ViewState
from ..models.sheet import Sheet, default_sheet
from ..schemas.validator import PROJECT_SCHEMA_VERSION, validate_project

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Project Payloads
# ─────────────────────────────────────────────────────────────────────────────

def project_to_payload(project: Project) -> dict[str, Any]:
    """
    Serialize a Project to a payload dictionary.

    The revision counter is workspace-local and NOT included.

    Args:
        project: Snapshot to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "version": PROJECT_SCHEMA_VERSION,
        "items": [item.to_dict() for item in project.items],
        "sheetPreset": project.sheet.to_dict(),
        "dpi": project.export_dpi,
        "unit": project.sheet.unit,
        "view": project.view.to_dict(),
    }


def payload_to_project(data: Any, *, validate: bool = True) -> Project:
    """
    Deserialize a Project from a payload dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first

    Returns:
        Project instance (revision 0)

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If a model rejects a value
    """
    if validate:
        validate_project(data)

    fallback = default_sheet()
    sheet_data = data.get("sheetPreset")
    if sheet_data:
        sheet = Sheet.from_dict(sheet_data)
    else:
        sheet = fallback

    unit = data.get("unit")
    if unit and unit != sheet.unit:
        sheet = Sheet(sheet.name, sheet.width, sheet.height, unit, sheet.display_dpi)

    items = tuple(Item.from_dict(raw) for raw in data.get("items", []))

    return Project(
        sheet=sheet,
        items=items,
        export_dpi=data.get("dpi", DEFAULT_EXPORT_DPI),
        view=ViewState.from_dict(data.get("view")),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Structural Copy
# ─────────────────────────────────────────────────────────────────────────────

def structural_copy(value: Any) -> Any:
    """
    Copy a value structurally.

    Dicts, lists, tuples and sets are rebuilt recursively; frozen models
    and scalars are shared as-is. If ``value`` can't be deep-copied, a
    shallow copy is returned. Callers must not rely on the fallback being
    deep.

    Args:
        value: Value to copy

    Returns:
        Independent copy of ``value`` (shallow on fallback)
    """
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error, RecursionError) as e:
        logger.debug(f"Deep copy failed ({e}); falling back to shallow copy")
        return copy.copy(value)
