"""
Schema Validation Utilities

Validates persisted/shared project payloads against the JSON Schema
shipped next to this module before any model is built from them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

PROJECT_SCHEMA_VERSION = 1

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_project(data: Any) -> None:
    """
    Validate a project payload.

    Only checks shape; missing optional fields are filled with defaults by
    the decoder afterwards.

    Args:
        data: Parsed JSON value

    Raises:
        ValidationError: If data is not a valid payload
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Payload must be an object, got {type(data).__name__}", path=""
        )

    validator = jsonschema.Draft202012Validator(_load_schema("project"))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        path = "/".join(str(p) for p in first.path)
        raise ValidationError(
            f"Invalid project payload at '{path}': {first.message}",
            path=path,
            errors=[e.message for e in errors],
        )

    version = data.get("version", PROJECT_SCHEMA_VERSION)
    if version > PROJECT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported project payload version: {version} (expected <= {PROJECT_SCHEMA_VERSION})",
            path="version",
        )

    ids = [item["id"] for item in data.get("items", [])]
    if len(ids) != len(set(ids)):
        raise ValidationError("Duplicate item ids in payload", path="items")
