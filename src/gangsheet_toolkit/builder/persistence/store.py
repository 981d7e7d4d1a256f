"""
Module: builder.persistence.store

Purpose:
    Durable key -> string stores for saved projects.

Key Classes:
    - KeyValueStore: Interface (get/set/delete/keys)
    - MemoryStore: In-process dict
    - JsonFileStore: One JSON file holding every key, written atomically

Dependencies:
    - json (std)
    - pathlib (std)

Used By:
    - builder.persistence.codec: save_project() / load_project()
    - builder.controller: save() / load()
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String store keyed by string."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Value at key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value at key, replacing any existing value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key; returns whether it existed."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys."""


class MemoryStore(KeyValueStore):
    """Dict-backed store (tests, embedding)."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object file.

    A missing file is an empty store. An unreadable file is treated as
    empty and logged; it is only overwritten on the next successful set().
    Writes go through a temp file and an atomic rename.

    Example:
        >>> store = JsonFileStore(Path("~/.gangsheet/projects.json").expanduser())
        >>> store.set("gangsheet-project", payload)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def keys(self) -> list[str]:
        return list(self._read())

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Store file is corrupted, treating as empty: {self.path}: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Failed to read store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file is not a JSON object: {self.path}")
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        """Write with atomic replacement.

        Uses a temp file so an interrupted write can't corrupt the store.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        try:
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
