"""
Module: builder.persistence

Purpose:
    Save/load projects to key -> string stores and round-trip them
    through share links.
"""

from .store import JsonFileStore, KeyValueStore, MemoryStore
from .codec import (
    DEFAULT_SHARE_PARAM,
    PersistenceCorrupt,
    PersistenceMiss,
    SharePayloadInvalid,
    build_share_url,
    decode_project,
    decode_share,
    encode_project,
    encode_share,
    load_project,
    read_share_url,
    save_project,
)

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "DEFAULT_SHARE_PARAM",
    "PersistenceCorrupt",
    "PersistenceMiss",
    "SharePayloadInvalid",
    "build_share_url",
    "decode_project",
    "decode_share",
    "encode_project",
    "encode_share",
    "load_project",
    "read_share_url",
    "save_project",
]
