"""
Module: builder.persistence.codec

Purpose:
    Encode/decode whole projects as text for durable storage and for
    share links.

    Storage:  JSON text under a caller-supplied key.
    Share:    the same JSON, URL-safe base64 encoded, carried in a single
              percent-encoded query parameter.

Key Functions:
    - encode_project() / decode_project(): Project <-> JSON text
    - save_project() / load_project(): Store round trip
    - encode_share() / decode_share(): Project <-> share token
    - build_share_url() / read_share_url(): Share link helpers

Key Classes:
    - PersistenceMiss: No value at key
    - PersistenceCorrupt: Value present but unusable
    - SharePayloadInvalid: Share token missing or undecodable

Dependencies:
    - core.utils.serialization: payload conversion
    - core.schemas.validator: payload validation (jsonschema)
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional
from urllib.parse import parse_qs, quote, urlencode, urlsplit, urlunsplit

from gangsheet_toolkit.core.models import Project
from gangsheet_toolkit.core.schemas import ValidationError
from gangsheet_toolkit.core.utils import payload_to_project, project_to_payload

from .store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SHARE_PARAM = "design"


class PersistenceMiss(Exception):
    """No saved project under the key."""
    pass


class PersistenceCorrupt(Exception):
    """Saved value exists but cannot be decoded."""
    pass


class SharePayloadInvalid(Exception):
    """Share parameter missing or undecodable."""
    pass


# ─────────────────────────────────────────────────────────────────────────────
# JSON text
# ─────────────────────────────────────────────────────────────────────────────

def encode_project(project: Project) -> str:
    """Serialize a project to compact JSON text."""
    return json.dumps(project_to_payload(project), separators=(",", ":"))


def decode_project(text: str) -> Project:
    """
    Parse JSON text back into a Project, applying defaults.

    Raises:
        PersistenceCorrupt: If the text isn't JSON or fails validation
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise PersistenceCorrupt(f"Project text is not valid JSON: {e}") from e
    try:
        return payload_to_project(data)
    except ValidationError as e:
        raise PersistenceCorrupt(str(e)) from e
    except (ValueError, KeyError, TypeError) as e:
        raise PersistenceCorrupt(f"Project payload rejected: {e}") from e


# ─────────────────────────────────────────────────────────────────────────────
# Store
# ─────────────────────────────────────────────────────────────────────────────

def save_project(store: KeyValueStore, key: str, project: Project) -> None:
    """Store a project under ``key``."""
    store.set(key, encode_project(project))
    logger.info(f"Saved project ({len(project.items)} items) to '{key}'")


def load_project(store: KeyValueStore, key: str) -> Project:
    """
    Load a project saved under ``key``.

    Raises:
        PersistenceMiss: If nothing is stored under key
        PersistenceCorrupt: If the stored value can't be decoded
    """
    text = store.get(key)
    if text is None:
        raise PersistenceMiss(f"No saved project under '{key}'")
    project = decode_project(text)
    logger.info(f"Loaded project ({len(project.items)} items) from '{key}'")
    return project


# ─────────────────────────────────────────────────────────────────────────────
# Share links
# ─────────────────────────────────────────────────────────────────────────────

def encode_share(project: Project) -> str:
    """
    Encode a project as a URL-safe token.

    Example:
        >>> decode_share(encode_share(project)).items == project.items
        True
    """
    raw = encode_project(project).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_share(token: Optional[str]) -> Project:
    """
    Decode a share token.

    Raises:
        SharePayloadInvalid: If the token is missing or undecodable
    """
    if not token:
        raise SharePayloadInvalid("Share payload is missing")
    padded = token.strip() + "=" * (-len(token.strip()) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        text = raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise SharePayloadInvalid(f"Share payload is not valid base64: {e}") from e
    try:
        return decode_project(text)
    except PersistenceCorrupt as e:
        raise SharePayloadInvalid(f"Share payload is invalid: {e}") from e


def build_share_url(base_url: str, project: Project, param: str = DEFAULT_SHARE_PARAM) -> str:
    """
    Put a share token into ``base_url`` as a single query parameter.

    Existing query parameters other than ``param`` are kept.
    """
    parts = urlsplit(base_url)
    query = [
        (k, v)
        for k, values in parse_qs(parts.query, keep_blank_values=True).items()
        if k != param
        for v in values
    ]
    query.append((param, encode_share(project)))
    return urlunsplit(parts._replace(query=urlencode(query, quote_via=quote)))


def read_share_url(url: str, param: str = DEFAULT_SHARE_PARAM) -> Optional[Project]:
    """
    Extract a project from a share link.

    Never raises: a missing or malformed payload returns None and logs a
    warning, so the caller's current state stays untouched.
    """
    try:
        values = parse_qs(urlsplit(url).query).get(param)
        if not values:
            raise SharePayloadInvalid(f"URL has no '{param}' parameter")
        return decode_share(values[0])
    except SharePayloadInvalid as e:
        logger.warning(f"Ignoring share link: {e}")
    except ValueError as e:
        logger.warning(f"Ignoring malformed share URL: {e}")
    return None
