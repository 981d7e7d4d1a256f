"""
Module: builder.uploads

Purpose:
    Turn uploaded files into Items: filter non-images, decode with Pillow,
    and compute the default placement.

Key Functions:
    - decode_image(): Bytes -> DecodedImage (size + data URI)
    - build_item(): DecodedImage -> placed Item
    - open_source(): Item.source -> PIL Image (used by raster export)

Key Classes:
    - UploadedFile: Raw upload (name, content type, bytes)
    - InvalidUpload: Non-image upload (dropped silently by callers)
    - DecodeFailure: Corrupt/unreadable image

Dependencies:
    - PIL: Image decoding
    - base64 (std): data URI encoding

Used By:
    - builder.controller: upload()
    - builder.output.raster: Image loading
"""

from __future__ import annotations

import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from gangsheet_toolkit.core.models import Item, Sheet, new_item_id

from .config import BuilderConfig
from .geometry import clamp_position

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:"


class InvalidUpload(Exception):
    """Upload is not an image."""
    pass


class DecodeFailure(Exception):
    """Image bytes could not be decoded."""
    pass


@dataclass(frozen=True)
class UploadedFile:
    """
    A file handed over by the upload surface.

    Attributes:
        name: Original filename
        content_type: MIME type reported by the client
        data: Raw file bytes
    """

    name: str
    content_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return self.content_type.lower().startswith("image/")

    @classmethod
    def from_path(cls, path: Path) -> UploadedFile:
        """Read a file from disk, guessing its content type from the name."""
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content_type=content_type or "application/octet-stream",
            data=path.read_bytes(),
        )


@dataclass(frozen=True)
class DecodedImage:
    """
    Result of decoding an upload.

    Attributes:
        name: Display name
        width: Intrinsic pixel width
        height: Intrinsic pixel height
        source: data URI with the original bytes
    """

    name: str
    width: int
    height: int
    source: str


def decode_image(upload: UploadedFile) -> DecodedImage:
    """
    Decode an uploaded image.

    Args:
        upload: File to decode

    Returns:
        DecodedImage with intrinsic size and a data URI

    Raises:
        InvalidUpload: If the content type is not an image
        DecodeFailure: If Pillow can't read the bytes
    """
    if not upload.is_image:
        raise InvalidUpload(f"{upload.name} is not an image ({upload.content_type})")

    try:
        with Image.open(io.BytesIO(upload.data)) as img:
            img.load()
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailure(f"Could not decode {upload.name}: {e}") from e

    if width <= 0 or height <= 0:
        raise DecodeFailure(f"{upload.name} has no pixels")

    mime = Image.MIME.get(fmt or "", upload.content_type)
    encoded = base64.b64encode(upload.data).decode("ascii")
    return DecodedImage(
        name=upload.name,
        width=width,
        height=height,
        source=f"data:{mime};base64,{encoded}",
    )


def build_item(decoded: DecodedImage, sheet: Sheet, config: BuilderConfig) -> Item:
    """
    Create an Item with default placement for a decoded image.

    Scale follows the base-scale rule; the item starts at the configured
    initial position, clamped onto the sheet.

    Example:
        >>> item = build_item(decoded_300x300, sheet_22x24, BuilderConfig())
        >>> (item.scale, item.x, item.y)
        (0.45, 20.0, 20.0)
    """
    scale = config.base_scale(
        decoded.width, decoded.height, sheet.pixel_width, sheet.pixel_height
    )
    x, y = config.initial_position
    x, y = clamp_position(
        x, y, decoded.width * scale, decoded.height * scale, sheet
    )
    return Item(
        id=new_item_id(),
        name=decoded.name,
        source=decoded.source,
        width=decoded.width,
        height=decoded.height,
        x=x,
        y=y,
        scale=scale,
    )


def source_bytes(source: str) -> bytes:
    """
    Get the raw image bytes behind an Item.source.

    Raises:
        DecodeFailure: If the data URI is malformed or the file is missing
    """
    if source.startswith(DATA_URI_PREFIX):
        header, _, payload = source.partition(",")
        if ";base64" not in header:
            raise DecodeFailure("Only base64 data URIs are supported")
        try:
            return base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise DecodeFailure(f"Malformed data URI: {e}") from e

    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as e:
        raise DecodeFailure(f"Image source not readable: {path}") from e


def open_source(source: str) -> Image.Image:
    """
    Open an Item.source as a loaded RGBA PIL Image.

    Raises:
        DecodeFailure: If the image can't be read
    """
    data = source_bytes(source)
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailure(f"Could not decode image source: {e}") from e
