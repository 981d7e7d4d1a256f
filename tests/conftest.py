import base64
import io
import struct
import sys
import zlib
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import gangsheet_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from gangsheet_toolkit.builder.uploads import UploadedFile  # noqa: E402
from gangsheet_toolkit.core.models import Item, Sheet  # noqa: E402


def png_bytes(width: int = 40, height: int = 20, color=(255, 0, 0, 255)) -> bytes:
    """Encode a solid-color RGBA PNG."""
    img = Image.new("RGBA", (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def png_data_uri(width: int = 40, height: int = 20, color=(255, 0, 0, 255)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(width, height, color)).decode("ascii")


def header_only_png(width: int, height: int) -> bytes:
    """PNG whose header declares width x height but carries almost no data."""
    def chunk(tag: bytes, body: bytes) -> bytes:
        return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", zlib.crc32(tag + body))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", b"\x00")
        + chunk(b"IEND", b"")
    )


# Common test fixtures
@pytest.fixture
def pixel_sheet():
    """Small pixel sheet so exports stay tiny."""
    return Sheet("test", 400, 300, "pixel")


@pytest.fixture
def make_item():
    """Factory for items backed by a real PNG data URI."""
    def _create(
        item_id: str = "item-a",
        width: int = 40,
        height: int = 20,
        **fields,
    ) -> Item:
        return Item(
            id=item_id,
            name=fields.pop("name", f"{item_id}.png"),
            source=fields.pop("source", png_data_uri(width, height)),
            width=width,
            height=height,
            **fields,
        )
    return _create


@pytest.fixture
def make_upload():
    """Factory for in-memory PNG uploads."""
    def _create(name: str = "art.png", width: int = 40, height: int = 20) -> UploadedFile:
        return UploadedFile(name, "image/png", png_bytes(width, height))
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image on disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def oversized_upload():
    """Upload whose header claims 30000x30000 pixels."""
    return UploadedFile("huge.png", "image/png", header_only_png(30000, 30000))
