"""
Module: builder

Purpose:
    Gang-sheet editing pipeline. Uploaded images become Items on a Sheet,
    are arranged by auto-layout or dragging, and are exported as
    SVG/PNG/PDF or saved and shared as JSON payloads.

Key Functions:
    - apply_auto_layout(): Grid / compact / smart-pack arrangement
    - decode_image() / build_item(): Upload -> Item
    - quote_sheet(): Area-based price quote

Key Classes:
    - GangSheetWorkspace: One editing session (main entry point)
    - BuilderConfig: Placement, copy and storage settings
    - ItemCollection: Ordered items + selection
    - DragController: Multi-pointer drag state machine
    - Exporter: Export chain with format fallback

Dependencies:
    - PIL: Image decoding and raster export
    - reportlab: PDF export
    - gangsheet_toolkit.core.models: Sheet, Item, Project
    - gangsheet_toolkit.core.schemas.validator: Payload validation

Used By:
    - gangsheet_toolkit.cli: build command
"""

from .config import BuilderConfig
from .collection import AutofillLimitExceeded, ItemCollection
from .uploads import DecodeFailure, InvalidUpload, UploadedFile, build_item, decode_image
from .layout import LayoutConfig, apply_auto_layout
from .interaction import DragController, InteractionMode
from .output import ExportArtifact, ExportFormat, Exporter, default_exporter
from .persistence import JsonFileStore, MemoryStore
from .pricing import PriceQuote, quote_image, quote_sheet
from .controller import GangSheetWorkspace, Notice

__all__ = [
    # Config
    "BuilderConfig",
    "LayoutConfig",
    # Items
    "AutofillLimitExceeded",
    "ItemCollection",
    "UploadedFile",
    "InvalidUpload",
    "DecodeFailure",
    "decode_image",
    "build_item",
    # Arrangement
    "apply_auto_layout",
    "DragController",
    "InteractionMode",
    # Export
    "Exporter",
    "ExportFormat",
    "ExportArtifact",
    "default_exporter",
    # Persistence
    "JsonFileStore",
    "MemoryStore",
    # Pricing
    "PriceQuote",
    "quote_image",
    "quote_sheet",
    # Controller
    "GangSheetWorkspace",
    "Notice",
]
