"""
Module: builder.controller

Purpose:
    Orchestrate one editing session: uploads, item edits, auto-layout,
    drags, export, save/load and share links.
    Upload → Arrange (layout or drag) → Snapshot → Export / Save

    Every failure is caught here, logged, and recorded as a Notice for the
    presentation layer. Nothing raised by a component terminates the
    session.

Key Classes:
    - GangSheetWorkspace: Session state + operations
    - Notice: User-facing message

Dependencies:
    - builder.collection: ItemCollection
    - builder.layout: apply_auto_layout()
    - builder.interaction: DragController
    - builder.output: Exporter
    - builder.persistence: stores and codec

Used By:
    - cli: build command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional

from gangsheet_toolkit.core.models import (
    Item,
    LayoutMode,
    Project,
    Sheet,
    ViewState,
    get_preset,
)

from .collection import AutofillLimitExceeded, ItemCollection
from .config import BuilderConfig
from .geometry import fit_to_sheet
from .interaction import DragController, DragSession
from .layout import apply_auto_layout
from .output import ExportArtifact, ExportFormat, Exporter, default_exporter
from .persistence import (
    KeyValueStore,
    MemoryStore,
    PersistenceCorrupt,
    PersistenceMiss,
    build_share_url,
    load_project,
    read_share_url,
    save_project,
)
from .pricing import PriceQuote, quote_sheet
from .uploads import DecodeFailure, InvalidUpload, UploadedFile, build_item, decode_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """
    Message for the user.

    Attributes:
        level: "info", "warning" or "error"
        message: Human-readable text
    """

    level: str
    message: str


class GangSheetWorkspace:
    """
    One gang-sheet editing session.

    Holds the sheet, export resolution, view state and item collection;
    hands out immutable Project snapshots to export and persistence.

    Example:
        >>> ws = GangSheetWorkspace()
        >>> ws.upload([UploadedFile("logo.png", "image/png", data)])
        >>> ws.apply_auto_layout(LayoutMode.SMART)
        >>> artifact = ws.export(ExportFormat.PNG)
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        *,
        store: Optional[KeyValueStore] = None,
        exporter: Optional[Exporter] = None,
    ) -> None:
        self.config = config or BuilderConfig()
        self.store = store if store is not None else MemoryStore()
        self.exporter = exporter if exporter is not None else default_exporter()

        self.sheet: Sheet = get_preset(self.config.default_preset)
        self.export_dpi: int = self.config.default_export_dpi
        self.view = ViewState()
        self.collection = ItemCollection(
            self.sheet,
            duplicate_offset=self.config.duplicate_offset,
            autofill_gap=self.config.autofill_gap,
            autofill_limit=self.config.max_autofill_tiles,
        )
        self.drags = DragController(self.collection, lambda: self.sheet, lambda: self.view)
        self.notices: list[Notice] = []
        self._settings_revision = 0

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def items(self) -> tuple[Item, ...]:
        return self.collection.items

    @property
    def revision(self) -> int:
        """Increases on every item or settings change."""
        return self.collection.revision + self._settings_revision

    def snapshot(self) -> Project:
        """Immutable view of the current project."""
        return Project(
            sheet=self.sheet,
            items=self.collection.items,
            export_dpi=self.export_dpi,
            view=self.view,
            revision=self.revision,
        )

    def reset(self) -> None:
        """Remove all items and restore the default sheet and settings."""
        self.drags.cancel_all()
        self._apply(
            Project(
                sheet=get_preset(self.config.default_preset),
                export_dpi=self.config.default_export_dpi,
            )
        )
        logger.info("Project reset")

    # ─────────────────────────────────────────────────────────────────────────
    # Uploads
    # ─────────────────────────────────────────────────────────────────────────

    def upload(self, files: Iterable[UploadedFile]) -> list[Item]:
        """
        Add uploaded images as items.

        Non-images are skipped without a notice. Images that fail to decode
        are logged and reported; the remaining files are still processed.

        Returns:
            Items created, in upload order
        """
        created: list[Item] = []
        for upload in files:
            try:
                decoded = decode_image(upload)
            except InvalidUpload as e:
                logger.debug(f"Ignoring upload: {e}")
                continue
            except DecodeFailure as e:
                logger.exception(f"Upload failed: {e}")
                self._notify("error", f"Could not read {upload.name}")
                continue

            item = self.collection.add(build_item(decoded, self.sheet, self.config))
            created.append(item)

        if created:
            self.collection.select(created[-1].id)
            logger.info(f"Uploaded {len(created)} images")
        return created

    # ─────────────────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────────────────

    def set_sheet(self, sheet: Sheet) -> None:
        """Switch sheet; items are shrunk/clamped to stay on it."""
        self.sheet = sheet
        self.collection.set_sheet(sheet)
        self.collection.replace_all(fit_to_sheet(item, sheet) for item in self.collection)
        self._bump()
        logger.info(f"Sheet set to {sheet.name} ({sheet.pixel_width}x{sheet.pixel_height}px)")

    def set_preset(self, name: str) -> bool:
        try:
            sheet = get_preset(name)
        except KeyError as e:
            self._notify("error", str(e.args[0]))
            return False
        self.set_sheet(sheet)
        return True

    def set_export_dpi(self, dpi: int) -> bool:
        if dpi <= 0:
            self._notify("error", f"Export resolution must be positive: {dpi}")
            return False
        self.export_dpi = dpi
        self._bump()
        return True

    def set_view(self, **changes: Any) -> bool:
        """Change view state fields (zoom, grid_size, snap_to_grid, ...)."""
        try:
            self.view = replace(self.view, **changes)
        except (TypeError, ValueError) as e:
            self._notify("error", f"Invalid view setting: {e}")
            return False
        self._bump()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Items
    # ─────────────────────────────────────────────────────────────────────────

    def update_item(self, item_id: str, patch: Mapping[str, Any]) -> Optional[Item]:
        """Direct numeric/name edit of one item."""
        try:
            return self.collection.update(item_id, patch)
        except (TypeError, ValueError) as e:
            self._notify("error", f"Invalid edit: {e}")
            return None

    def delete_item(self, item_id: str) -> bool:
        return self.collection.remove(item_id)

    def select(self, item_id: Optional[str]) -> None:
        try:
            self.collection.select(item_id)
        except KeyError as e:
            logger.debug(f"Select ignored: {e}")

    def duplicate(self, item_id: str, count: int = 1) -> list[Item]:
        try:
            return self.collection.duplicate(item_id, count)
        except ValueError as e:
            self._notify("error", str(e))
            return []

    def autofill(self, item_id: str) -> list[Item]:
        try:
            tiles = self.collection.autofill(item_id)
        except AutofillLimitExceeded as e:
            self._notify("error", str(e))
            return []
        if item_id in self.collection and not tiles:
            self._notify("warning", "Item is too large to tile on this sheet")
        return tiles

    def apply_auto_layout(self, mode: LayoutMode | str | None = None) -> bool:
        """
        Rearrange every item with an auto-layout strategy.

        Args:
            mode: Strategy; remembered in the view state. Defaults to the
                current view layout mode.
        """
        try:
            mode = LayoutMode(mode) if mode is not None else self.view.layout_mode
        except ValueError:
            self._notify("error", f"Unknown layout mode: {mode}")
            return False

        if mode is not self.view.layout_mode:
            self.view = replace(self.view, layout_mode=mode)
            self._bump()
        if mode is LayoutMode.FREEFORM:
            return True

        self.drags.cancel_all()
        placed = apply_auto_layout(self.collection.items, self.sheet, mode, self.config.layout)
        self.collection.replace_all(placed)
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer events
    # ─────────────────────────────────────────────────────────────────────────

    def pointer_down(self, pointer_id: int, item_id: str, position, region: str = "body") -> Optional[DragSession]:
        return self.drags.pointer_down(pointer_id, item_id, position, region)

    def pointer_move(self, pointer_id: int, position) -> Optional[Item]:
        return self.drags.pointer_move(pointer_id, position)

    def pointer_up(self, pointer_id: int) -> Optional[DragSession]:
        return self.drags.pointer_up(pointer_id)

    def pointer_cancel(self, pointer_id: int) -> Optional[DragSession]:
        return self.drags.pointer_cancel(pointer_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def export(self, fmt: ExportFormat | str = ExportFormat.PNG) -> Optional[ExportArtifact]:
        """
        Export the current project.

        Renders from a snapshot. If the workspace changed before rendering
        finished, the artifact is flagged ``stale`` and a warning notice is
        recorded; newer edits are never mixed in.
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            self._notify("error", f"Unknown export format: {fmt}")
            return None

        snapshot = self.snapshot()
        artifact = self.exporter.export(snapshot, fmt)

        if artifact.degraded:
            self._notify(
                "warning",
                f"{fmt.value.upper()} export unavailable; saved as {artifact.format.value.upper()}",
            )
        if self.revision != snapshot.revision:
            artifact = replace(artifact, stale=True)
            self._notify("warning", "Project changed during export; the file reflects the earlier state")
        return artifact

    # ─────────────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────────────

    def save(self, key: Optional[str] = None) -> bool:
        key = key or self.config.storage_key
        try:
            save_project(self.store, key, self.snapshot())
        except OSError as e:
            logger.exception(f"Save failed: {e}")
            self._notify("error", "Could not save project")
            return False
        self._notify("info", "Project saved")
        return True

    def load(self, key: Optional[str] = None) -> bool:
        """Load a saved project; on any failure the current state stays."""
        key = key or self.config.storage_key
        try:
            project = load_project(self.store, key)
        except PersistenceMiss:
            self._notify("info", "No saved project found")
            return False
        except PersistenceCorrupt as e:
            logger.warning(f"Saved project unreadable: {e}")
            self._notify("error", "Saved project is corrupted and was not loaded")
            return False

        self.drags.cancel_all()
        self._apply(project)
        self._notify("info", "Project loaded")
        return True

    def share_url(self, base_url: str) -> str:
        return build_share_url(base_url, self.snapshot(), self.config.share_param)

    def load_share_url(self, url: str) -> bool:
        """Merge a shared project from a URL; invalid links change nothing."""
        project = read_share_url(url, self.config.share_param)
        if project is None:
            return False
        self.drags.cancel_all()
        self._apply(project)
        logger.info(f"Loaded shared project with {len(project.items)} items")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Pricing
    # ─────────────────────────────────────────────────────────────────────────

    def quote(self, rate: Optional[float] = None) -> PriceQuote:
        if rate is None:
            return quote_sheet(self.sheet)
        return quote_sheet(self.sheet, rate=rate)

    # ─────────────────────────────────────────────────────────────────────────
    # Internal
    # ─────────────────────────────────────────────────────────────────────────

    def _apply(self, project: Project) -> None:
        self.sheet = project.sheet
        self.export_dpi = project.export_dpi
        self.view = project.view
        self.collection.set_sheet(project.sheet)
        self.collection.replace_all(project.items)
        self._bump()

    def _bump(self) -> None:
        self._settings_revision += 1

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level, message))
        log = logger.warning if level in ("warning", "error") else logger.info
        log(message)
