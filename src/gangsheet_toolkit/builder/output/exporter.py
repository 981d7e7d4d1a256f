"""
Module: builder.output.exporter

Purpose:
    Produce an export artifact from a Project snapshot, degrading through
    document -> raster -> vector when a rendering service is missing or
    fails. Each fallback is a deliberate degrade, not an error.

Key Functions:
    - Exporter.export(): Main entry point
    - export_filename(): gangsheet-<timestamp>.<ext>

Key Classes:
    - ExportFormat: svg / png / pdf
    - ExportArtifact: Bytes + format actually produced
    - Exporter: Holds the optional services

Dependencies:
    - builder.output.vector: render_svg()
    - builder.output.services: RasterRenderer, DocumentRenderer

Used By:
    - builder.controller: export()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gangsheet_toolkit.core.models import Project

from .services import DocumentRenderer, RasterRenderer, RendererUnavailable
from .vector import render_svg

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "gangsheet"


class ExportFormat(str, Enum):
    SVG = "svg"
    PNG = "png"
    PDF = "pdf"

    @property
    def mime_type(self) -> str:
        return {
            ExportFormat.SVG: "image/svg+xml",
            ExportFormat.PNG: "image/png",
            ExportFormat.PDF: "application/pdf",
        }[self]


@dataclass(frozen=True)
class ExportArtifact:
    """
    Result of an export (immutable).

    Attributes:
        requested: Format the caller asked for
        format: Format actually produced
        data: File contents
        filename: Suggested filename
        revision: Snapshot revision the artifact was rendered from
        stale: True if the workspace changed while rendering
    """

    requested: ExportFormat
    format: ExportFormat
    data: bytes
    filename: str
    revision: int
    stale: bool = False

    @property
    def degraded(self) -> bool:
        return self.format is not self.requested

    @property
    def mime_type(self) -> str:
        return self.format.mime_type


def export_filename(fmt: ExportFormat, timestamp_ms: Optional[int] = None) -> str:
    """
    Build the download filename.

    Example:
        >>> export_filename(ExportFormat.PNG, 1700000000000)
        'gangsheet-1700000000000.png'
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{FILENAME_PREFIX}-{timestamp_ms}.{fmt.value}"


class Exporter:
    """
    Export pipeline with capability-checked services.

    Either service may be None (not installed); the chain then skips it.

    Example:
        >>> exporter = Exporter(PillowRasterRenderer(), ReportLabDocumentRenderer())
        >>> artifact = exporter.export(project, ExportFormat.PDF)
        >>> artifact.filename
        'gangsheet-….pdf'
    """

    def __init__(
        self,
        raster: Optional[RasterRenderer] = None,
        document: Optional[DocumentRenderer] = None,
    ) -> None:
        self.raster = raster
        self.document = document

    def export(
        self,
        project: Project,
        fmt: ExportFormat | str = ExportFormat.PNG,
        *,
        timestamp_ms: Optional[int] = None,
    ) -> ExportArtifact:
        """
        Export a snapshot.

        Args:
            project: Immutable snapshot; live state is never read
            fmt: Requested format
            timestamp_ms: Filename timestamp (defaults to now)

        Returns:
            ExportArtifact; check ``degraded`` to see if a fallback ran

        Raises:
            ValueError: If fmt is not a known format
        """
        requested = ExportFormat(fmt)
        produced, data = self._render(project, requested)
        if produced is not requested:
            logger.warning(f"Export degraded from {requested.value} to {produced.value}")
        return ExportArtifact(
            requested=requested,
            format=produced,
            data=data,
            filename=export_filename(produced, timestamp_ms),
            revision=project.revision,
        )

    def _render(self, project: Project, fmt: ExportFormat) -> tuple[ExportFormat, bytes]:
        if fmt is ExportFormat.PDF:
            raster = self._try_raster(project)
            if raster is not None:
                document = self._try_document(raster, project)
                if document is not None:
                    return ExportFormat.PDF, document
                return ExportFormat.PNG, raster
            return ExportFormat.SVG, render_svg(project).encode("utf-8")

        if fmt is ExportFormat.PNG:
            raster = self._try_raster(project)
            if raster is not None:
                return ExportFormat.PNG, raster

        return ExportFormat.SVG, render_svg(project).encode("utf-8")

    def _try_raster(self, project: Project) -> Optional[bytes]:
        if self.raster is None or not self.raster.available:
            logger.info("Raster renderer unavailable")
            return None
        background = None if project.view.transparent else project.view.background
        try:
            return self.raster.render(project, scale=project.export_scale, background=background)
        except RendererUnavailable as e:
            logger.warning(f"Raster renderer unavailable: {e}")
        except Exception as e:
            logger.exception(f"Raster renderer failed: {e}")
        return None

    def _try_document(self, raster: bytes, project: Project) -> Optional[bytes]:
        if self.document is None or not self.document.available:
            logger.info("Document renderer unavailable")
            return None
        try:
            return self.document.render(raster, project)
        except RendererUnavailable as e:
            logger.warning(f"Document renderer unavailable: {e}")
        except Exception as e:
            logger.exception(f"Document renderer failed: {e}")
        return None


def default_exporter() -> Exporter:
    """Exporter wired to the bundled Pillow and ReportLab services."""
    from .document import ReportLabDocumentRenderer
    from .raster import PillowRasterRenderer

    return Exporter(PillowRasterRenderer(), ReportLabDocumentRenderer())
