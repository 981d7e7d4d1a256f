"""
Module: builder.output.services

Purpose:
    Interfaces for the optional rendering services the exporter delegates
    to. A service advertises whether it can run (``available``); the
    exporter degrades to the next format when it can't.

Key Classes:
    - RasterRenderer: Project -> PNG bytes
    - DocumentRenderer: PNG bytes + Project -> document bytes
    - RendererUnavailable: Service missing or failed
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from gangsheet_toolkit.core.models import Project


class RendererUnavailable(Exception):
    """Rendering service missing or unable to produce output."""
    pass


class RasterRenderer(ABC):
    """Bitmap renderer interface."""

    @property
    def available(self) -> bool:
        """Whether the service can render right now."""
        return True

    @abstractmethod
    def render(self, project: Project, *, scale: float, background: str | None) -> bytes:
        """
        Render the sheet to PNG bytes.

        Args:
            project: Snapshot to render
            scale: Multiplier from display pixels to export pixels
            background: Hex fill color, or None for transparent

        Returns:
            PNG bytes at export resolution

        Raises:
            RendererUnavailable: If rendering can't be done
        """


class DocumentRenderer(ABC):
    """Document generator interface."""

    @property
    def available(self) -> bool:
        """Whether the service can render right now."""
        return True

    @abstractmethod
    def render(self, raster: bytes, project: Project) -> bytes:
        """
        Wrap a rendered raster into a document.

        Args:
            raster: PNG bytes from a RasterRenderer
            project: Snapshot (for physical page size)

        Returns:
            Document bytes

        Raises:
            RendererUnavailable: If rendering can't be done
        """
