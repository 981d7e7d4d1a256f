"""
Module: builder.output.raster

Purpose:
    Default bitmap renderer built on Pillow. Composes every visible item
    onto a sheet-sized canvas at export resolution.

Key Classes:
    - PillowRasterRenderer: RasterRenderer implementation

Dependencies:
    - PIL: Image composition and PNG encoding
    - builder.uploads: open_source()

Used By:
    - builder.output.exporter: Raster export, document input
"""

from __future__ import annotations

import io
import logging
import math

from PIL import Image, ImageColor

from gangsheet_toolkit.core.models import Item, Project

from ..uploads import DecodeFailure, open_source
from .services import RasterRenderer, RendererUnavailable

logger = logging.getLogger(__name__)

# Largest canvas the renderer will allocate
MAX_CANVAS_PIXELS = 400_000_000


class PillowRasterRenderer(RasterRenderer):
    """
    Compose the sheet with Pillow.

    Items are resized to their scaled size times the export multiplier,
    rotated about their center (clockwise, matching the editor) and
    alpha-composited in z-order.
    """

    def __init__(self, *, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self.resample = resample

    def render(self, project: Project, *, scale: float, background: str | None) -> bytes:
        sheet = project.sheet
        width = max(1, round(sheet.pixel_width * scale))
        height = max(1, round(sheet.pixel_height * scale))
        if width * height > MAX_CANVAS_PIXELS:
            raise RendererUnavailable(
                f"Canvas {width}x{height} exceeds {MAX_CANVAS_PIXELS} pixels"
            )

        fill = (0, 0, 0, 0) if background is None else ImageColor.getrgb(background)
        if len(fill) == 3:
            fill = fill + (255,)
        canvas = Image.new("RGBA", (width, height), fill)

        for item in project.visible_items:
            try:
                self._draw_item(canvas, item, scale)
            except DecodeFailure as e:
                logger.warning(f"Skipping {item.id} in raster export: {e}")

        buf = io.BytesIO()
        canvas.save(buf, format="PNG", dpi=(project.export_dpi, project.export_dpi))
        logger.info(f"Rendered raster {width}x{height} at x{scale:.3f}")
        return buf.getvalue()

    def _draw_item(self, canvas: Image.Image, item: Item, scale: float) -> None:
        target_w = max(1, round(item.scaled_width * scale))
        target_h = max(1, round(item.scaled_height * scale))

        with open_source(item.source) as img:
            sprite = img.resize((target_w, target_h), self.resample)

        if item.rotation % 360:
            # PIL rotates counter-clockwise; the editor rotates clockwise
            sprite = sprite.rotate(-item.rotation, resample=Image.Resampling.BICUBIC, expand=True)

        cx = (item.x + item.scaled_width / 2) * scale
        cy = (item.y + item.scaled_height / 2) * scale
        left = math.floor(cx - sprite.width / 2)
        top = math.floor(cy - sprite.height / 2)

        # alpha_composite needs a non-negative destination; crop what hangs off
        src_left = max(0, -left)
        src_top = max(0, -top)
        if src_left >= sprite.width or src_top >= sprite.height:
            return
        if src_left or src_top:
            sprite = sprite.crop((src_left, src_top, sprite.width, sprite.height))
        dest = (max(0, left), max(0, top))
        if dest[0] >= canvas.width or dest[1] >= canvas.height:
            return
        sprite = sprite.crop(
            (0, 0, min(sprite.width, canvas.width - dest[0]), min(sprite.height, canvas.height - dest[1]))
        )
        canvas.alpha_composite(sprite, dest=dest)
