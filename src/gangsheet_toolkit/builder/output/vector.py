"""
Module: builder.output.vector

Purpose:
    Render a Project snapshot to an SVG document at export resolution.

Key Functions:
    - render_svg(): Main rendering function
    - item_transform(): Rotation-about-center transform string

Output:
    <svg width=W height=H viewBox="0 0 W H">
      <rect .../>                       (unless transparent)
      <image href=... x y width height transform=.../>  (per visible item)
    </svg>

Dependencies:
    - xml.etree.ElementTree (std)

Used By:
    - builder.output.exporter: Vector export / final fallback
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from gangsheet_toolkit.core.models import Item, Project

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def _fmt(value: float) -> str:
    """Compact number formatting for attributes."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def item_transform(cx: float, cy: float, rotation: float) -> str:
    """
    Rotation about a center point.

    translate to center, rotate, translate back: the same pivot the
    editor rotates items around.
    """
    return (
        f"translate({_fmt(cx)} {_fmt(cy)}) "
        f"rotate({_fmt(rotation)}) "
        f"translate({_fmt(-cx)} {_fmt(-cy)})"
    )


def render_svg(project: Project) -> str:
    """
    Render a project to SVG text.

    Item geometry is rescaled from editor pixels by
    export dimension / display dimension on each axis.

    Args:
        project: Snapshot to render

    Returns:
        SVG document as a string

    Example:
        >>> svg = render_svg(project)
        >>> svg.startswith("<?xml")
        True
    """
    sheet = project.sheet
    export_w, export_h = sheet.export_size(project.export_dpi)
    sx = export_w / sheet.pixel_width
    sy = export_h / sheet.pixel_height

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": str(export_w),
            "height": str(export_h),
            "viewBox": f"0 0 {export_w} {export_h}",
        },
    )

    if not project.view.transparent:
        ET.SubElement(
            root,
            "rect",
            {
                "x": "0",
                "y": "0",
                "width": str(export_w),
                "height": str(export_h),
                "fill": project.view.background,
            },
        )

    for item in project.visible_items:
        _add_image(root, item, sx, sy)

    logger.info(
        f"Rendered SVG {export_w}x{export_h} with {len(project.visible_items)} images"
    )
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body


def _add_image(root: ET.Element, item: Item, sx: float, sy: float) -> None:
    x = item.x * sx
    y = item.y * sy
    width = item.scaled_width * sx
    height = item.scaled_height * sy
    cx = x + width / 2
    cy = y + height / 2

    ET.SubElement(
        root,
        "image",
        {
            "id": item.id,
            "href": item.source,
            "x": _fmt(x),
            "y": _fmt(y),
            "width": _fmt(width),
            "height": _fmt(height),
            "preserveAspectRatio": "none",
            "transform": item_transform(cx, cy, item.rotation),
        },
    )
