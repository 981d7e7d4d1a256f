"""
Module: builder.interaction

Purpose:
    Manual manipulation of items: the per-pointer drag state machine and
    the interaction-mode signal the presentation layer reacts to.
"""

from .drag import NO_DRAG_REGIONS, DragController, DragSession, InteractionMode

__all__ = [
    "NO_DRAG_REGIONS",
    "DragController",
    "DragSession",
    "InteractionMode",
]
