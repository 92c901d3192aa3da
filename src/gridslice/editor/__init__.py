"""
Module: editor

Purpose:
    Interactive boundary editing, independent of any GUI toolkit.

Key Classes:
    - DragController: Pointer-drag state machine
    - DragTarget: Edge being dragged
"""

from .drag import DragController, DragTarget, PointerSource, SurfaceRect, hit_test, pointer_to_percent

__all__ = [
    "DragController",
    "DragTarget",
    "PointerSource",
    "SurfaceRect",
    "hit_test",
    "pointer_to_percent",
]
