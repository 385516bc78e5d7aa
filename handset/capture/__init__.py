"""Pointer capture for handwriting strokes.

    CaptureBuffer: Groups pointer events into raw strokes with undo/clear.
    PointerEvent: Host input sample (client position, time, pressure).
    MaskConstraint: Point filter snapping input into a glyph mask.
"""

from .buffer import CaptureBuffer, PointerEvent, PointFilter
from .constraints import MaskConstraint

__all__ = ['CaptureBuffer', 'PointerEvent', 'PointFilter', 'MaskConstraint']
