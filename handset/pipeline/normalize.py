"""Canvas pixel to em-space coordinate mapping.

The glyph box is the rectangle on a canvas that the font's [0, em] x [0, em]
design square is drawn into. Captured points are mapped through the box so
strokes recorded on canvases of different sizes share one coordinate system.
"""

from __future__ import annotations

import logging
from typing import Iterable, Tuple

import numpy as np

from ..config import DEFAULT_EM_SIZE, GLYPH_FILL
from ..domain.points import GlyphBox, RawPoint
from ..errors import InvalidGlyphBoxError

logger = logging.getLogger(__name__)


def validate_glyph_box(glyph_box: GlyphBox) -> GlyphBox:
    """Return glyph_box, or raise InvalidGlyphBoxError if it cannot be mapped.

    A zero or negative size would produce NaN/Infinity coordinates that
    poison every downstream point.
    """
    if not glyph_box.is_valid:
        raise InvalidGlyphBoxError(
            f"glyph box must have finite, positive size, got {glyph_box}")
    return glyph_box


def to_em_space(points: Iterable[RawPoint], glyph_box: GlyphBox,
                em_size: float = DEFAULT_EM_SIZE) -> list[RawPoint]:
    """Map canvas-pixel points into em-space.

    x' = (x - box.x) / box.w * em_size, and likewise for y with box.h.
    Time and pressure pass through unchanged.

    Args:
        points: Points in canvas pixels.
        glyph_box: Canvas rectangle that the em square occupies.
        em_size: Size of the em square in design units.

    Returns:
        New list of points in em units.

    Raises:
        InvalidGlyphBoxError: If the box has a non-positive or non-finite size.
    """
    validate_glyph_box(glyph_box)
    points = list(points)
    if not points:
        return []

    xy = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    origin = np.array([glyph_box.x, glyph_box.y], dtype=np.float64)
    scale = np.array([em_size / glyph_box.w, em_size / glyph_box.h], dtype=np.float64)
    em = (xy - origin) * scale

    return [p.with_position(float(ex), float(ey)) for p, (ex, ey) in zip(points, em)]


def from_em_space(x: float, y: float, glyph_box: GlyphBox,
                  em_size: float = DEFAULT_EM_SIZE) -> Tuple[float, float]:
    """Map one em-space coordinate back onto a canvas."""
    return (glyph_box.x + (x / em_size) * glyph_box.w,
            glyph_box.y + (y / em_size) * glyph_box.h)


def glyph_box_for_canvas(width: float, height: float, fill: float = GLYPH_FILL) -> GlyphBox:
    """Square glyph box centered on a canvas.

    The side is min(width, height) * fill, matching how the template glyph is
    drawn behind the capture surface.
    """
    size = min(width, height) * fill
    box = GlyphBox(x=(width - size) / 2, y=(height - size) / 2, w=size, h=size)
    logger.debug("Glyph box for %sx%s canvas: %s", width, height, box)
    return box
