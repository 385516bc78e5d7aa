"""Input constraint assistance for the capture buffer.

Constraints are point filters: callables that take a mapped RawPoint and
return a (possibly moved) RawPoint. They run before the normalization
pipeline sees any data, so they only change positions, never time or
pressure.
"""

from __future__ import annotations

import numpy as np
from scipy.ndimage import distance_transform_edt

from ..domain.points import RawPoint


class MaskConstraint:
    """Snap points that fall outside a glyph mask to the nearest inside pixel.

    The nearest-inside lookup comes from scipy's Euclidean distance transform
    with index mapping, computed once per mask.

    Args:
        mask: Boolean array (height, width) in capture-surface pixels, True
            inside the glyph.

    Example:
        >>> mask = np.zeros((100, 100), dtype=bool)
        >>> mask[20:80, 20:80] = True
        >>> snap = MaskConstraint(mask)
        >>> snap(RawPoint(5, 50, t=10, p=0.4))
        RawPoint(x=20.0, y=50.0, t=10, p=0.4)
    """

    def __init__(self, mask: np.ndarray):
        self.mask = np.asarray(mask, dtype=bool)
        if not self.mask.any():
            raise ValueError("constraint mask has no inside pixels")
        _, self._indices = distance_transform_edt(~self.mask, return_indices=True)

    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) lies on the surface and inside the mask."""
        h, w = self.mask.shape
        if not (0 <= x <= w - 1 and 0 <= y <= h - 1):
            return False
        ix, iy = self._pixel(x, y)
        return bool(self.mask[iy, ix])

    def __call__(self, point: RawPoint) -> RawPoint:
        if self.contains(point.x, point.y):
            return point
        ix, iy = self._pixel(point.x, point.y)
        ny = float(self._indices[0, iy, ix])
        nx = float(self._indices[1, iy, ix])
        return point.with_position(nx, ny)

    def _pixel(self, x: float, y: float) -> tuple[int, int]:
        h, w = self.mask.shape
        ix = int(round(min(max(x, 0), w - 1)))
        iy = int(round(min(max(y, 0), h - 1)))
        return ix, iy
