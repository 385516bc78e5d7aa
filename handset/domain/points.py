"""Point and box value objects for captured strokes."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from ..config import DEFAULT_PRESSURE


@dataclass(frozen=True)
class RawPoint:
    """Immutable timestamped, pressure-tagged sample.

    Coordinates are canvas pixels while a stroke is being captured and em
    units once the stroke has been normalized.
    """
    x: float
    y: float
    t: float = 0.0
    p: float = DEFAULT_PRESSURE

    def distance_to(self, other: RawPoint) -> float:
        """Euclidean distance to another point (time and pressure ignored)."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: RawPoint, r: float) -> RawPoint:
        """Point at fraction r of the way to other, interpolating x, y, t and p."""
        return RawPoint(
            x=self.x + r * (other.x - self.x),
            y=self.y + r * (other.y - self.y),
            t=self.t + r * (other.t - self.t),
            p=self.p + r * (other.p - self.p),
        )

    def with_position(self, x: float, y: float) -> RawPoint:
        """Copy with a new position; time and pressure are kept."""
        return replace(self, x=x, y=y)

    def same_position(self, other: RawPoint) -> bool:
        return self.x == other.x and self.y == other.y

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 't': self.t, 'p': self.p}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> RawPoint:
        p = d.get('p')
        return cls(x=d['x'], y=d['y'], t=d.get('t', 0), p=DEFAULT_PRESSURE if p is None else p)


@dataclass(frozen=True)
class ResampledPoint:
    """Em-space point carrying playback timing.

    Attributes:
        x: Em-space x.
        y: Em-space y.
        dt: Milliseconds since the previous resampled point of the stroke
            (0 for the first point).
        p: Pressure at this point.
        s: Cumulative arc length from the start of the stroke, in em units.
    """
    x: float
    y: float
    dt: float
    p: float
    s: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'dt': self.dt, 'p': self.p, 's': self.s}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ResampledPoint:
        p = d.get('p')
        return cls(
            x=d['x'], y=d['y'], dt=d.get('dt', 0),
            p=DEFAULT_PRESSURE if p is None else p,
            s=d.get('s', 0),
        )


@dataclass(frozen=True)
class GlyphBox:
    """Rectangle on a canvas that the [0, em] x [0, em] square maps onto."""
    x: float
    y: float
    w: float
    h: float

    @property
    def is_valid(self) -> bool:
        """True when the box has a finite, strictly positive size."""
        return (math.isfinite(self.w) and math.isfinite(self.h)
                and math.isfinite(self.x) and math.isfinite(self.y)
                and self.w > 0 and self.h > 0)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.w and self.y <= y <= self.y + self.h

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h}

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> GlyphBox:
        return cls(d['x'], d['y'], d['w'], d['h'])
