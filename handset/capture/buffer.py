"""In-progress stroke capture.

CaptureBuffer receives pointer events from the host surface, maps them into
RawPoints relative to the surface origin and groups them into strokes. A
stroke becomes part of the capture only when its pointer-up is observed;
undo and clear operate on committed strokes.

The buffer is mutated only from synchronous input handlers on the UI thread,
so it holds no locks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import DEFAULT_PRESSURE
from ..domain.points import RawPoint

logger = logging.getLogger(__name__)

PointFilter = Callable[[RawPoint], RawPoint]


@dataclass(frozen=True)
class PointerEvent:
    """Pointer sample as reported by the host input source.

    Attributes:
        client_x: Horizontal position in client (window) pixels.
        client_y: Vertical position in client pixels.
        timestamp: Event time in milliseconds, any epoch.
        pressure: Device pressure in [0, 1], or None if not reported.
    """
    client_x: float
    client_y: float
    timestamp: float
    pressure: Optional[float] = None


class CaptureBuffer:
    """Accumulates raw strokes for one capture.

    Attributes:
        origin: Client coordinates of the capture surface's top-left corner.
        point_filter: Optional callable applied to every mapped point, for
            constraint assistance such as MaskConstraint.

    Example:
        >>> buf = CaptureBuffer(origin=(10, 20))
        >>> buf.pointer_down(PointerEvent(10, 20, 1000.0))
        >>> buf.pointer_move(PointerEvent(15, 20, 1010.0, pressure=0.7))
        >>> stroke = buf.pointer_up()
        >>> [(p.x, p.y, p.t, p.p) for p in stroke]
        [(0, 0, 0.0, 0.5), (5, 0, 10.0, 0.7)]
    """

    def __init__(self, origin: Tuple[float, float] = (0.0, 0.0),
                 point_filter: Optional[PointFilter] = None):
        self.origin = origin
        self.point_filter = point_filter
        self._strokes: List[List[RawPoint]] = []
        self._active: Optional[List[RawPoint]] = None
        self._capture_start: Optional[float] = None
        self._last_t = 0.0

    # -- input events -------------------------------------------------------

    def pointer_down(self, event: PointerEvent) -> None:
        """Start a new stroke at the event position."""
        if self._active is not None:
            # Missed pointer-up: keep what was drawn
            self._commit()
        if self._capture_start is None:
            # Restored strokes keep their times; new input continues after them
            self._capture_start = event.timestamp - self._last_t
        self._active = [self._map(event)]

    def pointer_move(self, event: PointerEvent) -> None:
        """Append a point to the open stroke; ignored between strokes."""
        if self._active is None:
            return
        self._active.append(self._map(event))

    def pointer_up(self, event: Optional[PointerEvent] = None) -> Optional[Tuple[RawPoint, ...]]:
        """Commit the open stroke.

        Args:
            event: Final pointer sample, appended if given.

        Returns:
            The committed stroke, or None if no stroke was open.
        """
        if self._active is None:
            return None
        if event is not None:
            self._active.append(self._map(event))
        return self._commit()

    # -- editing ------------------------------------------------------------

    def undo(self) -> Optional[Tuple[RawPoint, ...]]:
        """Remove and return the last committed stroke."""
        if not self._strokes:
            return None
        removed = tuple(self._strokes.pop())
        logger.debug("Undo stroke: %d points, %d strokes left", len(removed), len(self._strokes))
        return removed

    def clear(self) -> None:
        """Drop every stroke, including one in progress."""
        self._strokes = []
        self._active = None
        self._capture_start = None
        self._last_t = 0.0

    def restore(self, strokes: List[List[RawPoint]]) -> None:
        """Replace the capture with previously saved strokes (e.g. a draft).

        Times are kept as saved; capture continues after the latest one.
        """
        self.clear()
        self._strokes = [list(s) for s in strokes if s]
        if self._strokes:
            self._last_t = max(p.t for s in self._strokes for p in s)

    # -- queries ------------------------------------------------------------

    def strokes(self) -> List[Tuple[RawPoint, ...]]:
        """Copy of the committed strokes, safe to hand to the pipeline."""
        return [tuple(s) for s in self._strokes]

    @property
    def is_capturing(self) -> bool:
        return self._active is not None

    @property
    def is_empty(self) -> bool:
        return not any(self._strokes)

    @property
    def stroke_count(self) -> int:
        return len(self._strokes)

    @property
    def point_count(self) -> int:
        return sum(len(s) for s in self._strokes)

    # -- internals ----------------------------------------------------------

    def _commit(self) -> Tuple[RawPoint, ...]:
        stroke = self._active
        self._active = None
        self._strokes.append(stroke)
        logger.debug("Committed stroke %d with %d points", len(self._strokes), len(stroke))
        return tuple(stroke)

    def _map(self, event: PointerEvent) -> RawPoint:
        ox, oy = self.origin
        # Timestamps never run backwards within a capture
        t = max(self._last_t, event.timestamp - self._capture_start)
        self._last_t = t
        p = DEFAULT_PRESSURE if event.pressure is None else min(1.0, max(0.0, event.pressure))
        point = RawPoint(x=event.client_x - ox, y=event.client_y - oy, t=t, p=p)
        if self.point_filter is not None:
            point = self.point_filter(point)
        return point
