"""Time-parameterized reveal computation.

A variant's strokes are flattened into one ordered list of segments, each
the pair of consecutive ResampledPoints (a, b) of a stroke. Segment arrival
times are the running sum of b.dt across the whole list, so the reveal clock
never resets at a stroke boundary. compute_reveal() is a pure function of
(timeline, elapsed, params, canvas): for a given elapsed animation time it
returns exactly which (sub)segments are visible and how wide each one is.

Width model:
    width = base * (0.6 + width_gain / 100 * pressure) / max(1, speed * 0.02)

where base = clamp(min(W, H) * 0.04, 6, 22), pressure is the trailing point's
pressure and speed is the arc length covered by the drawn (sub)segment.
Pressure thickens the line, fast motion thins it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import (
    BASE_WIDTH_FRACTION,
    BASE_WIDTH_MAX,
    BASE_WIDTH_MIN,
    DEFAULT_EM_SIZE,
    DEFAULT_PRESSURE,
    DEFAULT_SPEED,
    DEFAULT_WIDTH_GAIN,
    MAX_INK_LAG_MS,
    PRESSURE_FLOOR,
    SETTLE_MS,
    SPEED_DIVISOR,
)
from ..domain.points import GlyphBox, ResampledPoint
from ..domain.variant import Variant
from ..pipeline.normalize import from_em_space


@dataclass(frozen=True)
class PlaybackParams:
    """Parameters of one playback run.

    Attributes:
        speed_multiplier: Scales wall-clock time into animation time (> 0).
        width_gain: Pressure influence on stroke width, 0-100.
        ink_lag_ms: Duration of the glyph alpha ease-in once the reveal
            starts; 0 disables easing. At most MAX_INK_LAG_MS.
        pen_lift_gaps: Insert the recorded pause between strokes before each
            stroke after the first. When False, strokes follow each other
            without a pause.
    """
    speed_multiplier: float = DEFAULT_SPEED
    width_gain: float = DEFAULT_WIDTH_GAIN
    ink_lag_ms: float = 0.0
    pen_lift_gaps: bool = False

    def __post_init__(self):
        if not self.speed_multiplier > 0:
            raise ValueError(f"speed_multiplier must be > 0, got {self.speed_multiplier}")
        if self.width_gain < 0:
            raise ValueError(f"width_gain must be >= 0, got {self.width_gain}")
        if not 0 <= self.ink_lag_ms <= MAX_INK_LAG_MS:
            raise ValueError(f"ink_lag_ms must be in [0, {MAX_INK_LAG_MS}], got {self.ink_lag_ms}")


@dataclass(frozen=True)
class TimedSegment:
    """One playback segment with its place on the reveal clock."""
    a: ResampledPoint
    b: ResampledPoint
    start_ms: float
    arrival_ms: float
    stroke_index: int


@dataclass(frozen=True)
class SegmentTimeline:
    """Timed segments of a variant.

    total_ms is the arrival time of the last segment. end_ms also counts
    every segment as lasting at least 1 ms, and playback completes once
    end_ms plus the settle margin has passed.
    """
    segments: Tuple[TimedSegment, ...]
    total_ms: float
    end_ms: float

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments


@dataclass(frozen=True)
class DrawnSegment:
    """A revealed (sub)segment in canvas pixels."""
    index: int
    start: Tuple[float, float]
    end: Tuple[float, float]
    width: float
    ratio: float = 1.0

    @property
    def is_partial(self) -> bool:
        return self.ratio < 1.0


@dataclass(frozen=True)
class RevealFrame:
    """Everything needed to draw one frame of the reveal.

    Attributes:
        elapsed: Animation time of this frame in milliseconds.
        segments: Visible (sub)segments in drawing order.
        revealed: Fraction of segments revealed, 0.0-1.0 (partial segments
            count by their ratio).
        glyph_alpha: Glyph opacity multiplier from ink-lag easing.
        complete: True once playback has settled past the last arrival.
    """
    elapsed: float
    segments: Tuple[DrawnSegment, ...]
    revealed: float
    glyph_alpha: float
    complete: bool


def build_timeline(variant: Variant, pen_lift_gaps: bool = False) -> SegmentTimeline:
    """Flatten a variant's strokes into one timed segment list.

    Args:
        variant: Variant to replay.
        pen_lift_gaps: Delay each stroke after the first by the recorded time
            between the previous stroke's last point and its first point.

    Returns:
        SegmentTimeline whose total_ms is the arrival time of the last segment.
    """
    segments: List[TimedSegment] = []
    clock = 0.0
    prev_end_t: Optional[float] = None
    for stroke_index, stroke in enumerate(variant.strokes):
        if pen_lift_gaps and prev_end_t is not None and stroke.points:
            clock += max(0.0, stroke.points[0].t - prev_end_t)
        if stroke.points:
            prev_end_t = stroke.points[-1].t
        pts = stroke.resampled
        for a, b in zip(pts, pts[1:]):
            arrival = clock + b.dt
            segments.append(TimedSegment(a, b, start_ms=clock, arrival_ms=arrival,
                                         stroke_index=stroke_index))
            clock = arrival
    total = segments[-1].arrival_ms if segments else 0.0
    padding = sum(max(1.0, seg.b.dt) - seg.b.dt for seg in segments)
    return SegmentTimeline(tuple(segments), total, total + padding)


def base_width(canvas_width: float, canvas_height: float) -> float:
    """Nominal stroke width for a canvas, clamped to [6, 22] px."""
    return max(BASE_WIDTH_MIN, min(BASE_WIDTH_MAX, min(canvas_width, canvas_height) * BASE_WIDTH_FRACTION))


def stroke_width(base: float, width_gain: float, pressure: Optional[float], arc: float) -> float:
    """Width of a drawn (sub)segment.

    Args:
        base: Canvas base width from base_width().
        width_gain: Pressure gain, 0-100.
        pressure: Trailing pressure of the segment; None counts as 0.5.
        arc: Arc length covered by the drawn part, in em units.
    """
    if pressure is None:
        pressure = DEFAULT_PRESSURE
    speed = max(1.0, arc)
    return base * (PRESSURE_FLOOR + (width_gain / 100.0) * pressure) / max(1.0, speed * SPEED_DIVISOR)


def ink_lag_alpha(elapsed: float, reveal_start: float, ink_lag_ms: float) -> float:
    """Ease-out glyph opacity over ink_lag_ms once the reveal has started."""
    if ink_lag_ms <= 0:
        return 1.0
    x = min(1.0, max(0.0, (elapsed - reveal_start) / ink_lag_ms))
    return 1.0 - (1.0 - x) * (1.0 - x)


def compute_reveal(timeline: SegmentTimeline, elapsed: float, params: PlaybackParams,
                   canvas_size: Tuple[float, float], glyph_box: GlyphBox,
                   em_size: float = DEFAULT_EM_SIZE) -> RevealFrame:
    """Compute the visible (sub)segments at an animation time.

    Segments whose arrival time has passed are drawn in full. The first
    segment not yet reached is drawn up to the fraction of its duration that
    has elapsed, and nothing after it is drawn.

    Args:
        timeline: Output of build_timeline().
        elapsed: Animation time, i.e. wall-clock time times speed multiplier.
        params: Playback parameters.
        canvas_size: (width, height) of the output canvas in pixels.
        glyph_box: Canvas rectangle the em square maps onto.
        em_size: Size of the em square in design units.

    Returns:
        RevealFrame for this instant. Deterministic for identical inputs.
    """
    width, height = canvas_size
    base = base_width(width, height)
    drawn: List[DrawnSegment] = []
    revealed_units = 0.0

    for index, seg in enumerate(timeline.segments):
        a, b = seg.a, seg.b
        start = from_em_space(a.x, a.y, glyph_box, em_size)
        # Zero-duration segments still wait for the clock to start.
        if elapsed >= seg.arrival_ms and elapsed > 0:
            end = from_em_space(b.x, b.y, glyph_box, em_size)
            w = stroke_width(base, params.width_gain, b.p, b.s - a.s)
            drawn.append(DrawnSegment(index, start, end, w))
            revealed_units += 1.0
            continue

        ratio = max(0.0, min(1.0, (elapsed - seg.start_ms) / max(1.0, b.dt)))
        if ratio > 0.0:
            ex = a.x + ratio * (b.x - a.x)
            ey = a.y + ratio * (b.y - a.y)
            end = from_em_space(ex, ey, glyph_box, em_size)
            w = stroke_width(base, params.width_gain, b.p, (b.s - a.s) * ratio)
            drawn.append(DrawnSegment(index, start, end, w, ratio))
            revealed_units += ratio
        break

    n = len(timeline.segments)
    revealed = revealed_units / n if n else 1.0
    reveal_start = timeline.segments[0].start_ms if n else 0.0
    complete = n == 0 or elapsed >= timeline.end_ms + SETTLE_MS
    return RevealFrame(
        elapsed=elapsed,
        segments=tuple(drawn),
        revealed=revealed,
        glyph_alpha=ink_lag_alpha(elapsed, reveal_start, params.ink_lag_ms),
        complete=complete,
    )
