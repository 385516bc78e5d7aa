"""Assemble captured strokes into immutable Variant records.

Each raw stroke is resampled in canvas pixels, normalized into em-space and
annotated with playback timing (dt), pressure and cumulative arc length (s).
The resulting Variant can be persisted or handed straight to the reveal
player for a preview.
"""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Sequence

from ..config import DEFAULT_EM_SIZE, DEFAULT_STEP_PX
from ..domain.points import GlyphBox, RawPoint, ResampledPoint
from ..domain.variant import CharacterMetrics, ProcessedStroke, Variant, VariantStats
from ..errors import EmptyCaptureError
from .normalize import to_em_space, validate_glyph_box
from .resample import resample

logger = logging.getLogger(__name__)

# Advance width of fallback metrics, relative to the captured ink width
ADVANCE_SPACING = 1.2


def playback_points(points: Sequence[RawPoint]) -> list[ResampledPoint]:
    """Annotate em-space points with dt, pressure and cumulative arc length.

    The first point gets dt=0 and s=0; point i gets dt = t[i] - t[i-1],
    its own pressure, and s increased by the distance from point i-1. A
    single point therefore yields exactly one playback point.
    """
    if not points:
        return []
    first = points[0]
    out = [ResampledPoint(x=first.x, y=first.y, dt=0, p=first.p, s=0)]
    s = 0.0
    for a, b in zip(points, points[1:]):
        s += a.distance_to(b)
        out.append(ResampledPoint(x=b.x, y=b.y, dt=b.t - a.t, p=b.p, s=s))
    return out


def process_stroke(points: Sequence[RawPoint], glyph_box: GlyphBox,
                   em_size: float = DEFAULT_EM_SIZE,
                   step: float = DEFAULT_STEP_PX) -> ProcessedStroke:
    """Resample one raw stroke in pixels, then normalize it into em-space."""
    em_points = to_em_space(resample(points, step), glyph_box, em_size)
    return ProcessedStroke(points=tuple(em_points),
                           resampled=tuple(playback_points(em_points)))


def build_variant(raw_strokes: Iterable[Sequence[RawPoint]], glyph_box: GlyphBox, *,
                  em_size: float = DEFAULT_EM_SIZE, step: float = DEFAULT_STEP_PX,
                  starred: bool = False, weight: float = 1.0,
                  variant_id: Optional[str] = None) -> Variant:
    """Build a Variant from the raw strokes of one capture.

    Args:
        raw_strokes: Strokes in capture order, each a sequence of canvas-pixel
            points. Empty strokes are skipped.
        glyph_box: Canvas rectangle the em square maps onto.
        em_size: Size of the em square in design units.
        step: Resampling step in canvas pixels.
        starred: Initial starred flag; directly approved captures pass True.
        weight: Sampling weight of the variant.
        variant_id: Identifier to use instead of a fresh UUID.

    Returns:
        A new Variant. stats.durationMs spans the earliest to the latest raw
        timestamp; stats.arcLen is the summed em-space arc length.

    Raises:
        EmptyCaptureError: If no stroke contains a point.
        InvalidGlyphBoxError: If glyph_box has a non-positive size.
    """
    strokes = [list(s) for s in raw_strokes if len(s) > 0]
    if not strokes:
        raise EmptyCaptureError("cannot build a variant from an empty capture")
    validate_glyph_box(glyph_box)

    processed = tuple(process_stroke(s, glyph_box, em_size, step) for s in strokes)

    times = [p.t for s in strokes for p in s]
    stats = VariantStats(
        duration_ms=max(times) - min(times),
        arc_len=sum(s.arc_length for s in processed),
    )
    variant = Variant(
        id=variant_id or str(uuid.uuid4()),
        strokes=processed,
        stats=stats,
        starred=starred,
        weight=weight,
    )
    logger.debug("Built variant %s: %d strokes, %d segments, %.0f ms, arc %.1f",
                 variant.id, len(processed), variant.segment_count,
                 stats.duration_ms, stats.arc_len)
    return variant


def metrics_from_strokes(strokes: Iterable[ProcessedStroke]) -> CharacterMetrics:
    """Approximate character metrics from the captured ink.

    Used when no font file is available: bounds are the rounded extent of the
    em-space points and the advance is the ink width plus spacing.
    """
    xs, ys = [], []
    for stroke in strokes:
        for p in stroke.points:
            xs.append(p.x)
            ys.append(p.y)
    if not xs:
        return CharacterMetrics(advance=0, bounds=(0, 0, 0, 0), baseline=0)

    bounds = (round(min(xs)), round(min(ys)), round(max(xs)), round(max(ys)))
    width = bounds[2] - bounds[0]
    return CharacterMetrics(advance=round(width * ADVANCE_SPACING), bounds=bounds, baseline=0)
