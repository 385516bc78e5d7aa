"""Domain objects for captured handwriting.

This module provides the value objects shared by the capture buffer, the
normalization pipeline, the reveal player and persistence.

Point classes:
    RawPoint: Immutable sample with position, time and pressure.
    ResampledPoint: Em-space playback point with dt, pressure and arc length.
    GlyphBox: Canvas rectangle that the em square maps onto.

Record classes:
    ProcessedStroke: Resampled em-space points plus playback points.
    Variant: One recorded take of a character.
    VariantStats: Duration and arc length of a variant.
    CharacterMetrics: Advance, bounds and baseline of a character.
    CharacterData: Metrics and variants for one character.
    TracingSession: Font, metadata and per-character captures.

Example usage::

    from handset.domain import RawPoint, GlyphBox

    a = RawPoint(0, 0, t=0, p=0.5)
    b = RawPoint(3, 4, t=10, p=0.7)
    print(a.distance_to(b))  # 5.0
"""

from .points import GlyphBox, RawPoint, ResampledPoint
from .variant import (
    CharacterData,
    CharacterMetrics,
    FontInfo,
    ProcessedStroke,
    SessionMeta,
    TracingSession,
    Variant,
    VariantStats,
)

__all__ = [
    'RawPoint', 'ResampledPoint', 'GlyphBox',
    'ProcessedStroke', 'Variant', 'VariantStats',
    'CharacterMetrics', 'CharacterData', 'FontInfo', 'SessionMeta', 'TracingSession',
]
