"""Stroke normalization pipeline.

Raw strokes flow through three stages:

    resample: Constant arc-length spacing in canvas pixels.
    to_em_space: Canvas pixels to font design units through a glyph box.
    build_variant: Playback annotation (dt, p, s) and summary statistics.

Example usage::

    from handset.pipeline import build_variant, glyph_box_for_canvas

    box = glyph_box_for_canvas(400, 400)
    variant = build_variant(buffer.strokes(), box, starred=True)
"""

from .builder import build_variant, metrics_from_strokes, playback_points, process_stroke
from .normalize import from_em_space, glyph_box_for_canvas, to_em_space, validate_glyph_box
from .resample import resample

__all__ = [
    'resample',
    'to_em_space', 'from_em_space', 'glyph_box_for_canvas', 'validate_glyph_box',
    'build_variant', 'process_stroke', 'playback_points', 'metrics_from_strokes',
]
