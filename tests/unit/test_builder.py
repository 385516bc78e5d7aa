"""Unit tests for handset.pipeline.builder.

Tests build_variant() and its helpers:
    - playback_points: dt, pressure and cumulative arc length annotation
    - build_variant: per-stroke processing, stats, ids and flags
    - metrics_from_strokes: fallback metrics from captured ink
"""

import uuid

import pytest

from handset.domain import GlyphBox, RawPoint
from handset.errors import EmptyCaptureError, InvalidGlyphBoxError
from handset.pipeline import build_variant, metrics_from_strokes, playback_points, process_stroke


class TestPlaybackPoints:
    """Tests for playback_points."""

    def test_first_point_starts_clock(self):
        out = playback_points([RawPoint(1, 2, 40, 0.3), RawPoint(4, 6, 90, 0.7)])
        assert out[0].dt == 0
        assert out[0].s == 0
        assert out[0].p == 0.3

    def test_dt_pressure_and_arc(self):
        out = playback_points([RawPoint(0, 0, 0), RawPoint(3, 4, 30, 0.9), RawPoint(3, 10, 80, 0.1)])
        assert [p.dt for p in out] == [0, 30, 50]
        assert [p.p for p in out] == [0.5, 0.9, 0.1]
        assert [p.s for p in out] == [0, 5.0, 11.0]

    def test_single_point(self):
        out = playback_points([RawPoint(7, 8, 12, 0.4)])
        assert len(out) == 1
        assert (out[0].x, out[0].y, out[0].dt, out[0].s) == (7, 8, 0, 0)

    def test_empty(self):
        assert playback_points([]) == []


class TestProcessStroke:

    def test_resampled_in_pixels_then_normalized(self, raw_stroke, glyph_box):
        """Step applies to canvas pixels, coordinates come out in em units."""
        stroke = process_stroke(raw_stroke, glyph_box, em_size=1000, step=5)
        assert [round(p.x) for p in stroke.points] == [0, 50, 100, 150, 200]
        assert len(stroke.resampled) == 5
        assert stroke.arc_length == pytest.approx(200)
        assert stroke.segment_count == 4


class TestBuildVariant:
    """Tests for build_variant."""

    def test_every_stroke_has_resampled_points(self, sample_variant):
        assert len(sample_variant.strokes) == 2
        for stroke in sample_variant.strokes:
            assert len(stroke.resampled) >= 1

    def test_single_point_stroke(self, glyph_box):
        variant = build_variant([[RawPoint(50, 50, 10, 0.6)]], glyph_box)
        resampled = variant.strokes[0].resampled
        assert len(resampled) == 1
        assert (resampled[0].x, resampled[0].y) == (500, 500)
        assert resampled[0].dt == 0
        assert resampled[0].s == 0
        assert resampled[0].p == 0.6
        assert variant.stats.duration_ms == 0
        assert variant.stats.arc_len == 0
        assert variant.segment_count == 0

    def test_arc_length_non_decreasing(self, glyph_box):
        stroke = [RawPoint(10, 10, 0), RawPoint(30, 12, 40), RawPoint(31, 40, 95),
                  RawPoint(12, 44, 130), RawPoint(12, 44, 150), RawPoint(50, 80, 260)]
        variant = build_variant([stroke], glyph_box)
        s = [p.s for p in variant.strokes[0].resampled]
        assert s == sorted(s)

    def test_dt_sums_to_stroke_duration(self, sample_variant):
        bar, stem = sample_variant.strokes
        assert sum(p.dt for p in bar.resampled) == pytest.approx(300)
        assert sum(p.dt for p in stem.resampled) == pytest.approx(300)

    def test_stats(self, sample_variant):
        """Duration spans all raw points; arc length is summed in em units."""
        assert sample_variant.stats.duration_ms == 800
        assert sample_variant.stats.arc_len == pytest.approx(1200)

    def test_empty_strokes_skipped(self, glyph_box, raw_stroke):
        variant = build_variant([[], raw_stroke, []], glyph_box)
        assert len(variant.strokes) == 1

    def test_no_strokes_rejected(self, glyph_box):
        with pytest.raises(EmptyCaptureError):
            build_variant([], glyph_box)

    def test_all_empty_strokes_rejected(self, glyph_box):
        with pytest.raises(EmptyCaptureError):
            build_variant([[], []], glyph_box)

    def test_invalid_box_rejected(self, raw_stroke):
        with pytest.raises(InvalidGlyphBoxError):
            build_variant([raw_stroke], GlyphBox(0, 0, 0, 100))

    def test_defaults(self, raw_stroke, glyph_box):
        variant = build_variant([raw_stroke], glyph_box)
        assert variant.starred is False
        assert variant.weight == 1.0
        assert uuid.UUID(variant.id).version == 4

    def test_ids_are_unique(self, raw_stroke, glyph_box):
        a = build_variant([raw_stroke], glyph_box)
        b = build_variant([raw_stroke], glyph_box)
        assert a.id != b.id

    def test_explicit_flags(self, raw_stroke, glyph_box):
        variant = build_variant([raw_stroke], glyph_box, starred=True, weight=2.5, variant_id='abc')
        assert (variant.id, variant.starred, variant.weight) == ('abc', True, 2.5)

    def test_em_size(self, raw_stroke, glyph_box):
        variant = build_variant([raw_stroke], glyph_box, em_size=2048)
        assert variant.strokes[0].points[-1].x == pytest.approx(409.6)

    def test_raw_input_untouched(self, raw_stroke, glyph_box):
        before = list(raw_stroke)
        build_variant([raw_stroke], glyph_box)
        assert raw_stroke == before


class TestMetricsFromStrokes:

    def test_bounds_and_advance(self, sample_variant):
        metrics = metrics_from_strokes(sample_variant.strokes)
        assert metrics.bounds == (200, 200, 800, 800)
        assert metrics.advance == 720
        assert metrics.baseline == 0

    def test_no_points(self):
        metrics = metrics_from_strokes([])
        assert metrics.advance == 0
        assert metrics.bounds == (0, 0, 0, 0)
