"""Unit tests for em-space normalization in handset.pipeline.normalize."""

import math
import unittest

from handset.domain import GlyphBox, RawPoint
from handset.errors import HandsetError, InvalidGlyphBoxError
from handset.pipeline import from_em_space, glyph_box_for_canvas, to_em_space


class TestToEmSpace(unittest.TestCase):
    """Tests for to_em_space."""

    def test_center_maps_to_half_em(self):
        """(50, 50) in a 100x100 box at the origin is (500, 500)."""
        out = to_em_space([RawPoint(50, 50)], GlyphBox(0, 0, 100, 100), 1000)
        self.assertEqual((out[0].x, out[0].y), (500, 500))

    def test_time_and_pressure_pass_through(self):
        out = to_em_space([RawPoint(10, 20, t=123, p=0.9)], GlyphBox(0, 0, 100, 100))
        self.assertEqual(out[0].t, 123)
        self.assertEqual(out[0].p, 0.9)

    def test_box_corners(self):
        box = GlyphBox(40, 60, 200, 100)
        out = to_em_space([RawPoint(40, 60), RawPoint(240, 160)], box, 1000)
        self.assertAlmostEqual(out[0].x, 0)
        self.assertAlmostEqual(out[0].y, 0)
        self.assertAlmostEqual(out[1].x, 1000)
        self.assertAlmostEqual(out[1].y, 1000)

    def test_scaling_box_scales_output_inversely(self):
        points = [RawPoint(30, 70), RawPoint(90, 15)]
        small = to_em_space(points, GlyphBox(0, 0, 100, 100))
        large = to_em_space(points, GlyphBox(0, 0, 200, 400))
        for a, b in zip(small, large):
            self.assertAlmostEqual(b.x, a.x / 2)
            self.assertAlmostEqual(b.y, a.y / 4)

    def test_translating_box_translates_output(self):
        points = [RawPoint(30, 70)]
        base = to_em_space(points, GlyphBox(0, 0, 100, 100))[0]
        moved = to_em_space(points, GlyphBox(10, -20, 100, 100))[0]
        self.assertAlmostEqual(moved.x, base.x - 100)
        self.assertAlmostEqual(moved.y, base.y + 200)

    def test_em_size_scales_output(self):
        out = to_em_space([RawPoint(25, 25)], GlyphBox(0, 0, 100, 100), 2048)
        self.assertAlmostEqual(out[0].x, 512)

    def test_empty_input(self):
        self.assertEqual(to_em_space([], GlyphBox(0, 0, 100, 100)), [])

    def test_input_not_modified(self):
        points = [RawPoint(50, 50)]
        to_em_space(points, GlyphBox(0, 0, 100, 100))
        self.assertEqual(points[0].x, 50)

    def test_outputs_are_floats(self):
        out = to_em_space([RawPoint(1, 2)], GlyphBox(0, 0, 100, 100))
        self.assertIsInstance(out[0].x, float)


class TestInvalidGlyphBox(unittest.TestCase):
    """A box that cannot be mapped is rejected instead of producing NaN."""

    def check_rejected(self, box):
        with self.assertRaises(InvalidGlyphBoxError):
            to_em_space([RawPoint(1, 1)], box)

    def test_zero_width(self):
        self.check_rejected(GlyphBox(0, 0, 0, 100))

    def test_zero_height(self):
        self.check_rejected(GlyphBox(0, 0, 100, 0))

    def test_negative_size(self):
        self.check_rejected(GlyphBox(0, 0, -50, 100))

    def test_infinite_size(self):
        self.check_rejected(GlyphBox(0, 0, math.inf, 100))

    def test_nan_origin(self):
        self.check_rejected(GlyphBox(math.nan, 0, 100, 100))

    def test_rejected_even_without_points(self):
        with self.assertRaises(InvalidGlyphBoxError):
            to_em_space([], GlyphBox(0, 0, 0, 0))

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(InvalidGlyphBoxError, HandsetError))
        self.assertTrue(issubclass(InvalidGlyphBoxError, ValueError))


class TestFromEmSpace(unittest.TestCase):

    def test_inverse_of_to_em_space(self):
        box = GlyphBox(56, 56, 288, 288)
        p = to_em_space([RawPoint(123.5, 301.25)], box)[0]
        x, y = from_em_space(p.x, p.y, box)
        self.assertAlmostEqual(x, 123.5)
        self.assertAlmostEqual(y, 301.25)


class TestGlyphBoxForCanvas(unittest.TestCase):

    def test_square_canvas(self):
        box = glyph_box_for_canvas(400, 400)
        self.assertAlmostEqual(box.w, 288)
        self.assertAlmostEqual(box.h, 288)
        self.assertAlmostEqual(box.x, 56)
        self.assertAlmostEqual(box.y, 56)

    def test_wide_canvas_uses_height(self):
        box = glyph_box_for_canvas(800, 400, fill=0.5)
        self.assertEqual(box.w, 200)
        self.assertEqual(box.center, (400, 200))

    def test_box_is_valid(self):
        self.assertTrue(glyph_box_for_canvas(320, 240).is_valid)


if __name__ == '__main__':
    unittest.main()
