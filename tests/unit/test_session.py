"""Unit tests for the CaptureSession context object (without persistence)."""

import unittest

from handset.capture import PointerEvent
from handset.config import CHARACTER_SETS, CaptureConfig
from handset.domain import CharacterMetrics
from handset.errors import EmptyCaptureError
from handset.session import PREVIEW_VARIANT_ID, CaptureSession, new_tracing_session


def trace(session, points, t0=0.0):
    first, *rest = points
    session.pointer_down(PointerEvent(first[0], first[1], t0, 0.5))
    for i, (x, y) in enumerate(rest, start=1):
        session.pointer_move(PointerEvent(x, y, t0 + i * 20, 0.6))
    session.pointer_up()


class TestNewTracingSession(unittest.TestCase):

    def test_character_order(self):
        record = new_tracing_session('Caveat', 'AZ')
        self.assertEqual(record.order, list(CHARACTER_SETS['AZ']))
        self.assertEqual(record.current_index, 0)
        self.assertEqual(record.captured_count(), 0)

    def test_font_info(self):
        record = new_tracing_session('Gloria Hallelujah', '09', CaptureConfig(em_size=2048))
        self.assertEqual(record.font.family, 'Gloria Hallelujah')
        self.assertIn('Gloria+Hallelujah', record.font.source)
        self.assertEqual(record.font.em_size, 2048)

    def test_unique_ids(self):
        self.assertNotEqual(new_tracing_session().session_id, new_tracing_session().session_id)

    def test_unknown_set(self):
        with self.assertRaises(KeyError):
            new_tracing_session('Caveat', 'greek')

    def test_default_set_includes_punctuation(self):
        order = new_tracing_session().order
        self.assertEqual(order[:3], ['A', 'B', 'C'])
        self.assertIn('?', order)
        self.assertEqual(len(order), len(set(order)))


class TestCaptureSession(unittest.TestCase):
    """Tests for capture, preview, approval and navigation."""

    def setUp(self):
        self.session = CaptureSession.new('Caveat', '09', canvas_size=(400, 400))

    def test_starts_at_first_character(self):
        self.assertEqual(self.session.current_char, '0')
        self.assertEqual(self.session.progress(), (0, 10))

    def test_glyph_box_follows_canvas(self):
        self.assertAlmostEqual(self.session.glyph_box.w, 288)
        self.session.resize((200, 300))
        self.assertAlmostEqual(self.session.glyph_box.w, 144)

    def test_preview_requires_capture(self):
        with self.assertRaises(EmptyCaptureError):
            self.session.preview_variant()

    def test_approve_requires_capture(self):
        with self.assertRaises(EmptyCaptureError):
            self.session.approve()
        self.assertEqual(self.session.index, 0)

    def test_preview_does_not_store(self):
        trace(self.session, [(100, 100), (150, 200), (200, 300)])
        preview = self.session.preview_variant()
        self.assertEqual(preview.id, PREVIEW_VARIANT_ID)
        self.assertFalse(preview.starred)
        self.assertEqual(self.session.current_data.variants, [])
        self.assertEqual(self.session.buffer.stroke_count, 1)

    def test_approve_stores_starred_variant_and_advances(self):
        trace(self.session, [(100, 100), (150, 200), (200, 300)])
        variant = self.session.approve()
        self.assertTrue(variant.starred)
        self.assertNotEqual(variant.id, PREVIEW_VARIANT_ID)
        self.assertEqual(self.session.record.set['0'].variants, [variant])
        self.assertEqual(self.session.current_char, '1')
        self.assertTrue(self.session.buffer.is_empty)
        self.assertEqual(self.session.progress(), (1, 10))

    def test_approve_with_metrics(self):
        trace(self.session, [(100, 100), (120, 100)])
        metrics = CharacterMetrics(500, (0, 0, 480, 700), -200)
        self.session.approve(metrics)
        self.assertEqual(self.session.record.set['0'].metrics, metrics)

    def test_approve_without_metrics_uses_captured_ink(self):
        box = self.session.glyph_box
        trace(self.session, [(box.x, box.y), (box.x + box.w / 2, box.y + box.h)])
        self.session.approve()
        metrics = self.session.record.set['0'].metrics
        self.assertEqual(metrics.bounds, (0, 0, 500, 1000))
        self.assertEqual(metrics.advance, 600)

    def test_no_glyph_image_without_font(self):
        self.assertIsNone(self.session.glyph_image())

    def test_variants_normalized_to_em(self):
        box = self.session.glyph_box
        trace(self.session, [(box.x, box.y), (box.x + box.w, box.y + box.h)])
        variant = self.session.approve()
        last = variant.strokes[0].points[-1]
        self.assertAlmostEqual(last.x, 1000)
        self.assertAlmostEqual(last.y, 1000)

    def test_approve_on_last_character_stays(self):
        self.session.go_to('9')
        trace(self.session, [(100, 100), (120, 100)])
        self.session.approve()
        self.assertEqual(self.session.current_char, '9')

    def test_several_variants_per_character(self):
        trace(self.session, [(100, 100), (120, 100)])
        self.session.approve()
        self.session.go_to('0')
        trace(self.session, [(100, 100), (130, 110)])
        self.session.approve()
        self.assertEqual(len(self.session.record.set['0'].variants), 2)

    def test_redo_discards_capture(self):
        trace(self.session, [(100, 100), (120, 100)])
        self.session.redo()
        self.assertTrue(self.session.buffer.is_empty)
        self.assertEqual(self.session.index, 0)

    def test_undo(self):
        trace(self.session, [(100, 100), (120, 100)])
        trace(self.session, [(100, 200), (120, 200)], t0=500)
        self.session.undo()
        self.assertEqual(self.session.buffer.stroke_count, 1)

    def test_skip(self):
        self.session.skip()
        self.assertEqual(self.session.current_char, '1')
        self.assertEqual(self.session.record.set['0'].variants, [])

    def test_skip_discards_unsaved_capture_without_store(self):
        trace(self.session, [(100, 100), (120, 100)])
        self.session.skip()
        self.assertTrue(self.session.buffer.is_empty)

    def test_go_to_unknown_character(self):
        with self.assertRaises(ValueError):
            self.session.go_to('Z')


if __name__ == '__main__':
    unittest.main()
