import unittest

from clipmark.interaction import (
    EDGE_LEFT,
    EDGE_RIGHT,
    HIT_BODY,
    Dragging,
    Idle,
    InteractionController,
    Resizing,
)
from clipmark.timeaxis import TimeAxis
from clipmark.timeline import ClipStore


def _make(*ranges):
    store = ClipStore()
    for start, end in ranges:
        store.add(start, end)
    return store, InteractionController(store, TimeAxis(10))


class TestDrag(unittest.TestCase):
    def test_drag_moves_and_keeps_duration(self):
        store, ctl = _make((10, 15))
        self.assertTrue(ctl.press_body(0))
        self.assertEqual(ctl.state, Dragging(index=0, duration=5.0))

        for x in (0, 37, 420, 5, -80, 1234):
            ctl.move(x)
            c = store[0]
            self.assertAlmostEqual(c.end - c.start, 5.0)
            self.assertGreaterEqual(c.start, 0)

        ctl.move(125)
        self.assertEqual((store[0].start, store[0].end), (12.0, 17.0))

    def test_release_returns_to_idle_and_keeps_last_position(self):
        store, ctl = _make((0, 3))
        ctl.press_body(0)
        ctl.move(200)
        ctl.release()
        self.assertIsInstance(ctl.state, Idle)
        ctl.move(0)
        self.assertEqual((store[0].start, store[0].end), (20.0, 23.0))

    def test_press_while_active_is_ignored(self):
        _store, ctl = _make((0, 3), (10, 12))
        self.assertTrue(ctl.press_body(0))
        self.assertFalse(ctl.press_edge(1, EDGE_LEFT))
        self.assertFalse(ctl.press_body(1))
        self.assertEqual(ctl.state.index, 0)

    def test_invalid_index_is_a_noop(self):
        store, ctl = _make((0, 3))
        self.assertFalse(ctl.press_body(4))
        self.assertTrue(ctl.is_idle)
        ctl.state = Dragging(index=7, duration=2.0)
        ctl.move(100)
        self.assertEqual((store[0].start, store[0].end), (0.0, 3.0))

    def test_move_when_idle_does_nothing(self):
        store, ctl = _make((4, 6))
        ctl.move(300)
        self.assertEqual((store[0].start, store[0].end), (4.0, 6.0))


class TestResize(unittest.TestCase):
    def test_left_edge_clamps_before_right_edge(self):
        store, ctl = _make((10, 20))
        self.assertTrue(ctl.press_edge(0, EDGE_LEFT))
        self.assertEqual(ctl.state, Resizing(index=0, edge=EDGE_LEFT))

        ctl.move(50)
        self.assertEqual((store[0].start, store[0].end), (5.0, 20.0))
        ctl.move(900)
        self.assertEqual((store[0].start, store[0].end), (19.0, 20.0))
        for x in (-10, 0, 195, 199, 200, 5000):
            ctl.move(x)
            self.assertLess(store[0].start, store[0].end)

    def test_right_edge_clamps_after_left_edge(self):
        store, ctl = _make((10, 20))
        ctl.press_edge(0, EDGE_RIGHT)
        ctl.move(300)
        self.assertEqual((store[0].start, store[0].end), (10.0, 30.0))
        ctl.move(0)
        self.assertEqual((store[0].start, store[0].end), (10.0, 11.0))
        for x in (-10, 0, 95, 100, 105, 5000):
            ctl.move(x)
            self.assertLess(store[0].start, store[0].end)

    def test_left_edge_never_goes_below_zero(self):
        store, ctl = _make((0, 0.5))
        ctl.press_edge(0, EDGE_LEFT)
        for x in (3, 0, -20, 400):
            ctl.move(x)
            self.assertGreaterEqual(store[0].start, 0)
            self.assertLess(store[0].start, store[0].end)
        self.assertEqual((store[0].start, store[0].end), (0.0, 0.5))

    def test_unknown_edge_rejected(self):
        _store, ctl = _make((0, 5))
        with self.assertRaises(ValueError):
            ctl.press_edge(0, "top")


class TestSelectionAndHitTest(unittest.TestCase):
    def test_double_activate_selects_independently_of_drag(self):
        store, ctl = _make((0, 10), (20, 30))
        ctl.press_body(0)
        self.assertEqual(ctl.double_activate(1), (20.0, 30.0))
        self.assertEqual(store.selection, 1)
        self.assertIsInstance(ctl.state, Dragging)

    def test_double_activate_invalid_index(self):
        store, ctl = _make((0, 10))
        self.assertIsNone(ctl.double_activate(3))
        self.assertIsNone(store.selection)

    def test_hit_test(self):
        _store, ctl = _make((0, 10), (20, 30))
        # Clip 1 spans 200..300 px.
        self.assertEqual(ctl.hit_test(250), (1, HIT_BODY))
        self.assertEqual(ctl.hit_test(203), (1, EDGE_LEFT))
        self.assertEqual(ctl.hit_test(297), (1, EDGE_RIGHT))
        self.assertIsNone(ctl.hit_test(150))

    def test_hit_test_prefers_clip_drawn_last(self):
        _store, ctl = _make((0, 10), (5, 15))
        self.assertEqual(ctl.hit_test(80), (1, HIT_BODY))

    def test_short_clips_keep_a_body_to_drag(self):
        # 1 s clip spans 100..110 px, 2 s clip spans 200..220 px.
        store, ctl = _make((10, 11), (20, 22))
        self.assertEqual(ctl.hit_test(105), (0, HIT_BODY))
        self.assertEqual(ctl.hit_test(101), (0, EDGE_LEFT))
        self.assertEqual(ctl.hit_test(109), (0, EDGE_RIGHT))
        self.assertEqual(ctl.hit_test(207), (1, HIT_BODY))
        self.assertEqual(ctl.hit_test(213), (1, HIT_BODY))

        self.assertTrue(ctl.press_at(105))
        ctl.move(300)
        ctl.release()
        self.assertEqual((store[0].start, store[0].end), (30.0, 31.0))

    def test_press_at_dispatches(self):
        store, ctl = _make((0, 10))
        self.assertFalse(ctl.press_at(500))
        self.assertTrue(ctl.press_at(98))
        self.assertEqual(ctl.state, Resizing(index=0, edge=EDGE_RIGHT))
        ctl.move(150)
        ctl.release()
        self.assertEqual((store[0].start, store[0].end), (0.0, 15.0))


if __name__ == "__main__":
    unittest.main()
