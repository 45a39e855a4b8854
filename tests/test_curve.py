"""Tests for midi_curves.curve: key insertion, replacement, tangents, evaluation."""

import pytest

from midi_curves.curve import Keyframe, KeyframeCurve, TangentMode, times_close


class TestAddKey:
    """Test add_key ordering and non-merging."""

    def test_appends_in_order(self):
        c = KeyframeCurve()
        assert c.add_key(0.0, 1) == 0
        assert c.add_key(1.0, 2) == 1
        assert c.times() == [0.0, 1.0]
        assert c.values() == [1.0, 2.0]

    def test_inserts_earlier_key_before_later(self):
        c = KeyframeCurve()
        c.add_key(1.0, 0)
        index = c.add_key(0.99, 1)
        assert index == 0
        assert c.times() == [0.99, 1.0]

    def test_same_time_never_merges(self):
        c = KeyframeCurve()
        c.add_key(0.5, 1)
        c.add_key(0.5, 0)
        assert len(c) == 2
        assert c.values() == [1.0, 0.0]

    def test_new_key_defaults_to_linear(self):
        c = KeyframeCurve()
        c.add_key(0.0, 0)
        assert c[0].left is TangentMode.LINEAR
        assert c[0].right is TangentMode.LINEAR

    def test_start_end_time(self):
        c = KeyframeCurve()
        assert c.start_time is None
        assert c.end_time is None
        c.add_key(2.0, 0)
        c.add_key(0.5, 0)
        assert c.start_time == 0.5
        assert c.end_time == 2.0


    def test_large_curve_keeps_order(self):
        c = KeyframeCurve()
        for n in range(50_000):
            c.add_key(n * 0.01, n % 2)
        c.add_key(0.005, 9)
        assert len(c) == 50_001
        assert c[1].value == 9
        assert c.evaluate(0.005) == 9


class TestReplaceKeys:
    """Test move_key, __setitem__ and set_last_value_if_near."""

    def test_move_key_resorts(self):
        c = KeyframeCurve([Keyframe(0.0, 0), Keyframe(1.0, 1), Keyframe(2.0, 2)])
        new_index = c.move_key(0, Keyframe(3.0, 5))
        assert new_index == 2
        assert c.times() == [1.0, 2.0, 3.0]

    def test_setitem_replaces_value(self):
        c = KeyframeCurve([Keyframe(0.0, 0)])
        c[0] = Keyframe(0.0, 7)
        assert c[0].value == 7

    def test_move_key_bad_index_raises(self):
        c = KeyframeCurve()
        with pytest.raises(IndexError):
            c.move_key(0, Keyframe(0.0, 0))

    def test_set_last_value_if_near_overwrites(self):
        c = KeyframeCurve()
        c.add_key(1.0, 10)
        c.set_tangents(0, TangentMode.CONSTANT, TangentMode.LINEAR)
        assert c.set_last_value_if_near(1.0 + 1e-9, 20)
        assert len(c) == 1
        assert c[0].time == 1.0
        assert c[0].value == 20
        assert c[0].left is TangentMode.CONSTANT

    def test_set_last_value_if_near_far_returns_false(self):
        c = KeyframeCurve()
        c.add_key(1.0, 10)
        assert not c.set_last_value_if_near(1.1, 20)
        assert c.values() == [10.0]

    def test_set_last_value_if_near_empty(self):
        assert not KeyframeCurve().set_last_value_if_near(0.0, 1)

    def test_times_close(self):
        assert times_close(1.0, 1.0 + 1e-9)
        assert not times_close(1.0, 1.01)


class TestEvaluate:
    """Test evaluate with constant and linear segments."""

    def test_empty_is_zero(self):
        assert KeyframeCurve().evaluate(1.0) == 0.0

    def test_clamps_outside_range(self):
        c = KeyframeCurve([Keyframe(1.0, 2), Keyframe(2.0, 4)])
        assert c.evaluate(0.0) == 2
        assert c.evaluate(5.0) == 4

    def test_linear_segment(self):
        c = KeyframeCurve([Keyframe(0.0, 0), Keyframe(1.0, 1)])
        assert c.evaluate(0.25) == pytest.approx(0.25)

    def test_constant_segment_holds(self):
        c = KeyframeCurve([
            Keyframe(0.0, 0, TangentMode.CONSTANT, TangentMode.CONSTANT),
            Keyframe(1.0, 1, TangentMode.CONSTANT, TangentMode.CONSTANT),
        ])
        assert c.evaluate(0.999) == 0
        assert c.evaluate(1.0) == 1

    def test_constant_left_of_next_key_holds(self):
        c = KeyframeCurve([
            Keyframe(0.0, 0, TangentMode.LINEAR, TangentMode.LINEAR),
            Keyframe(1.0, 1, TangentMode.CONSTANT, TangentMode.LINEAR),
        ])
        assert c.evaluate(0.5) == 0
