"""Tests for the pointer event model and the event sequence builder."""

import numpy as np
import pytest

from touch_gestures.events import EventSequence, PointerAction, PointerEvent


class TestPointerEvent:
    def test_points_become_float_array(self):
        evt = PointerEvent(PointerAction.MOVE, [(1, 2), (3, 4)])
        assert evt.points.dtype == np.float64
        assert evt.points.shape == (2, 2)
        assert evt.pointer_count == 2

    def test_action_coerced_from_string(self):
        evt = PointerEvent("pointer_down", [(0, 0), (1, 1)], action_index=1)
        assert evt.action is PointerAction.POINTER_DOWN

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError):
            PointerEvent(PointerAction.MOVE, [(1, 2, 3)])

    def test_empty_points(self):
        evt = PointerEvent(PointerAction.CANCEL, [])
        assert evt.pointer_count == 0
        assert evt.points.shape == (0, 2)

    def test_active_points_skip_lifting_pointer(self):
        evt = PointerEvent(PointerAction.POINTER_UP, [(0, 0), (10, 0), (20, 0)], action_index=1)
        np.testing.assert_array_equal(evt.active_points(), [(0, 0), (20, 0)])
        assert evt.pointer_count == 3

    def test_active_points_keep_everything_otherwise(self):
        evt = PointerEvent(PointerAction.POINTER_DOWN, [(0, 0), (10, 0)], action_index=1)
        assert len(evt.active_points()) == 2

    def test_dict_round_trip(self):
        evt = PointerEvent(
            PointerAction.POINTER_UP, [(1, 2), (3, 4)], action_index=1, down_time=5, event_time=37
        )
        restored = PointerEvent.from_dict(evt.to_dict())
        assert restored.action is PointerAction.POINTER_UP
        assert restored.action_index == 1
        assert restored.event_time == 37
        np.testing.assert_array_equal(restored.points, evt.points)

    def test_single(self):
        evt = PointerEvent.single(PointerAction.DOWN, 3, 4, event_time=10)
        assert evt.pointer_count == 1
        assert tuple(evt.points[0]) == (3.0, 4.0)

    def test_with_points(self):
        evt = PointerEvent.single(PointerAction.MOVE, 0, 0, event_time=10)
        moved = evt.with_points([(5, 5)])
        assert moved.event_time == 10
        assert tuple(moved.points[0]) == (5.0, 5.0)
        assert tuple(evt.points[0]) == (0.0, 0.0)


class TestEventSequence:
    def test_frame_spacing(self):
        seq = EventSequence(down_time=-16)
        seq.down(0, 0)
        seq.move((1, 0))
        seq.up(1, 0)
        assert [e.event_time for e in seq] == [-16, 0, 16]
        assert all(e.down_time == -16 for e in seq)

    def test_actions_and_indices(self):
        seq = EventSequence()
        seq.down(0, 0)
        seq.pointer_down(1, (0, 0), (10, 10))
        seq.pointer_up(0, (0, 0), (10, 10))
        seq.cancel((10, 10))
        actions = [e.action for e in seq]
        assert actions == [
            PointerAction.DOWN,
            PointerAction.POINTER_DOWN,
            PointerAction.POINTER_UP,
            PointerAction.CANCEL,
        ]
        assert seq.events[1].action_index == 1
        assert seq.events[2].action_index == 0
        assert len(seq) == 4

    def test_custom_frame(self):
        seq = EventSequence(frame_ms=8)
        seq.other((0, 0))
        seq.other((0, 0))
        assert seq.events[1].event_time - seq.events[0].event_time == 8
