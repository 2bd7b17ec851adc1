"""Tests for event recording and replay."""

import json

import numpy as np
import pytest

from touch_gestures.events import EventSequence, PointerAction
from touch_gestures.recorder import EventPlayer, EventRecorder


def make_sequence():
    seq = EventSequence()
    seq.down(0, 0)
    seq.pointer_down(1, (0, 0), (100, 0))
    seq.move((0, 0), (150, 10))
    seq.pointer_up(1, (0, 0), (150, 10))
    seq.up(0, 0)
    return seq


def record(events):
    rec = EventRecorder()
    rec.start()
    rec.extend(events)
    rec.stop()
    return rec


class TestRecorder:
    def test_record_and_count(self):
        rec = EventRecorder()
        rec.start()
        for event in make_sequence():
            rec.add(event)
        assert rec.stop() == 5
        assert rec.duration == 64.0

    def test_not_recording_ignores_events(self):
        rec = EventRecorder()
        rec.add(make_sequence().events[0])
        assert rec.event_count == 0

    def test_stopped_recorder_ignores_events(self):
        rec = record(make_sequence())
        rec.add(make_sequence().events[0])
        assert rec.event_count == 5

    def test_document_layout(self, tmp_path):
        path = record(make_sequence()).save(tmp_path / "gesture.json")
        data = json.loads(path.read_text())
        assert data["version"] == 1
        assert data["event_count"] == 5
        assert data["duration"] == 64.0
        assert data["events"][1]["action"] == "pointer_down"

    def test_empty_duration(self):
        assert EventRecorder().duration == 0.0


class TestPlayer:
    @pytest.mark.parametrize("name", ["gesture.json", "gesture.yaml"])
    def test_save_and_load(self, tmp_path, name):
        path = record(make_sequence()).save(tmp_path / name)
        player = EventPlayer.load(path)
        assert player.event_count == 5
        assert player.duration == 64.0

        events = list(player.play())
        assert events[3].action is PointerAction.POINTER_UP
        assert events[3].action_index == 1
        np.testing.assert_array_equal(events[2].points, [(0, 0), (150, 10)])

    def test_unsupported_version(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(json.dumps({"version": 99, "events": []}))
        with pytest.raises(ValueError, match="version"):
            EventPlayer.load(path)

    def test_not_a_recording(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ValueError):
            EventPlayer.load(path)

    def test_get_event(self):
        player = EventPlayer(make_sequence().events)
        assert player.get_event(0).action is PointerAction.DOWN
        assert player.get_event(5) is None
        assert player.get_event(-1) is None

    def test_play_realtime(self):
        player = EventPlayer(make_sequence().events)
        assert len(list(player.play_realtime(speed=1000))) == 5

    def test_play_realtime_rejects_bad_speed(self):
        player = EventPlayer(make_sequence().events)
        with pytest.raises(ValueError):
            list(player.play_realtime(speed=0))
