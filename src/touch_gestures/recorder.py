"""Recording and replay of pointer event streams.

A recording is a versioned document holding the serialised events:

    {"version": 1, "event_count": 3, "duration": 32.0, "events": [...]}

``duration`` is the span of event times in milliseconds. Files ending in
``.yaml``/``.yml`` are written and read with PyYAML, everything else as JSON.
Recordings make gesture bugs reproducible without a touchscreen and drive
the ``replay`` command.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Iterable, Iterator, Optional

import yaml

from touch_gestures.events import PointerEvent

logger = logging.getLogger("touch_gestures.recorder")

FORMAT_VERSION = 1
YAML_SUFFIXES = (".yaml", ".yml")


def _duration(events: list[PointerEvent]) -> float:
    if not events:
        return 0.0
    return events[-1].event_time - events[0].event_time


class EventRecorder:
    """Collects pointer events and writes them to disk.

    Usage:
        recorder = EventRecorder()
        recorder.start()
        recorder.add(event)        # for every event the host dispatches
        recorder.stop()
        recorder.save("drag.json")
    """

    def __init__(self):
        self._events: list[PointerEvent] = []
        self._recording = False

    def start(self):
        """Begin a new session, discarding anything recorded before."""
        self._events = []
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns the number of events captured."""
        self._recording = False
        return len(self._events)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        return _duration(self._events)

    def add(self, event: PointerEvent):
        """Append ``event`` if a session is running."""
        if not self._recording:
            return
        self._events.append(event)

    def extend(self, events: Iterable[PointerEvent]):
        for event in events:
            self.add(event)

    def to_dict(self) -> dict:
        return {
            "version": FORMAT_VERSION,
            "event_count": len(self._events),
            "duration": self.duration,
            "events": [e.to_dict() for e in self._events],
        }

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.to_dict()
        with open(path, "w") as f:
            if path.suffix in YAML_SUFFIXES:
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f)

        logger.info("Saved %d events to %s", len(self._events), path)
        return path


class EventPlayer:
    """Replays a recorded event stream.

    Usage:
        player = EventPlayer.load("drag.json")
        for event in player.play():
            pipeline.process(event)
    """

    def __init__(self, events: list[PointerEvent]):
        self._events = events

    @classmethod
    def load(cls, path: str | Path) -> EventPlayer:
        """Read a recording written by ``EventRecorder.save``.

        Raises ValueError for an unsupported version or a document that is
        not a recording.
        """
        path = Path(path)
        with open(path) as f:
            if path.suffix in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if not isinstance(data, dict) or "events" not in data:
            raise ValueError(f"{path} is not an event recording")
        version = data.get("version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported recording version {version} in {path}")

        events = [PointerEvent.from_dict(e) for e in data["events"]]
        logger.debug("Loaded %d events from %s", len(events), path)
        return cls(events)

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        return _duration(self._events)

    def play(self) -> Iterator[PointerEvent]:
        """Yield every event immediately."""
        yield from self._events

    def play_realtime(self, speed: float = 1.0) -> Iterator[PointerEvent]:
        """Yield events spaced by their recorded timing.

        Args:
            speed: Playback speed multiplier (2.0 = double speed).
        """
        if speed <= 0:
            raise ValueError(f"speed must be > 0, got {speed}")
        if not self._events:
            return

        first = self._events[0].event_time
        start = time.monotonic()
        for event in self._events:
            target = (event.event_time - first) / 1000.0 / speed
            elapsed = time.monotonic() - start
            if target > elapsed:
                time.sleep(target - elapsed)
            yield event

    def get_event(self, index: int) -> Optional[PointerEvent]:
        if 0 <= index < len(self._events):
            return self._events[index]
        return None
