"""Canonical pointer event model consumed by the recognizers.

A host translates its platform input (touchscreen, trackpad, replayed
recording) into ``PointerEvent`` objects and forwards them to each
recognizer's ``on_event``.

Usage:
    evt = PointerEvent.single(PointerAction.DOWN, 10, 20, event_time=0)
    evt = PointerEvent(
        action=PointerAction.POINTER_DOWN,
        points=[(10, 20), (110, 20)],
        action_index=1,
        event_time=16,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class PointerAction(Enum):
    """Masked action of a pointer event."""
    DOWN = "down"                  # first pointer touches
    POINTER_DOWN = "pointer_down"  # additional pointer touches
    MOVE = "move"
    POINTER_UP = "pointer_up"      # non-last pointer lifts
    UP = "up"                      # last pointer lifts
    CANCEL = "cancel"
    OTHER = "other"                # hover, scroll, ... (ignored by recognizers)


@dataclass
class PointerEvent:
    """One input event reporting the position of every active pointer."""

    action: PointerAction
    points: np.ndarray  # shape (N, 2), ordered by pointer index
    action_index: int = 0
    down_time: float = 0.0  # ms
    event_time: float = 0.0  # ms

    def __post_init__(self):
        pts = np.asarray(self.points, dtype=np.float64)
        if pts.size == 0:
            pts = pts.reshape(0, 2)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError(f"points must have shape (N, 2), got {pts.shape}")
        self.points = pts
        if not isinstance(self.action, PointerAction):
            self.action = PointerAction(self.action)

    @property
    def pointer_count(self) -> int:
        return len(self.points)

    def active_points(self) -> np.ndarray:
        """Pointers still touching after this event.

        The pointer reported by a POINTER_UP is excluded so that centroids
        reflect the state after it leaves.
        """
        if self.action == PointerAction.POINTER_UP:
            return np.delete(self.points, self.action_index, axis=0)
        return self.points

    def with_points(self, points) -> PointerEvent:
        """Copy of this event with the pointer positions replaced."""
        return PointerEvent(
            action=self.action,
            points=points,
            action_index=self.action_index,
            down_time=self.down_time,
            event_time=self.event_time,
        )

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "points": self.points.tolist(),
            "action_index": self.action_index,
            "down_time": self.down_time,
            "event_time": self.event_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PointerEvent:
        return cls(
            action=PointerAction(data["action"]),
            points=data["points"],
            action_index=data.get("action_index", 0),
            down_time=data.get("down_time", 0.0),
            event_time=data.get("event_time", 0.0),
        )

    @classmethod
    def single(
        cls,
        action: PointerAction,
        x: float,
        y: float,
        event_time: float = 0.0,
        down_time: float = 0.0,
    ) -> PointerEvent:
        """Convenience constructor for a one-pointer event."""
        return cls(
            action=action,
            points=[(x, y)],
            down_time=down_time,
            event_time=event_time,
        )


@dataclass
class EventSequence:
    """Builds a timed stream of pointer events with a fixed frame interval.

    Useful for tests and synthetic recordings:
        seq = EventSequence()
        seq.down(0, 0)
        seq.pointer_down(1, (0, 0), (100, 100))
        seq.move((0, 0), (150, 150))
    """

    frame_ms: float = 16.0
    down_time: float = 0.0
    events: list[PointerEvent] = field(default_factory=list)
    _time: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self):
        self._time = self.down_time - self.frame_ms

    def _emit(self, action: PointerAction, points, index: int = 0) -> PointerEvent:
        self._time += self.frame_ms
        evt = PointerEvent(
            action=action,
            points=points,
            action_index=index,
            down_time=self.down_time,
            event_time=self._time,
        )
        self.events.append(evt)
        return evt

    def down(self, x: float, y: float) -> PointerEvent:
        return self._emit(PointerAction.DOWN, [(x, y)])

    def pointer_down(self, index: int, *points) -> PointerEvent:
        return self._emit(PointerAction.POINTER_DOWN, points, index)

    def move(self, *points) -> PointerEvent:
        return self._emit(PointerAction.MOVE, points)

    def pointer_up(self, index: int, *points) -> PointerEvent:
        return self._emit(PointerAction.POINTER_UP, points, index)

    def up(self, x: float, y: float) -> PointerEvent:
        return self._emit(PointerAction.UP, [(x, y)])

    def cancel(self, *points) -> PointerEvent:
        return self._emit(PointerAction.CANCEL, points)

    def other(self, *points) -> PointerEvent:
        return self._emit(PointerAction.OTHER, points)

    def __iter__(self):
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)
