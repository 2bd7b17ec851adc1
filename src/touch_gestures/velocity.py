"""Velocity estimation for pointer positions and arbitrary gesture values.

``VelocityTracker`` is a generic two-axis estimator: it keeps the recent
motion samples of a single trace and fits a least-squares polynomial to
them. ``ValueVelocityTracker`` reuses it for one-dimensional values such as
an angle or a span by feeding synthetic samples along the x axis.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

import numpy as np

from touch_gestures.events import PointerAction, PointerEvent

logger = logging.getLogger("touch_gestures.velocity")

HORIZON_MS = 100.0  # samples older than this relative to the newest are ignored
HISTORY_SIZE = 20
DEGREE = 2
PIXELS_PER_SECOND = 1000


@dataclass
class _Sample:
    event_time: float  # ms
    x: float
    y: float


class VelocityTracker:
    """Least-squares velocity fit over the most recent motion samples.

    DOWN starts a new trace. MOVE extends it. UP and CANCEL report the last
    known position, which adds no information, so they are ignored and the
    final velocity reflects the motion leading up to the lift.
    """

    def __init__(self, degree: int = DEGREE, horizon_ms: float = HORIZON_MS):
        self.degree = degree
        self.horizon_ms = horizon_ms
        self._samples: deque[_Sample] = deque(maxlen=HISTORY_SIZE)
        self._velocity = (0.0, 0.0)

    def clear(self):
        self._samples.clear()

    def add_movement(self, action: PointerAction, event_time: float, x: float, y: float):
        if action == PointerAction.DOWN:
            self._samples.clear()
        elif action != PointerAction.MOVE:
            return
        self._samples.append(_Sample(event_time, x, y))

    def compute_current_velocity(
        self, units: int = PIXELS_PER_SECOND, max_velocity: float = float("inf")
    ):
        """Fit the samples and store the resulting velocity.

        ``units`` is the time base in milliseconds: 1000 gives values per
        second, 1 gives values per millisecond.
        """
        vx, vy = self._estimate()
        scale = units / 1000.0
        vx = float(np.clip(vx * scale, -max_velocity, max_velocity))
        vy = float(np.clip(vy * scale, -max_velocity, max_velocity))
        self._velocity = (vx, vy)

    @property
    def x_velocity(self) -> float:
        return self._velocity[0]

    @property
    def y_velocity(self) -> float:
        return self._velocity[1]

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    def _estimate(self) -> tuple[float, float]:
        """Per-second velocity of the newest sample."""
        if not self._samples:
            return (0.0, 0.0)

        newest = self._samples[-1].event_time
        window = [s for s in self._samples if newest - s.event_time <= self.horizon_ms]
        degree = min(self.degree, len(window) - 1)
        if degree < 1:
            return (0.0, 0.0)

        # Time axis in seconds, newest sample at t = 0.
        t = np.array([(s.event_time - newest) / 1000.0 for s in window])
        xs = np.array([s.x for s in window])
        ys = np.array([s.y for s in window])

        vander = np.vander(t, degree + 1, increasing=True)
        x_coeffs, *_ = np.linalg.lstsq(vander, xs, rcond=None)
        y_coeffs, *_ = np.linalg.lstsq(vander, ys, rcond=None)
        return (float(x_coeffs[1]), float(y_coeffs[1]))


class Accumulation(Enum):
    """How a tracked value absorbs corrections.

    ADDITIVE values (positions, angles) are corrected by shifting them,
    MULTIPLICATIVE values (spans) by scaling them.
    """
    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"

    @property
    def identity(self) -> float:
        return 0.0 if self is Accumulation.ADDITIVE else 1.0

    def apply(self, value, adjust):
        if self is Accumulation.ADDITIVE:
            return value + adjust
        return value * adjust

    def difference(self, value, base):
        """The adjustment that turns ``base`` into ``value``."""
        if self is Accumulation.ADDITIVE:
            return value - base
        value = np.asarray(value, dtype=np.float64)
        base = np.asarray(base, dtype=np.float64)
        # A zero span on either side has no meaningful ratio; leave it as is.
        degenerate = (base == 0) | (value == 0)
        safe = np.where(degenerate, 1.0, base)
        return np.where(degenerate, 1.0, value / safe)

    def inverse(self, adjust):
        if self is Accumulation.ADDITIVE:
            return -adjust
        return 1.0 / adjust

    def magnitude(self, initial, current):
        """Total change from ``initial`` to ``current``."""
        if self is Accumulation.ADDITIVE:
            return current - initial
        initial = np.asarray(initial, dtype=np.float64)
        current = np.asarray(current, dtype=np.float64)
        safe = np.where(initial > 0, initial, 1.0)
        return np.where(initial > 0, current / safe, 1.0)


# Masked event action -> action recorded for the synthetic sample.
_SAMPLE_ACTIONS = {
    PointerAction.DOWN: PointerAction.DOWN,
    PointerAction.POINTER_DOWN: PointerAction.DOWN,
    PointerAction.MOVE: PointerAction.MOVE,
    PointerAction.POINTER_UP: PointerAction.UP,
    PointerAction.UP: PointerAction.UP,
    PointerAction.CANCEL: PointerAction.CANCEL,
}


class ValueVelocityTracker:
    """Velocity of an arbitrary scalar value over a gesture.

    Usage:
        tracker = ValueVelocityTracker(Accumulation.ADDITIVE, max_velocity)
        tracker.start(down_event, angle)
        tracker.adjust(-jump)          # pointer entered or left
        tracker.move(move_event, angle)
        velocity = tracker.end(up_event, angle)

    ``adjust`` replaces the previous offset; it is not cumulative.
    """

    def __init__(
        self,
        accumulation: Accumulation = Accumulation.ADDITIVE,
        maximum_fling_velocity: float = float("inf"),
    ):
        self.accumulation = accumulation
        self.maximum_fling_velocity = maximum_fling_velocity
        self._tracker = VelocityTracker()
        self._adjust = accumulation.identity
        self._velocity = 0.0

    @property
    def velocity(self) -> float:
        """Velocity computed by the most recent ``end``, per second."""
        return self._velocity

    @property
    def offset(self) -> float:
        return self._adjust

    def start(self, event: PointerEvent, value: float):
        """Begin a gesture. Must be balanced with ``end``."""
        self._tracker = VelocityTracker()
        self._adjust = self.accumulation.identity
        self._velocity = 0.0
        self._add_value_movement(event, value)

    def adjust(self, offset: float):
        """Set the correction applied to subsequent values."""
        self._adjust = float(offset)

    def move(self, event: PointerEvent, value: float):
        self._add_value_movement(event, value)

    def end(self, event: PointerEvent, value: float) -> float:
        self._add_value_movement(event, value)
        self._tracker.compute_current_velocity(PIXELS_PER_SECOND, self.maximum_fling_velocity)
        self._velocity = self._tracker.x_velocity
        logger.debug(
            "Velocity %.3f/s from %d samples", self._velocity, self._tracker.sample_count
        )
        self._tracker.clear()
        return self._velocity

    def _add_value_movement(self, event: PointerEvent, value: float):
        action = _SAMPLE_ACTIONS.get(event.action)
        if action is None:
            raise ValueError(f"Unexpected action for event: {event}")
        sample = float(self.accumulation.apply(value, self._adjust))
        self._tracker.add_movement(action, event.event_time, sample, 0.0)
