"""Gesture recognizer state machine shared by drag, rotate and scale.

A recognizer turns a stream of pointer events into a continuous gesture.
It is attached to one element at a time; the host forwards every touch
event for that element to ``on_event`` and listeners are told about each
state change:

    POSSIBLE -> BEGAN -> CHANGED* -> RECOGNIZED | CANCELLED -> POSSIBLE

RECOGNIZED and CANCELLED revert to POSSIBLE on the element's next looper
turn, so listeners can still read the final values.

Usage:
    recognizer = DragGestureRecognizer()
    recognizer.element = element
    recognizer.add_state_change_listener(lambda r: print(r.state))
    recognizer.on_event(event)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

import numpy as np

from touch_gestures.events import PointerAction, PointerEvent
from touch_gestures.geometry import centroid, map_point, map_points, transformation_matrix
from touch_gestures.quantities import TrackedQuantity
from touch_gestures.velocity import ValueVelocityTracker

logger = logging.getLogger("touch_gestures.recognizer")


class GestureState(Enum):
    POSSIBLE = "possible"
    BEGAN = "began"
    CHANGED = "changed"
    RECOGNIZED = "recognized"
    CANCELLED = "cancelled"


IN_PROGRESS = (GestureState.BEGAN, GestureState.CHANGED)
TERMINAL = (GestureState.RECOGNIZED, GestureState.CANCELLED)

_DOWN_ACTIONS = (PointerAction.DOWN, PointerAction.POINTER_DOWN)
_POINTER_ACTIONS = (PointerAction.POINTER_DOWN, PointerAction.POINTER_UP)
_UP_ACTIONS = (PointerAction.UP, PointerAction.POINTER_UP)


class DetachedRecognizerError(RuntimeError):
    """Raised when a recognizer without an element is asked to process input."""


StateChangeListener = Callable[["GestureRecognizer"], None]


class GestureRecognizer:
    """Continuous gesture state machine over one tracked quantity.

    The quantity decides what is measured (centroid, angle, span) and how it
    is corrected; this class owns the lifecycle, listener notification,
    slop gating and velocity tracking that all gestures share.
    """

    def __init__(
        self,
        quantity: TrackedQuantity,
        slop: Optional[float] = None,
        element=None,
        name: Optional[str] = None,
    ):
        self._quantity = quantity
        self.name = name or quantity.name
        self._listeners: list[StateChangeListener] = []
        self._element = None
        self._state = GestureState.POSSIBLE

        self._slop: Optional[float] = None
        self._slop_explicit = False
        if slop is not None:
            self.slop = slop

        dims = quantity.dimensions
        self._initial = np.zeros(dims)
        self._current = np.zeros(dims)
        self._centroid = np.zeros(2)
        self._trackers = [ValueVelocityTracker(quantity.accumulation) for _ in range(dims)]

        if element is not None:
            self.element = element

    # --- configuration ---

    @property
    def quantity(self) -> TrackedQuantity:
        return self._quantity

    @property
    def slop(self) -> Optional[float]:
        """Movement needed before the gesture begins.

        Unset (``None``) until the recognizer is attached, at which point it
        defaults from the element's touch configuration.
        """
        return self._slop

    @slop.setter
    def slop(self, value: Optional[float]):
        if value is None:
            self._slop = None
            self._slop_explicit = False
            if self._element is not None:
                self._slop = self._quantity.default_slop(self._element.config)
            return
        if value < 0:
            raise ValueError(f"slop must be >= 0, got {value}")
        self._slop = float(value)
        self._slop_explicit = True

    @property
    def element(self):
        return self._element

    @element.setter
    def element(self, element):
        """Attach to ``element``, or detach with ``None``."""
        previous = self._element
        if previous is not None and previous is not element:
            previous.remove_callbacks(self._reset_to_possible)

        self._element = element
        if element is None:
            logger.debug("%s detached", self.name)
            if self._state in TERMINAL:
                self._transition(GestureState.POSSIBLE)
            return

        if not self._slop_explicit:
            self._slop = self._quantity.default_slop(element.config)

        max_velocity = element.config.scaled_maximum_fling_velocity
        self._trackers = [
            ValueVelocityTracker(self._quantity.accumulation, max_velocity)
            for _ in range(self._quantity.dimensions)
        ]
        logger.debug("%s attached to %r (slop=%.4g)", self.name, element, self._slop)

        if previous is not element and self._state in TERMINAL:
            element.post(self._reset_to_possible)

    # --- listeners ---

    def add_state_change_listener(self, listener: StateChangeListener):
        """Register ``listener``; adding the same listener twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_state_change_listener(self, listener: StateChangeListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> list[StateChangeListener]:
        return list(self._listeners)

    # --- state ---

    @property
    def state(self) -> GestureState:
        return self._state

    def is_in_progress(self) -> bool:
        return self._state in IN_PROGRESS

    def set_state(self, state: GestureState):
        """Move to ``state``, notify listeners and schedule the auto-reset."""
        element = self._require_element()
        self._transition(state)

        element.remove_callbacks(self._reset_to_possible)
        if state in TERMINAL:
            element.post(self._reset_to_possible)

    def _transition(self, state: GestureState):
        self._state = state
        logger.debug("%s -> %s", self.name, state.name)
        for listener in list(self._listeners):
            listener(self)

    def _reset_to_possible(self):
        self.set_state(GestureState.POSSIBLE)

    def _require_element(self):
        if self._element is None:
            raise DetachedRecognizerError(
                f"{self.name} recognizer has no element; attach one before sending events"
            )
        return self._element

    # --- geometry ---

    @property
    def untransformed_centroid(self) -> tuple[float, float]:
        """Centroid of the gesture in the parent's untransformed space."""
        c = self._current if self._quantity.centroid_follows_value else self._centroid
        return (float(c[0]), float(c[1]))

    @property
    def untransformed_centroid_x(self) -> float:
        return self.untransformed_centroid[0]

    @property
    def untransformed_centroid_y(self) -> float:
        return self.untransformed_centroid[1]

    @property
    def centroid(self) -> tuple[float, float]:
        """Centroid of the gesture in the element's local space.

        Uses the element's transform at the time of the call.
        """
        x, y = self.untransformed_centroid
        if self._element is None:
            return (x, y)
        _, inverse = transformation_matrix(self._element.transform)
        return map_point(inverse, x, y)

    @property
    def centroid_x(self) -> float:
        return self.centroid[0]

    @property
    def centroid_y(self) -> float:
        return self.centroid[1]

    @property
    def magnitude(self) -> tuple[float, ...]:
        """Total change since the gesture began, per component."""
        mag = self._quantity.accumulation.magnitude(self._initial, self._current)
        return tuple(float(v) for v in np.atleast_1d(mag))

    @property
    def velocities(self) -> tuple[float, ...]:
        """Per-component velocity at the end of the last gesture, per second."""
        return tuple(t.velocity for t in self._trackers)

    # --- event intake ---

    def on_event(self, event: PointerEvent) -> bool:
        """Process one pointer event. Always returns True once attached."""
        element = self._require_element()
        quantity = self._quantity

        matrix, _ = transformation_matrix(element.transform)
        active = map_points(matrix, event.active_points())
        center = np.array(centroid(quantity.reference_points(active)))
        value = quantity.measure(active)

        action = event.action
        count = event.pointer_count
        needed = quantity.min_pointers

        if action in _DOWN_ACTIONS and count == needed:
            self._start(event, center, value)
        if action in _POINTER_ACTIONS and count > needed:
            self._adjust(center, value)
        if action == PointerAction.MOVE and count >= needed:
            self._move(event, center, value)
        if (action in _UP_ACTIONS and count == needed) or (
            action == PointerAction.CANCEL and count >= needed
        ):
            self._end(event, center, value)

        return True

    def _start(self, event: PointerEvent, center: np.ndarray, value: np.ndarray):
        self._centroid = center
        self._initial = value.copy()
        self._current = value.copy()

        for tracker, v in zip(self._trackers, value):
            tracker.start(event, float(v))

        if self._slop == 0:
            self.set_state(GestureState.BEGAN)

    def _adjust(self, center: np.ndarray, value: np.ndarray):
        # The pointer set changed, not the gesture: shift the baseline so the
        # reported magnitude stays put.
        accumulation = self._quantity.accumulation
        self._centroid = center

        adjustment = accumulation.difference(value, self._current)
        self._initial = accumulation.apply(self._initial, adjustment)
        self._current = accumulation.apply(self._current, adjustment)

        for tracker, a in zip(self._trackers, np.atleast_1d(adjustment)):
            tracker.adjust(float(accumulation.inverse(a)))

    def _move(self, event: PointerEvent, center: np.ndarray, value: np.ndarray):
        accumulation = self._quantity.accumulation
        if not self._quantity.centroid_follows_value:
            self._centroid = center

        if not self.is_in_progress():
            adjustment = self._quantity.slop_adjustment(value, self._initial, self._slop)
            if adjustment is not None:
                self._initial = accumulation.apply(self._initial, adjustment)
                self._current = accumulation.apply(self._current, adjustment)
                self.set_state(GestureState.BEGAN)

        if self.is_in_progress():
            self._current = value.copy()
            self.set_state(GestureState.CHANGED)

        for tracker, v in zip(self._trackers, value):
            tracker.move(event, float(v))

    def _end(self, event: PointerEvent, center: np.ndarray, value: np.ndarray):
        self._centroid = center
        rest = self._quantity.resting_value(value)
        self._initial = rest.copy()
        self._current = rest.copy()

        for tracker, v in zip(self._trackers, value):
            tracker.end(event, float(v))

        if self.is_in_progress():
            if event.action == PointerAction.CANCEL:
                self.set_state(GestureState.CANCELLED)
            else:
                self.set_state(GestureState.RECOGNIZED)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state.name}, slop={self._slop})"
