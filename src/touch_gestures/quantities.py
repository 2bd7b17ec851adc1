"""Capabilities that specialise the shared recognizer state machine.

Each tracked quantity answers four questions for the recognizer:
what value do the current pointers describe, when has that value moved far
enough to start a gesture, how is it corrected when pointers come and go
(additively or multiplicatively), and where does it rest once the gesture
ends.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol

import numpy as np

from touch_gestures.config import ViewConfiguration
from touch_gestures.geometry import angle, average_span, centroid
from touch_gestures.velocity import Accumulation


class TrackedQuantity(Protocol):
    name: str
    min_pointers: int  # pointer count that opens a gesture epoch
    accumulation: Accumulation
    dimensions: int
    centroid_follows_value: bool  # True when the value itself is the centroid

    def default_slop(self, config: ViewConfiguration) -> float: ...

    def reference_points(self, active: np.ndarray) -> np.ndarray: ...

    def measure(self, active: np.ndarray) -> np.ndarray: ...

    def slop_adjustment(
        self, value: np.ndarray, initial: np.ndarray, slop: float
    ) -> Optional[np.ndarray]: ...

    def resting_value(self, value: np.ndarray) -> np.ndarray: ...


class Translation:
    """Centroid position of all active pointers, in pixels."""

    name = "drag"
    min_pointers = 1
    accumulation = Accumulation.ADDITIVE
    dimensions = 2
    centroid_follows_value = True

    def default_slop(self, config: ViewConfiguration) -> float:
        return config.scaled_touch_slop

    def reference_points(self, active: np.ndarray) -> np.ndarray:
        return active

    def measure(self, active: np.ndarray) -> np.ndarray:
        return np.array(centroid(active))

    def slop_adjustment(self, value, initial, slop):
        # Either axis may cross; both axes absorb up to one slop.
        delta = value - initial
        if not np.any(np.abs(delta) > slop):
            return None
        return np.sign(delta) * np.minimum(np.abs(delta), slop)

    def resting_value(self, value):
        # Position keeps meaning after lift; freeze at the last centroid.
        return value.copy()


class Rotation:
    """Angle from the first to the second active pointer, in radians.

    Any further pointers are ignored. With fewer than two active pointers
    the angle is 0.
    """

    name = "rotate"
    min_pointers = 2
    accumulation = Accumulation.ADDITIVE
    dimensions = 1
    centroid_follows_value = False

    def default_slop(self, config: ViewConfiguration) -> float:
        return math.pi / 180

    def reference_points(self, active: np.ndarray) -> np.ndarray:
        return active[:2]

    def measure(self, active: np.ndarray) -> np.ndarray:
        if len(active) < 2:
            return np.zeros(1)
        return np.array([angle(active[0], active[1])])

    def slop_adjustment(self, value, initial, slop):
        delta = value - initial
        if not abs(delta[0]) > slop:
            return None
        return np.sign(delta) * slop

    def resting_value(self, value):
        return np.zeros(1)


class Scale:
    """Average span of all active pointers around their centroid, in pixels."""

    name = "scale"
    min_pointers = 2
    accumulation = Accumulation.MULTIPLICATIVE
    dimensions = 1
    centroid_follows_value = False

    def default_slop(self, config: ViewConfiguration) -> float:
        return config.scaled_touch_slop

    def reference_points(self, active: np.ndarray) -> np.ndarray:
        return active

    def measure(self, active: np.ndarray) -> np.ndarray:
        if len(active) == 0:
            return np.zeros(1)
        return np.array([average_span(active, centroid(active))])

    def slop_adjustment(self, value, initial, slop):
        # Slop is measured in pixels of span, applied as a ratio.
        delta = value - initial
        if not abs(delta[0]) > slop:
            return None
        if initial[0] <= 0:
            return np.ones(1)
        return 1.0 + np.sign(delta) * (slop / initial)

    def resting_value(self, value):
        return np.zeros(1)
