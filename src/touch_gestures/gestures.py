"""Drag, rotate and scale recognizers.

Each class pins a tracked quantity onto the shared ``GestureRecognizer``
and names its readings. All three can be attached to the same element and
fed the same event stream; they do not arbitrate between each other.
"""

from __future__ import annotations

from typing import Optional

from touch_gestures.quantities import Rotation, Scale, Translation
from touch_gestures.recognizer import GestureRecognizer


class DragGestureRecognizer(GestureRecognizer):
    """Translation of the pointer centroid, one or more pointers.

    Pointers joining or leaving mid-drag move the centroid but not the
    reported translation.
    """

    def __init__(self, slop: Optional[float] = None, element=None):
        super().__init__(Translation(), slop=slop, element=element)

    @property
    def translation_x(self) -> float:
        return self.magnitude[0]

    @property
    def translation_y(self) -> float:
        return self.magnitude[1]

    @property
    def velocity_x(self) -> float:
        """Horizontal velocity at the end of the last drag, in pixels per second."""
        return self.velocities[0]

    @property
    def velocity_y(self) -> float:
        return self.velocities[1]

    def describe(self) -> str:
        return (
            f"drag state={self.state.name} tx={self.translation_x:.3f} ty={self.translation_y:.3f} "
            f"cx={self.centroid_x:.3f} cy={self.centroid_y:.3f} "
            f"vx={self.velocity_x:.3f} vy={self.velocity_y:.3f}"
        )


class RotateGestureRecognizer(GestureRecognizer):
    """Rotation of the first two pointers, in radians.

    Counter-clockwise in the y-up convention (increasing atan2) is positive.
    """

    def __init__(self, slop: Optional[float] = None, element=None):
        super().__init__(Rotation(), slop=slop, element=element)

    @property
    def rotation(self) -> float:
        return self.magnitude[0]

    @property
    def velocity(self) -> float:
        """Angular velocity at the end of the last rotation, in radians per second."""
        return self.velocities[0]

    def describe(self) -> str:
        return (
            f"rotate state={self.state.name} r={self.rotation:.3f} "
            f"cx={self.centroid_x:.3f} cy={self.centroid_y:.3f} v={self.velocity:.3f}"
        )


class ScaleGestureRecognizer(GestureRecognizer):
    """Uniform scale from the average pointer span. 1 means unchanged."""

    def __init__(self, slop: Optional[float] = None, element=None):
        super().__init__(Scale(), slop=slop, element=element)

    @property
    def scale(self) -> float:
        return self.magnitude[0]

    @property
    def velocity(self) -> float:
        """Span velocity at the end of the last pinch, in pixels per second."""
        return self.velocities[0]

    def describe(self) -> str:
        return (
            f"scale state={self.state.name} s={self.scale:.3f} "
            f"cx={self.centroid_x:.3f} cy={self.centroid_y:.3f} v={self.velocity:.3f}"
        )
