"""The target a recognizer is attached to.

An element owns a transform relative to its parent, the platform touch
conventions that apply to it, and the looper its deferred callbacks run on.
Hosts embedding the recognizers in a real UI toolkit can pass any object
with the same attributes.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

import numpy as np

from touch_gestures.config import ViewConfiguration, get_config
from touch_gestures.geometry import Transform, map_point, transformation_matrix
from touch_gestures.looper import Looper


class Target(Protocol):
    """Collaborator interface a recognizer requires from its element."""

    transform: Transform
    config: ViewConfiguration

    def post(self, callback: Callable[[], None]) -> None: ...

    def remove_callbacks(self, callback: Callable[[], None]) -> None: ...


class Element:
    """A transformable on-screen element that receives touches."""

    def __init__(
        self,
        transform: Optional[Transform] = None,
        config: Optional[ViewConfiguration] = None,
        looper=None,
        name: str = "element",
    ):
        self.transform = transform if transform is not None else Transform()
        self.config = config if config is not None else get_config()
        self.looper = looper if looper is not None else Looper()
        self.name = name

    def post(self, callback: Callable[[], None]):
        self.looper.post(callback)

    def remove_callbacks(self, callback: Callable[[], None]):
        self.looper.remove_callbacks(callback)

    def matrices(self) -> tuple[np.ndarray, np.ndarray]:
        """(local-to-parent, parent-to-local) for the current transform."""
        return transformation_matrix(self.transform)

    def local_to_parent(self, x: float, y: float) -> tuple[float, float]:
        matrix, _ = self.matrices()
        return map_point(matrix, x, y)

    def parent_to_local(self, x: float, y: float) -> tuple[float, float]:
        _, inverse = self.matrices()
        return map_point(inverse, x, y)

    def __repr__(self) -> str:
        return f"Element({self.name!r}, transform={self.transform})"
