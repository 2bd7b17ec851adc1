"""Point, angle and affine-transform helpers.

All functions are pure: they take arrays or tuples and return fresh values.
Points are (x, y) pairs; point sets are numpy arrays of shape (N, 2).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass
class Transform:
    """2-D transform of a target element relative to its parent.

    Applied as: scale about the pivot, rotate about the pivot, translate.
    Rotation is in degrees, positive values rotate from +x toward +y.
    """
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    translation_x: float = 0.0
    translation_y: float = 0.0
    pivot_x: float = 0.0
    pivot_y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return (
            self.scale_x == 1.0
            and self.scale_y == 1.0
            and self.rotation == 0.0
            and self.translation_x == 0.0
            and self.translation_y == 0.0
        )


def centroid(points) -> tuple[float, float]:
    """Arithmetic mean of a set of points. Empty input gives (nan, nan)."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return (math.nan, math.nan)
    c = pts.mean(axis=0)
    return (float(c[0]), float(c[1]))


def distance(a, b) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def angle(a, b) -> float:
    """Angle of the vector from ``a`` to ``b`` in radians, range (-pi, pi]."""
    return math.atan2(b[1] - a[1], b[0] - a[0])


def average_span(points, center) -> float:
    """Twice the mean distance of ``points`` to ``center``.

    The factor of two makes the span comparable to a diameter: two pointers
    100px apart have a span of 100.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return 0.0
    dists = np.linalg.norm(pts - np.asarray(center, dtype=np.float64), axis=1)
    return float(dists.mean() * 2.0)


def _scale_about(sx: float, sy: float, px: float, py: float) -> np.ndarray:
    return np.array([
        [sx, 0.0, px - sx * px],
        [0.0, sy, py - sy * py],
        [0.0, 0.0, 1.0],
    ])


def _rotate_about(degrees: float, px: float, py: float) -> np.ndarray:
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [c, -s, px - c * px + s * py],
        [s, c, py - s * px - c * py],
        [0.0, 0.0, 1.0],
    ])


def _translate(tx: float, ty: float) -> np.ndarray:
    return np.array([
        [1.0, 0.0, tx],
        [0.0, 1.0, ty],
        [0.0, 0.0, 1.0],
    ])


def transformation_matrix(transform: Transform) -> tuple[np.ndarray, np.ndarray]:
    """Build the local-to-parent matrix of ``transform`` and its inverse.

    Returns:
        (matrix, inverse): ``matrix`` maps element-local points into the
        parent's untransformed space, ``inverse`` maps them back.
    """
    scale = _scale_about(
        transform.scale_x, transform.scale_y, transform.pivot_x, transform.pivot_y
    )
    rotate = _rotate_about(transform.rotation, transform.pivot_x, transform.pivot_y)
    translate = _translate(transform.translation_x, transform.translation_y)
    matrix = translate @ rotate @ scale

    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError:
        # Zero scale collapses the element; nothing maps back.
        inverse = np.full((3, 3), np.nan)
    return matrix, inverse


def map_points(matrix: np.ndarray, points) -> np.ndarray:
    """Apply a 3x3 affine matrix to an (N, 2) array of points."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return pts.copy()
    homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
    return (homogeneous @ matrix.T)[:, :2]


def map_point(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """Apply a 3x3 affine matrix to a single point."""
    mapped = map_points(matrix, [(x, y)])[0]
    return (float(mapped[0]), float(mapped[1]))
