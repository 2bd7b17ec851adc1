"""Tests for point, angle and transform helpers."""

import math

import numpy as np
import pytest

from touch_gestures.geometry import (
    Transform,
    angle,
    average_span,
    centroid,
    distance,
    map_point,
    map_points,
    transformation_matrix,
)


class TestCentroid:
    def test_single_point(self):
        assert centroid([(3, 4)]) == (3.0, 4.0)

    def test_mean_of_points(self):
        assert centroid([(0, 0), (100, 100)]) == (50.0, 50.0)
        assert centroid(np.array([(0, 0), (30, 0), (0, 30)])) == (10.0, 10.0)

    def test_empty_is_nan(self):
        cx, cy = centroid(np.empty((0, 2)))
        assert math.isnan(cx)
        assert math.isnan(cy)


class TestDistanceAndAngle:
    def test_distance(self):
        assert distance((0, 0), (3, 4)) == 5.0
        assert distance((1, 1), (1, 1)) == 0.0

    def test_angle_quadrants(self):
        assert angle((0, 0), (1, 0)) == 0.0
        assert angle((0, 0), (0, 1)) == pytest.approx(math.pi / 2)
        assert angle((0, 0), (-1, 0)) == pytest.approx(math.pi)
        assert angle((0, 0), (0, -1)) == pytest.approx(-math.pi / 2)

    def test_angle_is_from_first_to_second(self):
        assert angle((0, 0), (1, 1)) == pytest.approx(math.pi / 4)
        assert angle((1, 1), (0, 0)) == pytest.approx(-3 * math.pi / 4)


class TestAverageSpan:
    def test_two_points_span_their_distance(self):
        pts = [(0, 0), (100, 0)]
        assert average_span(pts, centroid(pts)) == pytest.approx(100.0)

    def test_single_point_is_zero(self):
        assert average_span([(5, 5)], (5, 5)) == 0.0

    def test_empty_is_zero(self):
        assert average_span(np.empty((0, 2)), (0, 0)) == 0.0

    def test_diagonal(self):
        pts = [(0, 0), (100, 100)]
        assert average_span(pts, centroid(pts)) == pytest.approx(math.hypot(100, 100))


class TestTransformationMatrix:
    def test_identity(self):
        matrix, inverse = transformation_matrix(Transform())
        np.testing.assert_allclose(matrix, np.eye(3))
        np.testing.assert_allclose(inverse, np.eye(3))
        assert Transform().is_identity

    def test_translation(self):
        matrix, _ = transformation_matrix(Transform(translation_x=5, translation_y=-3))
        assert map_point(matrix, 1, 1) == pytest.approx((6, -2))

    def test_rotation_turns_x_toward_y(self):
        matrix, _ = transformation_matrix(Transform(rotation=90))
        assert map_point(matrix, 1, 0) == pytest.approx((0, 1))

    def test_rotation_about_pivot(self):
        matrix, _ = transformation_matrix(Transform(rotation=90, pivot_x=10, pivot_y=10))
        assert map_point(matrix, 20, 10) == pytest.approx((10, 20))
        assert map_point(matrix, 10, 10) == pytest.approx((10, 10))

    def test_scale_about_pivot(self):
        matrix, _ = transformation_matrix(Transform(scale_x=2, scale_y=3, pivot_x=10, pivot_y=10))
        assert map_point(matrix, 20, 10) == pytest.approx((30, 10))
        assert map_point(matrix, 10, 20) == pytest.approx((10, 40))

    def test_scale_then_rotate_then_translate(self):
        t = Transform(scale_x=2, scale_y=2, rotation=90, translation_x=5)
        matrix, _ = transformation_matrix(t)
        assert map_point(matrix, 1, 0) == pytest.approx((5, 2))

    def test_inverse_maps_back(self):
        t = Transform(scale_x=1.5, scale_y=0.5, rotation=30, translation_x=7, pivot_x=3, pivot_y=-2)
        matrix, inverse = transformation_matrix(t)
        x, y = map_point(matrix, 12, -4)
        assert map_point(inverse, x, y) == pytest.approx((12, -4))

    def test_zero_scale_has_nan_inverse(self):
        _, inverse = transformation_matrix(Transform(scale_x=0))
        assert np.isnan(inverse).all()


class TestMapPoints:
    def test_returns_fresh_array(self):
        pts = np.array([(1.0, 2.0), (3.0, 4.0)])
        out = map_points(np.eye(3), pts)
        assert out is not pts
        out[0, 0] = 99
        assert pts[0, 0] == 1.0

    def test_empty(self):
        out = map_points(np.eye(3), np.empty((0, 2)))
        assert out.shape == (0, 2)
