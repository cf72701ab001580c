import math

import numpy as np
import pytest

from morphometry.data_models import Point
from morphometry.geometry import convex_hull, polygon_area, polygon_perimeter, principal_axes

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_unit_square_area_and_perimeter():
    assert polygon_area(UNIT_SQUARE) == pytest.approx(1.0)
    assert polygon_perimeter(UNIT_SQUARE) == pytest.approx(4.0)


def test_right_triangle():
    triangle = [Point(0, 0), Point(3, 0), Point(0, 4)]
    assert polygon_area(triangle) == pytest.approx(6.0)
    assert polygon_perimeter(triangle) == pytest.approx(12.0)


def test_area_invariant_under_rotation_and_reversal():
    pts = [(0, 0), (4, 0), (5, 3), (2, 5), (-1, 2)]
    expected = polygon_area(pts)
    for shift in range(len(pts)):
        rotated = pts[shift:] + pts[:shift]
        assert polygon_area(rotated) == pytest.approx(expected)
        assert polygon_area(rotated[::-1]) == pytest.approx(expected)


def test_degenerate_inputs():
    assert polygon_area([]) == 0.0
    assert polygon_area([(0, 0), (1, 1)]) == 0.0
    assert polygon_perimeter([(0, 0)]) == 0.0
    # Two points: there and back again.
    assert polygon_perimeter([(0, 0), (3, 4)]) == pytest.approx(10.0)
    assert principal_axes([(0, 0), (1, 1)]) == (0.0, 0.0)


def test_convex_hull_of_convex_polygon_keeps_points_and_area():
    t = np.linspace(0, 2 * np.pi, 12, endpoint=False)
    dodecagon = np.column_stack([np.cos(t), np.sin(t)])
    hull = convex_hull(dodecagon)
    assert len(hull) == len(dodecagon)
    assert polygon_area(hull) == pytest.approx(polygon_area(dodecagon))


def test_convex_hull_drops_interior_and_collinear_points():
    pts = [(0, 0), (2, 0), (4, 0), (4, 4), (2, 2), (0, 4)]
    hull = convex_hull(pts)
    assert {tuple(p) for p in hull} == {(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)}
    assert polygon_area(hull) == pytest.approx(16.0)


def test_convex_hull_small_input_is_copied():
    pts = np.array([[1.0, 2.0], [3.0, 4.0]])
    hull = convex_hull(pts)
    assert np.array_equal(hull, pts)
    hull[0, 0] = 99.0
    assert pts[0, 0] == 1.0


def test_principal_axes_of_sampled_circle():
    t = np.linspace(0, 2 * np.pi, 360, endpoint=False)
    circle = np.column_stack([5 * np.cos(t), 5 * np.sin(t)])
    major, minor = principal_axes(circle)
    # Population variance of a radius-r circle is r^2/2 along every axis.
    expected = 2 * math.sqrt(12.5)
    assert major == pytest.approx(expected)
    assert minor == pytest.approx(expected)


def test_principal_axes_of_collinear_points_has_zero_minor():
    major, minor = principal_axes([(0, 0), (1, 1), (2, 2), (3, 3)])
    assert major > 0
    assert minor == pytest.approx(0.0, abs=1e-9)


def test_rejects_bad_shape():
    with pytest.raises(ValueError):
        polygon_area(np.zeros((3, 3)))
