"""
Tests for splines module.

Run with: pytest tests/test_splines.py -v
"""

import numpy as np
import pytest
from hexgrid import GridPoint, Layout, Orientation, Parity
from splines import (
    RoutingError,
    compute_missing_points,
    curve_path,
    label_side,
    one_step,
    smooth_path,
    step_budget,
    wave_points,
)


ALL_ORIENTATIONS = [
    Orientation(Layout.FLAT_TOP, Parity.NORMAL),
    Orientation(Layout.FLAT_TOP, Parity.SWAPPED),
    Orientation(Layout.POINTY_TOP, Parity.NORMAL),
    Orientation(Layout.POINTY_TOP, Parity.SWAPPED),
]


def assert_dense(route, orientation):
    """Every consecutive pair in the route is adjacent."""
    for a, b in zip(route, route[1:]):
        assert b in orientation.neighbors(a)


class TestOneStep:
    """Tests for one_step."""

    def test_moves_to_neighbor(self):
        orientation = Orientation()
        step = one_step(GridPoint(1, 1), GridPoint(1, 5), orientation)
        assert step == GridPoint(1, 2)

    def test_tie_goes_to_first_neighbor(self):
        """All of (1, 2), (2, 1), (3, 2) and (2, 3) are one unit away; NW is listed first."""
        orientation = Orientation()
        assert one_step(GridPoint(2, 2), GridPoint(2, 2), orientation) == GridPoint(1, 2)


class TestComputeMissingPoints:
    """Tests for compute_missing_points."""

    def test_empty(self):
        assert compute_missing_points([], Orientation()) == []

    def test_single_waypoint(self):
        assert compute_missing_points([GridPoint(3, 3)], Orientation()) == [(3, 3)]

    def test_adjacent_waypoints(self):
        route = compute_missing_points([GridPoint(1, 1), GridPoint(1, 2)], Orientation())
        assert route == [(1, 1), (1, 2)]

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_route_is_dense(self, orientation):
        waypoints = [GridPoint(1, 1), GridPoint(6, 4), GridPoint(2, 8)]
        route = compute_missing_points(waypoints, orientation)
        assert route[0] == waypoints[0]
        assert route[-1] == waypoints[-1]
        assert waypoints[1] in route
        assert_dense(route, orientation)

    def test_accepts_tuples(self):
        route = compute_missing_points([(1, 1), (1, 3)], Orientation())
        assert route == [(1, 1), (1, 2), (1, 3)]
        assert all(isinstance(p, GridPoint) for p in route)

    def test_repeated_waypoint_visited_once(self):
        route = compute_missing_points([GridPoint(1, 1), GridPoint(1, 1), GridPoint(1, 2)], Orientation())
        assert route == [(1, 1), (1, 2)]

    def test_budget_exceeded(self):
        with pytest.raises(RoutingError) as excinfo:
            compute_missing_points([GridPoint(1, 1), GridPoint(9, 9)], Orientation(), max_steps=2)
        error = excinfo.value
        assert error.start == (1, 1)
        assert error.target == (9, 9)
        assert error.steps == 2
        assert "did not converge" in str(error)

    def test_step_budget(self):
        assert step_budget(GridPoint(1, 1), GridPoint(4, 3)) == 4 * 5 + 6


class TestWavePoints:
    """Tests for wave_points."""

    def test_endpoints_unchanged(self):
        pixels = np.array([[0, 0], [100, 0], [200, 50]], dtype=float)
        result = wave_points(pixels, depth=0.2, scale=150)
        assert result[0].tolist() == pytest.approx([0, 0])
        assert result[-1].tolist() == pytest.approx([200, 50])

    def test_sample_count(self):
        pixels = np.array([[0, 0], [100, 0]], dtype=float)
        result = wave_points(pixels, rate=0.1)
        assert result.shape == (11, 2)

    def test_displacement_peak(self):
        """Half way along the first segment the wave is at full depth."""
        pixels = np.array([[0, 0], [100, 0]], dtype=float)
        result = wave_points(pixels, frequency=1.0, depth=0.1, rate=0.1, scale=100)
        assert result[5].tolist() == pytest.approx([50, 10])

    def test_zero_depth_is_copy(self):
        pixels = np.array([[0, 0], [100, 0]], dtype=float)
        result = wave_points(pixels, depth=0)
        np.testing.assert_allclose(result, pixels)
        assert result is not pixels

    def test_single_point(self):
        result = wave_points(np.array([[5, 5]], dtype=float))
        assert result.shape == (1, 2)


class TestSmoothPath:
    """Tests for smooth_path."""

    def test_empty(self):
        assert smooth_path(np.empty((0, 2))) == ""

    def test_single_point(self):
        assert smooth_path(np.array([[1, 2]])) == "M1.0,2.0"

    def test_straight_below_threshold(self):
        path = smooth_path(np.array([[0, 0], [10, 0], [20, 5]]), curvature=0)
        assert path == "M0.0,0.0 L10.0,0.0 L20.0,5.0"

    def test_cubic_segments(self):
        path = smooth_path(np.array([[0, 0], [10, 0]]), curvature=1 / 3)
        assert path == "M0.0,0.0 C1.7,0.0 8.3,0.0 10.0,0.0"

    def test_one_curve_per_segment(self):
        path = smooth_path(np.array([[0, 0], [10, 0], [20, 10], [30, 10]]))
        assert path.startswith("M0.0,0.0 ")
        assert path.count("C") == 3
        assert path.endswith("30.0,10.0")


class TestLabelSide:
    """Tests for label_side."""

    def test_explicit_side_wins(self):
        assert label_side([GridPoint(3, 1), GridPoint(2, 1)], "left") == "left"

    def test_left_to_right(self):
        assert label_side([GridPoint(1, 1), GridPoint(2, 1)]) is None

    def test_right_to_left(self):
        assert label_side([GridPoint(3, 1), GridPoint(2, 1)]) == "right"

    def test_turns_left_on_second_step(self):
        assert label_side([GridPoint(3, 1), GridPoint(3, 2), GridPoint(2, 2)]) == "right"

    def test_short_route(self):
        assert label_side([GridPoint(3, 1)]) is None
        assert label_side([]) is None


class TestCurvePath:
    """Tests for curve_path."""

    def test_empty_route(self):
        assert curve_path([], Orientation()) == ""

    def test_starts_at_first_hex_center(self):
        route = [GridPoint(1, 1), GridPoint(1, 2)]
        path = curve_path(route, Orientation())
        assert path.startswith("M150.0,86.6 C")

    def test_straight_route(self):
        route = [GridPoint(0, 0), GridPoint(0, 1)]
        path = curve_path(route, Orientation(), depth=0, curvature=0)
        assert path == "M0.0,0.0 L0.0,173.2"
