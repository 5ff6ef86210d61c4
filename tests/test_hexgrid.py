"""
Tests for hexgrid module.

Run with: pytest tests/test_hexgrid.py -v
"""

import math
import pytest
from hexgrid import (
    HEX_RADIUS,
    GridPoint,
    Layout,
    Orientation,
    Parity,
    PixelPoint,
)
from map_utils import EMPTY_BOUNDS


ALL_ORIENTATIONS = [
    Orientation(Layout.FLAT_TOP, Parity.NORMAL),
    Orientation(Layout.FLAT_TOP, Parity.SWAPPED),
    Orientation(Layout.POINTY_TOP, Parity.NORMAL),
    Orientation(Layout.POINTY_TOP, Parity.SWAPPED),
]

SAMPLE_POINTS = [GridPoint(x, y) for x in range(0, 6) for y in range(0, 6)]

# Centers of adjacent hexes are sqrt(3) * radius apart
NEIGHBOR_DISTANCE = HEX_RADIUS * math.sqrt(3)


class TestPoints:
    """Tests for the GridPoint and PixelPoint tuples."""

    def test_grid_point_str(self):
        assert str(GridPoint(3, 10)) == "0310"

    def test_pixel_point_str(self):
        assert str(PixelPoint(1.25, -86.6025)) == "1.2,-86.6"

    def test_points_are_tuples(self):
        x, y = GridPoint(1, 2)
        assert (x, y) == (1, 2)


class TestOrientation:
    """Tests for Orientation spacing and flags."""

    def test_default_is_flat_top_normal(self):
        orientation = Orientation()
        assert orientation.flat_top
        assert not orientation.swap_even_odd

    def test_from_flags(self):
        orientation = Orientation.from_flags(flat_top=False, swap_even_odd=True)
        assert orientation.layout is Layout.POINTY_TOP
        assert orientation.parity is Parity.SWAPPED

    def test_flat_top_spacing(self):
        orientation = Orientation()
        assert orientation.dx == pytest.approx(150)
        assert orientation.dy == pytest.approx(100 * math.sqrt(3))

    def test_pointy_top_spacing(self):
        orientation = Orientation(Layout.POINTY_TOP)
        assert orientation.dx == pytest.approx(100 * math.sqrt(3))
        assert orientation.dy == pytest.approx(150)

    def test_wave_scale_same_for_both_layouts(self):
        flat = Orientation(Layout.FLAT_TOP)
        pointy = Orientation(Layout.POINTY_TOP)
        assert flat.wave_scale == pytest.approx(pointy.wave_scale)
        assert flat.wave_scale == pytest.approx(150)

    def test_label_offset(self):
        assert Orientation().label_offset == pytest.approx(0.4)


class TestPixels:
    """Tests for grid to pixel conversion."""

    def test_flat_top_normal(self):
        orientation = Orientation()
        dy = orientation.dy
        assert orientation.pixels(GridPoint(0, 0)) == (0, 0)
        # Odd columns sit half a row higher
        x, y = orientation.pixels(GridPoint(1, 1))
        assert x == pytest.approx(150)
        assert y == pytest.approx(dy / 2)
        x, y = orientation.pixels(GridPoint(2, 1))
        assert x == pytest.approx(300)
        assert y == pytest.approx(dy)

    def test_flat_top_swapped(self):
        orientation = Orientation(Layout.FLAT_TOP, Parity.SWAPPED)
        dy = orientation.dy
        x, y = orientation.pixels(GridPoint(0, 0))
        assert y == pytest.approx(-dy / 2)
        x, y = orientation.pixels(GridPoint(1, 0))
        assert x == pytest.approx(150)
        assert y == pytest.approx(0)

    def test_pointy_top_normal(self):
        orientation = Orientation(Layout.POINTY_TOP)
        dx = orientation.dx
        x, y = orientation.pixels(GridPoint(0, 1))
        assert x == pytest.approx(-dx / 2)
        assert y == pytest.approx(150)
        x, y = orientation.pixels(GridPoint(2, 2))
        assert x == pytest.approx(2 * dx)
        assert y == pytest.approx(300)

    def test_pointy_top_swapped(self):
        orientation = Orientation(Layout.POINTY_TOP, Parity.SWAPPED)
        dx = orientation.dx
        x, _ = orientation.pixels(GridPoint(0, 0))
        assert x == pytest.approx(-dx / 2)
        x, _ = orientation.pixels(GridPoint(0, 1))
        assert x == pytest.approx(0)

    def test_offsets(self):
        orientation = Orientation()
        x, y = orientation.pixels(GridPoint(2, 2), 5, -7)
        assert x == pytest.approx(305)
        assert y == pytest.approx(2 * orientation.dy - 7)

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_grid_inverts_pixels(self, orientation):
        for point in SAMPLE_POINTS:
            assert orientation.grid(orientation.pixels(point)) == point


class TestCorners:
    """Tests for hex corners."""

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_corners_on_circle(self, orientation):
        center = orientation.pixels(GridPoint(3, 4))
        corners = orientation.corners(GridPoint(3, 4))
        assert len(corners) == 6
        for x, y in corners:
            assert math.hypot(x - center.x, y - center.y) == pytest.approx(HEX_RADIUS)

    def test_flat_top_starts_at_right_vertex(self):
        first = Orientation().hex_corners()[0]
        assert first.x == pytest.approx(HEX_RADIUS)
        assert first.y == pytest.approx(0)

    def test_pointy_top_starts_at_top_vertex(self):
        first = Orientation(Layout.POINTY_TOP).hex_corners()[0]
        assert first.x == pytest.approx(0, abs=1e-9)
        assert first.y == pytest.approx(-HEX_RADIUS)

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_hex_polygon_is_regular_and_convex(self, orientation):
        polygon = orientation.hex_polygon(GridPoint(1, 1))
        assert polygon.is_valid
        assert polygon.area == pytest.approx(3 * math.sqrt(3) / 2 * HEX_RADIUS ** 2)
        assert polygon.convex_hull.area == pytest.approx(polygon.area)
        assert polygon.centroid.x == pytest.approx(orientation.pixels(GridPoint(1, 1)).x)


class TestNeighbors:
    """Tests for neighbor tables."""

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_neighbors_are_adjacent(self, orientation):
        """Every neighbor center is one hex width away."""
        for point in SAMPLE_POINTS:
            center = orientation.pixels(point)
            neighbors = orientation.neighbors(point)
            assert len(set(neighbors)) == 6
            for neighbor in neighbors:
                other = orientation.pixels(neighbor)
                distance = math.hypot(other.x - center.x, other.y - center.y)
                assert distance == pytest.approx(NEIGHBOR_DISTANCE)

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_neighbors_symmetric(self, orientation):
        for point in SAMPLE_POINTS:
            for neighbor in orientation.neighbors(point):
                assert point in orientation.neighbors(neighbor)

    def test_flat_top_even_column_order(self):
        """NW, N, NE, SE, S, SW for an even column."""
        neighbors = Orientation().neighbors(GridPoint(2, 2))
        assert neighbors == [(1, 2), (2, 1), (3, 2), (3, 3), (2, 3), (1, 3)]

    def test_flat_top_odd_column_order(self):
        neighbors = Orientation().neighbors(GridPoint(1, 1))
        assert neighbors == [(0, 0), (1, 0), (2, 0), (2, 1), (1, 2), (0, 1)]

    def test_neighbors_are_grid_points(self):
        assert all(isinstance(n, GridPoint) for n in Orientation().neighbors(GridPoint(0, 0)))


class TestViewbox:
    """Tests for Orientation.viewbox."""

    def test_empty(self):
        assert Orientation().viewbox([]) is EMPTY_BOUNDS

    def test_single_hex(self):
        bounds = Orientation().viewbox([GridPoint(0, 0)])
        half_height = HEX_RADIUS * math.sqrt(3) / 2
        assert bounds.min_x == pytest.approx(-110)
        assert bounds.max_x == pytest.approx(110)
        assert bounds.min_y == pytest.approx(-half_height - 10)
        assert bounds.max_y == pytest.approx(half_height + 10)

    @pytest.mark.parametrize("orientation", ALL_ORIENTATIONS)
    def test_contains_every_corner(self, orientation):
        points = [GridPoint(1, 1), GridPoint(4, 2), GridPoint(2, 5)]
        bounds = orientation.viewbox(points, margin=0)
        for point in points:
            for x, y in orientation.corners(point):
                assert bounds.min_x - 1e-6 <= x <= bounds.max_x + 1e-6
                assert bounds.min_y - 1e-6 <= y <= bounds.max_y + 1e-6
