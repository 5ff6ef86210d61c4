"""
hexgrid.py - Core hex grid geometry for text maps

Offset-coordinate hex grids in either flat-top (columns staggered) or
pointy-top (rows staggered) tiling. Grid coordinates are integer (x, y)
pairs as written in map sources ("0310" = x 3, y 10); pixel coordinates
are floats in SVG space with y growing downward.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple

from shapely.geometry import MultiPolygon, Polygon

from map_utils import Bounds, EMPTY_BOUNDS


# === Geometry Constants ===
HEX_RADIUS = 100.0           # center to vertex, in pixels
LABEL_OFFSET = 0.4           # fraction of dy between center and coordinate/label text
VIEWBOX_MARGIN = 10.0        # padding so stroke widths and glow are not clipped


class GridPoint(NamedTuple):
    """A hex address in offset coordinates."""
    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x:02d}{self.y:02d}"


class PixelPoint(NamedTuple):
    """A position in SVG pixel space."""
    x: float
    y: float

    def __str__(self) -> str:
        return f"{self.x:.1f},{self.y:.1f}"


class Layout(Enum):
    FLAT_TOP = "flat-top"
    POINTY_TOP = "pointy-top"


class Parity(Enum):
    NORMAL = "normal"
    SWAPPED = "swapped"


# Neighbor deltas indexed by [layout][parity][axis is odd]. The staggered
# axis is x for flat-top and y for pointy-top.
#
# Flat-top, normal parity (odd columns sit half a hex higher):
#
#      0201                 1
#  0102    0302          0     2
#      0202    0402
#  0103    0303          5     3
#      0203                 4
#
# Pointy-top, normal parity (odd rows sit half a hex to the left):
#
#   0201  0301            0   1
#      0202  0302       5       2
#   0203  0303            4   3
_NEIGHBOR_DELTAS = {
    Layout.FLAT_TOP: {
        Parity.NORMAL: (
            ((-1, 0), (0, -1), (1, 0), (1, 1), (0, 1), (-1, 1)),
            ((-1, -1), (0, -1), (1, -1), (1, 0), (0, 1), (-1, 0)),
        ),
        Parity.SWAPPED: (
            ((-1, -1), (0, -1), (1, -1), (1, 0), (0, 1), (-1, 0)),
            ((-1, 0), (0, -1), (1, 0), (1, 1), (0, 1), (-1, 1)),
        ),
    },
    Layout.POINTY_TOP: {
        Parity.NORMAL: (
            ((0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 0)),
            ((-1, -1), (0, -1), (1, 0), (0, 1), (-1, 1), (-1, 0)),
        ),
        Parity.SWAPPED: (
            ((-1, -1), (0, -1), (1, 0), (0, 1), (-1, 1), (-1, 0)),
            ((0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 0)),
        ),
    },
}


def _flat_top_normal(gx: int, gy: int, dx: float, dy: float) -> PixelPoint:
    return PixelPoint(gx * dx, gy * dy - (gx % 2) * dy / 2)


def _flat_top_swapped(gx: int, gy: int, dx: float, dy: float) -> PixelPoint:
    return PixelPoint(gx * dx, gy * dy - ((gx + 1) % 2) * dy / 2)


def _pointy_top_normal(gx: int, gy: int, dx: float, dy: float) -> PixelPoint:
    return PixelPoint(gx * dx - (gy % 2) * dx / 2, gy * dy)


def _pointy_top_swapped(gx: int, gy: int, dx: float, dy: float) -> PixelPoint:
    return PixelPoint(gx * dx - ((gy + 1) % 2) * dx / 2, gy * dy)


_PIXEL_FUNCS = {
    (Layout.FLAT_TOP, Parity.NORMAL): _flat_top_normal,
    (Layout.FLAT_TOP, Parity.SWAPPED): _flat_top_swapped,
    (Layout.POINTY_TOP, Parity.NORMAL): _pointy_top_normal,
    (Layout.POINTY_TOP, Parity.SWAPPED): _pointy_top_swapped,
}


@dataclass(frozen=True)
class Orientation:
    """
    Hex tiling orientation.

    Attributes:
        layout: FLAT_TOP (columns staggered) or POINTY_TOP (rows staggered)
        parity: NORMAL, or SWAPPED to stagger the even columns/rows instead
    """
    layout: Layout = Layout.FLAT_TOP
    parity: Parity = Parity.NORMAL

    @classmethod
    def from_flags(cls, flat_top: bool = True, swap_even_odd: bool = False) -> 'Orientation':
        """Build an orientation from the two map options."""
        return cls(
            Layout.FLAT_TOP if flat_top else Layout.POINTY_TOP,
            Parity.SWAPPED if swap_even_odd else Parity.NORMAL,
        )

    @property
    def flat_top(self) -> bool:
        return self.layout is Layout.FLAT_TOP

    @property
    def swap_even_odd(self) -> bool:
        return self.parity is Parity.SWAPPED

    @property
    def dx(self) -> float:
        """Horizontal distance between adjacent columns."""
        if self.flat_top:
            return HEX_RADIUS * 3 / 2
        return HEX_RADIUS * math.sqrt(3)

    @property
    def dy(self) -> float:
        """Vertical distance between adjacent rows."""
        if self.flat_top:
            return HEX_RADIUS * math.sqrt(3)
        return HEX_RADIUS * 3 / 2

    @property
    def label_offset(self) -> float:
        return LABEL_OFFSET

    @property
    def wave_scale(self) -> float:
        """Pixel scale for path waves; identical for both layouts."""
        return min(self.dx, self.dy)

    def pixels(self, point, offset_x: float = 0, offset_y: float = 0) -> PixelPoint:
        """
        Convert a grid coordinate to the pixel position of its hex center.

        Args:
            point: Anything with integer x and y
            offset_x, offset_y: Pixel offsets added to the result

        Returns:
            PixelPoint in SVG space
        """
        func = _PIXEL_FUNCS[(self.layout, self.parity)]
        pix = func(point.x, point.y, self.dx, self.dy)
        return PixelPoint(pix.x + offset_x, pix.y + offset_y)

    def grid(self, pixel) -> GridPoint:
        """
        Convert a pixel position to the grid coordinate of the nearest row/column.

        Exact inverse of pixels() for hex centers.
        """
        if self.flat_top:
            gx = round(pixel.x / self.dx)
            if self.swap_even_odd:
                shift = ((gx + 1) % 2) * self.dy / 2
            else:
                shift = (gx % 2) * self.dy / 2
            gy = round((pixel.y + shift) / self.dy)
        else:
            gy = round(pixel.y / self.dy)
            if self.swap_even_odd:
                shift = ((gy + 1) % 2) * self.dx / 2
            else:
                shift = (gy % 2) * self.dx / 2
            gx = round((pixel.x + shift) / self.dx)
        return GridPoint(int(gx), int(gy))

    def hex_corners(self) -> List[PixelPoint]:
        """
        Corner offsets of a hex centered on the origin.

        Flat-top corners start at the rightmost vertex (0°); pointy-top
        corners are the same polygon rotated by 90° and start at the top.
        """
        start = 0.0 if self.flat_top else -math.pi / 2
        return [
            PixelPoint(
                HEX_RADIUS * math.cos(start + i * math.pi / 3),
                HEX_RADIUS * math.sin(start + i * math.pi / 3),
            )
            for i in range(6)
        ]

    def corners(self, point) -> List[PixelPoint]:
        """Pixel positions of the six corners of the hex at point."""
        return [self.pixels(point, c.x, c.y) for c in self.hex_corners()]

    def hex_polygon(self, point) -> Polygon:
        """Shapely Polygon of the hex at point."""
        return Polygon(self.corners(point))

    def neighbors(self, point) -> List[GridPoint]:
        """
        Get the 6 neighboring grid coordinates.

        Flat-top order: NW, N, NE, SE, S, SW. Pointy-top order: NW, NE,
        E, SE, SW, W. The delta table depends on the parity of the
        staggered axis of point itself.
        """
        axis = point.x if self.flat_top else point.y
        deltas = _NEIGHBOR_DELTAS[self.layout][self.parity][axis % 2]
        return [GridPoint(point.x + ddx, point.y + ddy) for ddx, ddy in deltas]

    def viewbox(self, regions: Iterable, margin: float = VIEWBOX_MARGIN) -> Bounds:
        """
        Bounding box in pixel space over the corners of every region.

        Args:
            regions: Objects with integer x and y (Regions or GridPoints)
            margin: Padding added on every side

        Returns:
            Bounds, or EMPTY_BOUNDS when there are no regions
        """
        polygons = [self.hex_polygon(r) for r in regions]
        if not polygons:
            return EMPTY_BOUNDS
        min_x, min_y, max_x, max_y = MultiPolygon(polygons).bounds
        return Bounds(min_x, min_y, max_x, max_y).expand(margin)
