"""
Resolved per-hex and per-path records.

Regions and splines are built once per parse pass and read by the
layout pass. Spline geometry is derived on demand from the waypoints and
the orientation, so asking twice gives the same answer.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from hexgrid import GridPoint, Orientation, PixelPoint
from splines import (
    DEFAULT_CURVATURE,
    DEFAULT_DEPTH,
    DEFAULT_FREQUENCY,
    DEFAULT_RATE,
    compute_missing_points,
    curve_path,
    label_side,
)


def split_link_label(label: Optional[str]) -> Tuple[str, str]:
    """
    Split "link|display" into its parts.

    A label without "|" links to itself; a missing label gives ("", "").
    """
    if not label:
        return ("", "")
    link, sep, display = label.partition("|")
    if sep:
        return (link.strip(), display.strip())
    return (label.strip(), label.strip())


@dataclass(frozen=True)
class CurveOptions:
    """Wave and smoothing parameters for drawing a path."""
    frequency: float = DEFAULT_FREQUENCY
    depth: float = DEFAULT_DEPTH
    rate: float = DEFAULT_RATE
    curvature: float = DEFAULT_CURVATURE

    def merged(self, overrides: Optional[Dict[str, float]]) -> 'CurveOptions':
        """Copy with the known keys of overrides applied."""
        if not overrides:
            return self
        known = {k: float(v) for k, v in overrides.items() if k in self.__dataclass_fields__}
        return replace(self, **known)


@dataclass
class Region:
    """
    One hex cell.

    Attributes:
        x, y: Grid coordinates (0-99 so they print as two digits)
        z: Layer index from the source; unused by the layout
        types: Type tags in render order
        label: Optional label, possibly "link|display"
        size: Optional font-size override for the label
    """
    x: int
    y: int
    z: int = 0
    types: List[str] = field(default_factory=list)
    label: Optional[str] = None
    size: Optional[str] = None

    @property
    def id(self) -> str:
        return f"hex.{self.x}.{self.y}"

    @property
    def point(self) -> GridPoint:
        return GridPoint(self.x, self.y)

    def pixels(self, orientation: Orientation, offset_x: float = 0, offset_y: float = 0) -> PixelPoint:
        return orientation.pixels(self.point, offset_x, offset_y)

    def link_and_label(self) -> Tuple[str, str]:
        return split_link_label(self.label)


@dataclass
class Spline:
    """
    One connector path.

    Attributes:
        id: Element id, unique within the map
        types: Path style tag
        points: Explicit waypoints, not necessarily adjacent
        label: Text drawn along the path
        side: Explicit textPath side ("left"/"right")
        start: textPath startOffset, e.g. "50%"
        curve: Wave and smoothing parameters
    """
    id: str
    types: str
    points: List[GridPoint] = field(default_factory=list)
    label: Optional[str] = None
    side: Optional[str] = None
    start: Optional[str] = None
    curve: CurveOptions = field(default_factory=CurveOptions)

    def add_point(self, x, y):
        """Append a waypoint; accepts ints or digit strings."""
        self.points.append(GridPoint(int(x), int(y)))

    def route(self, orientation: Orientation) -> List[GridPoint]:
        """Every hex the path passes through."""
        return compute_missing_points(self.points, orientation)

    def path_data(self, orientation: Orientation, route: Optional[List[GridPoint]] = None) -> str:
        """SVG path data for the curved route; pass route to skip routing again."""
        if route is None:
            route = self.route(orientation)
        c = self.curve
        return curve_path(route, orientation, c.frequency, c.depth, c.rate, c.curvature)

    def label_side(self, orientation: Orientation, route: Optional[List[GridPoint]] = None) -> Optional[str]:
        if route is None:
            route = self.route(orientation)
        return label_side(route, self.side)
