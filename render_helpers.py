"""
Rendering helper functions for hex map layout.

Small geometry and string helpers shared by the layout pass and the SVG
renderer: polyline measurement, positions along a route, point lists and
SVG id namespacing.
"""

import math
import re
from typing import Callable, Dict, List, Sequence, Tuple

from shapely.geometry import LineString


SVG_ID_REGEX = re.compile(r'(\bid=["\'])([^"\']+)(["\'])')
SVG_HREF_REGEX = re.compile(r'(\b(?:xlink:)?href=["\']#)([^"\']+)(["\'])')
SVG_CHOMP_WHITESPACE_REGEX = re.compile(r'>\s+<')


def get_line_length(line_coords: Sequence[Tuple[float, float]]) -> float:
    """Total length of a polyline; 0 for fewer than two points."""
    if len(line_coords) < 2:
        return 0.0
    return LineString(line_coords).length


def get_point_and_angle_at_distance(
    line_coords: Sequence[Tuple[float, float]],
    target_distance: float
) -> Tuple[float, float, float]:
    """Get position and angle at a given distance along a line.

    Args:
        line_coords: List of (x, y) coordinate tuples defining the line
        target_distance: Distance along line to find point (clamped to the line)

    Returns:
        Tuple of (x, y, angle_degrees) at the target distance
    """
    if len(line_coords) == 1:
        x, y = line_coords[0]
        return (x, y, 0.0)

    line = LineString(line_coords)
    distance = min(max(target_distance, 0.0), line.length)
    point = line.interpolate(distance)

    # Angle of the segment the point falls on
    cumulative = 0.0
    for (x1, y1), (x2, y2) in zip(line_coords[:-1], line_coords[1:]):
        seg_len = math.hypot(x2 - x1, y2 - y1)
        if seg_len > 0 and cumulative + seg_len >= distance:
            return (point.x, point.y, math.degrees(math.atan2(y2 - y1, x2 - x1)))
        cumulative += seg_len
    return (point.x, point.y, 0.0)


def get_point_and_angle_at_fraction(
    line_coords: Sequence[Tuple[float, float]],
    fraction: float
) -> Tuple[float, float, float]:
    """Like get_point_and_angle_at_distance with a 0..1 fraction of the length."""
    return get_point_and_angle_at_distance(line_coords, get_line_length(line_coords) * fraction)


def parse_start_offset(start) -> float:
    """Fraction of the path for a textPath startOffset ("50%" or 0.5); 0.5 if unset."""
    if start is None or start == "":
        return 0.5
    text = str(start).strip()
    if text.endswith("%"):
        return float(text[:-1]) / 100
    return float(text)


def format_points(points) -> str:
    """SVG polygon points attribute: "x,y x,y ..." with one decimal."""
    return " ".join(f"{x:.1f},{y:.1f}" for x, y in points)


def namespace_svg(svg: str, namespace: Callable[[str], str]) -> str:
    """Rewrite id and #href references in an SVG fragment through namespace."""
    svg = SVG_CHOMP_WHITESPACE_REGEX.sub("><", svg.strip())
    svg = SVG_ID_REGEX.sub(lambda m: f"{m.group(1)}{namespace(m.group(2))}{m.group(3)}", svg)
    svg = SVG_HREF_REGEX.sub(lambda m: f"{m.group(1)}{namespace(m.group(2))}{m.group(3)}", svg)
    return svg


def merge_attributes(*attribute_sets: Dict[str, str]) -> Dict[str, str]:
    """Merge attribute dicts left to right, skipping None."""
    merged: Dict[str, str] = {}
    for attributes in attribute_sets:
        if attributes:
            merged.update(attributes)
    return merged

