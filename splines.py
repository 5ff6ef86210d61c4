"""
splines.py - Route paths through the hex grid and draw them as curves

A path is declared as a few waypoints ("0101-0305-0610 river"). The
router fills the gaps with adjacent hexes, then the curve generator
turns the hex centers into one smooth SVG path with an optional
sinusoidal meander.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

from hexgrid import GridPoint, Orientation


# === Curve Defaults ===
DEFAULT_FREQUENCY = 1.0      # half-waves per hex step
DEFAULT_DEPTH = 0.1          # wave amplitude as a fraction of Orientation.wave_scale
DEFAULT_RATE = 0.1           # sampling step as a fraction of a hex step
DEFAULT_CURVATURE = 1 / 3    # Catmull-Rom tension; 1/3 is the uniform spline
STRAIGHT_BELOW = 0.01        # curvature under this draws straight segments

# Steps allowed per unit of grid distance before routing gives up
STEPS_PER_UNIT = 4


class RoutingError(Exception):
    """The greedy walk failed to reach a waypoint within its step budget."""

    def __init__(self, start, target, steps: int, kind: str = "path did not converge"):
        self.start = start
        self.target = target
        self.steps = steps
        self.kind = kind
        super().__init__(f"{kind}: {start} -> {target} after {steps} steps")


def _distance2(a, b) -> int:
    return (b.x - a.x) ** 2 + (b.y - a.y) ** 2


def one_step(current, target, orientation: Orientation) -> GridPoint:
    """
    The neighbor of current closest to target.

    Brute force over the six neighbors using squared grid distance; the
    first neighbor in Orientation.neighbors() order wins a tie.
    """
    best = None
    best_d = None
    for candidate in orientation.neighbors(current):
        d = _distance2(candidate, target)
        if best_d is None or d < best_d:
            best, best_d = candidate, d
    return best


def step_budget(start, target) -> int:
    """Maximum steps the router may take between two waypoints."""
    return STEPS_PER_UNIT * (abs(target.x - start.x) + abs(target.y - start.y)) + 6


def compute_missing_points(
    waypoints: Sequence,
    orientation: Orientation,
    max_steps: Optional[int] = None
) -> List[GridPoint]:
    """
    Fill the gaps between waypoints with adjacent hexes.

    Args:
        waypoints: Ordered grid points or (x, y) pairs
        orientation: Decides which hexes are adjacent
        max_steps: Step budget per waypoint pair; defaults to step_budget()

    Returns:
        Every hex along the route, starting and ending on a waypoint.
        Repeated consecutive waypoints are visited once.

    Raises:
        RoutingError: If a waypoint is not reached within the budget
    """
    points = [GridPoint(int(x), int(y)) for x, y in waypoints]
    if not points:
        return []

    current = points[0]
    result = [current]
    for target in points[1:]:
        if target == current:
            continue
        budget = max_steps if max_steps is not None else step_budget(current, target)
        start = current
        steps = 0
        while current != target:
            if steps >= budget:
                raise RoutingError(start, target, steps)
            current = one_step(current, target, orientation)
            result.append(current)
            steps += 1
    return result


def wave_points(
    pixels: np.ndarray,
    frequency: float = DEFAULT_FREQUENCY,
    depth: float = DEFAULT_DEPTH,
    rate: float = DEFAULT_RATE,
    scale: float = 1.0
) -> np.ndarray:
    """
    Sample a polyline and push the samples sideways along a sine wave.

    Args:
        pixels: (n, 2) array of hex centers in pixel space
        frequency: Half-waves per segment; whole numbers keep the wave
            pinned to every hex center
        depth: Amplitude as a fraction of scale
        rate: Sampling step as a fraction of a segment (0.1 = 10 samples)
        scale: Pixel length the depth is measured against

    Returns:
        (m, 2) array of displaced samples; first and last points unchanged
    """
    pixels = np.asarray(pixels, dtype=float)
    if len(pixels) < 2 or depth == 0:
        return pixels.copy()

    samples = max(1, int(math.ceil(1 / rate))) if rate > 0 else 1
    t = np.arange(samples) / samples

    starts = pixels[:-1]
    vectors = pixels[1:] - starts
    lengths = np.hypot(vectors[:, 0], vectors[:, 1])
    lengths[lengths == 0] = 1.0
    # Unit normals, rotated 90° from each segment direction
    normals = np.column_stack([-vectors[:, 1], vectors[:, 0]]) / lengths[:, None]

    # (segments, samples) running parameter s = segment index + t
    s = np.arange(len(starts))[:, None] + t[None, :]
    offsets = depth * scale * np.sin(math.pi * frequency * s)

    base = starts[:, None, :] + t[None, :, None] * vectors[:, None, :]
    displaced = base + offsets[:, :, None] * normals[:, None, :]
    return np.vstack([displaced.reshape(-1, 2), pixels[-1:]])


def _fmt(x: float, y: float) -> str:
    return f"{x:.1f},{y:.1f}"


def smooth_path(points: np.ndarray, curvature: float = DEFAULT_CURVATURE) -> str:
    """
    One continuous SVG path through every point.

    Interior tangents follow a Catmull-Rom spline converted to cubic
    Béziers; the ends reuse their own point as the missing neighbor.
    """
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        return ""
    path = [f"M{_fmt(*points[0])}"]
    if len(points) == 1:
        return path[0]
    if curvature < STRAIGHT_BELOW:
        path.extend(f"L{_fmt(*p)}" for p in points[1:])
        return " ".join(path)

    padded = np.vstack([points[:1], points, points[-1:]])
    p0, p1, p2, p3 = padded[:-3], padded[1:-2], padded[2:-1], padded[3:]
    c1 = p1 + (p2 - p0) * curvature / 2
    c2 = p2 - (p3 - p1) * curvature / 2
    for a, b, end in zip(c1, c2, p2):
        path.append(f"C{_fmt(*a)} {_fmt(*b)} {_fmt(*end)}")
    return " ".join(path)


def label_side(route: Sequence, side: Optional[str] = None) -> Optional[str]:
    """
    Which side of the path its label sits on.

    Text on a path reads along the path direction, so a path that heads
    right-to-left would show its label upside down. Returns the explicit
    side when given, "right" for such paths, otherwise None (the default
    left side).
    """
    if side is not None:
        return side
    if len(route) < 2:
        return None
    if route[1].x < route[0].x or (len(route) > 2 and route[2].x < route[0].x):
        return "right"
    return None


def curve_path(
    route: Sequence,
    orientation: Orientation,
    frequency: float = DEFAULT_FREQUENCY,
    depth: float = DEFAULT_DEPTH,
    rate: float = DEFAULT_RATE,
    curvature: float = DEFAULT_CURVATURE
) -> str:
    """SVG path data for a dense route of adjacent hexes."""
    if not route:
        return ""
    pixels = np.array([orientation.pixels(p) for p in route], dtype=float)
    samples = wave_points(pixels, frequency, depth, rate, orientation.wave_scale)
    return smooth_path(samples, curvature)
