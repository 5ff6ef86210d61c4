"""
Utility classes for hex map layout.

This module provides the bounds value used for viewboxes and the SVG
layer management shared by the renderer.
"""

from dataclasses import dataclass
from typing import List, Dict, Any


@dataclass(frozen=True)
class Bounds:
    """Represents a rectangular bounds in pixel space.

    Attributes:
        min_x: Left boundary
        min_y: Top boundary (SVG y grows downward)
        max_x: Right boundary
        max_y: Bottom boundary
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        """Width of the bounds."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Height of the bounds."""
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        """True for the degenerate bounds of an empty map."""
        return self.width == 0 and self.height == 0

    def expand(self, buffer: float) -> 'Bounds':
        """Return a new Bounds expanded by buffer in all directions."""
        return Bounds(
            min_x=self.min_x - buffer,
            min_y=self.min_y - buffer,
            max_x=self.max_x + buffer,
            max_y=self.max_y + buffer
        )

    def svg_viewbox(self) -> str:
        """Format as an SVG viewBox attribute (x y width height)."""
        return f"{self.min_x:.0f} {self.min_y:.0f} {self.width:.0f} {self.height:.0f}"


EMPTY_BOUNDS = Bounds(0, 0, 0, 0)


class LayerManager:
    """Manages SVG layer groups and their z-ordering.

    Layers are registered with a z-order value (higher = on top). Layer
    ids are passed through the namespace function so that two maps in
    the same document never share element ids.

    Attributes:
        layers: Dictionary mapping layer name to layer info
    """

    def __init__(self, dwg, namespace=None):
        """Initialize the layer manager.

        Args:
            dwg: svgwrite Drawing object
            namespace: Optional callable turning a layer name into an element id
        """
        self.dwg = dwg
        self.namespace = namespace or (lambda what: what)
        self.layers: Dict[str, Dict[str, Any]] = {}
        self._groups: Dict[str, Any] = {}

    def register_layer(
        self,
        name: str,
        z_order: int
    ) -> Any:
        """Register and create a new layer group.

        Args:
            name: Layer name, namespaced into the group id
            z_order: Stacking order (higher values render on top)

        Returns:
            The created SVG group element
        """
        group = self.dwg.g(id=self.namespace(name))

        self.layers[name] = {
            'group': group,
            'z_order': z_order
        }

        self._groups[name] = group
        return group

    def get_layer(self, name: str) -> Any:
        """Get a layer group by name."""
        return self._groups.get(name)

    def get_layers_by_z_order(self) -> List[Any]:
        """Get layers sorted by z-order (lowest first)."""
        sorted_layers = sorted(self.layers.items(), key=lambda x: x[1]['z_order'])
        return [info['group'] for _, info in sorted_layers]

    def assemble(self, parent: Any = None):
        """Add every layer to the parent (the drawing by default) in z-order."""
        parent = parent if parent is not None else self.dwg
        for layer in self.get_layers_by_z_order():
            parent.add(layer)


class LayerZOrder:
    """Standard z-order values for map layers.

    Lower values render first (underneath).
    """
    BACKGROUNDS = 100
    PATHS = 200
    THINGS = 300
    COORDINATES = 400
    REGIONS = 500
    PATH_LABELS = 600
    LABELS = 700

    # (name, z_order) pairs in render order
    STANDARD = [
        ("backgrounds", BACKGROUNDS),
        ("paths", PATHS),
        ("things", THINGS),
        ("coordinates", COORDINATES),
        ("regions", REGIONS),
        ("path-labels", PATH_LABELS),
        ("labels", LABELS),
    ]
