"""
Coordinate label resolution for one map document.

Hex flowers and explicit `map` options assign display labels to
coordinates; every other hex shows its coordinate through the
coordinates-format template. A resolver belongs to a single parse
session, so two documents never see each other's labels.
"""

from typing import Dict, Iterable, List, Optional

from hex_flower import (
    FlowerDirection,
    HexMapping,
    calculate_hex_flower,
    format_coordinate,
    parse_coordinate,
)

DEFAULT_COORDINATES_FORMAT = "{X}{Y}"


def format_coordinates(x: int, y: int, template: str = DEFAULT_COORDINATES_FORMAT) -> str:
    """Fill {X} and {Y} with two-digit zero-padded values.

    >>> format_coordinates(3, 7, "{X}.{Y}")
    '03.07'
    """
    return template.replace("{X}", f"{x:02d}").replace("{Y}", f"{y:02d}")


class CoordinateLabelResolver:
    """Coordinate -> display label table for one document.

    Attributes:
        coordinates_format: Template used for hexes without a mapped label
    """

    def __init__(self, coordinates_format: str = DEFAULT_COORDINATES_FORMAT):
        self.coordinates_format = coordinates_format
        self._labels: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, coordinate: str) -> bool:
        return coordinate in self._labels

    def clear(self):
        """Forget every mapping."""
        self._labels = {}

    def add_mapping(self, display: str, coordinate: str):
        """Show display at coordinate ("XXYY"); later mappings win."""
        if parse_coordinate(coordinate) is None:
            raise ValueError(f"Invalid coordinate in mapping: {coordinate!r}")
        self._labels[coordinate.strip()] = display

    def add_mappings(self, entries: str) -> int:
        """
        Add comma separated "display=coordinate" pairs.

        Args:
            entries: e.g. "Keep=1010, Ford=1112"

        Returns:
            Number of mappings added
        """
        count = 0
        for item in entries.split(","):
            item = item.strip()
            if not item:
                continue
            display, sep, coordinate = item.partition("=")
            if not sep or not display.strip():
                raise ValueError(f"Invalid map entry (expected display=XXYY): {item!r}")
            self.add_mapping(display.strip(), coordinate.strip())
            count += 1
        return count

    def add_hex_mappings(self, mappings: Iterable[HexMapping]):
        for mapping in mappings:
            self._labels[mapping.coordinate] = mapping.display_value

    def add_hex_flower(
        self,
        letter: str,
        center: str,
        counterclockwise: bool = False,
        start_dir: FlowerDirection = FlowerDirection.NORTH,
        relabel_outer_ring: bool = False
    ) -> List[HexMapping]:
        """Lay out a flower and record its labels; returns the mappings (empty if skipped)."""
        mappings = calculate_hex_flower(letter, center, counterclockwise, start_dir, relabel_outer_ring)
        self.add_hex_mappings(mappings)
        return mappings

    def lookup(self, x: int, y: int) -> Optional[str]:
        """Mapped label for the hex at (x, y), if any."""
        return self._labels.get(format_coordinate(x, y))

    def label_for(self, x: int, y: int, template: Optional[str] = None) -> str:
        """Label to draw for the hex at (x, y); mapped labels take precedence."""
        mapped = self.lookup(x, y)
        if mapped is not None:
            return mapped
        return format_coordinates(x, y, template or self.coordinates_format)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._labels)
