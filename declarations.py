"""
Typed declarations produced by the map text front end.

Each record corresponds to one kind of source line:

    0101 forest "Dark Wood" 20           RegionDecl
    0101-0105 mountains                  RegionRangeDecl
    0102-0405-0607 river "Blue" right    SplineDecl
    option flower-start northeast        OptionDecl
    forest attributes fill="green"       AttributeDecl
    river path attributes stroke="blue"  PathAttributeDecl
    house path M -20,0 ...               PathDecl
    <g id="tower">...</g>                DefDecl
    text font-size="12pt"                TextAttributesDecl
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class RegionDecl:
    """One hex with its types and optional label."""
    x: int
    y: int
    z: int = 0
    types: Tuple[str, ...] = ()
    label: Optional[str] = None
    size: Optional[str] = None


@dataclass(frozen=True)
class RegionRangeDecl:
    """A straight horizontal or vertical run of hexes sharing types and label."""
    start_x: int
    start_y: int
    end_x: int
    end_y: int
    types: Tuple[str, ...] = ()
    label: Optional[str] = None
    size: Optional[str] = None

    def expand(self) -> List[RegionDecl]:
        """
        One RegionDecl per hex, walking from start to end inclusive.

        Diagonal runs expand to nothing.
        """
        if self.start_y == self.end_y:
            step = 1 if self.start_x <= self.end_x else -1
            cells = [(x, self.start_y) for x in range(self.start_x, self.end_x + step, step)]
        elif self.start_x == self.end_x:
            step = 1 if self.start_y <= self.end_y else -1
            cells = [(self.start_x, y) for y in range(self.start_y, self.end_y + step, step)]
        else:
            return []
        return [
            RegionDecl(x=x, y=y, types=self.types, label=self.label, size=self.size)
            for x, y in cells
        ]


@dataclass(frozen=True)
class SplineDecl:
    """A path through explicit waypoints.

    curve_options may hold frequency, depth, rate and curvature overrides.
    """
    points: Tuple[Tuple[int, int], ...]
    types: str
    label: Optional[str] = None
    side: Optional[str] = None
    start: Optional[str] = None
    curve_options: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class OptionDecl:
    """An `option KEY VALUE...` line.

    For `hexflower` the letter and center are carried separately; for
    `map` the value is the raw "display=XXYY, ..." list.
    """
    key: str
    value: Any = True
    letter: Optional[str] = None
    center: Optional[str] = None


@dataclass(frozen=True)
class AttributeDecl:
    """SVG attributes for a hex type (drawn as a filled hex)."""
    type: str
    attributes: Dict[str, str]


@dataclass(frozen=True)
class PathAttributeDecl:
    """SVG attributes for a path type, or for path shapes when type is None."""
    type: Optional[str]
    attributes: Dict[str, str]


@dataclass(frozen=True)
class PathDecl:
    """SVG path data for a hex type (drawn as a symbol)."""
    type: str
    d: str


@dataclass(frozen=True)
class DefDecl:
    """Raw SVG placed in <defs>; ids are namespaced per map."""
    svg: str


@dataclass(frozen=True)
class TextAttributesDecl:
    """Attributes for coordinate text ("text"), label text ("label") or the glow behind labels ("glow")."""
    kind: str
    attributes: Dict[str, str]
