"""
map_session.py - Turn map declarations into a rendering-ready layout

A MapSession handles one document: it applies the options, lays out the
hex flowers, builds regions and splines, and produces a MapLayout with
pixel geometry and resolved labels for every hex and path.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from coordinate_labels import DEFAULT_COORDINATES_FORMAT, CoordinateLabelResolver
from declarations import (
    AttributeDecl,
    DefDecl,
    OptionDecl,
    PathAttributeDecl,
    PathDecl,
    RegionDecl,
    RegionRangeDecl,
    SplineDecl,
    TextAttributesDecl,
)
from hex_flower import FlowerDirection, HexMapping
from hexgrid import GridPoint, Orientation, PixelPoint
from map_records import CurveOptions, Region, Spline
from map_utils import Bounds
from render_helpers import format_points, get_point_and_angle_at_fraction, namespace_svg, parse_start_offset
from splines import DEFAULT_CURVATURE, DEFAULT_DEPTH, DEFAULT_FREQUENCY, DEFAULT_RATE


# === Configuration ===
DEFAULT_DOCUMENT_ID = "map"

# Option keys that are plain flags
FLAG_OPTIONS = {
    "horizontal": "horizontal",
    "swap-even-odd": "swap_even_odd",
    "global": "global_ids",
    "counterclockwise": "counterclockwise",
    "relabel-outer-ring": "relabel_outer_ring",
    "no-underline": "no_underline",
}

# Option keys with a numeric value
NUMBER_OPTIONS = {
    "pathFrequency": "path_frequency",
    "path-frequency": "path_frequency",
    "pathDepth": "path_depth",
    "path-depth": "path_depth",
    "pathRate": "path_rate",
    "path-rate": "path_rate",
    "pathCurvature": "path_curvature",
    "path-curvature": "path_curvature",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "no", "off", "0", "")
    return bool(value)


@dataclass
class MapOptions:
    """Options for one map, set by `option` lines."""
    horizontal: bool = False            # pointy-top hexes in horizontal rows
    swap_even_odd: bool = False
    coordinates_format: str = DEFAULT_COORDINATES_FORMAT
    global_ids: bool = False            # don't suffix element ids with the document id
    counterclockwise: bool = False
    flower_start: FlowerDirection = FlowerDirection.NORTH
    relabel_outer_ring: bool = False
    no_underline: bool = False
    path_frequency: float = DEFAULT_FREQUENCY
    path_depth: float = DEFAULT_DEPTH
    path_rate: float = DEFAULT_RATE
    path_curvature: float = DEFAULT_CURVATURE

    def apply(self, option: OptionDecl) -> bool:
        """
        Set the option named by option.key.

        Returns:
            True if the key is a known option

        Raises:
            ValueError: If the value can't be interpreted
        """
        key = option.key
        if key in FLAG_OPTIONS:
            setattr(self, FLAG_OPTIONS[key], _as_bool(option.value))
        elif key in NUMBER_OPTIONS:
            try:
                setattr(self, NUMBER_OPTIONS[key], float(option.value))
            except (TypeError, ValueError):
                raise ValueError(f"Option {key} needs a number, got {option.value!r}")
        elif key == "flower-start":
            self.flower_start = FlowerDirection.parse(option.value)
        elif key == "coordinates-format":
            self.coordinates_format = str(option.value)
        else:
            return False
        return True

    @property
    def orientation(self) -> Orientation:
        return Orientation.from_flags(flat_top=not self.horizontal, swap_even_odd=self.swap_even_odd)

    @property
    def curve(self) -> CurveOptions:
        return CurveOptions(
            frequency=self.path_frequency,
            depth=self.path_depth,
            rate=self.path_rate,
            curvature=self.path_curvature,
        )


@dataclass
class RegionLayout:
    """Pixel geometry and resolved text for one hex."""
    id: str
    x: int
    y: int
    types: List[str]
    center: PixelPoint
    corners: List[PixelPoint]
    coordinate_label: str
    coordinate_position: PixelPoint
    link: str = ""
    display: str = ""
    label_position: Optional[PixelPoint] = None
    size: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return bool(self.display) and self.link != self.display

    @property
    def points(self) -> str:
        """Corner polygon as an SVG points attribute."""
        return format_points(self.corners)


@dataclass
class SplineLayout:
    """Pixel geometry for one path."""
    id: str
    types: str
    waypoints: List[GridPoint]
    route: List[GridPoint]
    pixel_route: List[PixelPoint]
    d: str
    label: Optional[str] = None
    side: Optional[str] = None
    start: Optional[str] = None
    label_anchor: Optional[Tuple[float, float, float]] = None


@dataclass
class MapLayout:
    """Everything a renderer needs to draw one map."""
    document_id: str
    global_ids: bool
    orientation: Orientation
    viewbox: Bounds
    regions: List[RegionLayout] = field(default_factory=list)
    splines: List[SplineLayout] = field(default_factory=list)
    attributes: Dict[str, Dict[str, str]] = field(default_factory=dict)
    path_attributes: Dict[str, Dict[str, str]] = field(default_factory=dict)
    shape_attributes: Dict[str, str] = field(default_factory=dict)
    paths: Dict[str, str] = field(default_factory=dict)
    defs: List[str] = field(default_factory=list)
    text_attributes: Dict[str, str] = field(default_factory=dict)
    glow_attributes: Dict[str, str] = field(default_factory=dict)
    label_attributes: Dict[str, str] = field(default_factory=dict)
    no_underline: bool = False

    def namespace(self, what: str) -> str:
        return namespace_id(what, self.document_id, self.global_ids)

    def used_types(self) -> List[str]:
        """Every region and path type on the map, sorted."""
        types = set()
        for region in self.regions:
            types.update(region.types)
        for spline in self.splines:
            types.add(spline.types)
        return sorted(types)


def namespace_id(what: str, document_id: str, global_ids: bool = False) -> str:
    """
    Suffix an element id with the document id.

    Keeps definitions from leaking between maps shown in the same page.
    """
    if global_ids:
        return what
    return f"{what}-{document_id}"


class MapSession:
    """
    One parse pass over a map document.

    Attributes:
        document_id: Used to namespace element ids
        options: MapOptions after the option pass
        resolver: Coordinate labels from hex flowers and `map` options
        regions: Regions in declaration order
        splines: Splines in declaration order
    """

    def __init__(
        self,
        document_id: str = DEFAULT_DOCUMENT_ID,
        options: Optional[MapOptions] = None,
        debug: bool = False
    ):
        """Initialize the session.

        Args:
            document_id: Document id used to namespace element ids
            options: Starting options; a fresh MapOptions by default
            debug: Print diagnostics while processing
        """
        self.document_id = document_id
        self.initial_options = options
        self.debug = debug
        self._debug_log: List[Dict[str, Any]] = []
        self._reset()

    def _reset(self):
        base = self.initial_options
        self.options = replace(base) if base is not None else MapOptions()
        self.resolver = CoordinateLabelResolver(self.options.coordinates_format)
        self.flowers: Dict[str, List[HexMapping]] = {}
        self.regions: List[Region] = []
        self.splines: List[Spline] = []
        self.attributes: Dict[str, Dict[str, str]] = {}
        self.path_attributes: Dict[str, Dict[str, str]] = {}
        self.shape_attributes: Dict[str, str] = {}
        self.paths: Dict[str, str] = {}
        self.defs: List[str] = []
        self.text_attributes: Dict[str, str] = {}
        self.glow_attributes: Dict[str, str] = {}
        self.label_attributes: Dict[str, str] = {}
        self._path_id = 0

    def _log(self, event: str, **details):
        self._debug_log.append({'event': event, **details})
        if self.debug:
            extra = ", ".join(f"{k}={v!r}" for k, v in details.items())
            print(f"  {event}: {extra}" if extra else f"  {event}")

    def get_debug_log(self) -> List[Dict[str, Any]]:
        """Diagnostics recorded by the last process() call."""
        return self._debug_log

    def clear_debug_log(self):
        self._debug_log = []

    def namespace(self, what: str) -> str:
        return namespace_id(what, self.document_id, self.options.global_ids)

    @property
    def orientation(self) -> Orientation:
        return self.options.orientation

    # --- parsing ---

    def process(self, declarations: Iterable) -> 'MapLayout':
        """
        Process the declarations of one document and lay it out.

        Options are applied first, so an option affects the whole map no
        matter where it appears. Hex flowers are computed with the final
        flower-start and counterclockwise values; `map` entries are added
        after the flowers and win over them.
        """
        declarations = list(declarations)
        self._reset()

        flowers: List[OptionDecl] = []
        mappings: List[OptionDecl] = []
        for decl in declarations:
            if not isinstance(decl, OptionDecl):
                continue
            if decl.key == "hexflower":
                flowers.append(decl)
            elif decl.key == "map":
                mappings.append(decl)
            elif not self.options.apply(decl):
                self._log("unknown option", key=decl.key)

        self.resolver.coordinates_format = self.options.coordinates_format
        for decl in flowers:
            self.add_hex_flower(decl.letter, decl.center)
        for decl in mappings:
            self.resolver.add_mappings(str(decl.value))

        for decl in declarations:
            if isinstance(decl, OptionDecl):
                continue
            self.add_declaration(decl)

        return self.layout()

    def add_hex_flower(self, letter: Optional[str], center: Optional[str]) -> List[HexMapping]:
        mappings = self.resolver.add_hex_flower(
            letter or "",
            center or "",
            self.options.counterclockwise,
            self.options.flower_start,
            self.options.relabel_outer_ring,
        )
        if not mappings:
            self._log("skipped hexflower", letter=letter, center=center)
        else:
            self.flowers[letter] = mappings
            self._log("hexflower", letter=letter, center=center, hexes=len(mappings))
        return mappings

    def add_declaration(self, decl):
        """Dispatch one non-option declaration."""
        if isinstance(decl, RegionDecl):
            self.regions.append(self.make_region(decl))
        elif isinstance(decl, RegionRangeDecl):
            expanded = decl.expand()
            if not expanded:
                self._log("skipped diagonal range", start=(decl.start_x, decl.start_y), end=(decl.end_x, decl.end_y))
            self.regions.extend(self.make_region(d) for d in expanded)
        elif isinstance(decl, SplineDecl):
            self.splines.append(self.make_spline(decl))
        elif isinstance(decl, AttributeDecl):
            self.attributes[decl.type] = dict(decl.attributes)
        elif isinstance(decl, PathAttributeDecl):
            if decl.type is None:
                self.shape_attributes = dict(decl.attributes)
            else:
                self.path_attributes[decl.type] = dict(decl.attributes)
        elif isinstance(decl, PathDecl):
            self.paths[decl.type] = decl.d
        elif isinstance(decl, DefDecl):
            self.defs.append(namespace_svg(decl.svg, self.namespace))
        elif isinstance(decl, TextAttributesDecl):
            self._set_text_attributes(decl)
        else:
            raise TypeError(f"Unsupported declaration: {type(decl).__name__}")

    def _set_text_attributes(self, decl: TextAttributesDecl):
        if decl.kind == "text":
            self.text_attributes = dict(decl.attributes)
        elif decl.kind == "glow":
            self.glow_attributes = dict(decl.attributes)
        elif decl.kind == "label":
            self.label_attributes = dict(decl.attributes)
        else:
            raise ValueError(f"Unknown text attribute kind: {decl.kind!r}")

    def make_region(self, decl: RegionDecl) -> Region:
        return Region(
            x=int(decl.x),
            y=int(decl.y),
            z=int(decl.z),
            types=list(decl.types),
            label=decl.label,
            size=decl.size,
        )

    def make_spline(self, decl: SplineDecl) -> Spline:
        self._path_id += 1
        spline = Spline(
            id=self.namespace(f"path-{self._path_id}"),
            types=decl.types,
            label=decl.label,
            side=decl.side,
            start=decl.start,
            curve=self.options.curve.merged(decl.curve_options),
        )
        for x, y in decl.points:
            spline.add_point(x, y)
        return spline

    # --- layout ---

    def layout(self) -> MapLayout:
        """Pixel geometry and labels for everything processed so far."""
        orientation = self.orientation
        return MapLayout(
            document_id=self.document_id,
            global_ids=self.options.global_ids,
            orientation=orientation,
            viewbox=orientation.viewbox(self.regions),
            regions=[self.layout_region(r, orientation) for r in self.regions],
            splines=[self.layout_spline(s, orientation) for s in self.splines],
            attributes=dict(self.attributes),
            path_attributes=dict(self.path_attributes),
            shape_attributes=dict(self.shape_attributes),
            paths=dict(self.paths),
            defs=list(self.defs),
            text_attributes=dict(self.text_attributes),
            glow_attributes=dict(self.glow_attributes),
            label_attributes=dict(self.label_attributes),
            no_underline=self.options.no_underline,
        )

    def layout_region(self, region: Region, orientation: Orientation) -> RegionLayout:
        text_shift = orientation.dy * orientation.label_offset
        link, display = region.link_and_label()
        return RegionLayout(
            id=self.namespace(region.id),
            x=region.x,
            y=region.y,
            types=list(region.types),
            center=region.pixels(orientation),
            corners=orientation.corners(region.point),
            coordinate_label=self.resolver.label_for(region.x, region.y),
            coordinate_position=region.pixels(orientation, 0, -text_shift),
            link=link,
            display=display,
            label_position=region.pixels(orientation, 0, text_shift) if display else None,
            size=region.size,
        )

    def layout_spline(self, spline: Spline, orientation: Orientation) -> SplineLayout:
        route = spline.route(orientation)
        pixel_route = [orientation.pixels(p) for p in route]
        anchor = None
        if spline.label is not None and pixel_route:
            anchor = get_point_and_angle_at_fraction(pixel_route, parse_start_offset(spline.start))
        return SplineLayout(
            id=spline.id,
            types=spline.types,
            waypoints=list(spline.points),
            route=route,
            pixel_route=pixel_route,
            d=spline.path_data(orientation, route),
            label=spline.label,
            side=spline.label_side(orientation, route),
            start=spline.start,
            label_anchor=anchor,
        )
