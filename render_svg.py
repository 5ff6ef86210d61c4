"""
render_svg.py - Draw a MapLayout as SVG

Layers, bottom to top:
    defs          hex type symbols and raw <defs> from the map source
    backgrounds   hex types that have attributes (filled hexes)
    paths         curved paths (rivers, roads, trails)
    things        hex types without attributes (symbols on top)
    coordinates   coordinate or hex flower label near the top of each hex
    regions       hex outlines
    path-labels   text along paths
    labels        hex labels, with a glow copy underneath
"""

from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

import svgwrite

from map_session import MapLayout
from map_utils import LayerManager, LayerZOrder
from render_helpers import merge_attributes


SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# === SVG Style Constants ===
BACKGROUND_FILL = "white"
DEFAULT_PATH_ATTRIBUTES = {"fill": "none"}


def _set(element, attributes: Optional[Dict[str, str]]):
    """Copy SVG attributes verbatim onto an svgwrite element."""
    if attributes:
        element.attribs.update({k: str(v) for k, v in attributes.items()})
    return element


class RawFragment:
    """An SVG fragment from the map source, added to the drawing as-is."""

    elementname = "g"

    def __init__(self, fragment: str):
        self.fragment = fragment

    def get_xml(self) -> ET.Element:
        wrapper = ET.fromstring(
            f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}">{self.fragment}</svg>'
        )
        children = list(wrapper)
        root = children[0] if len(children) == 1 else wrapper
        if root is wrapper:
            root.tag = "g"
        for element in root.iter():
            _strip_namespace(element)
        return root


def _strip_namespace(element: ET.Element):
    """svgwrite writes unqualified tags, so parsed fragments must match."""
    if element.tag.startswith("{"):
        element.tag = element.tag.split("}", 1)[1]
    for key in list(element.attrib):
        if key.startswith(f"{{{XLINK_NS}}}"):
            element.attrib["xlink:" + key.split("}", 1)[1]] = element.attrib.pop(key)
        elif key.startswith("{"):
            element.attrib[key.split("}", 1)[1]] = element.attrib.pop(key)


def build_drawing(layout: MapLayout, filename: str = "map.svg") -> svgwrite.Drawing:
    """
    Build the svgwrite Drawing for a layout.

    Args:
        layout: Output of MapSession.process()
        filename: Filename stored on the drawing (used by save())

    Returns:
        The drawing; nothing is written to disk
    """
    if layout.viewbox.is_empty:
        return svgwrite.Drawing(filename, debug=False)

    box = layout.viewbox
    dwg = svgwrite.Drawing(
        filename,
        size=(f"{box.width:.0f}px", f"{box.height:.0f}px"),
        viewBox=box.svg_viewbox(),
        debug=False,
    )
    dwg.add(dwg.rect(
        insert=(round(box.min_x), round(box.min_y)),
        size=(round(box.width), round(box.height)),
        fill=BACKGROUND_FILL,
    ))

    add_defs(dwg, layout)

    layers = LayerManager(dwg, layout.namespace)
    for name, z_order in LayerZOrder.STANDARD:
        layers.register_layer(name, z_order)

    add_backgrounds(dwg, layers.get_layer("backgrounds"), layout)
    add_paths(dwg, layers.get_layer("paths"), layout)
    add_things(dwg, layers.get_layer("things"), layout)
    add_coordinates(dwg, layers.get_layer("coordinates"), layout)
    add_regions(dwg, layers.get_layer("regions"), layout)
    add_path_labels(dwg, layers.get_layer("path-labels"), layout)
    add_labels(dwg, layers.get_layer("labels"), layout)

    layers.assemble()
    return dwg


def add_defs(dwg, layout: MapLayout):
    """Raw definitions, then one symbol group per type that has a path or attributes."""
    for fragment in layout.defs:
        dwg.defs.add(RawFragment(fragment))

    corners = layout.orientation.hex_corners()
    for type_name in layout.used_types():
        path = layout.paths.get(type_name)
        attributes = layout.attributes.get(type_name)
        if not path and not attributes:
            continue
        group = dwg.g(id=layout.namespace(type_name))
        # A lone shape gets a glow behind it
        if path and not attributes:
            group.add(_set(dwg.path(d=path), layout.glow_attributes))
        if attributes:
            group.add(_set(dwg.polygon(points=[tuple(c) for c in corners]), attributes))
        if path:
            group.add(_set(dwg.path(d=path), layout.shape_attributes))
        dwg.defs.add(group)


def _use(dwg, layout: MapLayout, type_name: str, center):
    return dwg.use(f"#{layout.namespace(type_name)}", insert=(round(center.x, 1), round(center.y, 1)))


def add_backgrounds(dwg, group, layout: MapLayout):
    for region in layout.regions:
        for type_name in region.types:
            if type_name in layout.attributes:
                group.add(_use(dwg, layout, type_name, region.center))


def add_things(dwg, group, layout: MapLayout):
    for region in layout.regions:
        for type_name in region.types:
            if type_name not in layout.attributes:
                group.add(_use(dwg, layout, type_name, region.center))


def add_paths(dwg, group, layout: MapLayout):
    for spline in layout.splines:
        if not spline.d:
            continue
        attributes = merge_attributes(
            DEFAULT_PATH_ATTRIBUTES,
            layout.path_attributes.get(spline.types),
            {"type": spline.types},
        )
        group.add(_set(dwg.path(d=spline.d, id=spline.id), attributes))


def add_coordinates(dwg, group, layout: MapLayout):
    for region in layout.regions:
        pos = region.coordinate_position
        text = dwg.text(
            region.coordinate_label,
            insert=(round(pos.x, 1), round(pos.y, 1)),
            text_anchor="middle",
        )
        group.add(_set(text, layout.text_attributes))


def add_regions(dwg, group, layout: MapLayout):
    outline = layout.attributes.get("default")
    for region in layout.regions:
        polygon = dwg.polygon(points=[(round(c.x, 1), round(c.y, 1)) for c in region.corners], id=region.id)
        group.add(_set(polygon, outline))


def add_path_labels(dwg, group, layout: MapLayout):
    for spline in layout.splines:
        if spline.label is None:
            continue
        path_attributes = {}
        if spline.side is not None:
            path_attributes["side"] = spline.side
        if spline.start is not None:
            path_attributes["startOffset"] = spline.start

        g = dwg.g()
        for extra in (layout.glow_attributes, None):
            text = _set(dwg.text(""), merge_attributes(layout.label_attributes, extra))
            text.add(_set(dwg.textPath(f"#{spline.id}", spline.label), path_attributes))
            g.add(text)
        group.add(g)


def add_labels(dwg, group, layout: MapLayout):
    for region in layout.regions:
        if not region.display:
            continue
        attributes = merge_attributes(
            layout.label_attributes,
            {"font-size": region.size} if region.size else None,
        )
        pos = region.label_position

        g = dwg.g()
        parent = g
        if region.is_link:
            parent = _set(dwg.a(region.link), {"data-href": region.link, "class": "internal-link"})
            if layout.no_underline:
                parent.attribs["text-decoration"] = "none"
            g.add(parent)
        for extra in (layout.glow_attributes, None):
            text = dwg.text(region.display, insert=(round(pos.x, 1), round(pos.y, 1)), text_anchor="middle")
            parent.add(_set(text, merge_attributes(attributes, extra)))
        group.add(g)


def render_svg(layout: MapLayout, output_path: Optional[str] = None) -> svgwrite.Drawing:
    """
    Render a layout, saving it when output_path is given.

    Returns:
        The svgwrite Drawing
    """
    dwg = build_drawing(layout, output_path or "map.svg")
    if output_path:
        dwg.saveas(output_path)
        box = layout.viewbox
        print(f"Saved SVG to {output_path} ({box.width:.0f}x{box.height:.0f}px)")
    return dwg


def render_svg_string(layout: MapLayout) -> str:
    """SVG markup for a layout."""
    return build_drawing(layout).tostring()


# === Quick demo ===
if __name__ == "__main__":
    import os

    from declarations import AttributeDecl, OptionDecl, PathAttributeDecl, RegionDecl, SplineDecl, TextAttributesDecl
    from map_session import MapSession

    source: List = [
        OptionDecl("flower-start", "northeast"),
        OptionDecl("relabel-outer-ring"),
        OptionDecl("hexflower", letter="A", center="0505"),
        AttributeDecl("default", {"fill": "none", "stroke": "grey", "stroke-width": "3"}),
        AttributeDecl("forest", {"fill": "#228b22"}),
        AttributeDecl("grass", {"fill": "#98fb98"}),
        PathAttributeDecl("river", {"stroke": "#4a90d9", "stroke-width": "8"}),
        TextAttributesDecl("text", {"font-size": "12pt", "fill": "#666666"}),
        TextAttributesDecl("glow", {"stroke": "white", "stroke-width": "4"}),
        SplineDecl(points=((1, 1), (8, 8)), types="river", label="Blue River"),
    ]
    for x in range(1, 10):
        for y in range(1, 10):
            terrain = ("forest",) if (x + y) % 3 == 0 else ("grass",)
            label = "Keep|The Keep" if (x, y) == (5, 5) else None
            source.append(RegionDecl(x=x, y=y, types=terrain, label=label))

    os.makedirs("output", exist_ok=True)
    session = MapSession("demo", debug=True)
    render_svg(session.process(source), "output/demo_flower.svg")
