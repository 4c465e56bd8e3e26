"""Footprint generator — standard-footprint lookup or generated `.kicad_mod`.

Common packages resolve to KiCad's own libraries through footprint_mapper;
everything else is built as a kiutils Footprint from the source pads and
holes, with outlines derived from the pad bounding box.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from kiutils.footprint import Attributes, DrillDefinition, Footprint, Model
from kiutils.footprint import Pad as KiPad
from kiutils.items.common import Effects, Font, Position, Stroke
from kiutils.items.fpitems import FpLine, FpText

from category_router import LIBRARY_PREFIX, footprint_reference
from footprint_mapper import map_to_kicad_footprint
from geometry import (
    FOOTPRINT_PRECISION, BoundingBox, pad_bounds, round_half_away, to_mm,
    transform_point,
)
from library_mutator import sanitize_footprint_name
from models import FootprintResult, FootprintType, Hole, NormalizedComponent, Pad, Point
from sexpr import escape_text

logger = logging.getLogger(__name__)

# KiCad 7 board format: fp_text reference/value plus plain (property k v) fields
FOOTPRINT_VERSION = "20221018"
GENERATOR = "jlcbridge"

ROUNDRECT_RATIO = 0.25

# Outline layer, margin around the pad box (mm), stroke width (mm)
SILKSCREEN = ("F.SilkS", 0.15, 0.12)
FAB = ("F.Fab", 0.0, 0.1)
COURTYARD = ("F.CrtYd", 0.25, 0.05)

BOTTOM_LAYER_ID = 2

_THT_SHAPES = {
    "ELLIPSE": "circle",
    "CIRCLE": "circle",
    "ROUND": "circle",
    "OVAL": "oval",
    "RECT": "rect",
}


@dataclass
class FootprintOptions:
    library_name: str = LIBRARY_PREFIX
    include_3d: bool = False
    model_path: Optional[str] = None


def angle_to_ki(rotation: float) -> float:
    """Source rotation (0..360, clockwise) to KiCad's -180..180 convention."""
    if rotation > 180:
        return -(360 - rotation)
    return rotation


def is_through_hole(pad: Pad) -> bool:
    return pad.hole_radius > 0


def pad_shape(pad: Pad) -> str:
    """SMD pads are always rounded rectangles; THT shapes map, unknown -> rect."""
    if not is_through_hole(pad):
        return "roundrect"
    return _THT_SHAPES.get(pad.shape.upper(), "rect")


def pad_layers(pad: Pad) -> list[str]:
    if is_through_hole(pad):
        return ["*.Cu", "*.Mask"]
    if pad.layer_id == BOTTOM_LAYER_ID:
        return ["B.Cu", "B.Mask", "B.Paste"]
    return ["F.Cu", "F.Mask", "F.Paste"]


def footprint_name_for(component: NormalizedComponent) -> str:
    return sanitize_footprint_name(component.footprint.name)


def _num(value: float):
    """Whole millimetres print as `2`, not `2.0`."""
    return int(value) if float(value).is_integer() else value


def _position(x: float, y: float, angle: Optional[float] = None) -> Position:
    return Position(X=_num(x), Y=_num(y), angle=_num(angle) if angle else None)


# ── kiutils items ────────────────────────────────────────────────────────────

def build_pad(pad: Pad, origin: Point) -> KiPad:
    x, y = transform_point(pad.x, pad.y, origin, FOOTPRINT_PRECISION)
    shape = pad_shape(pad)
    ki_pad = KiPad(
        number=pad.number,
        type="thru_hole" if is_through_hole(pad) else "smd",
        shape=shape,
        position=_position(x, y, angle_to_ki(pad.rotation)),
        size=_position(to_mm(pad.width), to_mm(pad.height)),
        layers=pad_layers(pad),
    )
    if shape == "roundrect":
        ki_pad.roundrectRatio = ROUNDRECT_RATIO
    if is_through_hole(pad):
        ki_pad.drill = DrillDefinition(diameter=_num(to_mm(pad.hole_radius * 2)))
    return ki_pad


def build_hole(hole: Hole, origin: Point) -> KiPad:
    x, y = transform_point(hole.x, hole.y, origin, FOOTPRINT_PRECISION)
    diameter = _num(to_mm(hole.radius * 2))
    return KiPad(number="", type="np_thru_hole", shape="circle",
                 position=_position(x, y), size=Position(X=diameter, Y=diameter),
                 drill=DrillDefinition(diameter=diameter), layers=["*.Cu", "*.Mask"])


def outline_lines(box: BoundingBox, layer: str, width: float) -> list[FpLine]:
    """Four fp_line segments tracing `box` clockwise from the top-left corner."""
    corners = [(box.min_x, box.min_y), (box.max_x, box.min_y),
               (box.max_x, box.max_y), (box.min_x, box.max_y)]
    lines = []
    for i, start in enumerate(corners):
        end = corners[(i + 1) % 4]
        lines.append(FpLine(start=_position(*start), end=_position(*end), layer=layer,
                            width=None, stroke=Stroke(width=width, type="solid")))
    return lines


def _text(kind: str, text: str, y: float, layer: str, size: float = 1,
          thickness: float = 0.15) -> FpText:
    font = Font(height=size, width=size, thickness=thickness)
    return FpText(type=kind, text=escape_text(text), position=_position(0, y),
                  layer=layer, effects=Effects(font=font))


def footprint_properties(component: NormalizedComponent) -> dict[str, str]:
    """Description, LCSC, Manufacturer and the record attributes as footprint fields."""
    info = component.info
    fields = [("Description", info.description), ("LCSC", info.part_id),
              ("Manufacturer", info.manufacturer)]
    fields += list(info.attributes.items())
    properties = {}
    for key, value in fields:
        if not value or key in ("Reference", "Value") or key in properties:
            continue
        properties[key] = escape_text(value)
    return properties


# ── Generation ───────────────────────────────────────────────────────────────

def build_footprint(component: NormalizedComponent,
                    options: Optional[FootprintOptions] = None) -> Footprint:
    """kiutils Footprint for the component's pads, holes and outlines."""
    options = options or FootprintOptions()
    info = component.info
    block = component.footprint
    name = footprint_name_for(component)
    bounds = pad_bounds(block.pads, block.origin)

    fp = Footprint(entryName=name, version=FOOTPRINT_VERSION, generator=GENERATOR)
    fp.description = escape_text(info.description or name)
    fp.tags = escape_text(info.category or "component")
    fp.properties = footprint_properties(component)
    fp.attributes = Attributes(
        type="through_hole" if block.type == FootprintType.THT else "smd")

    fp.graphicItems.append(_text("reference", "REF**",
                                 round_half_away(bounds.min_y - 1, 2), "F.SilkS"))
    fp.graphicItems.append(_text("value", info.name,
                                 round_half_away(bounds.max_y + 1, 2), "F.Fab"))
    for layer, margin, width in (SILKSCREEN, FAB, COURTYARD):
        fp.graphicItems.extend(outline_lines(bounds.expanded(margin), layer, width))
    fp.graphicItems.append(_text("user", "${REFERENCE}", 0, "F.Fab",
                                 size=0.5, thickness=0.08))

    fp.pads = [build_pad(pad, block.origin) for pad in block.pads]
    fp.pads += [build_hole(hole, block.origin) for hole in block.holes]

    if options.include_3d and options.model_path and component.model_3d:
        fp.models = [Model(path=options.model_path)]
    return fp


def generate_footprint(component: NormalizedComponent,
                       options: Optional[FootprintOptions] = None) -> str:
    """Full `.kicad_mod` text for the component's footprint."""
    return build_footprint(component, options).to_sexpr()


def get_footprint(component: NormalizedComponent,
                  options: Optional[FootprintOptions] = None) -> FootprintResult:
    """Standard footprint reference when the package is known, else generated content."""
    for package in (component.footprint.name, component.info.package):
        mapping = map_to_kicad_footprint(package, component.info.prefix)
        if mapping:
            logger.debug("Package %s maps to %s", package, mapping.reference)
            return FootprintResult(kind="reference", name=mapping.footprint,
                                   reference=mapping.reference)

    options = options or FootprintOptions()
    name = footprint_name_for(component)
    return FootprintResult(kind="generated", name=name,
                           reference=footprint_reference(name, options.library_name),
                           content=generate_footprint(component, options))
