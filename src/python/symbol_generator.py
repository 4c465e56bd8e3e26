"""Symbol generator — emits KiCad 9 `.kicad_sym` entries.

Passives with a known template get the fixed vertical layout from
symbol_templates. Everything else gets a DIP-style box: pins sorted by
number, first half down the left side, second half up the right side.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from geometry import (
    SYMBOL_PRECISION, parse_arc_path, path_to_points, round_half_away, to_mm,
    transform_point, transform_points,
)
from library_mutator import sanitize_symbol_name
from models import (
    NormalizedComponent, ParsedPin, Point, ShapeStyle, SymbolArc, SymbolCircle,
    SymbolEllipse, SymbolPath, SymbolPolygon, SymbolPolyline, SymbolRect,
)
from sexpr import fmt, font_effects, quote
from symbol_templates import SymbolTemplate, template_for
from value_normalizer import extract_display_value

logger = logging.getLogger(__name__)

SYMBOL_LIB_VERSION = "20241209"
GENERATOR = "jlcbridge"
GENERATOR_VERSION = "9.0"

IC_PIN_LENGTH = 2.54
IC_PIN_SPACING = 2.54
IC_BODY_HALF_WIDTH = 12.7
IC_PIN_FONT_SIZE = 1.0
PROPERTY_FONT_SIZE = 1.27

FOOTPRINT_PROPERTY_AT = (-1.778, 0, 90)
DATASHEET_URL = "https://www.lcsc.com/datasheet/{part_id}.pdf"

_LEADING_INT_RE = re.compile(r'\s*(\d+)')


class SymbolLayout(Enum):
    AUTO = "auto"       # template for passives, derived box for everything else
    SOURCE = "source"   # pins and graphics where the vendor drew them


@dataclass
class SymbolOptions:
    symbol_name: Optional[str] = None
    layout: SymbolLayout = SymbolLayout.AUTO


@dataclass
class PlacedPin:
    pin: ParsedPin
    x: float
    y: float
    rotation: float
    length: float = IC_PIN_LENGTH


@dataclass
class ICLayout:
    left: list[PlacedPin] = field(default_factory=list)
    right: list[PlacedPin] = field(default_factory=list)

    @property
    def body_top(self) -> float:
        top = self.left[0].y if self.left else 0.0
        return round_half_away(top + IC_PIN_SPACING, 2)

    @property
    def body_bottom(self) -> float:
        bottom = self.left[-1].y if self.left else 0.0
        return round_half_away(bottom - IC_PIN_SPACING, 2)


# ── Layout ───────────────────────────────────────────────────────────────────

def pin_sort_key(pin: ParsedPin) -> int:
    """Leading integer of the pin number; non-numeric numbers sort as 0."""
    m = _LEADING_INT_RE.match(pin.number or "")
    return int(m.group(1)) if m else 0


def calculate_ic_layout(pins: list[ParsedPin]) -> ICLayout:
    """Pins 1..ceil(n/2) down the left edge, the rest up the right edge."""
    ordered = sorted(pins, key=pin_sort_key)
    half = math.ceil(len(ordered) / 2)
    top_y = (half - 1) * IC_PIN_SPACING
    left_x = round_half_away(-(IC_BODY_HALF_WIDTH + IC_PIN_LENGTH), 2)
    right_x = round_half_away(IC_BODY_HALF_WIDTH + IC_PIN_LENGTH, 2)

    layout = ICLayout()
    for i, pin in enumerate(ordered):
        if i < half:
            y = round_half_away(top_y - i * IC_PIN_SPACING, SYMBOL_PRECISION)
            layout.left.append(PlacedPin(pin, left_x, y, 0))
        else:
            y = round_half_away((i - half) * IC_PIN_SPACING, SYMBOL_PRECISION)
            layout.right.append(PlacedPin(pin, right_x, y, 180))
    return layout


def pin_rotation_from_position(x: float, y: float) -> int:
    """Point a pin back toward the symbol centre."""
    if abs(x) > abs(y):
        return 180 if x > 0 else 0
    return 270 if y > 0 else 90


def pin_graphic_style(pin: ParsedPin) -> str:
    if pin.has_inverted_bubble and pin.has_clock_marker:
        return "inverted_clock"
    if pin.has_inverted_bubble:
        return "inverted"
    if pin.has_clock_marker:
        return "clock"
    return "line"


# ── Text blocks ──────────────────────────────────────────────────────────────

def library_header() -> str:
    return ("(kicad_symbol_lib\n"
            f"\t(version {SYMBOL_LIB_VERSION})\n"
            f"\t(generator \"{GENERATOR}\")\n"
            f"\t(generator_version \"{GENERATOR_VERSION}\")\n")


def _symbol_start(name: str, hide_pin_numbers: bool) -> str:
    out = f"\t(symbol \"{name}\"\n"
    if hide_pin_numbers:
        out += ("\t\t(pin_numbers\n\t\t\t(hide yes)\n\t\t)\n"
                "\t\t(pin_names\n\t\t\t(offset 0)\n\t\t)\n")
    out += "\t\t(exclude_from_sim no)\n\t\t(in_bom yes)\n\t\t(on_board yes)\n"
    return out


def _symbol_end() -> str:
    return "\t\t(embedded_fonts no)\n\t)\n"


def _property(key: str, value, at: tuple = (0, 0, 0), hidden: bool = True) -> str:
    x, y, rot = at
    return (f"\t\t(property {quote(key)} {quote(value)}\n"
            f"\t\t\t(at {fmt(x)} {fmt(y)} {fmt(rot)})\n"
            + font_effects(PROPERTY_FONT_SIZE, "\t\t\t", hide=hidden) +
            "\t\t)\n")


def build_properties(component: NormalizedComponent) -> list[tuple[str, str]]:
    """Ordered (key, value) pairs for every property after Reference and Value."""
    info = component.info
    props = [("Footprint", info.footprint_ref or info.package or "")]

    if info.datasheet_pdf:
        datasheet = info.datasheet_pdf
    elif info.part_id:
        datasheet = DATASHEET_URL.format(part_id=info.part_id)
    else:
        datasheet = "~"
    props.append(("Datasheet", datasheet))
    props.append(("Description", info.description or info.name))

    optional = [
        ("Product Page", info.product_url),
        ("Manufacturer", info.manufacturer),
        ("Category", info.category),
        ("LCSC", info.part_id),
        ("ki_keywords", info.part_id),
        ("Stock", info.stock),
        ("Price", f"{info.price}USD" if info.price is not None else None),
        ("Process", info.process),
        ("Minimum Qty", info.min_order_qty),
        ("Class", info.part_class),
        ("Part", info.part_number),
    ]
    props.extend((k, str(v)) for k, v in optional if v is not None and v != "")

    taken = {"Reference", "Value"} | {k for k, _ in props}
    for key, value in info.attributes.items():
        if key in taken:
            logger.debug("Attribute %r collides with a fixed property, skipped", key)
            continue
        taken.add(key)
        props.append((key, str(value)))
    return props


def _properties_block(component: NormalizedComponent, reference_at: tuple,
                      value_at: tuple) -> str:
    info = component.info
    reference = (info.prefix or "U").rstrip("?") or "U"
    value = extract_display_value(info.name, info.description, info.prefix, info.category)

    out = _property("Reference", reference, reference_at, hidden=False)
    out += _property("Value", value, value_at, hidden=False)
    for key, val in build_properties(component):
        at = FOOTPRINT_PROPERTY_AT if key == "Footprint" else (0, 0, 0)
        out += _property(key, val, at)
    return out


def _pin(placed: PlacedPin, font_size: float, show_name: bool = True) -> str:
    pin = placed.pin
    name = pin.name if show_name and pin.name.strip() else "~"
    effects = font_effects(font_size, "\t\t\t\t\t")
    return (f"\t\t\t(pin {pin.electrical_type.value} {pin_graphic_style(pin)}\n"
            f"\t\t\t\t(at {fmt(placed.x)} {fmt(placed.y)} {fmt(placed.rotation)})\n"
            f"\t\t\t\t(length {fmt(placed.length)})\n"
            f"\t\t\t\t(name {quote(name)}\n"
            f"{effects}"
            "\t\t\t\t)\n"
            f"\t\t\t\t(number {quote(pin.number)}\n"
            f"{effects}"
            "\t\t\t\t)\n"
            "\t\t\t)\n")


# ── Source graphics ──────────────────────────────────────────────────────────

def _stroke_fill(style: ShapeStyle, filled: Optional[bool] = None) -> str:
    fill = style.filled if filled is None else filled
    return (f"\t\t\t\t(stroke\n\t\t\t\t\t(width {fmt(to_mm(style.stroke_width, SYMBOL_PRECISION))})\n"
            "\t\t\t\t\t(type default)\n\t\t\t\t)\n"
            f"\t\t\t\t(fill\n\t\t\t\t\t(type {'background' if fill else 'none'})\n\t\t\t\t)\n")


def _polyline_block(points: list[tuple[float, float]], style: ShapeStyle,
                    filled: Optional[bool] = None) -> str:
    xy = " ".join(f"(xy {fmt(x)} {fmt(y)})" for x, y in points)
    return f"\t\t\t(polyline\n\t\t\t\t(pts {xy})\n{_stroke_fill(style, filled)}\t\t\t)\n"


def source_graphic(graphic, origin: Point) -> str:
    """One parsed source graphic as symbol text; "" when it cannot be drawn."""
    p = SYMBOL_PRECISION
    if isinstance(graphic, SymbolRect):
        sx, sy = transform_point(graphic.x, graphic.y, origin, p)
        ex, ey = transform_point(graphic.x + graphic.width, graphic.y + graphic.height, origin, p)
        return (f"\t\t\t(rectangle\n\t\t\t\t(start {fmt(sx)} {fmt(sy)})\n"
                f"\t\t\t\t(end {fmt(ex)} {fmt(ey)})\n{_stroke_fill(graphic.style)}\t\t\t)\n")
    if isinstance(graphic, (SymbolCircle, SymbolEllipse)):
        cx, cy = transform_point(graphic.cx, graphic.cy, origin, p)
        if isinstance(graphic, SymbolEllipse):
            radius = (graphic.radius_x + graphic.radius_y) / 2
        else:
            radius = graphic.radius
        return (f"\t\t\t(circle\n\t\t\t\t(center {fmt(cx)} {fmt(cy)})\n"
                f"\t\t\t\t(radius {fmt(to_mm(radius, p))})\n{_stroke_fill(graphic.style)}\t\t\t)\n")
    if isinstance(graphic, SymbolArc):
        arc = parse_arc_path(graphic.path)
        if arc is None:
            return ""
        (sx, sy), (mx, my), (ex, ey) = transform_points(arc, origin, p)
        return (f"\t\t\t(arc\n\t\t\t\t(start {fmt(sx)} {fmt(sy)})\n"
                f"\t\t\t\t(mid {fmt(mx)} {fmt(my)})\n\t\t\t\t(end {fmt(ex)} {fmt(ey)})\n"
                f"{_stroke_fill(graphic.style, False)}\t\t\t)\n")
    if isinstance(graphic, SymbolPolygon):
        points = transform_points(graphic.points, origin, p)
        if len(points) < 2:
            return ""
        if points[0] != points[-1]:
            points.append(points[0])
        return _polyline_block(points, graphic.style)
    if isinstance(graphic, SymbolPolyline):
        points = transform_points(graphic.points, origin, p)
        return _polyline_block(points, graphic.style, False) if len(points) >= 2 else ""
    if isinstance(graphic, SymbolPath):
        points = transform_points(path_to_points(graphic.path), origin, p)
        return _polyline_block(points, graphic.style) if len(points) >= 2 else ""
    return ""


# ── Entry generation ─────────────────────────────────────────────────────────

def symbol_name_for(component: NormalizedComponent, options: Optional[SymbolOptions] = None) -> str:
    if options and options.symbol_name:
        return sanitize_symbol_name(options.symbol_name)
    return sanitize_symbol_name(component.info.name)


def _from_template(component: NormalizedComponent, name: str, template: SymbolTemplate) -> str:
    pins = sorted(component.symbol.pins, key=pin_sort_key)
    out = _symbol_start(name, hide_pin_numbers=True)
    out += _properties_block(component, template.reference_at, template.value_at)
    out += f"\t\t(symbol \"{name}_0_1\"\n{template.body}\t\t)\n"
    out += f"\t\t(symbol \"{name}_1_1\"\n"
    for pin, (x, y, rot) in zip(pins, template.pin_positions()):
        out += _pin(PlacedPin(pin, x, y, rot, template.pin_length), PROPERTY_FONT_SIZE,
                    show_name=False)
    out += "\t\t)\n"
    return out + _symbol_end()


def _from_ic_layout(component: NormalizedComponent, name: str) -> str:
    layout = calculate_ic_layout(component.symbol.pins)
    top, bottom = layout.body_top, layout.body_bottom

    out = _symbol_start(name, hide_pin_numbers=False)
    out += _properties_block(component, (0, top + IC_PIN_SPACING, 0),
                             (0, bottom - IC_PIN_SPACING, 0))
    out += (f"\t\t(symbol \"{name}_0_1\"\n"
            "\t\t\t(rectangle\n"
            f"\t\t\t\t(start {fmt(-IC_BODY_HALF_WIDTH)} {fmt(top)})\n"
            f"\t\t\t\t(end {fmt(IC_BODY_HALF_WIDTH)} {fmt(bottom)})\n"
            "\t\t\t\t(stroke\n\t\t\t\t\t(width 0.254)\n\t\t\t\t\t(type default)\n\t\t\t\t)\n"
            "\t\t\t\t(fill\n\t\t\t\t\t(type background)\n\t\t\t\t)\n"
            "\t\t\t)\n")
    for placed in layout.left + layout.right:
        out += _pin(placed, IC_PIN_FONT_SIZE)
    out += "\t\t)\n"
    return out + _symbol_end()


def _from_source(component: NormalizedComponent, name: str) -> str:
    origin = component.symbol.origin
    placed = []
    for pin in component.symbol.pins:
        x, y = transform_point(pin.x, pin.y, origin, SYMBOL_PRECISION)
        placed.append(PlacedPin(pin, x, y, pin_rotation_from_position(x, y),
                                to_mm(pin.pin_length, SYMBOL_PRECISION)))
    ys = [p.y for p in placed] or [0.0]

    out = _symbol_start(name, hide_pin_numbers=False)
    out += _properties_block(component, (0, max(ys) + IC_PIN_SPACING, 0),
                             (0, min(ys) - IC_PIN_SPACING, 0))
    out += f"\t\t(symbol \"{name}_0_1\"\n"
    for graphic in component.symbol.graphics:
        out += source_graphic(graphic, origin)
    out += "\t\t)\n"
    out += f"\t\t(symbol \"{name}_1_1\"\n"
    for p in placed:
        out += _pin(p, IC_PIN_FONT_SIZE)
    out += "\t\t)\n"
    return out + _symbol_end()


def generate_symbol_entry(component: NormalizedComponent,
                          options: Optional[SymbolOptions] = None) -> str:
    """One self-contained `(symbol ...)` entry, ready to splice into a library."""
    options = options or SymbolOptions()
    name = symbol_name_for(component, options)

    if options.layout == SymbolLayout.SOURCE:
        return _from_source(component, name)

    template = template_for(component.info.prefix, component.category)
    if template is not None and len(component.symbol.pins) <= template.pin_slots:
        logger.debug("Symbol %s: %s template", name, template.prefix)
        return _from_template(component, name, template)
    logger.debug("Symbol %s: IC layout with %d pins", name, len(component.symbol.pins))
    return _from_ic_layout(component, name)


def generate_symbol_library(components: list[NormalizedComponent],
                            options: Optional[SymbolOptions] = None) -> str:
    """A complete library file containing one entry per component."""
    out = library_header()
    for component in components:
        out += generate_symbol_entry(component, options)
    return out + ")\n"
