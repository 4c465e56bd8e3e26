"""Data models for the jlcbridge conversion pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class ElectricalType(Enum):
    UNSPECIFIED = "unspecified"
    INPUT = "input"
    OUTPUT = "output"
    BIDIRECTIONAL = "bidirectional"
    POWER_IN = "power_in"
    POWER_OUT = "power_out"
    OPEN_COLLECTOR = "open_collector"
    OPEN_EMITTER = "open_emitter"
    PASSIVE = "passive"
    NO_CONNECT = "no_connect"

    @classmethod
    def from_code(cls, code: str) -> "ElectricalType":
        """Map the service's integer pin type code; unknown codes are passive."""
        return _PIN_TYPE_CODES.get(str(code).strip(), cls.PASSIVE)


_PIN_TYPE_CODES = {
    "0": ElectricalType.UNSPECIFIED,
    "1": ElectricalType.INPUT,
    "2": ElectricalType.OUTPUT,
    "3": ElectricalType.BIDIRECTIONAL,
    "4": ElectricalType.POWER_IN,
    "5": ElectricalType.POWER_OUT,
    "6": ElectricalType.OPEN_COLLECTOR,
    "7": ElectricalType.OPEN_EMITTER,
    "8": ElectricalType.PASSIVE,
    "9": ElectricalType.NO_CONNECT,
}


class LibraryCategory(Enum):
    RESISTORS = "Resistors"
    CAPACITORS = "Capacitors"
    INDUCTORS = "Inductors"
    DIODES = "Diodes"
    TRANSISTORS = "Transistors"
    ICS = "ICs"
    CONNECTORS = "Connectors"
    MISC = "Misc"


class ComponentClass(Enum):
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"
    IC = "ic"
    OTHER = "other"


class FootprintType(Enum):
    SMD = "smd"
    THT = "tht"


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


# ── Raw input ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RawComponentRecord:
    """One component as delivered by the fetch collaborator, never mutated."""
    name: str
    prefix: str = "U"
    package: Optional[str] = None
    manufacturer: Optional[str] = None
    product_url: Optional[str] = None
    datasheet_pdf: Optional[str] = None
    part_id: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    attributes: tuple[tuple[str, str], ...] = ()
    stock: Optional[int] = None
    price: Optional[float] = None
    min_order_qty: Optional[int] = None
    process: Optional[str] = None  # "SMT" or "THT"
    part_class: Optional[str] = None
    part_number: Optional[str] = None
    symbol_origin: Optional[Point] = None
    symbol_shapes: tuple[str, ...] = ()
    footprint_name: Optional[str] = None
    footprint_origin: Optional[Point] = None
    footprint_shapes: tuple[str, ...] = ()
    footprint_type: Optional[FootprintType] = None
    model_3d: Optional[str] = None  # raw SVGNODE descriptor line


# ── Parsed symbol shapes ─────────────────────────────────────────────────────

@dataclass
class ShapeStyle:
    stroke_color: str = ""
    stroke_width: float = 0.0
    stroke_style: str = ""
    fill_color: str = ""

    @property
    def filled(self) -> bool:
        return self.fill_color not in ("", "none")


@dataclass
class ParsedPin:
    number: str = ""
    name: str = ""
    electrical_type: ElectricalType = ElectricalType.UNSPECIFIED
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    has_inverted_bubble: bool = False
    has_clock_marker: bool = False
    pin_length: float = 100.0


@dataclass
class SymbolRect:
    x: float = 0.0
    y: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    width: float = 0.0
    height: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolCircle:
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolEllipse:
    cx: float = 0.0
    cy: float = 0.0
    radius_x: float = 0.0
    radius_y: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolArc:
    path: str = ""
    helper_dots: str = ""
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolPolyline:
    points: list[tuple[float, float]] = field(default_factory=list)
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolPolygon:
    points: list[tuple[float, float]] = field(default_factory=list)
    style: ShapeStyle = field(default_factory=ShapeStyle)


@dataclass
class SymbolPath:
    path: str = ""
    style: ShapeStyle = field(default_factory=ShapeStyle)


SymbolGraphic = Union[SymbolRect, SymbolCircle, SymbolEllipse, SymbolArc,
                      SymbolPolyline, SymbolPolygon, SymbolPath]


# ── Parsed footprint primitives ──────────────────────────────────────────────

@dataclass
class Pad:
    shape: str = "RECT"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    layer_id: int = 1
    net: str = ""
    number: str = ""
    hole_radius: float = 0.0
    points: str = ""
    rotation: float = 0.0
    id: str = ""
    hole_length: float = 0.0
    hole_point: str = ""
    plated: bool = False
    locked: bool = False


@dataclass
class Track:
    stroke_width: float = 0.0
    layer_id: int = 1
    net: str = ""
    points: list[tuple[float, float]] = field(default_factory=list)
    id: str = ""
    locked: bool = False


@dataclass
class Hole:
    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0
    id: str = ""
    locked: bool = False


@dataclass
class FootprintCircle:
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0
    stroke_width: float = 0.0
    layer_id: int = 1
    id: str = ""
    locked: bool = False


@dataclass
class FootprintArc:
    stroke_width: float = 0.0
    layer_id: int = 1
    net: str = ""
    path: str = ""
    helper_dots: str = ""
    id: str = ""
    locked: bool = False


@dataclass
class FootprintRect:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    stroke_width: float = 0.0
    id: str = ""
    layer_id: int = 1
    locked: bool = False


@dataclass
class Via:
    x: float = 0.0
    y: float = 0.0
    diameter: float = 0.0
    net: str = ""
    radius: float = 0.0
    id: str = ""
    locked: bool = False


@dataclass
class FootprintText:
    type: str = ""
    x: float = 0.0
    y: float = 0.0
    stroke_width: float = 0.0
    rotation: float = 0.0
    mirror: str = ""
    layer_id: int = 1
    net: str = ""
    font_size: float = 0.0
    text: str = ""
    text_path: str = ""
    displayed: bool = False
    id: str = ""
    locked: bool = False


@dataclass(frozen=True)
class Model3DRef:
    name: str
    uuid: str


@dataclass
class UnknownShape:
    """A shape line whose designator is outside the known set."""
    designator: str
    raw: str


FootprintPrimitive = Union[Pad, Track, Hole, FootprintCircle, FootprintArc,
                           FootprintRect, Via, FootprintText]


@dataclass
class ParsedSymbol:
    pins: list[ParsedPin] = field(default_factory=list)
    graphics: list[SymbolGraphic] = field(default_factory=list)
    unknown: list[UnknownShape] = field(default_factory=list)


@dataclass
class ParsedFootprint:
    pads: list[Pad] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    holes: list[Hole] = field(default_factory=list)
    circles: list[FootprintCircle] = field(default_factory=list)
    arcs: list[FootprintArc] = field(default_factory=list)
    rects: list[FootprintRect] = field(default_factory=list)
    vias: list[Via] = field(default_factory=list)
    texts: list[FootprintText] = field(default_factory=list)
    model_3d: Optional[Model3DRef] = None
    unknown: list[UnknownShape] = field(default_factory=list)


# ── Normalized component ─────────────────────────────────────────────────────

@dataclass
class ComponentInfo:
    name: str
    prefix: str = "U"
    package: Optional[str] = None
    manufacturer: Optional[str] = None
    product_url: Optional[str] = None
    datasheet_pdf: Optional[str] = None
    part_id: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)
    stock: Optional[int] = None
    price: Optional[float] = None
    min_order_qty: Optional[int] = None
    process: Optional[str] = None
    part_class: Optional[str] = None
    part_number: Optional[str] = None
    footprint_ref: Optional[str] = None  # "Library:Name" once resolved


@dataclass
class SymbolBlock:
    pins: list[ParsedPin] = field(default_factory=list)
    graphics: list[SymbolGraphic] = field(default_factory=list)
    origin: Point = field(default_factory=Point)


@dataclass
class FootprintBlock:
    name: str = "Unknown"
    type: FootprintType = FootprintType.SMD
    pads: list[Pad] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    holes: list[Hole] = field(default_factory=list)
    circles: list[FootprintCircle] = field(default_factory=list)
    arcs: list[FootprintArc] = field(default_factory=list)
    rects: list[FootprintRect] = field(default_factory=list)
    vias: list[Via] = field(default_factory=list)
    texts: list[FootprintText] = field(default_factory=list)
    origin: Point = field(default_factory=Point)


@dataclass
class NormalizedComponent:
    info: ComponentInfo
    symbol: SymbolBlock
    footprint: FootprintBlock
    category: LibraryCategory = LibraryCategory.MISC
    component_class: ComponentClass = ComponentClass.OTHER
    model_3d: Optional[Model3DRef] = None


# ── Results ──────────────────────────────────────────────────────────────────

@dataclass
class FootprintResult:
    """Either a reference to a KiCad standard footprint or generated content."""
    kind: str  # "reference" or "generated"
    name: str
    reference: Optional[str] = None
    content: Optional[str] = None


@dataclass
class TableUpdateResult:
    path: str = ""
    created: bool = False
    modified: bool = False
    rows_added: int = 0


@dataclass
class RegistrationResult:
    success: bool
    version: str
    sym_lib_table: TableUpdateResult = field(default_factory=TableUpdateResult)
    fp_lib_table: TableUpdateResult = field(default_factory=TableUpdateResult)
    symbols_created: list[str] = field(default_factory=list)
    directories_created: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    """Result of processing a component through the full pipeline."""
    status: str  # "success", "partial", "error"
    name: Optional[str] = None
    category: Optional[LibraryCategory] = None
    symbol_name: Optional[str] = None
    symbol_library: Optional[str] = None
    symbol_action: Optional[str] = None  # "created", "appended", "replaced", "exists"
    footprint_ref: Optional[str] = None
    footprint_file: Optional[str] = None
    has_3d_model: bool = False
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
