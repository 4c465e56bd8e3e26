"""Shape parsers — decode service shape lines into typed records."""

from collections.abc import Iterable

from models import (
    FootprintArc, FootprintCircle, FootprintRect, FootprintText, Hole,
    Model3DRef, Pad, ParsedFootprint, ParsedPin, ParsedSymbol, Track,
    UnknownShape, Via,
)
from parsers.base import BaseShapeParser, ShapeFields, parse_bool
from parsers.symbol_shapes import SymbolShapeParser
from parsers.footprint_shapes import FootprintShapeParser

__all__ = [
    "BaseShapeParser", "ShapeFields", "parse_bool",
    "SymbolShapeParser", "FootprintShapeParser",
    "parse_symbol_shapes", "parse_footprint_shapes",
]

_FOOTPRINT_BUCKETS: dict[type, str] = {
    Pad: "pads",
    Track: "tracks",
    Hole: "holes",
    FootprintCircle: "circles",
    FootprintArc: "arcs",
    FootprintRect: "rects",
    Via: "vias",
    FootprintText: "texts",
}


def parse_symbol_shapes(lines: Iterable[str]) -> ParsedSymbol:
    """Parse a symbol document's shape list into pins and graphics."""
    parser = SymbolShapeParser()
    result = ParsedSymbol()
    for line in lines:
        record = parser.parse_line(line)
        if record is None:
            continue
        if isinstance(record, ParsedPin):
            result.pins.append(record)
        elif isinstance(record, UnknownShape):
            result.unknown.append(record)
        else:
            result.graphics.append(record)
    return result


def parse_footprint_shapes(lines: Iterable[str]) -> ParsedFootprint:
    """Parse a footprint document's shape list, bucketing primitives by type."""
    parser = FootprintShapeParser()
    result = ParsedFootprint()
    for line in lines:
        record = parser.parse_line(line)
        if record is None:
            continue
        if isinstance(record, UnknownShape):
            result.unknown.append(record)
        elif isinstance(record, Model3DRef):
            result.model_3d = record
        else:
            getattr(result, _FOOTPRINT_BUCKETS[type(record)]).append(record)
    return result
