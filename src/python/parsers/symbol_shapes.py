"""Symbol shape parser.

Pin lines are split into "^^" segments:

    P~show~type~number~x~y~rotation~id~locked      segment 0, identity
    ^^dot_x~dot_y                                  segment 1
    ^^M 360 290 h -10~#880000                      segment 2, pin path
    ^^show~x~y~rot~NAME~anchor~font~size~color     segment 3, name
    ^^show~x~y~rot~NUMBER~...                      segment 4, number
    ^^show~cx~cy                                   segment 5, inverted bubble
    ^^show~path                                    segment 6, clock marker
"""

import re
from enum import Enum

from models import (
    ElectricalType, ParsedPin, ShapeStyle, SymbolArc, SymbolCircle,
    SymbolEllipse, SymbolPath, SymbolPolygon, SymbolPolyline, SymbolRect,
)
from parsers.base import BaseShapeParser, SEGMENT_SEPARATOR, ShapeFields

DEFAULT_PIN_LENGTH = 100.0

_PIN_LENGTH_RE = re.compile(r'[hv]\s*([+-]?(?:\d+\.?\d*|\.\d+))', re.IGNORECASE)


class SymbolDesignator(Enum):
    PIN = "P"
    RECT = "R"
    CIRCLE = "C"
    ELLIPSE = "E"
    ARC = "A"
    POLYLINE = "PL"
    POLYGON = "PG"
    PATH = "PT"
    TEXT = "T"


def pin_length_from_path(path: str) -> float:
    """Length of a pin from its drawing path, e.g. "M 360 290 h -10" -> 10."""
    m = _PIN_LENGTH_RE.search(path)
    if not m:
        return DEFAULT_PIN_LENGTH
    return abs(float(m.group(1)))


def _segment(segments: list[str], index: int) -> ShapeFields:
    if index < len(segments):
        return ShapeFields.split(segments[index])
    return ShapeFields([])


def _style(f: ShapeFields, start: int) -> ShapeStyle:
    """Read stroke_color~stroke_width~stroke_style~fill_color from `start`."""
    return ShapeStyle(
        stroke_color=f.text(start),
        stroke_width=f.number(start + 1),
        stroke_style=f.text(start + 2),
        fill_color=f.text(start + 3),
    )


class SymbolShapeParser(BaseShapeParser):

    designator_type = SymbolDesignator
    document_kind = "symbol"

    def handlers(self):
        return {
            SymbolDesignator.PIN: self.parse_pin,
            SymbolDesignator.RECT: self.parse_rect,
            SymbolDesignator.CIRCLE: self.parse_circle,
            SymbolDesignator.ELLIPSE: self.parse_ellipse,
            SymbolDesignator.ARC: self.parse_arc,
            SymbolDesignator.POLYLINE: self.parse_polyline,
            SymbolDesignator.POLYGON: self.parse_polygon,
            SymbolDesignator.PATH: self.parse_path,
            SymbolDesignator.TEXT: None,
        }

    def parse_pin(self, line: str) -> ParsedPin:
        segments = line.split(SEGMENT_SEPARATOR)
        settings = _segment(segments, 0)
        path = _segment(segments, 2).text(0)
        label = _segment(segments, 3)

        return ParsedPin(
            number=settings.text(3),
            name=label.text(4),
            electrical_type=ElectricalType.from_code(settings.text(2, "0")),
            x=settings.number(4),
            y=settings.number(5),
            rotation=settings.number(6),
            has_inverted_bubble=_segment(segments, 5).flag(0),
            has_clock_marker=_segment(segments, 6).flag(0),
            pin_length=pin_length_from_path(path),
        )

    def parse_rect(self, line: str) -> SymbolRect:
        f = ShapeFields.split(line)
        return SymbolRect(
            x=f.number(1), y=f.number(2),
            rx=f.number(3), ry=f.number(4),
            width=f.number(5), height=f.number(6),
            style=_style(f, 7),
        )

    def parse_circle(self, line: str) -> SymbolCircle:
        f = ShapeFields.split(line)
        return SymbolCircle(cx=f.number(1), cy=f.number(2), radius=f.number(3),
                            style=_style(f, 4))

    def parse_ellipse(self, line: str) -> SymbolEllipse:
        f = ShapeFields.split(line)
        return SymbolEllipse(cx=f.number(1), cy=f.number(2),
                             radius_x=f.number(3), radius_y=f.number(4),
                             style=_style(f, 5))

    def parse_arc(self, line: str) -> SymbolArc:
        f = ShapeFields.split(line)
        return SymbolArc(path=f.text(1), helper_dots=f.text(2), style=_style(f, 3))

    def parse_polyline(self, line: str) -> SymbolPolyline:
        f = ShapeFields.split(line)
        return SymbolPolyline(points=f.points(1), style=_style(f, 2))

    def parse_polygon(self, line: str) -> SymbolPolygon:
        f = ShapeFields.split(line)
        return SymbolPolygon(points=f.points(1), style=_style(f, 2))

    def parse_path(self, line: str) -> SymbolPath:
        f = ShapeFields.split(line)
        return SymbolPath(path=f.text(1), style=_style(f, 2))
