"""Footprint shape parser.

Field layouts follow the service's footprint document; index 0 is always
the designator.
"""

import json
from enum import Enum
from typing import Optional

from models import (
    FootprintArc, FootprintCircle, FootprintRect, FootprintText, Hole,
    Model3DRef, Pad, Track, Via,
)
from parsers.base import BaseShapeParser, FIELD_SEPARATOR, ShapeFields


class FootprintDesignator(Enum):
    PAD = "PAD"
    TRACK = "TRACK"
    HOLE = "HOLE"
    CIRCLE = "CIRCLE"
    ARC = "ARC"
    RECT = "RECT"
    VIA = "VIA"
    TEXT = "TEXT"
    SVGNODE = "SVGNODE"
    SOLIDREGION = "SOLIDREGION"


def parse_model_descriptor(line: str) -> Optional[Model3DRef]:
    """Extract the 3D model reference from an SVGNODE line's JSON payload."""
    payload = line.split(FIELD_SEPARATOR)[1]
    data = json.loads(payload)
    attrs = data.get("attrs") or {}
    uuid = attrs.get("uuid")
    if not uuid:
        return None
    return Model3DRef(name=attrs.get("title") or "3D Model", uuid=uuid)


class FootprintShapeParser(BaseShapeParser):

    designator_type = FootprintDesignator
    document_kind = "footprint"

    def handlers(self):
        return {
            FootprintDesignator.PAD: self.parse_pad,
            FootprintDesignator.TRACK: self.parse_track,
            FootprintDesignator.HOLE: self.parse_hole,
            FootprintDesignator.CIRCLE: self.parse_circle,
            FootprintDesignator.ARC: self.parse_arc,
            FootprintDesignator.RECT: self.parse_rect,
            FootprintDesignator.VIA: self.parse_via,
            FootprintDesignator.TEXT: self.parse_text,
            FootprintDesignator.SVGNODE: parse_model_descriptor,
            # Filled copper regions are not converted
            FootprintDesignator.SOLIDREGION: None,
        }

    def parse_pad(self, line: str) -> Pad:
        f = ShapeFields.split(line)
        return Pad(
            shape=f.text(1, "RECT"),
            x=f.number(2),
            y=f.number(3),
            width=f.number(4),
            height=f.number(5),
            layer_id=f.integer(6, 1),
            net=f.text(7),
            number=f.text(8),
            hole_radius=f.number(9),
            points=f.text(10),
            rotation=f.number(11),
            id=f.text(12),
            hole_length=f.number(13),
            hole_point=f.text(14),
            plated=f.flag(15),
            locked=f.flag(16),
        )

    def parse_track(self, line: str) -> Track:
        f = ShapeFields.split(line)
        return Track(
            stroke_width=f.number(1),
            layer_id=f.integer(2, 1),
            net=f.text(3),
            points=f.points(4),
            id=f.text(5),
            locked=f.flag(6),
        )

    def parse_hole(self, line: str) -> Hole:
        f = ShapeFields.split(line)
        return Hole(x=f.number(1), y=f.number(2), radius=f.number(3),
                    id=f.text(4), locked=f.flag(5))

    def parse_circle(self, line: str) -> FootprintCircle:
        f = ShapeFields.split(line)
        return FootprintCircle(
            cx=f.number(1), cy=f.number(2), radius=f.number(3),
            stroke_width=f.number(4), layer_id=f.integer(5, 1),
            id=f.text(6), locked=f.flag(7),
        )

    def parse_arc(self, line: str) -> FootprintArc:
        f = ShapeFields.split(line)
        return FootprintArc(
            stroke_width=f.number(1), layer_id=f.integer(2, 1), net=f.text(3),
            path=f.text(4), helper_dots=f.text(5), id=f.text(6), locked=f.flag(7),
        )

    def parse_rect(self, line: str) -> FootprintRect:
        f = ShapeFields.split(line)
        return FootprintRect(
            x=f.number(1), y=f.number(2), width=f.number(3), height=f.number(4),
            stroke_width=f.number(5), id=f.text(6), layer_id=f.integer(7, 1),
            locked=f.flag(8),
        )

    def parse_via(self, line: str) -> Via:
        f = ShapeFields.split(line)
        return Via(
            x=f.number(1), y=f.number(2), diameter=f.number(3), net=f.text(4),
            radius=f.number(5), id=f.text(6), locked=f.flag(7),
        )

    def parse_text(self, line: str) -> FootprintText:
        f = ShapeFields.split(line)
        return FootprintText(
            type=f.text(1),
            x=f.number(2),
            y=f.number(3),
            stroke_width=f.number(4),
            rotation=f.number(5),
            mirror=f.text(6),
            layer_id=f.integer(7, 1),
            net=f.text(8),
            font_size=f.number(9),
            text=f.text(10),
            text_path=f.text(11),
            displayed=f.flag(12),
            id=f.text(13),
            locked=f.flag(14),
        )
