"""Builders for shape lines and components used across the tests."""

from models import (
    ComponentInfo, FootprintBlock, FootprintType, NormalizedComponent,
    ParsedPin, Point, SymbolBlock,
)
from category_router import get_library_category
from value_normalizer import detect_component_class


def make_pin_line(number, x, y, name="", type_code="0", rotation=0, length=10,
                  bubble=False, clock=False):
    """A symbol pin shape line in the service's `^^`-segmented format."""
    return (f"P~show~{type_code}~{number}~{x}~{y}~{rotation}~gge{number}~0"
            f"^^{x}~{y}"
            f"^^M {x} {y} h {length}~#880000"
            f"^^1~{x + 3}~{y + 4}~0~{name}~start~~~#0000FF"
            f"^^1~{x + 5}~{y - 1}~0~{number}~end~~~#0000FF"
            f"^^{1 if bubble else 0}~{x - 3}~{y}"
            f"^^{1 if clock else 0}~M {x} {y} L {x - 3} {y - 3}")


def make_pad_line(number, x, y, width=2.3622, height=2.3622, shape="RECT",
                  hole_radius=0, rotation=0, layer=1):
    return (f"PAD~{shape}~{x}~{y}~{width}~{height}~{layer}~~{number}~{hole_radius}"
            f"~~{rotation}~gge{number}~0~~Y~0")


def make_component(name="TEST", prefix="U", pin_count=0, pads=None, category=None,
                   description=None, footprint_name="CUSTOM-PKG",
                   footprint_type=FootprintType.SMD, **info):
    """Build a NormalizedComponent directly, bypassing record decoding."""
    pins = [ParsedPin(number=str(i + 1), name=f"P{i + 1}", x=i * 10, y=0)
            for i in range(pin_count)]
    return NormalizedComponent(
        info=ComponentInfo(name=name, prefix=prefix, category=category,
                           description=description, **info),
        symbol=SymbolBlock(pins=pins, origin=Point(0, 0)),
        footprint=FootprintBlock(name=footprint_name, type=footprint_type,
                                 pads=list(pads or []), origin=Point(0, 0)),
        category=get_library_category(prefix, category, description),
        component_class=detect_component_class(prefix, category),
    )


