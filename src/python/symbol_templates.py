"""Fixed vertical symbol layouts for two-terminal passives (R, C, L, D).

Pin 1 sits above the body pointing down, pin 2 below pointing up; a third
pin, when present, enters from the right.
"""

from dataclasses import dataclass

from models import LibraryCategory


@dataclass(frozen=True)
class SymbolTemplate:
    prefix: str
    body: str                   # graphics of the "<name>_0_1" unit
    pin_offset: float           # |y| of pins 1 and 2, x of pin 3
    pin_length: float
    reference_at: tuple[float, float, float]
    value_at: tuple[float, float, float]
    pin_slots: int = 3

    def pin_positions(self) -> list[tuple[float, float, float]]:
        """(x, y, rotation) for each pin slot in order."""
        h = self.pin_offset
        return [(0.0, h, 270.0), (0.0, -h, 90.0), (h, 0.0, 180.0)][:self.pin_slots]


def _stroke(width: float) -> str:
    return (f"\t\t\t\t(stroke\n\t\t\t\t\t(width {width})\n\t\t\t\t\t(type default)\n\t\t\t\t)\n"
            "\t\t\t\t(fill\n\t\t\t\t\t(type none)\n\t\t\t\t)\n")


def _polyline(points: list[tuple[float, float]], width: float) -> str:
    xy = " ".join(f"(xy {x} {y})" for x, y in points)
    return f"\t\t\t(polyline\n\t\t\t\t(pts {xy})\n{_stroke(width)}\t\t\t)\n"


def _arc(start, mid, end, width: float) -> str:
    return (f"\t\t\t(arc\n\t\t\t\t(start {start[0]} {start[1]})\n"
            f"\t\t\t\t(mid {mid[0]} {mid[1]})\n\t\t\t\t(end {end[0]} {end[1]})\n"
            f"{_stroke(width)}\t\t\t)\n")


RESISTOR = SymbolTemplate(
    prefix="R",
    body=(f"\t\t\t(rectangle\n\t\t\t\t(start -1.016 -2.54)\n\t\t\t\t(end 1.016 2.54)\n"
          f"{_stroke(0.254)}\t\t\t)\n"),
    pin_offset=3.81,
    pin_length=1.27,
    reference_at=(2.032, 0, 90),
    value_at=(0, 0, 90),
)

CAPACITOR = SymbolTemplate(
    prefix="C",
    body=(_polyline([(-2.032, -0.762), (2.032, -0.762)], 0.508)
          + _polyline([(-2.032, 0.762), (2.032, 0.762)], 0.508)),
    pin_offset=3.81,
    pin_length=3.048,
    reference_at=(0.635, 2.54, 0),
    value_at=(0.635, -2.54, 0),
)

INDUCTOR = SymbolTemplate(
    prefix="L",
    body=(_arc((0, -2.54), (0.6323, -1.905), (0, -1.27), 0)
          + _arc((0, -1.27), (0.6323, -0.635), (0, 0), 0)
          + _arc((0, 0), (0.6323, 0.635), (0, 1.27), 0)
          + _arc((0, 1.27), (0.6323, 1.905), (0, 2.54), 0)),
    pin_offset=3.81,
    pin_length=1.27,
    reference_at=(-1.27, 0, 90),
    value_at=(1.905, 0, 90),
)

DIODE = SymbolTemplate(
    prefix="D",
    body=(_polyline([(-1.27, 1.27), (1.27, 1.27)], 0.254)
          + _polyline([(-1.27, -1.27), (1.27, -1.27), (0, 1.27), (-1.27, -1.27)], 0.254)),
    pin_offset=3.81,
    pin_length=2.54,
    reference_at=(2.54, 0, 90),
    value_at=(-2.54, 0, 90),
)

_TEMPLATES = {t.prefix: t for t in (RESISTOR, CAPACITOR, INDUCTOR, DIODE)}

# Routed categories that fall back to a passive template when the prefix has none
_CATEGORY_TEMPLATES = {
    LibraryCategory.RESISTORS: RESISTOR,
    LibraryCategory.CAPACITORS: CAPACITOR,
    LibraryCategory.INDUCTORS: INDUCTOR,
    LibraryCategory.DIODES: DIODE,
}


def get_symbol_template(prefix: str | None) -> SymbolTemplate | None:
    return _TEMPLATES.get((prefix or "").strip().rstrip("?").upper())


def template_for(prefix: str | None, category: LibraryCategory | None) -> SymbolTemplate | None:
    """Template by prefix, else by routed category, else None (IC layout)."""
    template = get_symbol_template(prefix)
    if template is None and category is not None:
        template = _CATEGORY_TEMPLATES.get(category)
    return template
