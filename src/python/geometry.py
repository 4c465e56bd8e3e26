"""Geometry transform from the service's 10 mil grid to KiCad millimetres.

Source y grows downward, KiCad y grows upward for symbols, so every point is
flipped after origin subtraction: target = ((x - ox) * 0.254, -(y - oy) * 0.254).
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from models import Pad, Point

EE_TO_MM = 0.254

FOOTPRINT_PRECISION = 4
SYMBOL_PRECISION = 3
OUTLINE_PRECISION = 2

_PATH_TOKEN_RE = re.compile(r'[MLHVAZmlhvaz]|[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def round_half_away(value: float, places: int) -> float:
    """Round to `places` decimals, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    result = float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    return result + 0.0  # folds -0.0 into 0.0


def to_mm(length: float, places: int = FOOTPRINT_PRECISION) -> float:
    """Convert a length (no origin, no flip)."""
    return round_half_away(length * EE_TO_MM, places)


def transform_point(x: float, y: float, origin: Optional[Point] = None,
                    places: int = FOOTPRINT_PRECISION) -> tuple[float, float]:
    ox = origin.x if origin else 0.0
    oy = origin.y if origin else 0.0
    return (round_half_away((x - ox) * EE_TO_MM, places),
            round_half_away(-(y - oy) * EE_TO_MM, places))


def transform_points(points: Iterable[tuple[float, float]], origin: Optional[Point] = None,
                     places: int = SYMBOL_PRECISION) -> list[tuple[float, float]]:
    return [transform_point(x, y, origin, places) for x, y in points]


@dataclass
class BoundingBox:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def expanded(self, margin: float, places: int = OUTLINE_PRECISION) -> "BoundingBox":
        return BoundingBox(
            min_x=round_half_away(self.min_x - margin, places),
            max_x=round_half_away(self.max_x + margin, places),
            min_y=round_half_away(self.min_y - margin, places),
            max_y=round_half_away(self.max_y + margin, places),
        )


EMPTY_BOUNDS = BoundingBox(-1.0, 1.0, -1.0, 1.0)


def pad_bounds(pads: Iterable[Pad], origin: Optional[Point] = None) -> BoundingBox:
    """Smallest box covering every transformed pad centre +/- half its size."""
    ox = origin.x if origin else 0.0
    oy = origin.y if origin else 0.0
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for pad in pads:
        x = (pad.x - ox) * EE_TO_MM
        y = -(pad.y - oy) * EE_TO_MM
        hw = pad.width * EE_TO_MM / 2
        hh = pad.height * EE_TO_MM / 2
        min_x = min(min_x, x - hw)
        max_x = max(max_x, x + hw)
        min_y = min(min_y, y - hh)
        max_y = max(max_y, y + hh)

    if not math.isfinite(min_x):
        return BoundingBox(EMPTY_BOUNDS.min_x, EMPTY_BOUNDS.max_x,
                           EMPTY_BOUNDS.min_y, EMPTY_BOUNDS.max_y)
    return BoundingBox(min_x, max_x, min_y, max_y)


# ── SVG paths ────────────────────────────────────────────────────────────────

def arc_midpoint(x1: float, y1: float, rx: float, ry: float, phi_deg: float,
                 large_arc: bool, sweep: bool, x2: float, y2: float) -> tuple[float, float]:
    """Point halfway along an SVG elliptical arc, via endpoint-to-centre conversion."""
    if rx == 0 or ry == 0 or (x1 == x2 and y1 == y2):
        return ((x1 + x2) / 2, (y1 + y2) / 2)

    phi = math.radians(phi_deg)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx, dy = (x1 - x2) / 2, (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    rx, ry = abs(rx), abs(ry)
    scale = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if scale > 1:
        rx *= math.sqrt(scale)
        ry *= math.sqrt(scale)

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    delta = theta2 - theta1
    if sweep and delta < 0:
        delta += 2 * math.pi
    elif not sweep and delta > 0:
        delta -= 2 * math.pi

    mid = theta1 + delta / 2
    mx, my = rx * math.cos(mid), ry * math.sin(mid)
    return (cos_phi * mx - sin_phi * my + cx, sin_phi * mx + cos_phi * my + cy)


def parse_arc_path(path: str) -> Optional[tuple[tuple[float, float], ...]]:
    """Start, mid and end points of an "M x y A rx ry rot large sweep x y" path."""
    tokens = _PATH_TOKEN_RE.findall(path or "")
    try:
        m = tokens.index("M") if "M" in tokens else tokens.index("m")
        a = tokens.index("A") if "A" in tokens else tokens.index("a")
        x1, y1 = float(tokens[m + 1]), float(tokens[m + 2])
        rx, ry, rot, large, sweep, x2, y2 = (float(t) for t in tokens[a + 1:a + 8])
    except (ValueError, IndexError):
        return None
    if tokens[a] == "a":
        x2, y2 = x1 + x2, y1 + y2
    mid = arc_midpoint(x1, y1, rx, ry, rot, bool(large), bool(sweep), x2, y2)
    return ((x1, y1), mid, (x2, y2))


def path_to_points(path: str) -> list[tuple[float, float]]:
    """Flatten an SVG path into the vertices it visits.

    Handles M, L, H, V, A and Z in absolute and relative form. Arcs
    contribute their midpoint and end point.
    """
    tokens = _PATH_TOKEN_RE.findall(path or "")
    points: list[tuple[float, float]] = []
    x = y = 0.0
    start: Optional[tuple[float, float]] = None
    cmd = None
    i = 0

    def take(n):
        nonlocal i
        values = [float(t) for t in tokens[i:i + n]]
        if len(values) != n:
            raise ValueError("truncated path")
        i += n
        return values

    try:
        while i < len(tokens):
            if tokens[i].isalpha():
                cmd = tokens[i]
                i += 1
                if cmd in "Zz":
                    if start is not None:
                        points.append(start)
                        x, y = start
                    continue
            if cmd is None:
                break
            rel = cmd.islower()
            op = cmd.upper()
            if op in ("M", "L"):
                nx, ny = take(2)
                x, y = (x + nx, y + ny) if rel else (nx, ny)
                if op == "M":
                    start = (x, y)
                    cmd = "l" if rel else "L"
            elif op == "H":
                (nx,) = take(1)
                x = x + nx if rel else nx
            elif op == "V":
                (ny,) = take(1)
                y = y + ny if rel else ny
            elif op == "A":
                rx, ry, rot, large, sweep, nx, ny = take(7)
                ex, ey = (x + nx, y + ny) if rel else (nx, ny)
                points.append(arc_midpoint(x, y, rx, ry, rot, bool(large), bool(sweep), ex, ey))
                x, y = ex, ey
            else:
                break
            points.append((x, y))
    except ValueError:
        pass
    return points
