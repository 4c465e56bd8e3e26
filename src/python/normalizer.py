"""Normalizer — turns service records into NormalizedComponent.

Handles:
- Decoding the service's JSON `result` object into a RawComponentRecord
- Parsing symbol and footprint shape lists
- Routing to a category library and detecting the component class
- Defaulting missing document origins
"""

import json
import logging
import math
from typing import Any, Optional

from category_router import get_library_category
from models import (
    ComponentInfo, FootprintBlock, FootprintType, Model3DRef, NormalizedComponent,
    Point, RawComponentRecord, SymbolBlock,
)
from parsers import FootprintShapeParser, parse_footprint_shapes, parse_symbol_shapes
from value_normalizer import detect_component_class

logger = logging.getLogger(__name__)

BOM_PREFIX = "BOM_"
# c_para keys that already have a dedicated field
_RESERVED_BOM_KEYS = ("Manufacturer", "JLCPCB Part Class")


def _number(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _integer(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


def _origin(head: dict) -> Optional[Point]:
    x, y = _number(head.get("x")), _number(head.get("y"))
    if x is None or y is None:
        return None
    return Point(x, y)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def record_from_api_result(result: dict, part_id: Optional[str] = None) -> RawComponentRecord:
    """Decode the service's `result` object (dataStr, packageDetail, lcsc)."""
    data_str = result.get("dataStr") or {}
    head = data_str.get("head") or {}
    c_para = head.get("c_para") or {}
    package_detail = result.get("packageDetail") or {}
    fp_data = package_detail.get("dataStr") or {}
    fp_head = fp_data.get("head") or {}
    fp_c_para = fp_head.get("c_para") or {}
    lcsc = result.get("lcsc") or {}

    attributes = []
    for key, value in c_para.items():
        if not key.startswith(BOM_PREFIX) or not isinstance(value, str) or not value:
            continue
        clean_key = key[len(BOM_PREFIX):]
        if clean_key not in _RESERVED_BOM_KEYS:
            attributes.append((clean_key, value))

    footprint_shapes = tuple(fp_data.get("shape") or ())
    model_line = next((line for line in footprint_shapes
                       if isinstance(line, str) and line.startswith("SVGNODE~")), None)

    smt = result.get("SMT")
    if smt is None:
        footprint_type = None
    elif smt and "-TH_" not in (package_detail.get("title") or ""):
        footprint_type = FootprintType.SMD
    else:
        footprint_type = FootprintType.THT

    resolved_id = _text(lcsc.get("number")) or part_id
    return RawComponentRecord(
        name=_text(c_para.get("name")) or resolved_id or "Unknown",
        prefix=_text(c_para.get("pre")) or "U",
        package=_text(c_para.get("package")) or _text(fp_c_para.get("package")),
        manufacturer=_text(c_para.get("BOM_Manufacturer")) or _text(c_para.get("Manufacturer")),
        product_url=_text(lcsc.get("url")),
        datasheet_pdf=_text(result.get("datasheetPdf")),
        part_id=resolved_id,
        description=_text(result.get("title")) or _text(c_para.get("name")),
        category=_text(result.get("category")),
        attributes=tuple(attributes),
        stock=_integer(lcsc.get("stock")),
        price=_number(lcsc.get("price")),
        min_order_qty=_integer(lcsc.get("min")),
        process=None if smt is None else ("SMT" if smt else "THT"),
        part_class=_text(c_para.get("JLCPCB Part Class")) or _text(c_para.get("BOM_JLCPCB Part Class")),
        part_number=_text(c_para.get("Manufacturer Part")),
        symbol_origin=_origin(head),
        symbol_shapes=tuple(data_str.get("shape") or ()),
        footprint_name=_text(fp_c_para.get("package")),
        footprint_origin=_origin(fp_head),
        footprint_shapes=footprint_shapes,
        footprint_type=footprint_type,
        model_3d=model_line,
    )


def load_record(path: str, part_id: Optional[str] = None) -> RawComponentRecord:
    """Read a saved service response; accepts the envelope or the bare `result`."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get("result"), dict):
        data = data["result"]
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a component record")
    return record_from_api_result(data, part_id)


def _model_ref(record: RawComponentRecord, parsed: Optional[Model3DRef]) -> Optional[Model3DRef]:
    if parsed is not None or not record.model_3d:
        return parsed
    ref = FootprintShapeParser().parse_line(record.model_3d)
    return ref if isinstance(ref, Model3DRef) else None


def normalize_component(record: RawComponentRecord) -> NormalizedComponent:
    """Parse, categorize and package a record for the generators.

    Coordinates stay in source units next to their origin; the generators
    transform them on output.
    """
    symbol = parse_symbol_shapes(record.symbol_shapes)
    footprint = parse_footprint_shapes(record.footprint_shapes)
    for shape in symbol.unknown + footprint.unknown:
        logger.debug("%s: ignoring unknown shape %s", record.name, shape.designator)

    symbol_origin = record.symbol_origin
    if symbol_origin is None:
        logger.warning("%s: symbol origin missing, using (0, 0)", record.name)
        symbol_origin = Point()
    footprint_origin = record.footprint_origin
    if footprint_origin is None:
        logger.warning("%s: footprint origin missing, using (0, 0)", record.name)
        footprint_origin = Point()

    footprint_type = record.footprint_type
    if footprint_type is None:
        has_holes = any(pad.hole_radius > 0 for pad in footprint.pads)
        footprint_type = FootprintType.THT if has_holes else FootprintType.SMD

    info = ComponentInfo(
        name=record.name,
        prefix=record.prefix,
        package=record.package,
        manufacturer=record.manufacturer,
        product_url=record.product_url,
        datasheet_pdf=record.datasheet_pdf,
        part_id=record.part_id,
        description=record.description,
        category=record.category,
        attributes=dict(record.attributes),
        stock=record.stock,
        price=record.price,
        min_order_qty=record.min_order_qty,
        process=record.process,
        part_class=record.part_class,
        part_number=record.part_number,
    )

    return NormalizedComponent(
        info=info,
        symbol=SymbolBlock(pins=symbol.pins, graphics=symbol.graphics, origin=symbol_origin),
        footprint=FootprintBlock(
            name=record.footprint_name or record.package or "Unknown",
            type=footprint_type,
            pads=footprint.pads,
            tracks=footprint.tracks,
            holes=footprint.holes,
            circles=footprint.circles,
            arcs=footprint.arcs,
            rects=footprint.rects,
            vias=footprint.vias,
            texts=footprint.texts,
            origin=footprint_origin,
        ),
        category=get_library_category(record.prefix, record.category, record.description),
        component_class=detect_component_class(record.prefix, record.category),
        model_3d=_model_ref(record, footprint.model_3d),
    )
