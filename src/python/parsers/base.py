"""Base shape parser with common field helpers."""

import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from models import UnknownShape

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "~"
SEGMENT_SEPARATOR = "^^"


def parse_bool(value: Optional[str]) -> bool:
    """Shape-line boolean: empty string or "0" is false, anything else true."""
    return value is not None and value != "" and value != "0"


class ShapeFields:
    """Positional access to the fields of one shape line.

    Missing or unparseable trailing fields fall back to defaults: numbers to
    0, strings to "", flags to False.
    """

    def __init__(self, fields: list[str]):
        self.fields = fields

    @classmethod
    def split(cls, text: str, sep: str = FIELD_SEPARATOR) -> "ShapeFields":
        return cls(text.split(sep))

    def __len__(self) -> int:
        return len(self.fields)

    def text(self, index: int, default: str = "") -> str:
        if index < len(self.fields) and self.fields[index] != "":
            return self.fields[index]
        return default

    def number(self, index: int, default: float = 0.0) -> float:
        raw = self.text(index)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            return default
        if not math.isfinite(value):
            return default
        return value

    def integer(self, index: int, default: int = 0) -> int:
        value = self.number(index, float(default))
        return int(value) if value else default

    def flag(self, index: int) -> bool:
        return parse_bool(self.text(index))

    def points(self, index: int) -> list[tuple[float, float]]:
        return parse_points(self.text(index))


def parse_points(text: str) -> list[tuple[float, float]]:
    """Parse "x1 y1 x2 y2 ..." into coordinate pairs, dropping bad tokens."""
    values = []
    for token in text.replace(",", " ").split():
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)
    return [(values[i], values[i + 1]) for i in range(0, len(values) - 1, 2)]


class BaseShapeParser(ABC):
    """Dispatches shape lines by designator over a closed enum.

    Subclasses name the enum and map each member to a handler; a member
    mapped to None is recognized but deliberately discarded.
    """

    designator_type: type[Enum]
    document_kind: str = "shape"

    @abstractmethod
    def handlers(self) -> dict[Enum, Optional[Callable[[str], Any]]]:
        ...

    def parse_line(self, line: str) -> Any:
        """Parse one shape line.

        Returns the typed record, an UnknownShape for an unrecognized
        designator, or None when the line is discarded or malformed.
        Never raises.
        """
        if not isinstance(line, str) or not line:
            logger.debug("Skipping empty or non-text %s line: %r", self.document_kind, line)
            return None

        designator = line.split(FIELD_SEPARATOR, 1)[0]
        try:
            kind = self.designator_type(designator)
        except ValueError:
            logger.debug("Unknown %s shape type: %s", self.document_kind, designator)
            return UnknownShape(designator=designator, raw=line)

        handler = self.handlers().get(kind)
        if handler is None:
            return None
        try:
            return handler(line)
        except (ValueError, IndexError, TypeError, KeyError, AttributeError) as e:
            logger.debug("Malformed %s %s record skipped: %s", self.document_kind, designator, e)
            return None
