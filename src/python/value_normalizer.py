"""Value normalizer — short display values ("16k", "100n/50V") for passives."""

import re

from models import ComponentClass

_PREFIX_CLASSES = {
    "R": ComponentClass.RESISTOR,
    "C": ComponentClass.CAPACITOR,
    "L": ComponentClass.INDUCTOR,
    "FB": ComponentClass.INDUCTOR,
    "U": ComponentClass.IC,
}

_CLASS_KEYWORDS = [
    (re.compile(r'resistor', re.IGNORECASE), ComponentClass.RESISTOR),
    (re.compile(r'capacitor', re.IGNORECASE), ComponentClass.CAPACITOR),
    (re.compile(r'inductor|ferrite', re.IGNORECASE), ComponentClass.INDUCTOR),
    (re.compile(r'\bics?\b|microcontroller|mcu|amplifier|regulator', re.IGNORECASE),
     ComponentClass.IC),
]

_NUMBER = r'(\d+(?:\.\d+)?)'

# 16kΩ, 4.7 kohm, 100R
_RESISTANCE_RE = re.compile(_NUMBER + r'\s*([kKmMG]?)\s*(?:\u03a9|\u2126|(?i:ohms?)|R(?![A-Za-z]))')
# 100nF, 4.7µF
_CAPACITANCE_RE = re.compile(_NUMBER + r'\s*([pnuµμm])F')
# 10uH, 2.2 mH
_INDUCTANCE_RE = re.compile(_NUMBER + r'\s*([pnuµμm]?)H\b')
# 50V
_VOLTAGE_RE = re.compile(_NUMBER + r'\s*V\b')

PASSIVE_CLASSES = (ComponentClass.RESISTOR, ComponentClass.CAPACITOR, ComponentClass.INDUCTOR)


def _micro(multiplier: str) -> str:
    return "u" if multiplier in ("µ", "μ") else multiplier


def detect_component_class(prefix: str | None, category: str | None = None) -> ComponentClass:
    """Classify by reference prefix first, then by category keywords."""
    normalized = (prefix or "").strip().rstrip("?").upper()
    if normalized in _PREFIX_CLASSES:
        return _PREFIX_CLASSES[normalized]
    if category:
        for pattern, cls in _CLASS_KEYWORDS:
            if pattern.search(category):
                return cls
    return ComponentClass.OTHER


def normalize_value(text: str | None, component_class: ComponentClass) -> str:
    """Extract the canonical value from free text; unmatched text comes back as-is."""
    if not text:
        return text or ""

    if component_class == ComponentClass.RESISTOR:
        m = _RESISTANCE_RE.search(text)
        if m:
            multiplier = m.group(2)
            if multiplier == "K":
                multiplier = "k"
            return f"{m.group(1)}{multiplier}"

    elif component_class == ComponentClass.CAPACITOR:
        m = _CAPACITANCE_RE.search(text)
        if m:
            value = f"{m.group(1)}{_micro(m.group(2))}"
            voltage = _VOLTAGE_RE.search(text[m.end():]) or _VOLTAGE_RE.search(text)
            if voltage:
                return f"{value}/{voltage.group(1)}V"
            return value

    elif component_class == ComponentClass.INDUCTOR:
        m = _INDUCTANCE_RE.search(text)
        if m:
            return f"{m.group(1)}{_micro(m.group(2))}H"

    return text


def extract_display_value(name: str, description: str | None = None,
                          prefix: str | None = None, category: str | None = None) -> str:
    """Value shown on the schematic: normalized for passives, else the part name."""
    cls = detect_component_class(prefix, category)
    if cls in PASSIVE_CLASSES:
        for candidate in (description, name):
            if not candidate:
                continue
            value = normalize_value(candidate, cls)
            if value != candidate:
                return value
    return name
