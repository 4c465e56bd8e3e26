"""Footprint mapper — resolves common packages to KiCad's standard footprints.

Lookup is an explicit table only. Anything not listed returns None and the
footprint is generated from the source primitives instead.
"""

import re
from dataclasses import dataclass

# Chip passive sizes: imperial code -> metric code
_CHIP_SIZES = {
    "0201": "0603Metric",
    "0402": "1005Metric",
    "0603": "1608Metric",
    "0805": "2012Metric",
    "1206": "3216Metric",
    "1210": "3225Metric",
    "2010": "5025Metric",
    "2512": "6332Metric",
}

# Prefix -> (library, footprint name prefix) for chip passives
_CHIP_LIBRARIES = {
    "R": ("Resistor_SMD", "R"),
    "C": ("Capacitor_SMD", "C"),
    "L": ("Inductor_SMD", "L"),
    "FB": ("Inductor_SMD", "L"),
    "D": ("Diode_SMD", "D"),
}

_PACKAGE_TABLE = {
    "SOD-123": ("Diode_SMD", "D_SOD-123"),
    "SOD-323": ("Diode_SMD", "D_SOD-323"),
    "SOD-523": ("Diode_SMD", "D_SOD-523"),
    "SMA": ("Diode_SMD", "D_SMA"),
    "SMB": ("Diode_SMD", "D_SMB"),
    "SMC": ("Diode_SMD", "D_SMC"),
    "SOT-23": ("Package_TO_SOT_SMD", "SOT-23"),
    "SOT-23-3": ("Package_TO_SOT_SMD", "SOT-23"),
    "SOT-23-5": ("Package_TO_SOT_SMD", "SOT-23-5"),
    "SOT-23-6": ("Package_TO_SOT_SMD", "SOT-23-6"),
    "SOT-223": ("Package_TO_SOT_SMD", "SOT-223-3_TabPin2"),
    "SOT-89": ("Package_TO_SOT_SMD", "SOT-89-3"),
    "SOT-89-3": ("Package_TO_SOT_SMD", "SOT-89-3"),
    "TO-252": ("Package_TO_SOT_SMD", "TO-252-2"),
    "TO-252-2": ("Package_TO_SOT_SMD", "TO-252-2"),
    "SOIC-8": ("Package_SO", "SOIC-8_3.9x4.9mm_P1.27mm"),
    "SOIC-14": ("Package_SO", "SOIC-14_3.9x8.7mm_P1.27mm"),
    "SOIC-16": ("Package_SO", "SOIC-16_3.9x9.9mm_P1.27mm"),
    "TSSOP-20": ("Package_SO", "TSSOP-20_4.4x6.5mm_P0.65mm"),
    "MSOP-8": ("Package_SO", "MSOP-8_3x3mm_P0.65mm"),
}

# R0603, C0805, L1206, D0603 -> 0603 ...
_CHIP_TOKEN_RE = re.compile(r'^(?:[RCLD]|FB)?(\d{4})$')


@dataclass(frozen=True)
class FootprintMapping:
    library: str
    footprint: str

    @property
    def reference(self) -> str:
        """ "Library:Footprint" as used in a symbol's Footprint property."""
        return f"{self.library}:{self.footprint}"


def canonical_package(package: str | None) -> str:
    """Reduce a service package name to its lookup token.

    "SOT-23-3_L2.9-W1.3-P1.90-LS2.4-BR" -> "SOT-23-3", "R0603" -> "0603".
    """
    if not package:
        return ""
    token = package.strip().split("_", 1)[0].upper()
    m = _CHIP_TOKEN_RE.match(token)
    if m:
        return m.group(1)
    return token


def map_to_kicad_footprint(package: str | None, prefix: str | None = None) -> FootprintMapping | None:
    """Standard footprint for `package`, or None when it must be generated."""
    token = canonical_package(package)
    if not token:
        return None

    if token in _CHIP_SIZES:
        chip = _CHIP_LIBRARIES.get((prefix or "").strip().rstrip("?").upper())
        if chip is None:
            return None
        library, short = chip
        return FootprintMapping(library, f"{short}_{token}_{_CHIP_SIZES[token]}")

    entry = _PACKAGE_TABLE.get(token)
    if entry is None:
        return None
    return FootprintMapping(*entry)
