"""Category router — picks the category symbol library a component lands in."""

from models import LibraryCategory

# Library naming prefix used for file names, lib-table rows and references
LIBRARY_PREFIX = "JLC"

# Reference prefix to category (checked first, exact match)
_PREFIX_CATEGORIES = {
    "R": LibraryCategory.RESISTORS,
    "C": LibraryCategory.CAPACITORS,
    "L": LibraryCategory.INDUCTORS,
    "D": LibraryCategory.DIODES,
    "Q": LibraryCategory.TRANSISTORS,
    "U": LibraryCategory.ICS,
    "J": LibraryCategory.CONNECTORS,
    "P": LibraryCategory.CONNECTORS,
    "K": LibraryCategory.MISC,         # relays
    "Y": LibraryCategory.MISC,         # crystals
    "X": LibraryCategory.MISC,         # crystals/oscillators
    "F": LibraryCategory.MISC,         # fuses
    "FB": LibraryCategory.INDUCTORS,   # ferrite beads
}

# Keyword substrings (checked in order) against the category, then description
_CATEGORY_KEYWORDS = [
    ("resistor", LibraryCategory.RESISTORS),
    ("capacitor", LibraryCategory.CAPACITORS),
    ("inductor", LibraryCategory.INDUCTORS),
    ("ferrite bead", LibraryCategory.INDUCTORS),
    ("diode", LibraryCategory.DIODES),
    ("led", LibraryCategory.DIODES),
    ("transistor", LibraryCategory.TRANSISTORS),
    ("mosfet", LibraryCategory.TRANSISTORS),
    ("bjt", LibraryCategory.TRANSISTORS),
    ("jfet", LibraryCategory.TRANSISTORS),
    ("ic", LibraryCategory.ICS),
    ("mcu", LibraryCategory.ICS),
    ("microcontroller", LibraryCategory.ICS),
    ("op amp", LibraryCategory.ICS),
    ("opamp", LibraryCategory.ICS),
    ("voltage regulator", LibraryCategory.ICS),
    ("ldo", LibraryCategory.ICS),
    ("dc-dc", LibraryCategory.ICS),
    ("adc", LibraryCategory.ICS),
    ("dac", LibraryCategory.ICS),
    ("sensor", LibraryCategory.ICS),
    ("driver", LibraryCategory.ICS),
    ("connector", LibraryCategory.CONNECTORS),
    ("header", LibraryCategory.CONNECTORS),
    ("socket", LibraryCategory.CONNECTORS),
    ("terminal", LibraryCategory.CONNECTORS),
    ("relay", LibraryCategory.MISC),
    ("crystal", LibraryCategory.MISC),
    ("oscillator", LibraryCategory.MISC),
    ("fuse", LibraryCategory.MISC),
    ("switch", LibraryCategory.MISC),
    ("button", LibraryCategory.MISC),
]


def match_keywords(text: str | None) -> LibraryCategory | None:
    """First keyword category contained in `text`, case-insensitively."""
    if not text:
        return None
    lowered = text.lower()
    for keyword, category in _CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return None


def get_library_category(prefix: str | None, category: str | None = None,
                         description: str | None = None) -> LibraryCategory:
    """Route a component: prefix table, then category keywords, then description.

    Always returns a category; Misc when nothing matches.
    """
    normalized = (prefix or "").strip().rstrip("?").upper()
    if normalized in _PREFIX_CATEGORIES:
        return _PREFIX_CATEGORIES[normalized]
    return match_keywords(category) or match_keywords(description) or LibraryCategory.MISC


def all_categories() -> list[LibraryCategory]:
    return list(LibraryCategory)


def library_name(category: LibraryCategory) -> str:
    """e.g. "JLC-Resistors"."""
    return f"{LIBRARY_PREFIX}-{category.value}"


def library_filename(category: LibraryCategory) -> str:
    """e.g. "JLC-Resistors.kicad_sym"."""
    return f"{library_name(category)}.kicad_sym"


def footprint_library_name() -> str:
    return LIBRARY_PREFIX


def footprint_dir_name() -> str:
    return f"{LIBRARY_PREFIX}.pretty"


def models_dir_name() -> str:
    return f"{LIBRARY_PREFIX}.3dshapes"


def symbol_reference(category: LibraryCategory, symbol_name: str) -> str:
    """e.g. "JLC-Resistors:RC0603FR-0710KL"."""
    return f"{library_name(category)}:{symbol_name}"


def footprint_reference(footprint_name: str, library: str = LIBRARY_PREFIX) -> str:
    """e.g. "JLC:SOP-8_L4.9-W3.9-P1.27"."""
    return f"{library}:{footprint_name}"
