"""Tests for category routing and library naming."""

import pytest

from category_router import (
    all_categories, footprint_dir_name, footprint_reference, get_library_category,
    library_filename, library_name, match_keywords, models_dir_name,
    symbol_reference,
)
from models import LibraryCategory


class TestGetLibraryCategory:
    @pytest.mark.parametrize("prefix, expected", [
        ("R", LibraryCategory.RESISTORS),
        ("C", LibraryCategory.CAPACITORS),
        ("L", LibraryCategory.INDUCTORS),
        ("D", LibraryCategory.DIODES),
        ("Q", LibraryCategory.TRANSISTORS),
        ("U", LibraryCategory.ICS),
        ("J", LibraryCategory.CONNECTORS),
        ("P", LibraryCategory.CONNECTORS),
        ("K", LibraryCategory.MISC),
        ("Y", LibraryCategory.MISC),
        ("X", LibraryCategory.MISC),
        ("F", LibraryCategory.MISC),
        ("FB", LibraryCategory.INDUCTORS),
    ])
    def test_prefix_dominates(self, prefix, expected):
        # A conflicting category never overrides a known prefix
        assert get_library_category(prefix, "Ceramic Capacitor", "resistor") == expected

    def test_prefix_normalized(self):
        assert get_library_category("r?") == LibraryCategory.RESISTORS
        assert get_library_category(" U? ") == LibraryCategory.ICS

    def test_category_before_description(self):
        result = get_library_category("SW", "Tactile Switches", "Transistor-like button")
        assert result == LibraryCategory.MISC

    def test_description_fallback(self):
        assert get_library_category("Z", None, "N-Channel MOSFET 30V") == LibraryCategory.TRANSISTORS

    def test_default_misc(self):
        assert get_library_category(None) == LibraryCategory.MISC
        assert get_library_category("Z", "Widgets", "Thing") == LibraryCategory.MISC


class TestMatchKeywords:
    def test_case_insensitive(self):
        assert match_keywords("SCHOTTKY DIODES") == LibraryCategory.DIODES

    def test_order(self):
        assert match_keywords("Resistor Capacitor Network") == LibraryCategory.RESISTORS

    def test_empty(self):
        assert match_keywords("") is None
        assert match_keywords(None) is None


class TestNaming:
    def test_library_names(self):
        assert library_name(LibraryCategory.RESISTORS) == "JLC-Resistors"
        assert library_filename(LibraryCategory.ICS) == "JLC-ICs.kicad_sym"
        assert footprint_dir_name() == "JLC.pretty"
        assert models_dir_name() == "JLC.3dshapes"

    def test_references(self):
        assert symbol_reference(LibraryCategory.DIODES, "1N4148W") == "JLC-Diodes:1N4148W"
        assert footprint_reference("QFN-32") == "JLC:QFN-32"
        assert footprint_reference("QFN-32", "Mine") == "Mine:QFN-32"

    def test_all_categories(self):
        assert len(all_categories()) == 8
