"""Tests for component classification and display values."""

import pytest

from models import ComponentClass
from value_normalizer import detect_component_class, extract_display_value, normalize_value


class TestDetectComponentClass:
    @pytest.mark.parametrize("prefix, expected", [
        ("R", ComponentClass.RESISTOR),
        ("R?", ComponentClass.RESISTOR),
        ("c", ComponentClass.CAPACITOR),
        ("L", ComponentClass.INDUCTOR),
        ("FB", ComponentClass.INDUCTOR),
        ("U?", ComponentClass.IC),
    ])
    def test_prefix(self, prefix, expected):
        assert detect_component_class(prefix) == expected

    def test_prefix_wins_over_category(self):
        assert detect_component_class("R", "Ceramic Capacitors") == ComponentClass.RESISTOR

    def test_category_keywords(self):
        assert detect_component_class("Q", "Chip Resistor - Surface Mount") == ComponentClass.RESISTOR
        assert detect_component_class("X", "Microcontroller Units (MCUs/MPUs/SOCs)") == ComponentClass.IC
        assert detect_component_class("", "Ferrite Beads") == ComponentClass.INDUCTOR

    def test_unknown(self):
        assert detect_component_class("Q", None) == ComponentClass.OTHER
        assert detect_component_class(None) == ComponentClass.OTHER


class TestNormalizeValue:
    @pytest.mark.parametrize("text, expected", [
        ("16kΩ ±1% 100mW", "16k"),
        ("4.7 Kohm", "4.7k"),
        ("1MΩ", "1M"),
        ("100R 1%", "100"),
        ("220 Ohms", "220"),
    ])
    def test_resistor(self, text, expected):
        assert normalize_value(text, ComponentClass.RESISTOR) == expected

    @pytest.mark.parametrize("text, expected", [
        ("100nF 50V X7R", "100n/50V"),
        ("4.7µF 10V", "4.7u/10V"),
        ("22pF", "22p"),
    ])
    def test_capacitor(self, text, expected):
        assert normalize_value(text, ComponentClass.CAPACITOR) == expected

    @pytest.mark.parametrize("text, expected", [
        ("10uH 2A", "10uH"),
        ("2.2 mH", "2.2mH"),
        ("4.7μH", "4.7uH"),
    ])
    def test_inductor(self, text, expected):
        assert normalize_value(text, ComponentClass.INDUCTOR) == expected

    def test_unmatched_returned_unchanged(self):
        assert normalize_value("Thick Film", ComponentClass.RESISTOR) == "Thick Film"
        assert normalize_value("100nF", ComponentClass.IC) == "100nF"

    def test_empty(self):
        assert normalize_value("", ComponentClass.RESISTOR) == ""
        assert normalize_value(None, ComponentClass.RESISTOR) == ""


class TestExtractDisplayValue:
    def test_resistor_from_description(self):
        value = extract_display_value("0603WAF1002T5E",
                                      "10kΩ ±1% 100mW 0603 Thick Film Resistors", "R?")
        assert value == "10k"

    def test_falls_back_to_name(self):
        assert extract_display_value("CL10B104KB8NNNC", "MLCC", "C") == "CL10B104KB8NNNC"

    def test_value_in_name(self):
        assert extract_display_value("100nF", None, "C") == "100n"

    def test_ic_keeps_name(self):
        assert extract_display_value("STM32F103C8T6", "100nF on chip", "U") == "STM32F103C8T6"
