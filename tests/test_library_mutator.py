"""Tests for in-place library text edits."""

import os

import pytest

import library_mutator
from library_mutator import (
    LibraryFormatError, append_entry, entry_exists, find_form_end, list_entries,
    merge_entry_into_file, read_library, remove_entry, replace_entry,
    sanitize_footprint_name, sanitize_symbol_name, top_level_entries, validate_library,
    write_library,
)

HEADER = '(kicad_symbol_lib\n\t(version 20241209)\n'

LIB = (
    '(kicad_symbol_lib\n'
    '\t(version 20241209)\n'
    '\t(symbol "A"\n'
    '\t\t(property "Value" "x)(\\" )")\n'
    '\t\t(symbol "A_0_1")\n'
    '\t)\n'
    ')\n'
)

NESTED = (
    '(kicad_symbol_lib\n'
    '\t(version 20241209)\n'
    '\t(symbol "AMP" (symbol "AMP_1_1" (pin passive line)))\n'
    ')\n'
)


class TestSanitize:
    def test_symbol(self):
        assert sanitize_symbol_name("0603WAF1002T5E") == "0603WAF1002T5E"
        assert sanitize_symbol_name("LM358/DR") == "LM358_DR"
        assert sanitize_symbol_name("A.B C") == "A_B_C"

    def test_footprint_keeps_dots(self):
        assert sanitize_footprint_name("SOT-23-3_L2.9-W1.3") == "SOT-23-3_L2.9-W1.3"
        assert sanitize_footprint_name("QFN 32/5x5") == "QFN_32_5x5"


class TestScan:
    def test_parentheses_inside_strings_ignored(self):
        start = LIB.index('(symbol "A"')
        end = find_form_end(LIB, start)
        assert LIB[end - 2:end] == '\t)'

    def test_escaped_quote(self):
        text = '(a "\\")" (b))'
        assert find_form_end(text, 0) == len(text)

    def test_unterminated(self):
        assert find_form_end('(a (b)', 0) == -1


class TestValidate:
    def test_valid(self):
        assert validate_library(LIB) == LIB.rstrip()

    @pytest.mark.parametrize("text", ["", "(a", "(a (b)", "(a))", "(a \")\""])
    def test_invalid(self, text):
        with pytest.raises(LibraryFormatError):
            validate_library(text)

    def test_is_value_error(self):
        assert issubclass(LibraryFormatError, ValueError)


class TestEntries:
    def test_append(self):
        result = append_entry(LIB, '\t(symbol "B")\n')
        assert result.endswith('\t)\n\t(symbol "B")\n)\n')
        assert list_entries(result) == ["A", "B"]

    def test_append_to_invalid(self):
        with pytest.raises(LibraryFormatError):
            append_entry("(kicad_symbol_lib", '\t(symbol "B")\n')

    def test_exists(self):
        assert entry_exists(LIB, "A")
        assert not entry_exists(LIB, "B")
        assert not entry_exists(LIB, "A_0_1")

    def test_exists_uses_sanitized_name(self):
        text = append_entry(LIB, '\t(symbol "LM358_DR")\n')
        assert entry_exists(text, "LM358/DR")

    def test_remove(self):
        assert remove_entry(LIB, "A") == HEADER + ')\n'
        assert remove_entry(LIB, "Z") is None

    def test_replace(self):
        result = replace_entry(LIB, "A", '\t(symbol "A" (new))\n')
        assert result == HEADER + '\t(symbol "A" (new))\n)\n'

    def test_replace_missing_appends(self):
        result = replace_entry(LIB, "B", '\t(symbol "B")\n')
        assert list_entries(result) == ["A", "B"]

    def test_list_skips_sub_units(self):
        assert list_entries(LIB) == ["A"]

    def test_sub_unit_name_is_not_an_entry(self):
        assert remove_entry(NESTED, "AMP_1_1") is None
        result = replace_entry(NESTED, "AMP_1_1", '\t(symbol "AMP_1_1")\n')
        assert result.startswith(NESTED.rstrip()[:-1])
        assert list_entries(result) == ["AMP", "AMP_1_1"]
        assert '(symbol "AMP_1_1" (pin passive line))' in result

    def test_top_level_entries_spans(self):
        [(name, start, end)] = list(top_level_entries(LIB))
        assert name == "A"
        assert LIB[start:end].startswith('(symbol "A"\n')
        assert LIB[start:end].endswith('\t)')

    def test_footprint_kind(self):
        text = '(footprint_lib\n\t(footprint "SOT-23.x" (pad "1"))\n)\n'
        assert entry_exists(text, "SOT-23.x", sanitize_footprint_name, kind="footprint")
        assert list_entries(text, kind="footprint") == ["SOT-23.x"]


class TestFiles:
    def test_read_missing(self, tmp_path):
        assert read_library(str(tmp_path / "missing.kicad_sym")) is None

    def test_write_creates_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "lib.kicad_sym"
        write_library(str(path), LIB)
        assert path.read_text() == LIB
        assert os.listdir(path.parent) == ["lib.kicad_sym"]

    def test_failed_write_keeps_original(self, tmp_path, monkeypatch):
        path = tmp_path / "lib.kicad_sym"
        path.write_text(LIB)

        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(library_mutator.os, "replace", fail)
        with pytest.raises(OSError):
            write_library(str(path), "garbage")
        assert path.read_text() == LIB
        assert os.listdir(tmp_path) == ["lib.kicad_sym"]


class TestMergeEntryIntoFile:
    def test_lifecycle(self, tmp_path):
        path = str(tmp_path / "JLC-Resistors.kicad_sym")

        assert merge_entry_into_file(path, "A", '\t(symbol "A")\n', HEADER) == "created"
        assert read_library(path) == HEADER + '\t(symbol "A")\n)\n'

        assert merge_entry_into_file(path, "A", '\t(symbol "A" (v2))\n', HEADER) == "exists"
        assert "(v2)" not in read_library(path)

        assert merge_entry_into_file(path, "A", '\t(symbol "A" (v2))\n', HEADER,
                                     overwrite=True) == "replaced"
        assert list_entries(read_library(path)) == ["A"]
        assert "(v2)" in read_library(path)

        assert merge_entry_into_file(path, "B", '\t(symbol "B")\n', HEADER) == "appended"
        assert list_entries(read_library(path)) == ["A", "B"]

    def test_empty_file_is_recreated(self, tmp_path):
        path = tmp_path / "lib.kicad_sym"
        path.write_text("  \n")
        assert merge_entry_into_file(str(path), "A", '\t(symbol "A")\n', HEADER) == "created"

    def test_corrupt_file_untouched(self, tmp_path):
        path = tmp_path / "lib.kicad_sym"
        path.write_text('(kicad_symbol_lib\n\t(symbol "A"\n')
        with pytest.raises(LibraryFormatError):
            merge_entry_into_file(str(path), "B", '\t(symbol "B")\n', HEADER)
        assert path.read_text() == '(kicad_symbol_lib\n\t(symbol "A"\n'

    def test_sub_unit_name_appends(self, tmp_path):
        path = tmp_path / "lib.kicad_sym"
        path.write_text(NESTED)
        assert merge_entry_into_file(str(path), "AMP_1_1", '\t(symbol "AMP_1_1")\n',
                                     HEADER) == "appended"
        assert list_entries(read_library(str(path))) == ["AMP", "AMP_1_1"]
        assert '(symbol "AMP" (symbol "AMP_1_1" (pin passive line)))' in read_library(str(path))
