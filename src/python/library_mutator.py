"""Library mutator — append, look up and replace entries in library text.

A library file is one top-level form, e.g. `(kicad_symbol_lib ...)`, holding
zero or more `(symbol "NAME" ...)` entries. Entries are located by a
balanced-parenthesis scan that ignores parentheses inside quoted strings.
"""

import logging
import os
import re
import tempfile
from enum import Enum

logger = logging.getLogger(__name__)

_SYMBOL_NAME_RE = re.compile(r'[^A-Za-z0-9_-]')
_FOOTPRINT_NAME_RE = re.compile(r'[^A-Za-z0-9_.-]')


class LibraryFormatError(ValueError):
    """Library text is not a single balanced top-level form."""


def sanitize_symbol_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return _SYMBOL_NAME_RE.sub('_', name or "")


def sanitize_footprint_name(name: str) -> str:
    """As sanitize_symbol_name, but dots are kept ("SOT-23-3_L2.9-W1.3")."""
    return _FOOTPRINT_NAME_RE.sub('_', name or "")


class ScanState(Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    IN_ESCAPE = "in_escape"


def find_form_end(text: str, start: int) -> int:
    """Index just past the form whose opening parenthesis is at `start`.

    Returns -1 when the form never closes.
    """
    state = ScanState.NORMAL
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if state == ScanState.IN_ESCAPE:
            state = ScanState.IN_STRING
        elif state == ScanState.IN_STRING:
            if ch == '\\':
                state = ScanState.IN_ESCAPE
            elif ch == '"':
                state = ScanState.NORMAL
        elif ch == '"':
            state = ScanState.IN_STRING
        elif ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def validate_library(text: str) -> str:
    """Return `text` without trailing whitespace, or raise LibraryFormatError."""
    trimmed = text.rstrip()
    if not trimmed.endswith(')'):
        raise LibraryFormatError("Invalid library file format: missing closing parenthesis")
    start = trimmed.find('(')
    if start == -1 or find_form_end(trimmed, start) != len(trimmed):
        raise LibraryFormatError("Invalid library file format: unbalanced parentheses")
    return trimmed


def append_entry(library_text: str, entry: str) -> str:
    """Insert `entry` before the library's final closing parenthesis."""
    trimmed = validate_library(library_text)
    return trimmed[:-1] + entry + ')\n'


def top_level_entries(library_text: str, kind: str = "symbol"):
    """Yield (name, start, end) for each `(kind "NAME" ...)` directly under the root form.

    Nested forms such as the NAME_0_1 sub-units of a symbol are skipped.
    """
    trimmed = validate_library(library_text)
    pattern = re.compile(rf'\(\s*{kind}\s+"((?:[^"\\]|\\.)*)"')
    pos = trimmed.find('(') + 1
    while True:
        m = pattern.search(trimmed, pos)
        if not m:
            return
        end = find_form_end(trimmed, m.start())
        yield m.group(1), m.start(), end
        pos = end


def entry_exists(library_text: str, name: str, sanitize=sanitize_symbol_name,
                 kind: str = "symbol") -> bool:
    return sanitize(name) in list_entries(library_text, kind)


def remove_entry(library_text: str, name: str, sanitize=sanitize_symbol_name,
                 kind: str = "symbol") -> str | None:
    """Library text with the named top-level entry spliced out; None if it is not there."""
    target = sanitize(name)
    span = next(((start, end) for entry_name, start, end
                 in top_level_entries(library_text, kind) if entry_name == target), None)
    if span is None:
        return None
    start, end = span

    after = library_text[end:]
    if after.startswith('\n'):
        after = after[1:]
    before = library_text[:start]
    # Drop the indentation that belonged to the removed entry
    stripped = before.rstrip('\t ')
    if stripped.endswith('\n') or not stripped:
        before = stripped
    return before + after


def replace_entry(library_text: str, name: str, entry: str, sanitize=sanitize_symbol_name,
                  kind: str = "symbol") -> str:
    """Replace the named entry with `entry`, or append when there is none."""
    validate_library(library_text)
    if not entry_exists(library_text, name, sanitize, kind):
        return append_entry(library_text, entry)
    remaining = remove_entry(library_text, name, sanitize, kind)
    if remaining is None:
        logger.debug("%s %r matched but could not be located, appending", kind, name)
        return append_entry(library_text, entry)
    return append_entry(remaining, entry)


# ── Files ────────────────────────────────────────────────────────────────────

def read_library(path: str) -> str | None:
    if not os.path.exists(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def write_library(path: str, content: str) -> None:
    """Write `content` to `path` atomically (temp file in the same directory, then rename)."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def merge_entry_into_file(path: str, name: str, entry: str, header: str,
                          overwrite: bool = False) -> str:
    """Merge one entry into the library file at `path`.

    Returns "created", "appended", "exists" or "replaced". With
    overwrite=False an existing entry is left untouched.
    """
    existing = read_library(path)
    if existing is None or not existing.strip():
        write_library(path, header + entry + ')\n')
        logger.info("Created %s with %s", path, name)
        return "created"

    if entry_exists(existing, name):
        if not overwrite:
            validate_library(existing)
            return "exists"
        write_library(path, replace_entry(existing, name, entry))
        logger.info("Replaced %s in %s", name, path)
        return "replaced"

    write_library(path, append_entry(existing, entry))
    logger.info("Appended %s to %s", name, path)
    return "appended"


def list_entries(library_text: str, kind: str = "symbol") -> list[str]:
    """Names of the top-level entries (sub-units like NAME_0_1 excluded)."""
    return [name for name, _, _ in top_level_entries(library_text, kind)]
