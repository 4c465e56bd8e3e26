"""Helpers for emitting KiCad S-expression text."""

from typing import Union

Number = Union[int, float]


def escape_text(text) -> str:
    """Escape backslashes and newlines. kiutils escapes double quotes itself."""
    if text is None:
        return ""
    return (str(text)
            .replace('\\', '\\\\')
            .replace('\r\n', '\\n')
            .replace('\n', '\\n'))


def escape_string(text) -> str:
    """Escape backslashes, double quotes and newlines for a quoted atom."""
    return escape_text(text).replace('"', '\\"')


def quote(text) -> str:
    return f'"{escape_string(text)}"'


def fmt(value: Number) -> str:
    """Format a number the way KiCad writes it: no exponent, no trailing zeros."""
    text = f"{float(value):.6f}".rstrip('0').rstrip('.')
    if text in ("-0", ""):
        return "0"
    return text


def font_effects(size: Number, indent: str, hide: bool = False,
                 thickness: Number | None = None) -> str:
    """An `(effects (font ...))` block at the given indentation."""
    inner = indent + "\t"
    lines = [f"{indent}(effects",
             f"{inner}(font",
             f"{inner}\t(size {fmt(size)} {fmt(size)})"]
    if thickness is not None:
        lines.append(f"{inner}\t(thickness {fmt(thickness)})")
    lines.append(f"{inner})")
    if hide:
        lines.append(f"{inner}(hide yes)")
    lines.append(f"{indent})")
    return "\n".join(lines) + "\n"
