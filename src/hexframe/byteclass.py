"""Byte classification shared by the hex and character panels."""

from __future__ import annotations

import enum

from rich.color import ColorSystem
from rich.style import Style

# Vertical tab (0x0B) is not treated as whitespace.
ASCII_WHITESPACE = frozenset(b" \t\n\x0c\r")

OFFSET_STYLE = Style(color="color(242)")
NULL_STYLE = Style(color="color(242)")


class ByteCategory(enum.Enum):
    """Semantic class of a single byte value."""

    NULL = "null"
    ASCII_PRINTABLE = "ascii_printable"
    ASCII_WHITESPACE = "ascii_whitespace"
    ASCII_OTHER = "ascii_other"
    NON_ASCII = "non_ascii"


_CATEGORY_STYLES: dict[ByteCategory, Style] = {
    ByteCategory.NULL: NULL_STYLE,
    ByteCategory.ASCII_PRINTABLE: Style(color="cyan"),
    ByteCategory.ASCII_WHITESPACE: Style(color="green"),
    ByteCategory.ASCII_OTHER: Style(color="magenta"),
    ByteCategory.NON_ASCII: Style(color="yellow"),
}


def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        msg = f"byte value out of range: {value!r}"
        raise ValueError(msg)
    return value


def classify(value: int) -> ByteCategory:
    """Return the :class:`ByteCategory` for ``value``."""
    _check_byte(value)
    if value == 0x00:
        return ByteCategory.NULL
    if 0x21 <= value <= 0x7E:
        return ByteCategory.ASCII_PRINTABLE
    if value in ASCII_WHITESPACE:
        return ByteCategory.ASCII_WHITESPACE
    if value < 0x80:
        return ByteCategory.ASCII_OTHER
    return ByteCategory.NON_ASCII


def display_glyph(value: int) -> str:
    """Return the single character shown for ``value`` in the char panels."""
    category = classify(value)
    if category is ByteCategory.NULL:
        return "0"
    if category is ByteCategory.ASCII_PRINTABLE:
        return chr(value)
    if category is ByteCategory.ASCII_WHITESPACE:
        return " " if value == 0x20 else "_"
    if category is ByteCategory.ASCII_OTHER:
        return "•"
    return "×"


def display_color(value: int) -> Style:
    """Return the rich :class:`~rich.style.Style` used to colour ``value``."""
    return _CATEGORY_STYLES[classify(value)]


def paint(style: Style, text: str) -> str:
    """Wrap ``text`` in the ANSI escape sequences for ``style``.

    The 256-colour system is used so the grey offset colour survives as
    ``38;5;242`` while the basic colours keep their short ``3x`` codes.
    """
    return style.render(text, color_system=ColorSystem.EIGHT_BIT)
