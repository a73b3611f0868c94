"""Row geometry and border framing for the dump."""

from __future__ import annotations

import enum
from dataclasses import dataclass

DEFAULT_ROW_WIDTH = 16
# Widest row the panel arithmetic is sized for (16-bit row count, even).
MAX_ROW_WIDTH = 0xFFFE


class InvalidRowWidth(ValueError):
    """Raised when a row width is odd, not positive or too large."""


@dataclass(frozen=True)
class RowWidth:
    """Number of bytes shown on one row, split into two equal panels."""

    value: int = DEFAULT_ROW_WIDTH

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"row width must be an integer, got {self.value!r}"
            raise InvalidRowWidth(msg)
        if self.value <= 0:
            msg = f"row width must be positive, got {self.value}"
            raise InvalidRowWidth(msg)
        if self.value % 2:
            msg = f"row width must be divisible by 2, got {self.value}"
            raise InvalidRowWidth(msg)
        if self.value > MAX_ROW_WIDTH:
            msg = f"row width {self.value} exceeds the maximum of {MAX_ROW_WIDTH}"
            raise InvalidRowWidth(msg)

    @property
    def half(self) -> int:
        """Bytes per panel."""
        return self.value // 2

    @property
    def full(self) -> int:
        """Bytes per row."""
        return self.value

    @property
    def hex_panel_width(self) -> int:
        """Columns between two separators of one hex panel."""
        return self.half * 3 + 1


@dataclass(frozen=True)
class BorderElements:
    """Glyphs making up a horizontal border line."""

    left_corner: str
    horizontal_line: str
    column_separator: str
    right_corner: str


_UNICODE_HEADER = BorderElements("┌", "─", "┬", "┐")
_UNICODE_FOOTER = BorderElements("└", "─", "┴", "┘")
_ASCII_BORDER = BorderElements("+", "-", "+", "+")


class BorderStyle(enum.Enum):
    """Visual framing convention of the dump."""

    UNICODE = "unicode"
    ASCII = "ascii"
    NONE = "none"

    @classmethod
    def from_name(cls, name: str) -> BorderStyle:
        """Look up a style by its lower-case name (``unicode``, ``ascii``, ``none``)."""
        try:
            return cls(name.lower())
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            msg = f"unknown border style {name!r} (expected one of: {choices})"
            raise ValueError(msg) from None

    def header_elements(self) -> BorderElements | None:
        if self is BorderStyle.UNICODE:
            return _UNICODE_HEADER
        if self is BorderStyle.ASCII:
            return _ASCII_BORDER
        return None

    def footer_elements(self) -> BorderElements | None:
        if self is BorderStyle.UNICODE:
            return _UNICODE_FOOTER
        if self is BorderStyle.ASCII:
            return _ASCII_BORDER
        return None

    @property
    def outer_sep(self) -> str:
        """Glyph drawn on both sides of every panel group."""
        if self is BorderStyle.UNICODE:
            return "│"
        if self is BorderStyle.ASCII:
            return "|"
        return " "

    @property
    def inner_sep(self) -> str:
        """Glyph dividing the two halves of the hex and char columns."""
        if self is BorderStyle.UNICODE:
            return "┊"
        if self is BorderStyle.ASCII:
            return "|"
        return " "


def render_border(width: RowWidth, elements: BorderElements) -> str:
    """Build one horizontal border line aligned with the data rows.

    The five segments cover the address field, the two hex panels and the two
    character panels, in that order.
    """
    h = elements.horizontal_line
    side_segment = h * width.half
    main_segment = h * width.hex_panel_width
    c = elements.column_separator
    return (
        f"{elements.left_corner}{side_segment}{c}"
        f"{main_segment}{c}{main_segment}"
        f"{c}{side_segment}{c}{side_segment}{elements.right_corner}"
    )


def render_header(width: RowWidth, style: BorderStyle) -> str | None:
    """Return the top border line, or ``None`` when ``style`` draws no border."""
    elements = style.header_elements()
    if elements is None:
        return None
    return render_border(width, elements)


def render_footer(width: RowWidth, style: BorderStyle) -> str | None:
    """Return the bottom border line, or ``None`` when ``style`` draws no border."""
    elements = style.footer_elements()
    if elements is None:
        return None
    return render_border(width, elements)
