"""Stateful row renderer turning a byte stream into a framed hex dump."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from rich.style import Style

from .byteclass import OFFSET_STYLE, display_color, display_glyph, paint
from .layout import BorderStyle, RowWidth, render_footer, render_header
from .squeezer import SqueezeAction, Squeezer

logger = logging.getLogger(__name__)

BUFFER_SIZE = 256


class ByteSource(Protocol):
    """Anything that fills a buffer with input bytes, returning 0 at the end."""

    def readinto(self, buffer: bytearray | memoryview) -> int | None:
        """Read up to ``len(buffer)`` bytes into ``buffer``."""


class TextSink(Protocol):
    """Destination of the rendered text."""

    def write(self, text: str) -> object:
        """Write ``text``; raising :class:`OSError` signals a closed consumer."""


class SinkWriteFailure(RuntimeError):
    """Raised when the output sink rejects a write (e.g. a closed pipe)."""


@dataclass(frozen=True)
class DumpOptions:
    """Rendering preferences consumed by :class:`Printer`."""

    show_color: bool = False
    border_style: BorderStyle = BorderStyle.UNICODE
    use_squeeze: bool = True
    display_offset: int = 0
    row_width: RowWidth = field(default_factory=RowWidth)


class Printer:
    """Accumulate bytes into rows and write each finished row to ``sink``.

    Bytes must be fed strictly in stream order through :meth:`print_byte`
    (or all at once with :meth:`print_all`); row boundaries, addresses and
    duplicate detection all derive from the running 1-based byte index.
    """

    def __init__(
        self,
        sink: TextSink,
        show_color: bool = False,
        border_style: BorderStyle = BorderStyle.UNICODE,
        use_squeeze: bool = True,
        display_offset: int = 0,
        row_width: RowWidth | None = None,
    ) -> None:
        if display_offset < 0:
            msg = f"display offset must not be negative, got {display_offset}"
            raise ValueError(msg)
        self.sink = sink
        self.show_color = show_color
        self.border_style = border_style
        self.display_offset = display_offset
        self.row_width = row_width if row_width is not None else RowWidth()
        self.idx = 1
        # Raw bytes of the current row.
        self.raw_line = bytearray()
        # Rendered text of the current row, written out once the row is done.
        self.buffer_line: list[str] = []
        self.header_was_printed = False
        self.squeezer = Squeezer(use_squeeze)
        self.byte_hex_table: list[str] = [
            self._colorize(display_color(i), f"{i:02x} ") for i in range(256)
        ]
        self.byte_char_table: list[str] = [
            self._colorize(display_color(i), display_glyph(i)) for i in range(256)
        ]

    @classmethod
    def from_options(cls, sink: TextSink, options: DumpOptions) -> Printer:
        """Build a printer configured from ``options``."""
        return cls(
            sink,
            show_color=options.show_color,
            border_style=options.border_style,
            use_squeeze=options.use_squeeze,
            display_offset=options.display_offset,
            row_width=options.row_width,
        )

    def _colorize(self, style: Style, text: str) -> str:
        if not self.show_color:
            return text
        return paint(style, text)

    def _write(self, text: str) -> None:
        try:
            self.sink.write(text)
        except OSError as exc:
            msg = "output sink rejected write"
            raise SinkWriteFailure(msg) from exc

    def _flush_line(self) -> None:
        text = "".join(self.buffer_line)
        self.buffer_line.clear()
        if text:
            self._write(text)

    def header(self) -> None:
        """Write the top border, if the border style draws one."""
        line = render_header(self.row_width, self.border_style)
        if line is not None:
            self._write(line + "\n")

    def footer(self) -> None:
        """Write the bottom border, if the border style draws one."""
        line = render_footer(self.row_width, self.border_style)
        if line is not None:
            self._write(line + "\n")

    def _print_position_indicator(self) -> None:
        if not self.header_was_printed:
            self.header_was_printed = True
            self.header()

        address = f"{self.idx - 1 + self.display_offset:0{self.row_width.half}x}"
        outer = self.border_style.outer_sep
        self.buffer_line.append(
            f"{outer}{self._colorize(OFFSET_STYLE, address)}{outer} "
        )

    def print_byte(self, b: int) -> None:
        """Append one input byte, flushing the row when it becomes full.

        Raises :class:`SinkWriteFailure` if the finished row cannot be written;
        callers should stop feeding bytes at that point.
        """
        half = self.row_width.half
        full = self.row_width.full

        if self.idx % full == 1:
            self._print_position_indicator()

        self.buffer_line.append(self.byte_hex_table[b])
        self.raw_line.append(b)

        self.squeezer.observe(self.row_width, b, self.idx)

        position = self.idx % full
        try:
            if position == half:
                self.buffer_line.append(f"{self.border_style.inner_sep} ")
            elif position == 0:
                self.print_textline()
        finally:
            self.idx += 1

    def _pad_and_render_chars(self, length: int) -> None:
        half = self.row_width.half
        full = self.row_width.full
        outer = self.border_style.outer_sep
        inner = self.border_style.inner_sep
        buf = self.buffer_line

        if length < half:
            buf.append(
                f"{' ' * (3 * (half - length))}{inner}"
                f"{' ' * self.row_width.hex_panel_width}{outer}"
            )
        else:
            buf.append(f"{' ' * (3 * (full - length))}{outer}")

        for pos, b in enumerate(self.raw_line, start=1):
            buf.append(self.byte_char_table[b])
            if pos == half:
                buf.append(inner)

        if length < half:
            buf.append(f"{' ' * (half - length)}{inner}{' ' * half}{outer}\n")
        else:
            buf.append(f"{' ' * (full - length)}{outer}\n")

    def _placeholder_row(self) -> str:
        half = self.row_width.half
        outer = self.border_style.outer_sep
        inner = self.border_style.inner_sep
        asterisk = self._colorize(OFFSET_STYLE, "*")
        blank_hex = " " * self.row_width.hex_panel_width
        blank_chars = " " * half
        return (
            f"{outer}{asterisk}{' ' * (half - 1)}{outer}"
            f"{blank_hex}{inner}{blank_hex}{outer}"
            f"{blank_chars}{inner}{blank_chars}{outer}\n"
        )

    def _closing_row(self) -> str:
        half = self.row_width.half
        outer = self.border_style.outer_sep
        inner = self.border_style.inner_sep
        return (
            f"{' ' * (half * 3)}{inner}{' ' * self.row_width.hex_panel_width}{outer}"
            f"{' ' * half}{inner}{' ' * half}{outer}\n"
        )

    def print_textline(self) -> None:
        """Finish the current row (possibly short) and write it out.

        An empty row only produces output when a collapsed run is still open:
        an address-only row then marks where the input ended.
        """
        length = len(self.raw_line)

        if length == 0:
            if self.squeezer.is_run_active():
                self._print_position_indicator()
                self.buffer_line.append(self._closing_row())
                self._flush_line()
            return

        action = self.squeezer.decide()
        if action is SqueezeAction.COLLAPSE_FIRST:
            self.buffer_line.clear()
            self.buffer_line.append(self._placeholder_row())
        elif action is SqueezeAction.SUPPRESS:
            self.buffer_line.clear()
        else:
            self._pad_and_render_chars(length)

        self.squeezer.commit(self.raw_line)
        self.raw_line.clear()
        self._flush_line()

    def _ensure_header(self) -> None:
        if not self.header_was_printed:
            self.header_was_printed = True
            self.header()

    def _finish(self) -> bool:
        """Flush the trailing row and borders; return ``False`` if a write failed.

        Each step is attempted even when an earlier one failed.
        """
        ok = True
        for step in (self.print_textline, self._ensure_header, self.footer):
            try:
                step()
            except SinkWriteFailure as exc:
                if ok:
                    logger.debug("Output sink closed during final writes: %s", exc.__cause__)
                ok = False
        return ok

    def print_all(self, reader: ByteSource) -> bool:
        """Dump everything ``reader`` yields, framed by header and footer.

        Returns ``False`` when the sink failed at any point; the trailing row
        and borders are then attempted on a best-effort basis only.
        """
        scratch = bytearray(BUFFER_SIZE)
        view = memoryview(scratch)
        completed = True
        try:
            while True:
                size = reader.readinto(view)
                if not size:
                    break
                for b in view[:size]:
                    self.print_byte(b)
        except SinkWriteFailure as exc:
            logger.debug("Output sink closed, stopping dump: %s", exc.__cause__)
            completed = False

        finished = self._finish()
        return completed and finished
