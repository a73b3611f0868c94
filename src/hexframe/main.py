"""Command-line front end printing a framed, coloured hex dump."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys
from typing import TextIO

from rich.console import Console

from .input import LimitedReader, open_input, parse_byte_count, skip_bytes
from .layout import DEFAULT_ROW_WIDTH, BorderStyle, InvalidRowWidth, RowWidth
from .printer import DumpOptions, Printer

logger = logging.getLogger(__name__)

COLOR_CHOICES = ("always", "auto", "never")


def _byte_count(text: str) -> int:
    try:
        return parse_byte_count(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``hexframe`` command."""
    p = argparse.ArgumentParser(
        prog="hexframe",
        description="Hex dump with byte-class colouring and duplicate-row squeezing",
    )
    p.add_argument("file", nargs="?", default=None, help="file to dump (default: stdin)")
    p.add_argument(
        "-n", "--length", type=_byte_count, default=None,
        help="only read N bytes of input (accepts 0x.. and kB/KiB/MB/MiB units)",
    )
    p.add_argument(
        "-s", "--skip", type=_byte_count, default=0,
        help="skip the first N bytes of input",
    )
    p.add_argument(
        "--no-squeezing", dest="squeeze", action="store_false",
        help="print every row, even runs of identical rows",
    )
    p.add_argument("--color", choices=COLOR_CHOICES, default="auto")
    p.add_argument(
        "--border", choices=[style.value for style in BorderStyle], default="unicode",
    )
    p.add_argument(
        "-o", "--display-offset", type=_byte_count, default=0,
        help="add N to every printed address",
    )
    p.add_argument(
        "-w", "--width", type=int, default=DEFAULT_ROW_WIDTH,
        help="bytes per row, must be even (default: %(default)s)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    return p


def resolve_color(choice: str, stream: TextIO) -> bool:
    """Decide whether to emit ANSI colours for ``choice`` on ``stream``."""
    if choice == "always":
        return True
    if choice == "never":
        return False
    return Console(file=stream).is_terminal


def options_from_args(
    args: argparse.Namespace, stream: TextIO, skipped: int = 0,
) -> DumpOptions:
    """Translate parsed arguments into :class:`DumpOptions`.

    ``skipped`` is the number of input bytes actually skipped; it is added to
    the printed addresses so they match positions in the original input.
    """
    return DumpOptions(
        show_color=resolve_color(args.color, stream),
        border_style=BorderStyle.from_name(args.border),
        use_squeeze=args.squeeze,
        display_offset=args.display_offset + skipped,
        row_width=RowWidth(args.width),
    )


def _silence_stdout() -> None:
    # Further writes (including the interpreter's final flush) go nowhere.
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)


def main(argv: list[str] | None = None) -> None:
    """Run the ``hexframe`` command."""
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        RowWidth(args.width)
    except InvalidRowWidth as exc:
        p.error(f"argument -w/--width: {exc}")

    with contextlib.ExitStack() as stack:
        try:
            stream = stack.enter_context(open_input(args.file))
        except OSError as exc:
            raise SystemExit(f"hexframe: {args.file}: {exc.strerror or exc}") from exc

        skipped = skip_bytes(stream, args.skip)
        if skipped < args.skip:
            logger.debug("Input ended after skipping %d of %d bytes", skipped, args.skip)
        options = options_from_args(args, sys.stdout, skipped)
        printer = Printer.from_options(sys.stdout, options)
        completed = printer.print_all(LimitedReader(stream, args.length))

    if completed:
        try:
            sys.stdout.flush()
        except BrokenPipeError:
            completed = False
    if not completed:
        _silence_stdout()


if __name__ == "__main__":
    main()
