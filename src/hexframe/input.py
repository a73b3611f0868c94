"""Input helpers: opening sources, skipping a prefix and limiting length."""

from __future__ import annotations

import contextlib
import io
import logging
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

SKIP_CHUNK = 64 * 1024

_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
    "gb": 1000**3,
    "gib": 1024**3,
}

BYTE_COUNT = re.compile(r"^\s*(?P<number>0[xX][0-9a-fA-F]+|\d+)\s*(?P<unit>[A-Za-z]*)\s*$")


def parse_byte_count(text: str) -> int:
    """Parse ``text`` such as ``512``, ``0x200`` or ``4KiB`` into a byte count."""
    match = BYTE_COUNT.match(text)
    if not match:
        msg = f"invalid byte count: {text!r}"
        raise ValueError(msg)
    number = int(match.group("number"), 0)
    unit = match.group("unit").lower()
    if unit not in _UNITS:
        msg = f"unknown unit {match.group('unit')!r} in byte count {text!r}"
        raise ValueError(msg)
    return number * _UNITS[unit]


@contextlib.contextmanager
def open_input(path: str | Path | None) -> Iterator[BinaryIO]:
    """Yield a binary stream for ``path``; ``None`` or ``"-"`` reads stdin.

    Standard input is left open when the context exits.
    """
    if path is None or str(path) == "-":
        yield sys.stdin.buffer
        return
    with open(Path(path), "rb") as stream:
        yield stream


def skip_bytes(stream: BinaryIO, count: int) -> int:
    """Advance ``stream`` by up to ``count`` bytes and return how far it moved."""
    if count <= 0:
        return 0
    try:
        seekable = stream.seekable()
    except (AttributeError, OSError):
        seekable = False
    if seekable:
        start = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        target = min(start + count, end)
        stream.seek(target)
        return target - start

    logger.debug("Input is not seekable, reading %d bytes to skip them", count)
    skipped = 0
    while skipped < count:
        data = stream.read(min(SKIP_CHUNK, count - skipped))
        if not data:
            break
        skipped += len(data)
    return skipped


class LimitedReader:
    """Wrap a binary stream so that at most ``limit`` bytes can be read."""

    def __init__(self, stream: BinaryIO, limit: int | None = None) -> None:
        if limit is not None and limit < 0:
            msg = f"length limit must not be negative, got {limit}"
            raise ValueError(msg)
        self.stream = stream
        self.remaining = limit

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Fill ``buffer`` from the wrapped stream, honouring the limit."""
        view = memoryview(buffer)
        if self.remaining is not None:
            if self.remaining == 0:
                return 0
            view = view[: self.remaining]
        size = self.stream.readinto(view) or 0
        if self.remaining is not None:
            self.remaining -= size
        return size
