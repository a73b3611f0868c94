"""Detection and collapsing of runs of identical rows.

A run of byte-identical consecutive rows is shown as its first row, a single
``*`` placeholder row, and nothing else until a differing row arrives.
"""

from __future__ import annotations

import enum

from .layout import RowWidth


class SqueezeAction(enum.Enum):
    """What the printer does with a completed row."""

    NORMAL = "normal"
    COLLAPSE_FIRST = "collapse_first"
    SUPPRESS = "suppress"


class SqueezeState(enum.Enum):
    IDLE = "idle"
    RUN_ACTIVE = "run_active"


class Squeezer:
    """Track whether the row being assembled repeats the previous row.

    Bytes are fed through :meth:`observe` as they arrive; once a row is
    complete the printer asks :meth:`decide` what to do with it and then
    calls :meth:`commit` to make it the reference for the next row.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.state = SqueezeState.IDLE
        self._previous: bytes | None = None
        self._matching = False
        self._length = 0
        self._pending = SqueezeAction.NORMAL

    def observe(self, width: RowWidth, byte: int, index: int) -> None:
        """Compare ``byte`` (1-based stream ``index``) with the previous row."""
        if not self.enabled:
            return
        position = (index - 1) % width.full
        if position == 0:
            self._matching = self._previous is not None
        self._length = position + 1
        if not self._matching:
            return
        previous = self._previous
        if previous is None or position >= len(previous) or previous[position] != byte:
            self._matching = False

    def decide(self) -> SqueezeAction:
        """Return the action for the row observed since the last commit."""
        if not self.enabled:
            action = SqueezeAction.NORMAL
        elif (
            self._matching
            and self._previous is not None
            and self._length == len(self._previous)
        ):
            if self.state is SqueezeState.RUN_ACTIVE:
                action = SqueezeAction.SUPPRESS
            else:
                action = SqueezeAction.COLLAPSE_FIRST
        else:
            action = SqueezeAction.NORMAL
        self._pending = action
        return action

    def commit(self, row: bytes | bytearray) -> None:
        """Make ``row`` the reference row and advance the run state."""
        if not self.enabled:
            return
        self._previous = bytes(row)
        if self._pending is SqueezeAction.NORMAL:
            self.state = SqueezeState.IDLE
        else:
            self.state = SqueezeState.RUN_ACTIVE
        self._pending = SqueezeAction.NORMAL
        self._matching = False
        self._length = 0

    def is_run_active(self) -> bool:
        """Return ``True`` if the last committed row belonged to a collapsed run."""
        return self.enabled and self.state is SqueezeState.RUN_ACTIVE
