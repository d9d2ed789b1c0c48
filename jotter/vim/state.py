"""Vim state management.

Tracks the current mode, pending two-key command, count prefix, visual
anchor, and the single yank buffer of one composer session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple

from .undo import UndoHistory


class Position(NamedTuple):
    """Cursor position in character (not byte) units.

    Ordering is lexicographic on (row, col), which NamedTuple gives us.
    """

    row: int
    col: int


class VisualKind(Enum):
    """Selection shape of a visual mode."""

    CHAR = "char"
    LINE = "line"
    BLOCK = "block"


class VimMode(Enum):
    """Vim editing modes."""

    NORMAL = "NORMAL"
    INSERT = "INSERT"
    VISUAL = "VISUAL"
    VISUAL_LINE = "V-LINE"
    VISUAL_BLOCK = "V-BLOCK"

    @property
    def label(self) -> str:
        """Status-line label."""
        return self.value

    @property
    def visual_kind(self) -> VisualKind | None:
        """Selection kind for visual modes, None otherwise."""
        return _VISUAL_KINDS.get(self)

    @property
    def is_visual(self) -> bool:
        return self in _VISUAL_KINDS

    @classmethod
    def for_visual(cls, kind: VisualKind) -> VimMode:
        """Get the visual mode for a selection kind."""
        for mode, mode_kind in _VISUAL_KINDS.items():
            if mode_kind is kind:
                return mode
        raise ValueError(f"Unknown visual kind: {kind}")


_VISUAL_KINDS = {
    VimMode.VISUAL: VisualKind.CHAR,
    VimMode.VISUAL_LINE: VisualKind.LINE,
    VimMode.VISUAL_BLOCK: VisualKind.BLOCK,
}


class PendingCommand(Enum):
    """First key of a two-key command awaiting its second key."""

    DELETE = auto()     # d, completed by d
    YANK = auto()       # y, completed by y
    CHANGE = auto()     # c, completed by c
    GO_TO_TOP = auto()  # g, completed by g
    REPLACE = auto()    # r, completed by any character


@dataclass
class YankBuffer:
    """The single yank buffer (no registers)."""

    text: str = ""
    linewise: bool = False  # True if text pastes as whole lines

    @property
    def is_empty(self) -> bool:
        return not self.text

    def store(self, text: str, linewise: bool = False) -> None:
        """Overwrite the buffer contents."""
        self.text = text
        self.linewise = linewise


@dataclass
class EditorSession:
    """All mutable editing state of one composer session.

    Owned by the composer and handed to the engine; nothing here is global.
    Invariant: ``visual_anchor`` is set iff ``mode`` is a visual mode.
    """

    mode: VimMode = VimMode.NORMAL
    pending_command: PendingCommand | None = None
    pending_count: int = 0  # 0 means "no explicit count"
    visual_anchor: Position | None = None
    yank: YankBuffer = field(default_factory=YankBuffer)
    history: UndoHistory = field(default_factory=UndoHistory)

    # One-line hint shown after entering a visual mode (cosmetic)
    status_hint: str = ""

    def accumulate_digit(self, key: str) -> bool:
        """Accumulate a digit for the count prefix. Returns True if consumed."""
        if len(key) != 1 or not key.isdigit() or not key.isascii():
            return False
        if key == "0" and self.pending_count == 0:
            # 0 at start is a motion (go to line start), not a count
            return False
        self.pending_count = self.pending_count * 10 + int(key)
        return True

    def take_count(self) -> int:
        """Consume the accumulated count, returning 0 if none was typed."""
        count = self.pending_count
        self.pending_count = 0
        return count

    def take_count_or_one(self) -> int:
        """Consume the accumulated count, defaulting to 1."""
        return max(1, self.take_count())

    def reset_pending(self) -> None:
        """Drop any pending command and count."""
        self.pending_command = None
        self.pending_count = 0

    def enter_mode(self, mode: VimMode, anchor: Position | None = None) -> None:
        """Transition to a new mode with proper cleanup.

        Pending state never survives a mode transition, and the visual
        anchor only exists while a visual mode is active.
        """
        self.reset_pending()
        if mode.is_visual:
            if anchor is not None:
                self.visual_anchor = anchor
            self.status_hint = f"-- {mode.label} --"
        else:
            self.visual_anchor = None
            self.status_hint = ""
        self.mode = mode
