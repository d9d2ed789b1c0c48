"""Vim motion functions.

Motions compute cursor destinations without modifying text. They are pure
functions of the buffer lines, a start position, and a count, and are
used both for navigation and to extend visual selections.

The buffer is treated as one character stream in which every line break
is a whitespace character, so word motions cross lines and an empty line
is just a whitespace boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

from .state import Position


class CharClass(Enum):
    """Character class used by word motions."""

    WHITESPACE = 0
    WORD = 1
    PUNCT = 2


class WordMotion(Enum):
    """Word motion kinds."""

    NEXT_START = "next_start"  # w / W
    PREV_START = "prev_start"  # b / B
    END = "end"                # e / E


# Type alias for motion functions
MotionFunc = Callable[[Sequence[str], Position, int], Position]


def char_class(char: str, big_word: bool = False) -> CharClass:
    """Classify a character; in big-word mode only whitespace separates."""
    if not char or char.isspace():
        return CharClass.WHITESPACE
    if big_word:
        return CharClass.WORD
    if char.isalnum() or char == "_":
        return CharClass.WORD
    return CharClass.PUNCT


# ─────────────────────────────────────────────────────────────────
# Character stream helpers
# ─────────────────────────────────────────────────────────────────


def char_at(lines: Sequence[str], pos: Position) -> str:
    """Character at pos; the line-break slot (col == len) reads as newline."""
    line = lines[pos.row]
    if pos.col < len(line):
        return line[pos.col]
    return "\n"


def step_forward(lines: Sequence[str], pos: Position) -> Position | None:
    """Next character position, crossing line breaks; None at buffer end."""
    if pos.col < len(lines[pos.row]):
        return Position(pos.row, pos.col + 1)
    if pos.row + 1 < len(lines):
        return Position(pos.row + 1, 0)
    return None


def step_backward(lines: Sequence[str], pos: Position) -> Position | None:
    """Previous character position, crossing line breaks; None at buffer start."""
    if pos.col > 0:
        return Position(pos.row, pos.col - 1)
    if pos.row > 0:
        return Position(pos.row - 1, len(lines[pos.row - 1]))
    return None


def buffer_end(lines: Sequence[str]) -> Position:
    """Position just past the last character of the buffer."""
    return Position(len(lines) - 1, len(lines[-1]))


def first_non_blank(lines: Sequence[str], row: int) -> Position:
    """First non-blank column of a row (0 for blank lines)."""
    line = lines[row]
    for i, char in enumerate(line):
        if not char.isspace():
            return Position(row, i)
    return Position(row, 0)


def last_column(lines: Sequence[str], row: int) -> int:
    """Last column Normal mode may rest on (0 on an empty line)."""
    return max(0, len(lines[row]) - 1)


def clamp_normal(lines: Sequence[str], pos: Position) -> Position:
    """Clamp a position to Normal-mode bounds (never past the last char)."""
    row = max(0, min(pos.row, len(lines) - 1))
    col = max(0, min(pos.col, last_column(lines, row)))
    return Position(row, col)


# ─────────────────────────────────────────────────────────────────
# Word Motions (w, W, e, E, b, B)
# ─────────────────────────────────────────────────────────────────


def _next_start(lines: Sequence[str], pos: Position, big_word: bool) -> Position:
    start_class = char_class(char_at(lines, pos), big_word)
    current = pos
    # Leave the current unit: cross at least one class boundary
    while True:
        nxt = step_forward(lines, current)
        if nxt is None:
            return buffer_end(lines)
        current = nxt
        if char_class(char_at(lines, current), big_word) != start_class:
            break
    # Skip whitespace to the first character of the next unit
    while char_class(char_at(lines, current), big_word) == CharClass.WHITESPACE:
        nxt = step_forward(lines, current)
        if nxt is None:
            return current
        current = nxt
    return current


def _prev_start(lines: Sequence[str], pos: Position, big_word: bool) -> Position:
    current = step_backward(lines, pos)
    if current is None:
        return pos
    while char_class(char_at(lines, current), big_word) == CharClass.WHITESPACE:
        prev = step_backward(lines, current)
        if prev is None:
            return current
        current = prev
    unit_class = char_class(char_at(lines, current), big_word)
    while True:
        prev = step_backward(lines, current)
        if prev is None or char_class(char_at(lines, prev), big_word) != unit_class:
            return current
        current = prev


def _end(lines: Sequence[str], pos: Position, big_word: bool) -> Position:
    current = step_forward(lines, pos)
    if current is None:
        return pos
    while char_class(char_at(lines, current), big_word) == CharClass.WHITESPACE:
        nxt = step_forward(lines, current)
        if nxt is None:
            # No further unit to land on
            return pos
        current = nxt
    unit_class = char_class(char_at(lines, current), big_word)
    while True:
        nxt = step_forward(lines, current)
        if nxt is None or char_class(char_at(lines, nxt), big_word) != unit_class:
            return current
        current = nxt


_WORD_RESOLVERS = {
    WordMotion.NEXT_START: _next_start,
    WordMotion.PREV_START: _prev_start,
    WordMotion.END: _end,
}


def resolve_word_motion(
    lines: Sequence[str],
    pos: Position,
    motion: WordMotion,
    count: int = 1,
    big_word: bool = False,
) -> Position:
    """Apply a word motion ``count`` times in sequence.

    Each repetition starts where the previous one landed, exactly as if the
    key had been pressed ``count`` times.
    """
    resolver = _WORD_RESOLVERS[motion]
    current = Position(*pos)
    for _ in range(max(1, count)):
        nxt = resolver(lines, current, big_word)
        if nxt == current:
            break
        current = nxt
    return current


def motion_word_forward(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to next word start (w motion)."""
    return resolve_word_motion(lines, pos, WordMotion.NEXT_START, count)


def motion_word_forward_big(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to next WORD start (W motion)."""
    return resolve_word_motion(lines, pos, WordMotion.NEXT_START, count, big_word=True)


def motion_word_backward(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to previous word start (b motion)."""
    return resolve_word_motion(lines, pos, WordMotion.PREV_START, count)


def motion_word_backward_big(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to previous WORD start (B motion)."""
    return resolve_word_motion(lines, pos, WordMotion.PREV_START, count, big_word=True)


def motion_word_end(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to next word end (e motion)."""
    return resolve_word_motion(lines, pos, WordMotion.END, count)


def motion_word_end_big(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to next WORD end (E motion)."""
    return resolve_word_motion(lines, pos, WordMotion.END, count, big_word=True)


# ─────────────────────────────────────────────────────────────────
# Basic Cursor Motions (h, j, k, l)
# ─────────────────────────────────────────────────────────────────


def motion_left(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move cursor left, staying on the line (h motion)."""
    return Position(pos.row, max(0, pos.col - max(1, count)))


def motion_right(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move cursor right, stopping on the last character (l motion)."""
    return Position(pos.row, min(last_column(lines, pos.row), pos.col + max(1, count)))


def motion_up(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move cursor up by count lines (k motion)."""
    row = max(0, pos.row - max(1, count))
    return Position(row, min(pos.col, last_column(lines, row)))


def motion_down(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move cursor down by count lines (j motion)."""
    row = min(len(lines) - 1, pos.row + max(1, count))
    return Position(row, min(pos.col, last_column(lines, row)))


# ─────────────────────────────────────────────────────────────────
# Line Position Motions (0, ^, $)
# ─────────────────────────────────────────────────────────────────


def motion_line_start(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to start of line (0 motion)."""
    return Position(pos.row, 0)


def motion_first_non_blank(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to first non-blank character (^ motion)."""
    return first_non_blank(lines, pos.row)


def motion_line_end(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to end of line, count-1 lines down ($ motion)."""
    row = min(len(lines) - 1, pos.row + max(1, count) - 1)
    return Position(row, last_column(lines, row))


# ─────────────────────────────────────────────────────────────────
# Document Position Motions (gg, G)
# ─────────────────────────────────────────────────────────────────


def motion_document_start(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to line ``count`` if given, else the first line (gg motion)."""
    row = min(len(lines) - 1, count - 1) if count > 0 else 0
    return first_non_blank(lines, row)


def motion_document_end(lines: Sequence[str], pos: Position, count: int) -> Position:
    """Move to line ``count`` if given, else the last line (G motion)."""
    row = min(len(lines) - 1, count - 1) if count > 0 else len(lines) - 1
    return first_non_blank(lines, row)


# ─────────────────────────────────────────────────────────────────
# Motion Registry - maps handler names from keymap to functions
# ─────────────────────────────────────────────────────────────────

MOTION_HANDLERS: dict[str, MotionFunc] = {
    "motion_left": motion_left,
    "motion_right": motion_right,
    "motion_up": motion_up,
    "motion_down": motion_down,
    "motion_line_start": motion_line_start,
    "motion_first_non_blank": motion_first_non_blank,
    "motion_line_end": motion_line_end,
    "motion_word_forward": motion_word_forward,
    "motion_word_forward_big": motion_word_forward_big,
    "motion_word_end": motion_word_end,
    "motion_word_end_big": motion_word_end_big,
    "motion_word_backward": motion_word_backward,
    "motion_word_backward_big": motion_word_backward_big,
    "motion_document_start": motion_document_start,
    "motion_document_end": motion_document_end,
}

# Motions whose count is "go to line N" rather than a repeat count
RAW_COUNT_MOTIONS = frozenset({"motion_document_start", "motion_document_end"})


def get_motion_handler(name: str) -> MotionFunc | None:
    """Get a motion function by handler name."""
    return MOTION_HANDLERS.get(name)
