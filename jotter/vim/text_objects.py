"""Vim text object functions.

Text objects turn a count-driven motion or an active visual selection into
a concrete range for an operator to act on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from .motions import buffer_end, step_forward
from .state import Position, VisualKind


class ObjectKind(Enum):
    """Shape of a text object."""

    CHAR = auto()   # Character-wise, end exclusive
    LINE = auto()   # Whole lines, end.row is the last covered row
    BLOCK = auto()  # Rectangle, end column exclusive on every row


@dataclass(frozen=True)
class TextObject:
    """A resolved range of text.

    For LINE objects ``start`` is ``(first_row, 0)`` and ``end`` is
    ``(last_row, len(last_line))``, so a single-line object has
    ``start.row == end.row``.
    """

    kind: ObjectKind
    start: Position
    end: Position

    @property
    def is_linewise(self) -> bool:
        return self.kind is ObjectKind.LINE

    @property
    def row_span(self) -> int:
        return self.end.row - self.start.row + 1

    def is_empty(self, lines: Sequence[str]) -> bool:
        """True if applying an operator to this object would change nothing."""
        if self.kind is ObjectKind.LINE:
            return False
        if self.kind is ObjectKind.BLOCK:
            return not any(
                self.start.col < len(lines[row])
                for row in range(self.start.row, self.end.row + 1)
            )
        return self.start >= self.end


def text_of(lines: Sequence[str], obj: TextObject) -> str:
    """Text covered by an object, as it goes into the yank buffer."""
    if obj.kind is ObjectKind.LINE:
        return "\n".join(lines[obj.start.row : obj.end.row + 1]) + "\n"
    if obj.kind is ObjectKind.BLOCK:
        # Rows too short to reach the block contribute nothing
        return "\n".join(
            lines[row][obj.start.col : obj.end.col]
            for row in range(obj.start.row, obj.end.row + 1)
            if obj.start.col < len(lines[row])
        )
    return text_between(lines, obj.start, obj.end)


def text_between(lines: Sequence[str], start: Position, end: Position) -> str:
    """Text between two positions (end exclusive, line breaks as newlines)."""
    if start > end:
        start, end = end, start
    if start.row == end.row:
        return lines[start.row][start.col : end.col]
    parts = [lines[start.row][start.col :]]
    parts.extend(lines[start.row + 1 : end.row])
    parts.append(lines[end.row][: end.col])
    return "\n".join(parts)


# ─────────────────────────────────────────────────────────────────
# Count-driven objects (dd/yy/cc, x, X, D/C)
# ─────────────────────────────────────────────────────────────────


def resolve_line_object(lines: Sequence[str], cursor: Position, count: int = 1) -> TextObject:
    """``count`` whole lines starting at the cursor line, truncated at the end."""
    last_row = min(len(lines) - 1, cursor.row + max(1, count) - 1)
    return TextObject(
        ObjectKind.LINE,
        Position(cursor.row, 0),
        Position(last_row, len(lines[last_row])),
    )


def resolve_char_object(lines: Sequence[str], cursor: Position, count: int = 1) -> TextObject:
    """``count`` characters forward from the cursor (x).

    Line breaks count as characters, so the object may span lines; it
    stops at the end of the buffer.
    """
    end = cursor
    for _ in range(max(1, count)):
        nxt = step_forward(lines, end)
        if nxt is None:
            break
        end = nxt
    return TextObject(ObjectKind.CHAR, cursor, end)


def resolve_line_end_object(lines: Sequence[str], cursor: Position, count: int = 1) -> TextObject:
    """From the cursor to the end of the line ``count-1`` lines down (D/C)."""
    row = min(len(lines) - 1, cursor.row + max(1, count) - 1)
    start = Position(cursor.row, min(cursor.col, len(lines[cursor.row])))
    return TextObject(ObjectKind.CHAR, start, Position(row, len(lines[row])))


def resolve_char_before_object(lines: Sequence[str], cursor: Position, count: int = 1) -> TextObject:
    """Up to ``count`` characters before the cursor on its line (X)."""
    start = Position(cursor.row, max(0, cursor.col - max(1, count)))
    return TextObject(ObjectKind.CHAR, start, cursor)


# ─────────────────────────────────────────────────────────────────
# Visual selection objects
# ─────────────────────────────────────────────────────────────────


def resolve_visual_object(
    lines: Sequence[str], anchor: Position, cursor: Position, kind: VisualKind
) -> TextObject:
    """Object covered by a visual selection between anchor and cursor."""
    start, end = sorted((Position(*anchor), Position(*cursor)))

    if kind is VisualKind.LINE:
        return TextObject(
            ObjectKind.LINE,
            Position(start.row, 0),
            Position(end.row, len(lines[end.row])),
        )

    if kind is VisualKind.BLOCK:
        left = min(anchor[1], cursor[1])
        right = max(anchor[1], cursor[1])
        return TextObject(
            ObjectKind.BLOCK,
            Position(start.row, left),
            Position(end.row, right + 1),
        )

    # Inclusive of the character under the later end
    if end.col < len(lines[end.row]):
        after = Position(end.row, end.col + 1)
    else:
        after = step_forward(lines, end) or buffer_end(lines)
    return TextObject(ObjectKind.CHAR, start, after)
