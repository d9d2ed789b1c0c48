"""Vim operator functions.

Operators act on a resolved text object. They're the d in "dd", the c in
"cc", the y in a visual "y". Operators mutate the buffer and the yank
buffer but never the mode: a Change hands back a ``PostAction`` and the
engine performs the transition to Insert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

from .buffer import TextBuffer
from .motions import clamp_normal, first_non_blank, step_backward
from .state import EditorSession, Position
from .text_objects import ObjectKind, TextObject, text_of


class Operator(Enum):
    """Operators a text object can be handed to."""

    DELETE = auto()
    YANK = auto()
    CHANGE = auto()


class PostActionKind(Enum):
    NONE = auto()
    ENTER_INSERT = auto()


@dataclass(frozen=True)
class PostAction:
    """Mode transition the caller must perform after an operator."""

    kind: PostActionKind = PostActionKind.NONE
    position: Position | None = None

    @classmethod
    def enter_insert_at(cls, position: Position) -> PostAction:
        return cls(PostActionKind.ENTER_INSERT, position)

    @property
    def enters_insert(self) -> bool:
        return self.kind is PostActionKind.ENTER_INSERT


@dataclass
class OperatorResult:
    """Result of an operator execution."""

    modified: bool = False  # Buffer text changed
    post_action: PostAction = field(default_factory=PostAction)


# ─────────────────────────────────────────────────────────────────
# Range removal
# ─────────────────────────────────────────────────────────────────


def _line_deletion_range(lines: Sequence[str], obj: TextObject) -> tuple[Position, Position]:
    """Character range to cut for a LINE object.

    A single line other than the first takes its preceding newline with it,
    so the line above absorbs the join. The first line takes its following
    newline instead.
    """
    first, last = obj.start.row, obj.end.row
    last_row = len(lines) - 1

    if first == last and first > 0:
        return Position(first - 1, len(lines[first - 1])), Position(first, len(lines[first]))
    if last < last_row:
        return Position(first, 0), Position(last + 1, 0)
    if first > 0:
        return Position(first - 1, len(lines[first - 1])), Position(last, len(lines[last]))
    return Position(0, 0), Position(last, len(lines[last]))


def _cut_range(buffer: TextBuffer, start: Position, end: Position) -> str:
    """Jump, select, and cut; returns the removed text."""
    buffer.move_cursor(start)
    buffer.start_selection()
    buffer.move_cursor(end)
    if not buffer.cut():
        return ""
    return buffer.yank_text


def _remove_object(buffer: TextBuffer, obj: TextObject) -> str:
    """Remove an object's text from the buffer, returning the yank text."""
    lines = buffer.lines
    text = text_of(lines, obj)

    if obj.kind is ObjectKind.LINE:
        start, end = _line_deletion_range(lines, obj)
        _cut_range(buffer, start, end)
    elif obj.kind is ObjectKind.BLOCK:
        # Row by row; short rows only lose the columns they actually have
        for row in range(obj.start.row, obj.end.row + 1):
            line_len = len(lines[row])
            if obj.start.col >= line_len:
                continue
            _cut_range(
                buffer,
                Position(row, obj.start.col),
                Position(row, min(obj.end.col, line_len)),
            )
    else:
        text = _cut_range(buffer, obj.start, obj.end)

    buffer.set_yank_text(text)
    return buffer.yank_text


def _is_noop(lines: Sequence[str], obj: TextObject) -> bool:
    if obj.kind is ObjectKind.LINE:
        # Deleting the only, empty, line changes nothing
        return len(lines) == 1 and not lines[0]
    return obj.is_empty(lines)


# ─────────────────────────────────────────────────────────────────
# Core Operators
# ─────────────────────────────────────────────────────────────────


def operator_yank(buffer: TextBuffer, session: EditorSession, obj: TextObject) -> OperatorResult:
    """Copy an object into the yank buffer (y operator)."""
    lines = buffer.lines
    if obj.kind is not ObjectKind.LINE and obj.is_empty(lines):
        return OperatorResult()
    buffer.set_yank_text(text_of(lines, obj))
    session.yank.store(buffer.yank_text, linewise=obj.is_linewise)
    return OperatorResult()


def operator_delete(buffer: TextBuffer, session: EditorSession, obj: TextObject) -> OperatorResult:
    """Delete an object as one undo step (d operator)."""
    lines = buffer.lines
    if _is_noop(lines, obj):
        return OperatorResult()

    session.history.snapshot(lines, buffer.cursor)
    text = _remove_object(buffer, obj)
    session.yank.store(text, linewise=obj.is_linewise)

    remaining = buffer.lines
    if obj.is_linewise:
        row = min(obj.start.row, len(remaining) - 1)
        buffer.move_cursor(first_non_blank(remaining, row))
    else:
        buffer.move_cursor(clamp_normal(remaining, obj.start))
    return OperatorResult(modified=True)


def operator_change(buffer: TextBuffer, session: EditorSession, obj: TextObject) -> OperatorResult:
    """Delete an object and hand back an Insert transition (c operator).

    The edit opens an insert group instead of taking its own snapshot, so
    the deletion and the text typed afterwards undo together.
    """
    lines = buffer.lines
    session.history.begin_insert_group(lines, buffer.cursor)

    if _is_noop(lines, obj):
        start = obj.start if obj.kind is not ObjectKind.LINE else Position(obj.start.row, 0)
        buffer.move_cursor(start)
        return OperatorResult(post_action=PostAction.enter_insert_at(buffer.cursor))

    text = _remove_object(buffer, obj)
    session.yank.store(text, linewise=obj.is_linewise)

    if obj.is_linewise:
        remaining = buffer.lines
        if len(lines) - len(remaining) == obj.row_span:
            # Whole lines went away: reopen one empty line in their place
            row = min(obj.start.row, len(remaining))
            if row < len(remaining):
                buffer.move_cursor((row, 0))
                buffer.insert_newline()
                buffer.move_cursor((row, 0))
            else:
                buffer.move_cursor((row - 1, len(remaining[row - 1])))
                buffer.insert_newline()
        else:
            buffer.move_cursor((min(obj.start.row, len(remaining) - 1), 0))
    else:
        buffer.move_cursor(obj.start)

    return OperatorResult(modified=True, post_action=PostAction.enter_insert_at(buffer.cursor))


# ─────────────────────────────────────────────────────────────────
# Operator Registry
# ─────────────────────────────────────────────────────────────────

OPERATOR_HANDLERS = {
    Operator.DELETE: operator_delete,
    Operator.YANK: operator_yank,
    Operator.CHANGE: operator_change,
}


def apply_operator(
    buffer: TextBuffer, session: EditorSession, operator: Operator, obj: TextObject
) -> OperatorResult:
    """Apply an operator to a resolved text object."""
    return OPERATOR_HANDLERS[operator](buffer, session, obj)


# ─────────────────────────────────────────────────────────────────
# Put and replace
# ─────────────────────────────────────────────────────────────────


def paste(buffer: TextBuffer, session: EditorSession, before: bool, count: int = 1) -> bool:
    """Insert ``count`` copies of the yank buffer (p / P).

    Line-wise text goes below (or above) the cursor line; character-wise
    text goes in at the cursor column. One undo step per invocation.
    Returns True if the buffer changed.
    """
    yank = session.yank
    if yank.is_empty:
        return False

    lines = buffer.lines
    cursor = buffer.cursor
    count = max(1, count)
    session.history.snapshot(lines, cursor)

    if yank.linewise:
        content = yank.text[:-1] if yank.text.endswith("\n") else yank.text
        block = "\n".join([content] * count)
        if before:
            buffer.move_cursor((cursor.row, 0))
            buffer.insert_str(block + "\n")
            target_row = cursor.row
        else:
            buffer.move_cursor((cursor.row, len(lines[cursor.row])))
            buffer.insert_str("\n" + block)
            target_row = cursor.row + 1
        buffer.move_cursor(first_non_blank(buffer.lines, target_row))
        return True

    start = Position(cursor.row, min(cursor.col, len(lines[cursor.row])))
    buffer.move_cursor(start)
    buffer.insert_str(yank.text * count)
    if before:
        buffer.move_cursor(start)
    else:
        buffer.move_cursor(step_backward(buffer.lines, buffer.cursor) or start)
    return True


def replace_char(buffer: TextBuffer, session: EditorSession, char: str) -> bool:
    """Replace the character under the cursor (r). Returns True on change."""
    cursor = buffer.cursor
    lines = buffer.lines
    if cursor.col >= len(lines[cursor.row]):
        return False
    session.history.snapshot(lines, cursor)
    _cut_range(buffer, cursor, Position(cursor.row, cursor.col + 1))
    buffer.insert_char(char)
    buffer.move_cursor(cursor)
    return True
