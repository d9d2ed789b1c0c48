"""Line-oriented text buffer the vim engine edits.

Wraps Textual's ``Document`` (the model behind ``TextArea``) with a cursor,
a selection anchor, and a buffer-local yank slot. The engine only talks to
the buffer through these primitives; rendering reads ``lines`` and
``cursor`` after each key has been handled.
"""

from __future__ import annotations

from typing import Sequence

from rich.cells import cell_len
from textual.document._document import Document

from .state import Position


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


class TextBuffer:
    """Multi-line text with a cursor in character units."""

    def __init__(self, text: str = "") -> None:
        self._document = Document(text)
        self._cursor = Position(0, 0)
        self._selection_anchor: Position | None = None
        self._yank_text = ""

    # ─────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────

    @property
    def lines(self) -> list[str]:
        """Document as list of lines (a copy, never empty)."""
        return list(self._document.lines) or [""]

    @property
    def text(self) -> str:
        """Full document text."""
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def cursor(self) -> Position:
        """Current cursor position."""
        return self._cursor

    @property
    def current_line(self) -> str:
        return self._line(self._cursor.row)

    @property
    def cursor_cell_offset(self) -> int:
        """Terminal cells before the cursor on its line (wide chars count 2)."""
        return cell_len(self.current_line[: self._cursor.col])

    @property
    def selection_range(self) -> tuple[Position, Position] | None:
        """Ordered (start, end) of the active selection, if any."""
        if self._selection_anchor is None:
            return None
        start, end = sorted((self._selection_anchor, self._cursor))
        return start, end

    @property
    def yank_text(self) -> str:
        """Text removed by the last ``cut``."""
        return self._yank_text

    def set_yank_text(self, text: str) -> None:
        self._yank_text = text

    # ─────────────────────────────────────────────────────────────────
    # Cursor
    # ─────────────────────────────────────────────────────────────────

    def move_cursor(self, pos: tuple[int, int]) -> None:
        """Jump to an absolute position, clamped to the document."""
        self._cursor = self._clamp(pos)

    def start_selection(self) -> None:
        """Anchor a selection at the cursor."""
        self._selection_anchor = self._cursor

    def cancel_selection(self) -> None:
        self._selection_anchor = None

    # ─────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────

    def insert_str(self, text: str) -> None:
        """Insert text at the cursor; the cursor ends after it."""
        if not text:
            return
        result = self._document.replace_range(self._cursor, self._cursor, text)
        self._cursor = Position(*result.end_location)

    def insert_char(self, char: str) -> None:
        self.insert_str(char)

    def insert_newline(self) -> None:
        self.insert_str("\n")

    def delete_str(self, count: int) -> bool:
        """Delete ``count`` characters forward; a line break counts as one."""
        end = self._cursor
        for _ in range(count):
            nxt = self._next_position(end)
            if nxt is None:
                break
            end = nxt
        if end == self._cursor:
            return False
        self._document.replace_range(self._cursor, end, "")
        return True

    def delete_next_char(self) -> bool:
        return self.delete_str(1)

    def delete_char(self) -> bool:
        """Delete the character before the cursor (backspace)."""
        start = self._prev_position(self._cursor)
        if start is None:
            return False
        self._document.replace_range(start, self._cursor, "")
        self._cursor = start
        return True

    def delete_word(self) -> bool:
        """Delete back to the previous word boundary (ctrl+w)."""
        row, col = self._cursor
        if col == 0:
            return self.delete_char()

        line = self._line(row)
        start = col
        while start > 0 and line[start - 1].isspace():
            start -= 1
        if start > 0:
            word = _is_word_char(line[start - 1])
            while (
                start > 0
                and not line[start - 1].isspace()
                and _is_word_char(line[start - 1]) == word
            ):
                start -= 1

        self._document.replace_range((row, start), self._cursor, "")
        self._cursor = Position(row, start)
        return True

    def cut(self) -> bool:
        """Remove the selected range into the yank slot.

        The cursor ends at the start of the removed range. Returns False
        (and clears the selection) when nothing is selected.
        """
        selection = self.selection_range
        self._selection_anchor = None
        if selection is None or selection[0] == selection[1]:
            return False
        start, end = selection
        self._yank_text = self._document.get_text_range(start, end)
        self._document.replace_range(start, end, "")
        self._cursor = start
        return True

    def set_lines(self, lines: Sequence[str]) -> None:
        """Replace the whole document, keeping the cursor clamped."""
        current = self.lines
        end = (len(current) - 1, len(current[-1]))
        self._document.replace_range((0, 0), end, "\n".join(lines))
        self._selection_anchor = None
        self._cursor = self._clamp(self._cursor)

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    def _line(self, row: int) -> str:
        lines = self._document.lines
        if 0 <= row < len(lines):
            return lines[row]
        return ""

    def _clamp(self, pos: tuple[int, int]) -> Position:
        row = max(0, min(pos[0], self.line_count - 1))
        col = max(0, min(pos[1], len(self._line(row))))
        return Position(row, col)

    def _next_position(self, pos: Position) -> Position | None:
        row, col = pos
        if col < len(self._line(row)):
            return Position(row, col + 1)
        if row + 1 < self.line_count:
            return Position(row + 1, 0)
        return None

    def _prev_position(self, pos: Position) -> Position | None:
        row, col = pos
        if col > 0:
            return Position(row, col - 1)
        if row > 0:
            return Position(row - 1, len(self._line(row - 1)))
        return None
