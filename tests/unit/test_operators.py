"""Tests for operators, paste and replace."""

from __future__ import annotations

import pytest

from jotter.vim import EditorSession, Operator, Position, TextBuffer
from jotter.vim.operators import apply_operator, paste, replace_char
from jotter.vim.text_objects import (
    resolve_char_object,
    resolve_line_object,
    resolve_visual_object,
)
from jotter.vim.state import VisualKind


@pytest.fixture
def session():
    return EditorSession()


def make_buffer(text: str, cursor: tuple[int, int] = (0, 0)) -> TextBuffer:
    buffer = TextBuffer(text)
    buffer.move_cursor(cursor)
    return buffer


class TestDeleteOperator:
    """Tests for the delete operator."""

    def test_delete_middle_line(self, session):
        """Deleting a middle line joins its neighbours cleanly."""
        buffer = make_buffer("one\ntwo\nthree", (1, 0))
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.DELETE, obj)
        assert result.modified is True
        assert buffer.lines == ["one", "three"]
        assert buffer.cursor == Position(1, 0)
        assert session.yank.text == "two\n"
        assert session.yank.linewise is True

    def test_delete_first_line(self, session):
        """The first line takes its following newline."""
        buffer = make_buffer("one\ntwo")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert buffer.lines == ["two"]

    def test_delete_last_line(self, session):
        """The last line takes its preceding newline."""
        buffer = make_buffer("one\ntwo", (1, 0))
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert buffer.lines == ["one"]
        assert buffer.cursor == Position(0, 0)

    def test_delete_all_lines_leaves_empty_line(self, session):
        """Deleting every line leaves one empty line."""
        buffer = make_buffer("a\nb")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 2)
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert buffer.lines == [""]
        assert session.yank.text == "a\nb\n"

    def test_delete_line_in_empty_buffer_is_noop(self, session):
        """dd on a single empty line changes nothing and records no undo."""
        buffer = make_buffer("")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.DELETE, obj)
        assert result.modified is False
        assert session.yank.is_empty
        assert session.history.undo_depth == 0

    def test_delete_chars(self, session):
        """Character deletes are not line-wise."""
        buffer = make_buffer("hello", (0, 1))
        obj = resolve_char_object(buffer.lines, buffer.cursor, 2)
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert buffer.lines == ["hlo"]
        assert buffer.cursor == Position(0, 1)
        assert session.yank.text == "el"
        assert session.yank.linewise is False

    def test_delete_block_skips_short_rows(self, session):
        """Block delete only removes the columns each row has."""
        buffer = make_buffer("abcd\nef\nghij")
        obj = resolve_visual_object(
            buffer.lines, Position(0, 1), Position(2, 2), VisualKind.BLOCK
        )
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert buffer.lines == ["ad", "e", "gj"]
        assert session.yank.text == "bc\nf\nhi"
        assert buffer.cursor == Position(0, 1)

    def test_delete_records_one_undo_step(self, session):
        """Each delete pushes exactly one snapshot."""
        buffer = make_buffer("hello")
        obj = resolve_char_object(buffer.lines, buffer.cursor, 1)
        apply_operator(buffer, session, Operator.DELETE, obj)
        assert session.history.undo_depth == 1


class TestYankOperator:
    """Tests for the yank operator."""

    def test_yank_does_not_modify(self, session):
        """Yank copies without touching the buffer or history."""
        buffer = make_buffer("one\ntwo")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.YANK, obj)
        assert result.modified is False
        assert buffer.lines == ["one", "two"]
        assert session.yank.text == "one\n"
        assert session.history.undo_depth == 0

    def test_yank_empty_line(self, session):
        """yy on an empty buffer yanks a bare newline."""
        buffer = make_buffer("")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        apply_operator(buffer, session, Operator.YANK, obj)
        assert session.yank.text == "\n"
        assert session.yank.linewise is True


class TestChangeOperator:
    """Tests for the change operator."""

    def test_change_line_leaves_empty_line(self, session):
        """cc replaces the line with an empty one and asks for Insert."""
        buffer = make_buffer("one\ntwo\nthree", (1, 0))
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.CHANGE, obj)
        assert buffer.lines == ["one", "", "three"]
        assert result.post_action.enters_insert
        assert result.post_action.position == Position(1, 0)
        assert session.history.in_insert_group

    def test_change_last_line(self, session):
        """Changing the last line reopens an empty last line."""
        buffer = make_buffer("a\nb", (1, 0))
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.CHANGE, obj)
        assert buffer.lines == ["a", ""]
        assert result.post_action.position == Position(1, 0)

    def test_change_only_line(self, session):
        """Changing the only line does not add a second empty line."""
        buffer = make_buffer("abc")
        obj = resolve_line_object(buffer.lines, buffer.cursor, 1)
        apply_operator(buffer, session, Operator.CHANGE, obj)
        assert buffer.lines == [""]

    def test_change_empty_object_still_enters_insert(self, session):
        """An empty object changes nothing but still requests Insert."""
        buffer = make_buffer("ab", (0, 2))
        obj = resolve_char_object(buffer.lines, buffer.cursor, 1)
        result = apply_operator(buffer, session, Operator.CHANGE, obj)
        assert result.modified is False
        assert result.post_action.enters_insert
        assert buffer.lines == ["ab"]


class TestPaste:
    """Tests for p and P."""

    def test_paste_lines_after(self, session):
        """Line-wise p inserts below the cursor line."""
        buffer = make_buffer("one\nthree")
        session.yank.store("two\n", linewise=True)
        assert paste(buffer, session, before=False) is True
        assert buffer.lines == ["one", "two", "three"]
        assert buffer.cursor == Position(1, 0)

    def test_paste_lines_before(self, session):
        """Line-wise P inserts above the cursor line."""
        buffer = make_buffer("one\nthree", (1, 2))
        session.yank.store("two\n", linewise=True)
        paste(buffer, session, before=True)
        assert buffer.lines == ["one", "two", "three"]
        assert buffer.cursor == Position(1, 0)

    def test_paste_chars_at_cursor(self, session):
        """Char-wise p inserts at the cursor and rests on the last char."""
        buffer = make_buffer("hlo", (0, 1))
        session.yank.store("el")
        paste(buffer, session, before=False)
        assert buffer.lines == ["hello"]
        assert buffer.cursor == Position(0, 2)

    def test_paste_before_rests_on_first_char(self, session):
        """Char-wise P rests on the first inserted char."""
        buffer = make_buffer("hlo", (0, 1))
        session.yank.store("el")
        paste(buffer, session, before=True)
        assert buffer.lines == ["hello"]
        assert buffer.cursor == Position(0, 1)

    def test_paste_with_count(self, session):
        """A count pastes the text that many times in one undo step."""
        buffer = make_buffer("")
        session.yank.store("ab")
        paste(buffer, session, before=False, count=3)
        assert buffer.lines == ["ababab"]
        assert session.history.undo_depth == 1

    def test_paste_empty_yank(self, session):
        """Nothing to paste leaves the buffer and history alone."""
        buffer = make_buffer("abc")
        assert paste(buffer, session, before=False) is False
        assert session.history.undo_depth == 0


class TestReplaceChar:
    """Tests for r."""

    def test_replace_char(self, session):
        """r swaps the character under the cursor."""
        buffer = make_buffer("abc", (0, 1))
        assert replace_char(buffer, session, "x") is True
        assert buffer.lines == ["axc"]
        assert buffer.cursor == Position(0, 1)

    def test_replace_on_empty_line(self, session):
        """r on an empty line is a no-op."""
        buffer = make_buffer("")
        assert replace_char(buffer, session, "x") is False
        assert session.history.undo_depth == 0
