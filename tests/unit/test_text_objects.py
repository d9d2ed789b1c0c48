"""Tests for text object resolution."""

from __future__ import annotations

from jotter.vim import ObjectKind, Position, TextObject, VisualKind
from jotter.vim.text_objects import (
    resolve_char_before_object,
    resolve_char_object,
    resolve_line_end_object,
    resolve_line_object,
    resolve_visual_object,
    text_of,
)


class TestCountObjects:
    """Tests for objects built from the cursor and a count."""

    def test_line_object_truncates_at_buffer_end(self):
        """A count larger than the remaining lines stops at the last line."""
        lines = ["a", "b", "c"]
        obj = resolve_line_object(lines, Position(1, 0), 5)
        assert obj == TextObject(ObjectKind.LINE, Position(1, 0), Position(2, 1))
        assert obj.row_span == 2
        assert text_of(lines, obj) == "b\nc\n"

    def test_char_object_crosses_line_break(self):
        """x with a count counts the line break as a character."""
        lines = ["ab", "cd"]
        obj = resolve_char_object(lines, Position(0, 1), 3)
        assert obj.end == Position(1, 1)
        assert text_of(lines, obj) == "b\nc"

    def test_char_object_at_buffer_end_is_empty(self):
        """Nothing to take at the end of the buffer."""
        lines = ["ab"]
        obj = resolve_char_object(lines, Position(0, 2), 1)
        assert obj.is_empty(lines)

    def test_char_before_object_stays_on_line(self):
        """X takes at most the characters before the cursor."""
        obj = resolve_char_before_object(["abc"], Position(0, 2), 5)
        assert obj.start == Position(0, 0)
        assert obj.end == Position(0, 2)

    def test_char_before_at_column_zero_is_empty(self):
        """X at column 0 has nothing to take."""
        lines = ["abc"]
        assert resolve_char_before_object(lines, Position(0, 0), 1).is_empty(lines)

    def test_line_end_object(self):
        """D/C cover the cursor to the end of the line."""
        lines = ["hello"]
        obj = resolve_line_end_object(lines, Position(0, 2), 1)
        assert text_of(lines, obj) == "llo"


class TestVisualObjects:
    """Tests for visual selection objects."""

    def test_char_selection_is_inclusive(self):
        """Both ends of a char selection are included, in either direction."""
        lines = ["hello"]
        obj = resolve_visual_object(lines, Position(0, 3), Position(0, 1), VisualKind.CHAR)
        assert obj.start == Position(0, 1)
        assert obj.end == Position(0, 4)
        assert text_of(lines, obj) == "ell"

    def test_char_selection_ending_on_empty_line(self):
        """A selection ending on an empty line includes its line break."""
        lines = ["ab", "", "cd"]
        obj = resolve_visual_object(lines, Position(0, 1), Position(1, 0), VisualKind.CHAR)
        assert obj.end == Position(2, 0)
        assert text_of(lines, obj) == "b\n\n"

    def test_line_selection(self):
        """Line selections cover whole lines."""
        lines = ["a", "b", "c"]
        obj = resolve_visual_object(lines, Position(1, 0), Position(0, 0), VisualKind.LINE)
        assert obj.is_linewise
        assert text_of(lines, obj) == "a\nb\n"

    def test_block_selection(self):
        """Block text is the column slice of each row."""
        lines = ["abcd", "ef", "ghij"]
        obj = resolve_visual_object(lines, Position(0, 1), Position(2, 2), VisualKind.BLOCK)
        assert obj == TextObject(ObjectKind.BLOCK, Position(0, 1), Position(2, 3))
        assert text_of(lines, obj) == "bc\nf\nhi"

    def test_block_skips_rows_left_of_block(self):
        """Rows that end before the block's left column add nothing."""
        lines = ["abcd", "x", "abcd"]
        obj = resolve_visual_object(lines, Position(0, 1), Position(2, 1), VisualKind.BLOCK)
        assert text_of(lines, obj) == "b\nb"

    def test_block_past_all_lines_is_empty(self):
        """A block right of every row's text covers nothing."""
        lines = ["ab", "c"]
        obj = resolve_visual_object(lines, Position(0, 5), Position(1, 6), VisualKind.BLOCK)
        assert obj.is_empty(lines)
