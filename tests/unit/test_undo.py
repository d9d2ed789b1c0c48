"""Tests for the snapshot undo history."""

from __future__ import annotations

import pytest

from jotter.vim import UndoHistory


class TestUndoHistory:
    """Tests for snapshot, undo and redo."""

    def test_undo_restores_snapshot(self):
        """Undo returns the state saved before the edit."""
        history = UndoHistory()
        history.snapshot(["a"], (0, 0))
        restored = history.undo(["ab"], (0, 1))
        assert restored.lines == ("a",)
        assert restored.cursor == (0, 0)
        assert history.redo_depth == 1

    def test_redo_reapplies(self):
        """Redo returns the state undo moved away from."""
        history = UndoHistory()
        history.snapshot(["a"], (0, 0))
        history.undo(["ab"], (0, 1))
        restored = history.redo(["a"], (0, 0))
        assert restored.lines == ("ab",)
        assert history.undo_depth == 1

    def test_new_snapshot_clears_redo(self):
        """History is linear: a new edit discards the redo stack."""
        history = UndoHistory()
        history.snapshot(["a"], (0, 0))
        history.undo(["ab"], (0, 1))
        history.snapshot(["a"], (0, 0))
        assert history.redo_depth == 0

    def test_empty_history(self):
        """Nothing to undo or redo returns None."""
        history = UndoHistory()
        assert history.undo(["a"], (0, 0)) is None
        assert history.redo(["a"], (0, 0)) is None

    def test_limit_drops_oldest(self):
        """Depth is bounded by the limit."""
        history = UndoHistory(limit=2)
        for text in ("a", "b", "c"):
            history.snapshot([text], (0, 0))
        assert history.undo_depth == 2
        assert history.undo(["d"], (0, 0)).lines == ("c",)
        assert history.undo(["c"], (0, 0)).lines == ("b",)
        assert history.undo(["b"], (0, 0)) is None

    def test_invalid_limit(self):
        """A limit below one is rejected."""
        with pytest.raises(ValueError):
            UndoHistory(limit=0)


class TestInsertGroups:
    """Tests for insert-group batching."""

    def test_group_is_one_step(self):
        """Edits inside a group undo together."""
        history = UndoHistory()
        history.begin_insert_group([""], (0, 0))
        history.snapshot(["a"], (0, 1))
        assert history.commit_insert_group(["ab"]) is True
        assert history.undo_depth == 1
        assert history.undo(["ab"], (0, 2)).lines == ("",)

    def test_unchanged_group_is_dropped(self):
        """A group that changed nothing adds no step."""
        history = UndoHistory()
        history.begin_insert_group(["a"], (0, 0))
        assert history.commit_insert_group(["a"]) is False
        assert history.undo_depth == 0

    def test_undo_blocked_while_group_open(self):
        """Undo is refused mid-group."""
        history = UndoHistory()
        history.snapshot(["a"], (0, 0))
        history.begin_insert_group(["b"], (0, 0))
        assert history.in_insert_group
        assert history.undo(["bc"], (0, 0)) is None

    def test_clear_discards_everything(self):
        """Clear drops both stacks and any open group."""
        history = UndoHistory()
        history.snapshot(["a"], (0, 0))
        history.begin_insert_group(["b"], (0, 0))
        history.clear()
        assert history.undo_depth == 0
        assert not history.in_insert_group
