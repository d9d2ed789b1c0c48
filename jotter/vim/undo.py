"""Snapshot-based undo/redo with insert-group batching.

Every mutating command pushes a full copy of the buffer lines before it
edits. An insert group brackets one Insert-mode session: the snapshot is
taken once when the session starts and pushed when it is committed, so a
single undo reverts everything typed in between.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Sequence

DEFAULT_UNDO_LIMIT = 200


@dataclass(frozen=True)
class Snapshot:
    """Buffer contents plus the cursor at the time of the snapshot."""

    lines: tuple[str, ...]
    cursor: tuple[int, int]


class UndoHistory:
    """Linear undo/redo history (no branching).

    Pushing a new snapshot clears the redo stack.
    """

    def __init__(self, limit: int = DEFAULT_UNDO_LIMIT) -> None:
        if limit < 1:
            raise ValueError("Undo limit must be at least 1")
        self._undo: deque[Snapshot] = deque(maxlen=limit)
        self._redo: list[Snapshot] = []
        self._group: Snapshot | None = None

    @property
    def limit(self) -> int:
        return self._undo.maxlen or DEFAULT_UNDO_LIMIT

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def in_insert_group(self) -> bool:
        """True between begin_insert_group and commit_insert_group."""
        return self._group is not None

    def snapshot(self, lines: Sequence[str], cursor: tuple[int, int]) -> None:
        """Record the state before a single atomic edit.

        Ignored while an insert group is open: the group's snapshot
        already covers every edit of the session.
        """
        if self._group is not None:
            return
        self._push(Snapshot(tuple(lines), tuple(cursor)))

    def begin_insert_group(self, lines: Sequence[str], cursor: tuple[int, int]) -> None:
        """Open an insert group, capturing the state once."""
        if self._group is not None:
            return
        self._group = Snapshot(tuple(lines), tuple(cursor))

    def commit_insert_group(self, lines: Sequence[str]) -> bool:
        """Close the open insert group.

        The group becomes one undo step only if the buffer actually changed.
        Returns True if a snapshot was pushed.
        """
        group = self._group
        self._group = None
        if group is None or group.lines == tuple(lines):
            return False
        self._push(group)
        return True

    def undo(self, lines: Sequence[str], cursor: tuple[int, int]) -> Snapshot | None:
        """Pop the most recent snapshot, saving the current state for redo.

        Returns None when there is nothing to undo or an insert group is open.
        """
        if self._group is not None or not self._undo:
            return None
        restored = self._undo.pop()
        self._redo.append(Snapshot(tuple(lines), tuple(cursor)))
        return restored

    def redo(self, lines: Sequence[str], cursor: tuple[int, int]) -> Snapshot | None:
        """Pop the redo stack, saving the current state for undo."""
        if self._group is not None or not self._redo:
            return None
        restored = self._redo.pop()
        self._undo.append(Snapshot(tuple(lines), tuple(cursor)))
        return restored

    def clear(self) -> None:
        """Discard all history, including an open insert group."""
        self._undo.clear()
        self._redo.clear()
        self._group = None

    def _push(self, snapshot: Snapshot) -> None:
        self._undo.append(snapshot)
        self._redo.clear()
