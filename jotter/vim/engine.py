"""Vim emulation engine.

The VimEngine is the main controller that:
- Handles key events from the composer
- Manages vim state (mode, pending command, count)
- Dispatches to motions, text objects, and operators
- Keeps undo history consistent across mode transitions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .buffer import TextBuffer
from .keymap import BindingType, VimKeymapProvider, get_vim_keymap
from .motions import (
    RAW_COUNT_MOTIONS,
    clamp_normal,
    first_non_blank,
    get_motion_handler,
    motion_document_start,
)
from .operators import Operator, apply_operator, paste, replace_char
from .state import EditorSession, PendingCommand, Position, VimMode, VisualKind
from .text_objects import (
    TextObject,
    resolve_char_before_object,
    resolve_char_object,
    resolve_line_end_object,
    resolve_line_object,
    resolve_visual_object,
)

ESCAPE = "escape"
INSERT_TAB = "    "

_PENDING_BY_HANDLER = {
    "pending_delete": PendingCommand.DELETE,
    "pending_yank": PendingCommand.YANK,
    "pending_change": PendingCommand.CHANGE,
    "pending_go_to_top": PendingCommand.GO_TO_TOP,
    "pending_replace": PendingCommand.REPLACE,
}

# Doubled forms: pending command -> (completing key, operator)
_LINE_OPERATORS = {
    PendingCommand.DELETE: ("d", Operator.DELETE),
    PendingCommand.YANK: ("y", Operator.YANK),
    PendingCommand.CHANGE: ("c", Operator.CHANGE),
}

_VISUAL_KIND_BY_SWITCH = {
    "mode_visual": VisualKind.CHAR,
    "mode_visual_line": VisualKind.LINE,
    "mode_visual_block": VisualKind.BLOCK,
}


def has_ctrl(key: str) -> bool:
    """True if the key name carries the Ctrl modifier."""
    return key.startswith("ctrl+")


def is_text_key(key: str) -> bool:
    """True for a single printable character."""
    return len(key) == 1 and key.isprintable()


@dataclass
class KeyResult:
    """Result of processing a key event."""

    consumed: bool = True       # Was the key handled?
    modified: bool = False      # Did the buffer text change?
    mode_changed: bool = False  # Did the key switch modes?


class VimEngine:
    """Main vim emulation controller.

    This class sits between key events and the text buffer, translating
    vim commands into buffer operations. All state lives in the
    ``EditorSession`` so the composer can own and reset it.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        session: EditorSession | None = None,
        keymap: VimKeymapProvider | None = None,
    ) -> None:
        self._buffer = buffer
        self._session = session or EditorSession()
        self._keymap = keymap or get_vim_keymap()

        # Callback for mode changes
        self._on_mode_change: Callable[[VimMode], None] | None = None

        self._actions: dict[str, Callable[[int], KeyResult]] = {
            "action_insert": self._action_insert,
            "action_insert_line_start": self._action_insert_line_start,
            "action_append": self._action_append,
            "action_append_line_end": self._action_append_line_end,
            "action_open_below": self._action_open_below,
            "action_open_above": self._action_open_above,
            "action_delete_char": self._action_delete_char,
            "action_delete_char_before": self._action_delete_char_before,
            "action_substitute": self._action_substitute,
            "action_substitute_line": self._action_substitute_line,
            "action_delete_to_eol": self._action_delete_to_eol,
            "action_change_to_eol": self._action_change_to_eol,
            "action_paste_after": self._action_paste_after,
            "action_paste_before": self._action_paste_before,
            "action_undo": self._action_undo,
            "action_redo": self._action_redo,
        }

    @property
    def mode(self) -> VimMode:
        """Current vim mode."""
        return self._session.mode

    @property
    def session(self) -> EditorSession:
        """Current editing session state."""
        return self._session

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def status_label(self) -> str:
        """Mode label for the status line."""
        return self._session.mode.label

    @property
    def status_hint(self) -> str:
        """One-line hint shown right after entering a visual mode."""
        return self._session.status_hint

    def set_mode_callback(self, callback: Callable[[VimMode], None]) -> None:
        """Set callback for mode changes."""
        self._on_mode_change = callback

    # ─────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────

    def handle_key(self, key: str) -> KeyResult:
        """Process a key event.

        Args:
            key: The key that was pressed (e.g., "j", "d", "escape", "ctrl+r")

        Returns:
            KeyResult indicating how the key was handled
        """
        mode = self._session.mode
        try:
            if mode is VimMode.INSERT:
                result = self.handle_insert(key)
            elif mode.is_visual:
                result = self.handle_visual(key, mode.visual_kind)
            else:
                result = self.handle_normal(key)
        except Exception:
            # Never leave an insert group open behind an error
            self._session.history.commit_insert_group(self._buffer.lines)
            self._set_mode(VimMode.NORMAL)
            raise

        result.mode_changed = self._session.mode is not mode
        return result

    def enter_insert_mode(self, position: Position | None = None) -> None:
        """Enter insert mode, opening an insert group."""
        if position is not None:
            self._buffer.move_cursor(position)
        self._session.history.begin_insert_group(self._buffer.lines, self._buffer.cursor)
        self._set_mode(VimMode.INSERT)

    def exit_insert_mode(self) -> None:
        """Commit the insert group and return to normal mode."""
        self._set_mode(VimMode.NORMAL)

    def reset(self) -> None:
        """Return to a fresh Normal state (composer entry or exit)."""
        self._set_mode(VimMode.NORMAL)

    def clear(self) -> None:
        """Empty the buffer and discard undo history."""
        self.reset()
        self._buffer.set_lines([""])
        self._buffer.move_cursor((0, 0))
        self._session.history.clear()

    # ─────────────────────────────────────────────────────────────────
    # Mode transitions
    # ─────────────────────────────────────────────────────────────────

    def _set_mode(self, mode: VimMode, anchor: Position | None = None) -> None:
        old_mode = self._session.mode
        if old_mode is VimMode.INSERT and mode is not VimMode.INSERT:
            self._session.history.commit_insert_group(self._buffer.lines)

        self._session.enter_mode(mode, anchor)
        if mode is not VimMode.INSERT:
            self._clamp_cursor()

        if mode is not old_mode and self._on_mode_change:
            self._on_mode_change(mode)

    def _clamp_cursor(self) -> None:
        """Keep the cursor off the past-end column outside Insert mode."""
        self._buffer.move_cursor(clamp_normal(self._buffer.lines, self._buffer.cursor))

    # ─────────────────────────────────────────────────────────────────
    # Insert Mode
    # ─────────────────────────────────────────────────────────────────

    def handle_insert(self, key: str) -> KeyResult:
        """Handle keys in insert mode."""
        buffer = self._buffer
        row, col = buffer.cursor

        if key == ESCAPE:
            self.exit_insert_mode()
            return KeyResult()

        if key == "enter":
            buffer.insert_newline()
        elif key == "tab":
            buffer.insert_str(INSERT_TAB)
        elif key == "space":
            buffer.insert_char(" ")
        elif key == "backspace":
            return KeyResult(modified=buffer.delete_char())
        elif key == "delete":
            return KeyResult(modified=buffer.delete_next_char())
        elif key == "ctrl+w":
            return KeyResult(modified=buffer.delete_word())
        elif key in ("left", "right", "up", "down", "home", "end"):
            self._move_insert_cursor(key, row, col)
            return KeyResult()
        elif is_text_key(key):
            buffer.insert_char(key)
        else:
            return KeyResult(consumed=False)

        return KeyResult(modified=True)

    def _move_insert_cursor(self, key: str, row: int, col: int) -> None:
        buffer = self._buffer
        if key == "left":
            buffer.move_cursor((row, max(0, col - 1)))
        elif key == "right":
            buffer.move_cursor((row, col + 1))
        elif key == "up":
            buffer.move_cursor((max(0, row - 1), col))
        elif key == "down":
            buffer.move_cursor((row + 1, col))
        elif key == "home":
            buffer.move_cursor((row, 0))
        else:
            buffer.move_cursor((row, len(buffer.current_line)))

    # ─────────────────────────────────────────────────────────────────
    # Normal Mode
    # ─────────────────────────────────────────────────────────────────

    def handle_normal(self, key: str) -> KeyResult:
        """Handle keys in normal mode."""
        session = self._session

        # Two-key commands first; a mismatch falls through as a fresh key
        if session.pending_command is not None:
            completed = self._complete_pending(key)
            if completed is not None:
                return completed

        if not has_ctrl(key) and session.accumulate_digit(key):
            return KeyResult()

        binding = self._keymap.lookup(key)
        if binding is None:
            session.reset_pending()
            return KeyResult(consumed=False)

        if binding.type == BindingType.MOTION:
            self._execute_motion(binding.handler)
            return KeyResult()

        if binding.type == BindingType.PENDING:
            # Count stays until the second key arrives (3dd)
            session.pending_command = _PENDING_BY_HANDLER[binding.handler]
            return KeyResult()

        if binding.type == BindingType.MODE_SWITCH:
            kind = _VISUAL_KIND_BY_SWITCH[binding.handler]
            self._set_mode(VimMode.for_visual(kind), anchor=self._buffer.cursor)
            return KeyResult()

        action = self._actions[binding.handler]
        result = action(session.take_count_or_one())
        if self._session.mode is VimMode.NORMAL:
            self._clamp_cursor()
        return result

    def _complete_pending(self, key: str) -> KeyResult | None:
        """Offer a key to the pending command.

        Returns None when the key does not complete it; the pending command
        and count are cleared either way.
        """
        session = self._session
        pending = session.pending_command
        count = session.take_count()
        session.pending_command = None

        if pending is PendingCommand.REPLACE:
            if key == "space":
                key = " "
            if not is_text_key(key):
                return None
            modified = replace_char(self._buffer, session, key)
            return KeyResult(modified=modified)

        if pending is PendingCommand.GO_TO_TOP:
            if key != "g":
                return None
            pos = motion_document_start(self._buffer.lines, self._buffer.cursor, count)
            self._buffer.move_cursor(pos)
            return KeyResult()

        expected, operator = _LINE_OPERATORS[pending]
        if key != expected:
            return None
        obj = resolve_line_object(self._buffer.lines, self._buffer.cursor, max(1, count))
        return self._apply(operator, obj)

    def _execute_motion(self, handler_name: str) -> None:
        """Move the cursor by a motion, consuming the count."""
        handler = get_motion_handler(handler_name)
        if handler is None:
            return
        count = self._session.take_count()
        if handler_name not in RAW_COUNT_MOTIONS:
            count = max(1, count)
        lines = self._buffer.lines
        pos = handler(lines, self._buffer.cursor, count)
        self._buffer.move_cursor(clamp_normal(lines, pos))

    def _apply(self, operator: Operator, obj: TextObject) -> KeyResult:
        """Apply an operator and perform the transition it asks for."""
        result = apply_operator(self._buffer, self._session, operator, obj)
        if result.post_action.enters_insert:
            self.enter_insert_mode(result.post_action.position)
        elif self._session.mode is VimMode.NORMAL:
            self._clamp_cursor()
        return KeyResult(modified=result.modified)

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    def _action_insert(self, count: int) -> KeyResult:
        self.enter_insert_mode()
        return KeyResult()

    def _action_insert_line_start(self, count: int) -> KeyResult:
        lines = self._buffer.lines
        self.enter_insert_mode(first_non_blank(lines, self._buffer.cursor.row))
        return KeyResult()

    def _action_append(self, count: int) -> KeyResult:
        # Insert mode may sit past the last character
        row, col = self._buffer.cursor
        line_len = len(self._buffer.current_line)
        self.enter_insert_mode(Position(row, min(col + 1, line_len)))
        return KeyResult()

    def _action_append_line_end(self, count: int) -> KeyResult:
        row = self._buffer.cursor.row
        self.enter_insert_mode(Position(row, len(self._buffer.current_line)))
        return KeyResult()

    def _action_open_below(self, count: int) -> KeyResult:
        row = self._buffer.cursor.row
        self.enter_insert_mode(Position(row, len(self._buffer.current_line)))
        self._buffer.insert_newline()
        return KeyResult(modified=True)

    def _action_open_above(self, count: int) -> KeyResult:
        row = self._buffer.cursor.row
        self.enter_insert_mode(Position(row, 0))
        self._buffer.insert_newline()
        self._buffer.move_cursor((row, 0))
        return KeyResult(modified=True)

    def _action_delete_char(self, count: int) -> KeyResult:
        obj = resolve_char_object(self._buffer.lines, self._buffer.cursor, count)
        return self._apply(Operator.DELETE, obj)

    def _action_delete_char_before(self, count: int) -> KeyResult:
        obj = resolve_char_before_object(self._buffer.lines, self._buffer.cursor, count)
        return self._apply(Operator.DELETE, obj)

    def _action_substitute(self, count: int) -> KeyResult:
        obj = resolve_char_object(self._buffer.lines, self._buffer.cursor, count)
        return self._apply(Operator.CHANGE, obj)

    def _action_substitute_line(self, count: int) -> KeyResult:
        obj = resolve_line_object(self._buffer.lines, self._buffer.cursor, 1)
        return self._apply(Operator.CHANGE, obj)

    def _action_delete_to_eol(self, count: int) -> KeyResult:
        obj = resolve_line_end_object(self._buffer.lines, self._buffer.cursor, count)
        return self._apply(Operator.DELETE, obj)

    def _action_change_to_eol(self, count: int) -> KeyResult:
        obj = resolve_line_end_object(self._buffer.lines, self._buffer.cursor, count)
        return self._apply(Operator.CHANGE, obj)

    def _action_paste_after(self, count: int) -> KeyResult:
        return KeyResult(modified=paste(self._buffer, self._session, before=False, count=count))

    def _action_paste_before(self, count: int) -> KeyResult:
        return KeyResult(modified=paste(self._buffer, self._session, before=True, count=count))

    def _action_undo(self, count: int) -> KeyResult:
        modified = False
        for _ in range(count):
            snapshot = self._session.history.undo(self._buffer.lines, self._buffer.cursor)
            if snapshot is None:
                break
            self._restore(snapshot.lines, snapshot.cursor)
            modified = True
        return KeyResult(modified=modified)

    def _action_redo(self, count: int) -> KeyResult:
        modified = False
        for _ in range(count):
            snapshot = self._session.history.redo(self._buffer.lines, self._buffer.cursor)
            if snapshot is None:
                break
            self._restore(snapshot.lines, snapshot.cursor)
            modified = True
        return KeyResult(modified=modified)

    def _restore(self, lines: tuple[str, ...], cursor: tuple[int, int]) -> None:
        self._buffer.set_lines(lines)
        self._buffer.move_cursor(clamp_normal(lines, Position(*cursor)))

    # ─────────────────────────────────────────────────────────────────
    # Visual Mode
    # ─────────────────────────────────────────────────────────────────

    def handle_visual(self, key: str, kind: VisualKind) -> KeyResult:
        """Handle keys in a visual mode of the given kind."""
        session = self._session
        session.status_hint = ""

        if session.pending_command is PendingCommand.GO_TO_TOP:
            count = session.take_count()
            session.pending_command = None
            if key == "g":
                pos = motion_document_start(self._buffer.lines, self._buffer.cursor, count)
                self._buffer.move_cursor(pos)
                return KeyResult()

        if key == ESCAPE:
            self._set_mode(VimMode.NORMAL)
            return KeyResult()

        if not has_ctrl(key) and session.accumulate_digit(key):
            return KeyResult()

        switch = self._keymap.get_mode_switch(key)
        if switch is not None:
            target = _VISUAL_KIND_BY_SWITCH[switch.handler]
            if target is kind:
                self._set_mode(VimMode.NORMAL)
            else:
                self._set_mode(VimMode.for_visual(target))
            return KeyResult()

        action = self._keymap.get_visual_action(key)
        if action is not None:
            return self._execute_visual_action(action.handler, kind)

        if key == "g":
            session.pending_command = PendingCommand.GO_TO_TOP
            return KeyResult()

        motion = self._keymap.get_motion(key)
        if motion is not None:
            self._execute_motion(motion.handler)
            return KeyResult()

        session.reset_pending()
        return KeyResult(consumed=False)

    def _execute_visual_action(self, handler_name: str, kind: VisualKind) -> KeyResult:
        """Execute an action on the visual selection."""
        session = self._session
        anchor = session.visual_anchor or self._buffer.cursor
        cursor = self._buffer.cursor
        session.reset_pending()

        if handler_name == "visual_swap_ends":
            session.visual_anchor = cursor
            self._buffer.move_cursor(anchor)
            return KeyResult()

        obj = resolve_visual_object(self._buffer.lines, anchor, cursor, kind)

        if handler_name == "visual_yank":
            apply_operator(self._buffer, session, Operator.YANK, obj)
            if kind is VisualKind.BLOCK:
                self._buffer.move_cursor(obj.start)
            else:
                self._buffer.move_cursor(min(anchor, cursor))
            self._set_mode(VimMode.NORMAL)
            return KeyResult()

        operator = Operator.CHANGE if handler_name == "visual_change" else Operator.DELETE
        result = apply_operator(self._buffer, session, operator, obj)
        if result.post_action.enters_insert:
            self.enter_insert_mode(result.post_action.position)
        else:
            self._set_mode(VimMode.NORMAL)
        return KeyResult(modified=result.modified)
