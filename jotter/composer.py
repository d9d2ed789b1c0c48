"""Multi-line composer that owns one editing session.

The composer sits between Textual key events and the vim engine. It
handles the submit, cancel, and clear bindings itself and forwards
everything else to the engine (vim style) or straight to Insert-mode
editing (simple style).
"""

from __future__ import annotations

from enum import Enum, auto

from textual.events import Key

from .config import ComposerSettings, EditorStyle
from .vim import (
    EditorSession,
    KeyResult,
    Position,
    TextBuffer,
    UndoHistory,
    VimEngine,
    VimMode,
)

PLACEHOLDER_COMPOSE = "Compose…"


class ComposerAction(Enum):
    """What the caller should do after a key."""

    NONE = auto()
    SUBMIT = auto()
    CANCEL = auto()


def convert_key(event: Key) -> str:
    """Convert a Textual Key event to the engine's key format."""
    key = event.key

    # Handle special keys
    if key in ("enter", "return"):
        return "enter"
    if key in ("backspace", "ctrl+h"):
        return "backspace"
    if key in ("escape", "tab", "space"):
        return key

    # Modified keys keep their name (ctrl+r, shift+enter)
    if "+" in key and len(key) > 1:
        return key

    # Handle character keys
    if event.character and len(event.character) == 1 and event.character.isprintable():
        return event.character

    return key


class Composer:
    """Text composer with vim or simple editing."""

    def __init__(self, text: str = "", settings: ComposerSettings | None = None) -> None:
        self._settings = settings or ComposerSettings()
        self._buffer = TextBuffer(text)
        self._session = EditorSession(history=UndoHistory(self._settings.undo_limit))
        self._engine = VimEngine(self._buffer, self._session)
        self._engine.set_mode_callback(self._on_mode_change)
        self._status_label = ""
        self.dirty = False
        self._start()

    @property
    def settings(self) -> ComposerSettings:
        return self._settings

    @property
    def engine(self) -> VimEngine:
        return self._engine

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def mode(self) -> VimMode:
        return self._engine.mode

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def is_vim_style(self) -> bool:
        return self._settings.editor_style is EditorStyle.VIM

    @property
    def placeholder(self) -> str:
        return PLACEHOLDER_COMPOSE

    @property
    def status_label(self) -> str:
        """Mode label for the status line (empty in simple style)."""
        return self._status_label

    @property
    def status_hint(self) -> str:
        return self._engine.status_hint

    @property
    def cursor_cell_offset(self) -> int:
        """Cursor column in terminal cells, for rendering."""
        return self._buffer.cursor_cell_offset

    @property
    def has_unsaved_input(self) -> bool:
        """True when any line holds non-whitespace text."""
        return any(line.strip() for line in self._buffer.lines)

    # ─────────────────────────────────────────────────────────────────
    # Key handling
    # ─────────────────────────────────────────────────────────────────

    def on_key(self, event: Key) -> ComposerAction:
        """Handle a Textual key event."""
        action = self.handle_key(convert_key(event))
        event.prevent_default()
        return action

    def handle_key(self, key: str) -> ComposerAction:
        """Route one key; returns the action the caller should take."""
        settings = self._settings

        if key in settings.submit:
            self._session.history.commit_insert_group(self._buffer.lines)
            return ComposerAction.SUBMIT

        if not self.is_vim_style:
            return self._handle_simple(key)

        # Esc leaves Insert and Visual before it can cancel the composer
        if self._engine.mode is not VimMode.NORMAL and key == "escape":
            self._apply(self._engine.handle_key(key))
            return ComposerAction.NONE

        if key in settings.clear:
            self._clear()
            return ComposerAction.NONE

        if key in settings.cancel and self._engine.mode is VimMode.NORMAL:
            self._engine.reset()
            return ComposerAction.CANCEL

        self._apply(self._engine.handle_key(key))
        return ComposerAction.NONE

    def _handle_simple(self, key: str) -> ComposerAction:
        if key in self._settings.clear:
            self._clear()
            return ComposerAction.NONE
        if key in self._settings.cancel:
            return ComposerAction.CANCEL
        if key == "escape":
            return ComposerAction.NONE
        self._apply(self._engine.handle_insert(key))
        return ComposerAction.NONE

    def _apply(self, result: KeyResult) -> None:
        if result.modified:
            self.dirty = True

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    def submit(self) -> str:
        """Return the composed text and start over with an empty composer."""
        text = self._buffer.text
        self.close()
        return text

    def close(self) -> None:
        """Discard the text, undo history, and dirty flag."""
        self._engine.clear()
        self.dirty = False
        self._start()

    def _clear(self) -> None:
        self._engine.clear()
        self._start()

    def _start(self) -> None:
        self._engine.reset()
        if self.is_vim_style:
            self._status_label = self._engine.status_label
        else:
            self._status_label = ""
            row = self._buffer.line_count - 1
            self._engine.enter_insert_mode(Position(row, len(self._buffer.lines[row])))

    def _on_mode_change(self, mode: VimMode) -> None:
        """Handle vim mode changes."""
        if self.is_vim_style:
            self._status_label = mode.label
