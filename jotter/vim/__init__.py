"""Vim emulation engine for the jotter composer.

This package provides a vim-like editing experience for a multi-line text
composer, built on Textual's ``Document`` model.

Architecture:
    VimEngine - Main controller that handles key events
    EditorSession - Tracks mode, pending command, count, yank buffer, undo
    TextBuffer - Line-oriented buffer the engine edits
    VimKeymapConfig - Configurable key bindings

Usage:
    from jotter.vim import TextBuffer, VimEngine

    engine = VimEngine(TextBuffer("hello"))
    engine.set_mode_callback(on_mode_change)

    # In key handler:
    result = engine.handle_key(key)
    if result.consumed:
        event.prevent_default()
"""

from .buffer import TextBuffer
from .engine import KeyResult, VimEngine
from .keymap import (
    VimBinding,
    VimKeymapConfig,
    VimKeymapProvider,
    get_vim_keymap,
    reset_vim_keymap,
    set_vim_keymap,
)
from .operators import Operator, OperatorResult, PostAction
from .state import EditorSession, PendingCommand, Position, VimMode, VisualKind, YankBuffer
from .text_objects import ObjectKind, TextObject
from .undo import DEFAULT_UNDO_LIMIT, Snapshot, UndoHistory

__all__ = [
    # Core
    "VimEngine",
    "KeyResult",
    "TextBuffer",
    # State types
    "EditorSession",
    "PendingCommand",
    "Position",
    "VimMode",
    "VisualKind",
    "YankBuffer",
    # Objects and operators
    "ObjectKind",
    "TextObject",
    "Operator",
    "OperatorResult",
    "PostAction",
    # Undo
    "DEFAULT_UNDO_LIMIT",
    "Snapshot",
    "UndoHistory",
    # Keymap
    "VimBinding",
    "VimKeymapConfig",
    "VimKeymapProvider",
    "get_vim_keymap",
    "reset_vim_keymap",
    "set_vim_keymap",
]
