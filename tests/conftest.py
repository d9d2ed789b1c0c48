"""Shared pytest fixtures for jotter tests."""

from __future__ import annotations

import pytest

from jotter.vim import TextBuffer, VimEngine, reset_vim_keymap


@pytest.fixture(autouse=True)
def reset_keymap_after_test():
    """Reset the vim keymap after each test to avoid cross-test pollution."""
    yield
    reset_vim_keymap()


@pytest.fixture
def make_engine():
    """Build an engine over a fresh buffer with the cursor placed."""

    def _make(text: str = "", cursor: tuple[int, int] = (0, 0)) -> VimEngine:
        engine = VimEngine(TextBuffer(text))
        engine.buffer.move_cursor(cursor)
        return engine

    return _make


@pytest.fixture
def press():
    """Feed a sequence of keys to an engine, returning the last result."""

    def _press(engine: VimEngine, *keys: str):
        result = None
        for key in keys:
            result = engine.handle_key(key)
        return result

    return _press
