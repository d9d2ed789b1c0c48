"""Vim keymap configuration.

Defines the composer's vim key bindings as data: each key maps to a named
handler the engine dispatches on. Two-key sequences (dd, yy, cc, gg, r<char>)
start from a PENDING binding and are completed by the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto


class BindingType(Enum):
    """Type of vim key binding."""

    MOTION = auto()       # Movement command (h, j, w, etc.)
    ACTION = auto()       # Immediate action (i, x, p, u, etc.)
    MODE_SWITCH = auto()  # Mode change (v, V, ctrl+v)
    PENDING = auto()      # Waits for next key (d, y, c, g, r)


@dataclass
class VimBinding:
    """Definition of a vim key binding."""

    key: str                 # Key name (e.g., "w", "ctrl+r", "escape")
    type: BindingType        # Type of binding
    handler: str             # Handler name
    description: str = ""    # Human-readable description


def _bindings(*items: VimBinding) -> dict[str, VimBinding]:
    return {binding.key: binding for binding in items}


@dataclass
class VimKeymapConfig:
    """Key binding tables for each mode."""

    # ─────────────────────────────────────────────────────────────────
    # Motions - shared by Normal and Visual modes
    # ─────────────────────────────────────────────────────────────────
    motions: dict[str, VimBinding] = field(default_factory=lambda: _bindings(
        VimBinding("h", BindingType.MOTION, "motion_left", "Left"),
        VimBinding("l", BindingType.MOTION, "motion_right", "Right"),
        VimBinding("j", BindingType.MOTION, "motion_down", "Down"),
        VimBinding("k", BindingType.MOTION, "motion_up", "Up"),
        VimBinding("left", BindingType.MOTION, "motion_left", "Left"),
        VimBinding("right", BindingType.MOTION, "motion_right", "Right"),
        VimBinding("down", BindingType.MOTION, "motion_down", "Down"),
        VimBinding("up", BindingType.MOTION, "motion_up", "Up"),
        VimBinding("backspace", BindingType.MOTION, "motion_left", "Left"),
        VimBinding("space", BindingType.MOTION, "motion_right", "Right"),
        VimBinding("0", BindingType.MOTION, "motion_line_start", "Line start"),
        VimBinding("home", BindingType.MOTION, "motion_line_start", "Line start"),
        VimBinding("^", BindingType.MOTION, "motion_first_non_blank", "First non-blank"),
        VimBinding("$", BindingType.MOTION, "motion_line_end", "Line end"),
        VimBinding("end", BindingType.MOTION, "motion_line_end", "Line end"),
        VimBinding("w", BindingType.MOTION, "motion_word_forward", "Next word"),
        VimBinding("W", BindingType.MOTION, "motion_word_forward_big", "Next WORD"),
        VimBinding("e", BindingType.MOTION, "motion_word_end", "Word end"),
        VimBinding("E", BindingType.MOTION, "motion_word_end_big", "WORD end"),
        VimBinding("b", BindingType.MOTION, "motion_word_backward", "Previous word"),
        VimBinding("B", BindingType.MOTION, "motion_word_backward_big", "Previous WORD"),
        VimBinding("G", BindingType.MOTION, "motion_document_end", "Document end"),
    ))

    # ─────────────────────────────────────────────────────────────────
    # Normal mode actions
    # ─────────────────────────────────────────────────────────────────
    actions: dict[str, VimBinding] = field(default_factory=lambda: _bindings(
        VimBinding("i", BindingType.ACTION, "action_insert", "Insert"),
        VimBinding("I", BindingType.ACTION, "action_insert_line_start", "Insert at line start"),
        VimBinding("a", BindingType.ACTION, "action_append", "Append"),
        VimBinding("A", BindingType.ACTION, "action_append_line_end", "Append at line end"),
        VimBinding("o", BindingType.ACTION, "action_open_below", "Open line below"),
        VimBinding("O", BindingType.ACTION, "action_open_above", "Open line above"),
        VimBinding("x", BindingType.ACTION, "action_delete_char", "Delete char"),
        VimBinding("X", BindingType.ACTION, "action_delete_char_before", "Delete char before"),
        VimBinding("s", BindingType.ACTION, "action_substitute", "Substitute char"),
        VimBinding("S", BindingType.ACTION, "action_substitute_line", "Substitute line"),
        VimBinding("D", BindingType.ACTION, "action_delete_to_eol", "Delete to EOL"),
        VimBinding("C", BindingType.ACTION, "action_change_to_eol", "Change to EOL"),
        VimBinding("p", BindingType.ACTION, "action_paste_after", "Paste after"),
        VimBinding("P", BindingType.ACTION, "action_paste_before", "Paste before"),
        VimBinding("u", BindingType.ACTION, "action_undo", "Undo"),
        VimBinding("ctrl+r", BindingType.ACTION, "action_redo", "Redo"),
    ))

    # ─────────────────────────────────────────────────────────────────
    # Visual mode actions - operate on the selection
    # ─────────────────────────────────────────────────────────────────
    visual_actions: dict[str, VimBinding] = field(default_factory=lambda: _bindings(
        VimBinding("y", BindingType.ACTION, "visual_yank", "Yank selection"),
        VimBinding("d", BindingType.ACTION, "visual_delete", "Delete selection"),
        VimBinding("x", BindingType.ACTION, "visual_delete", "Delete selection"),
        VimBinding("c", BindingType.ACTION, "visual_change", "Change selection"),
        VimBinding("s", BindingType.ACTION, "visual_change", "Change selection"),
        VimBinding("o", BindingType.ACTION, "visual_swap_ends", "Swap selection ends"),
    ))

    # ─────────────────────────────────────────────────────────────────
    # Mode switches
    # ─────────────────────────────────────────────────────────────────
    mode_switches: dict[str, VimBinding] = field(default_factory=lambda: _bindings(
        VimBinding("v", BindingType.MODE_SWITCH, "mode_visual", "Visual mode"),
        VimBinding("V", BindingType.MODE_SWITCH, "mode_visual_line", "Visual line mode"),
        VimBinding("ctrl+v", BindingType.MODE_SWITCH, "mode_visual_block", "Visual block mode"),
    ))

    # ─────────────────────────────────────────────────────────────────
    # Pending commands (wait for next key)
    # ─────────────────────────────────────────────────────────────────
    pending: dict[str, VimBinding] = field(default_factory=lambda: _bindings(
        VimBinding("d", BindingType.PENDING, "pending_delete", "Delete lines"),
        VimBinding("y", BindingType.PENDING, "pending_yank", "Yank lines"),
        VimBinding("c", BindingType.PENDING, "pending_change", "Change lines"),
        VimBinding("g", BindingType.PENDING, "pending_go_to_top", "Go to top"),
        VimBinding("r", BindingType.PENDING, "pending_replace", "Replace char"),
    ))


class VimKeymapProvider(ABC):
    """Abstract base class for vim keymap providers."""

    @abstractmethod
    def get_config(self) -> VimKeymapConfig:
        """Get the keymap configuration."""

    def get_motion(self, key: str) -> VimBinding | None:
        """Get motion binding for a key."""
        return self.get_config().motions.get(key)

    def get_visual_action(self, key: str) -> VimBinding | None:
        """Get visual mode action binding for a key."""
        return self.get_config().visual_actions.get(key)

    def get_mode_switch(self, key: str) -> VimBinding | None:
        """Get mode switch binding for a key."""
        return self.get_config().mode_switches.get(key)

    def lookup(self, key: str) -> VimBinding | None:
        """Look up a Normal-mode binding for a key."""
        config = self.get_config()
        for bindings in (
            config.motions,
            config.actions,
            config.mode_switches,
            config.pending,
        ):
            if key in bindings:
                return bindings[key]
        return None


class DefaultVimKeymapProvider(VimKeymapProvider):
    """Default vim keymap with standard bindings."""

    def __init__(self) -> None:
        self._config = VimKeymapConfig()

    def get_config(self) -> VimKeymapConfig:
        return self._config


# Global vim keymap instance
_vim_keymap_provider: VimKeymapProvider | None = None


def get_vim_keymap() -> VimKeymapProvider:
    """Get the current vim keymap provider."""
    global _vim_keymap_provider
    if _vim_keymap_provider is None:
        _vim_keymap_provider = DefaultVimKeymapProvider()
    return _vim_keymap_provider


def set_vim_keymap(provider: VimKeymapProvider) -> None:
    """Set the vim keymap provider (for testing or custom keymaps)."""
    global _vim_keymap_provider
    _vim_keymap_provider = provider


def reset_vim_keymap() -> None:
    """Reset to default vim keymap provider."""
    global _vim_keymap_provider
    _vim_keymap_provider = None
