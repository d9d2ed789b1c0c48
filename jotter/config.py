"""Configuration management for jotter.

Settings live in a JSON object file under ``CONFIG_DIR``. The composer
section controls the editor style, undo depth, and the submit, cancel,
and clear key bindings.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .vim.undo import DEFAULT_UNDO_LIMIT

CONFIG_DIR = Path(os.environ.get("JOTTER_CONFIG_DIR", "~/.jotter")).expanduser()
SETTINGS_PATH = CONFIG_DIR / "settings.json"

COMPOSER_SETTINGS_KEY = "composer"
COMPOSER_FIELDS = {"editor_style", "undo_limit", "submit", "cancel", "clear"}


class EditorStyle(Enum):
    """How the composer interprets keys."""

    VIM = "vim"
    SIMPLE = "simple"

    @property
    def label(self) -> str:
        return EDITOR_STYLE_LABELS[self]

    @property
    def description(self) -> str:
        return EDITOR_STYLE_DESCRIPTIONS[self]


EDITOR_STYLE_LABELS = {
    EditorStyle.VIM: "Vim",
    EditorStyle.SIMPLE: "Simple",
}

EDITOR_STYLE_DESCRIPTIONS = {
    EditorStyle.VIM: "Modal editing with Normal, Insert, and Visual modes",
    EditorStyle.SIMPLE: "Type directly; no modes",
}


@dataclass
class ComposerSettings:
    """Composer behaviour and key bindings."""

    editor_style: EditorStyle = EditorStyle.VIM
    undo_limit: int = DEFAULT_UNDO_LIMIT
    submit: list[str] = field(default_factory=lambda: ["shift+enter"])
    cancel: list[str] = field(default_factory=lambda: ["escape"])
    clear: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComposerSettings:
        """Build settings from a JSON object, validating every field.

        Raises:
            ValueError: If a field has the wrong type or value.
        """
        if not isinstance(data, dict):
            raise ValueError("Composer settings must be a JSON object.")

        unknown = sorted(set(data) - COMPOSER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown composer setting(s): {', '.join(unknown)}")

        settings = cls()

        style = data.get("editor_style", settings.editor_style.value)
        try:
            settings.editor_style = EditorStyle(style)
        except ValueError:
            choices = ", ".join(s.value for s in EditorStyle)
            raise ValueError(f'"editor_style" must be one of: {choices}') from None

        undo_limit = data.get("undo_limit", settings.undo_limit)
        if isinstance(undo_limit, bool) or not isinstance(undo_limit, int) or undo_limit < 1:
            raise ValueError('"undo_limit" must be a positive integer.')
        settings.undo_limit = undo_limit

        for name in ("submit", "cancel", "clear"):
            if name not in data:
                continue
            keys = data[name]
            if not isinstance(keys, list) or not all(isinstance(k, str) and k for k in keys):
                raise ValueError(f'"{name}" must be a list of key names.')
            setattr(settings, name, list(keys))

        return settings

    def to_dict(self) -> dict[str, Any]:
        return {
            "editor_style": self.editor_style.value,
            "undo_limit": self.undo_limit,
            "submit": list(self.submit),
            "cancel": list(self.cancel),
            "clear": list(self.clear),
        }


def load_settings(path: Path | None = None) -> dict:
    """Load the settings file; a missing file reads as ``{}``.

    Raises:
        ValueError: If the file is not a JSON object.
    """
    path = path or SETTINGS_PATH
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:
        raise ValueError(f"Failed to read settings JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Settings file must contain a JSON object.")
    return payload


def save_settings(settings: dict, path: Path | None = None) -> None:
    """Write settings as JSON, creating the config directory if needed."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")


def load_composer_settings(path: Path | None = None) -> ComposerSettings:
    """Load composer settings, falling back to defaults on any problem."""
    try:
        settings = load_settings(path)
        return ComposerSettings.from_dict(settings.get(COMPOSER_SETTINGS_KEY, {}))
    except Exception as exc:
        print(f"[jotter] Failed to load composer settings: {exc}", file=sys.stderr)
        return ComposerSettings()
