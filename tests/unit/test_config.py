"""Tests for composer settings loading."""

from __future__ import annotations

import json

import pytest

from jotter.config import (
    ComposerSettings,
    EditorStyle,
    load_composer_settings,
    load_settings,
    save_settings,
)


class TestComposerSettings:
    """Tests for ComposerSettings validation."""

    def test_defaults(self):
        """Defaults match the shipped bindings."""
        settings = ComposerSettings()
        assert settings.editor_style is EditorStyle.VIM
        assert settings.undo_limit == 200
        assert settings.submit == ["shift+enter"]
        assert settings.cancel == ["escape"]
        assert settings.clear == []

    def test_from_dict(self):
        """Valid fields override the defaults."""
        settings = ComposerSettings.from_dict(
            {"editor_style": "simple", "undo_limit": 5, "clear": ["ctrl+l"]}
        )
        assert settings.editor_style is EditorStyle.SIMPLE
        assert settings.undo_limit == 5
        assert settings.clear == ["ctrl+l"]
        assert settings.submit == ["shift+enter"]

    @pytest.mark.parametrize(
        "data,field",
        [
            ({"editor_style": "emacs"}, "editor_style"),
            ({"undo_limit": 0}, "undo_limit"),
            ({"undo_limit": True}, "undo_limit"),
            ({"submit": "shift+enter"}, "submit"),
            ({"cancel": [""]}, "cancel"),
            ({"colour": "red"}, "colour"),
        ],
    )
    def test_invalid_fields(self, data, field):
        """Bad values raise ValueError naming the field."""
        with pytest.raises(ValueError, match=field):
            ComposerSettings.from_dict(data)

    def test_editor_style_labels(self):
        """Each style has a label and description."""
        assert EditorStyle.VIM.label == "Vim"
        assert EditorStyle.SIMPLE.label == "Simple"
        assert EditorStyle.SIMPLE.description


class TestSettingsFile:
    """Tests for reading and writing the settings file."""

    def test_missing_file(self, tmp_path):
        """A missing file reads as an empty object."""
        assert load_settings(tmp_path / "settings.json") == {}

    def test_save_and_load(self, tmp_path):
        """Saved settings load back."""
        path = tmp_path / "nested" / "settings.json"
        settings = {"composer": ComposerSettings(undo_limit=7).to_dict()}
        save_settings(settings, path)
        assert load_settings(path) == settings
        assert load_composer_settings(path).undo_limit == 7

    def test_non_object_file(self, tmp_path):
        """A JSON array is rejected."""
        path = tmp_path / "settings.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            load_settings(path)

    def test_invalid_json_falls_back(self, tmp_path, capsys):
        """Unreadable settings are reported on stderr and defaults are used."""
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        settings = load_composer_settings(path)
        assert settings == ComposerSettings()
        assert "[jotter] Failed to load composer settings" in capsys.readouterr().err

    def test_invalid_field_falls_back(self, tmp_path, capsys):
        """A bad composer field is reported and ignored."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"composer": {"undo_limit": -1}}), encoding="utf-8")
        settings = load_composer_settings(path)
        assert settings.undo_limit == 200
        assert "undo_limit" in capsys.readouterr().err
