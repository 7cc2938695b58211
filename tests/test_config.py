"""Tests for RouterSettings and TOML loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bufrouter.config import DEFAULT_MARKER, DEFAULT_PREFIX, RouterSettings, load_settings


class TestRouterSettings:
    def test_defaults(self):
        settings = RouterSettings(scheme="diary")
        assert settings.prefix == DEFAULT_PREFIX == "router"
        assert settings.marker == DEFAULT_MARKER == "bufrouter_handler_path"

    @pytest.mark.parametrize("scheme", ["", "1diary", "my diary"])
    def test_rejects_bad_scheme(self, scheme):
        with pytest.raises(ValidationError):
            RouterSettings(scheme=scheme)

    def test_rejects_empty_prefix(self):
        with pytest.raises(ValidationError, match="non-empty"):
            RouterSettings(scheme="diary", prefix="")

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            RouterSettings(scheme="diary", colour="red")

    def test_frozen(self):
        settings = RouterSettings(scheme="diary")
        with pytest.raises(ValidationError):
            settings.scheme = "other"


class TestLoadSettings:
    def test_top_level_table(self, tmp_path):
        path = tmp_path / "bufrouter.toml"
        path.write_text('scheme = "diary"\nprefix = "d"\n')
        settings = load_settings(path)
        assert settings.scheme == "diary"
        assert settings.prefix == "d"
        assert settings.marker == DEFAULT_MARKER

    def test_pyproject_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "x"\n\n[tool.bufrouter]\nscheme = "notes"\nmarker = "notes_path"\n'
        )
        settings = load_settings(path)
        assert settings.scheme == "notes"
        assert settings.marker == "notes_path"

    def test_missing_scheme(self, tmp_path):
        path = tmp_path / "bufrouter.toml"
        path.write_text('prefix = "d"\n')
        with pytest.raises(ValidationError):
            load_settings(path)
