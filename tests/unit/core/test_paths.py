"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from modsweep.core.paths import (
    APP_NAME,
    ensure_config_dir,
    get_config_dir,
    get_settings_path,
    get_user_theme_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME


class TestFilePaths:
    """Tests for paths of files inside the config directory."""

    def test_settings_path(self, config_home: Path) -> None:
        """Settings live in config.toml."""
        assert get_settings_path() == config_home / APP_NAME / "config.toml"

    def test_user_theme_path(self, config_home: Path) -> None:
        """Theme overrides live in theme.toml."""
        assert get_user_theme_path() == config_home / APP_NAME / "theme.toml"


class TestEnsureConfigDir:
    """Tests for ensure_config_dir function."""

    def test_creates_directory(self, config_home: Path) -> None:
        """The directory is created with parents."""
        result = ensure_config_dir()

        assert result == config_home / APP_NAME
        assert result.is_dir()

    def test_permission_error_is_runtime_error(self, config_home: Path) -> None:
        """Permission problems are reported as RuntimeError."""
        with (
            patch("pathlib.Path.mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_config_dir()
