"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str | None]], Path]:
    """Build a directory tree below tmp_path/"tree".

    Keys are POSIX relative paths. A string value creates a file with that
    content; None creates a directory.
    """

    def _make(layout: dict[str, str | None]) -> Path:
        root = tmp_path / "tree"
        root.mkdir(exist_ok=True)
        for rel, content in layout.items():
            target = root / rel
            if content is None:
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content)
        return root

    return _make


@pytest.fixture
def config_home(tmp_path: Path) -> Iterator[Path]:
    """Point XDG_CONFIG_HOME at a temporary directory."""
    home = tmp_path / "xdg-config"
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(home)}):
        yield home


@pytest.fixture
def rule_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a rule source file and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / "rules" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
