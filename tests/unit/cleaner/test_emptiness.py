"""Unit tests for directory emptiness checks."""

import asyncio
from pathlib import Path

import pytest
from modsweep.cleaner.emptiness import entries_are_empty, is_empty
from modsweep.cleaner.hooks import OsArtifactFilter
from modsweep.core.errors import FilesystemError


class TestEntriesAreEmpty:
    """Tests for entries_are_empty."""

    def test_no_entries(self) -> None:
        """No entries is empty under any predicate."""
        assert entries_are_empty([], None) is True
        assert entries_are_empty([], OsArtifactFilter()) is True

    def test_without_predicate(self) -> None:
        """Without a predicate any entry prevents emptiness."""
        assert entries_are_empty([".DS_Store"], None) is False

    def test_all_filtered(self) -> None:
        """Entries all matched by the predicate are ignored."""
        assert entries_are_empty([".DS_Store", "thumbs.db"], OsArtifactFilter()) is True

    def test_partially_filtered(self) -> None:
        """One unmatched entry is enough to be non-empty."""
        assert entries_are_empty([".DS_Store", "index.js"], OsArtifactFilter()) is False


class TestIsEmpty:
    """Tests for is_empty."""

    def test_empty_directory(self, tmp_path: Path) -> None:
        """A directory without entries is empty."""
        assert asyncio.run(is_empty(tmp_path)) is True

    def test_directory_with_artifact(self, tmp_path: Path) -> None:
        """OS artifacts only count when no predicate is given."""
        (tmp_path / ".DS_Store").write_text("")

        assert asyncio.run(is_empty(tmp_path)) is False
        assert asyncio.run(is_empty(str(tmp_path), OsArtifactFilter())) is True

    def test_subdirectory_counts(self, tmp_path: Path) -> None:
        """Subdirectories are entries, even empty ones."""
        (tmp_path / "sub").mkdir()
        assert asyncio.run(is_empty(tmp_path, OsArtifactFilter())) is False

    def test_file_is_never_empty(self, tmp_path: Path) -> None:
        """A regular file is not an empty directory."""
        target = tmp_path / "file.txt"
        target.write_text("")
        assert asyncio.run(is_empty(target)) is False

    def test_entry_list(self) -> None:
        """A list of names is checked without touching the filesystem."""
        assert asyncio.run(is_empty(["Thumbs.db"], OsArtifactFilter())) is True
        assert asyncio.run(is_empty(["a"], OsArtifactFilter())) is False

    def test_missing_path(self, tmp_path: Path) -> None:
        """A missing directory raises FilesystemError."""
        with pytest.raises(FilesystemError):
            asyncio.run(is_empty(tmp_path / "missing"))

    def test_invalid_target(self) -> None:
        """Anything else is a TypeError."""
        with pytest.raises(TypeError):
            asyncio.run(is_empty(42))  # type: ignore[arg-type]
