"""Cleanup configuration and the user settings file.

Two layers:

- :class:`CleanSettings` holds the plain-data options and is what the
  settings file (``~/.config/modsweep/config.toml``, table ``[clean]``)
  stores.
- :class:`CleanConfig` is the immutable value a run is built from. It adds
  the working directory and the hooks that cannot come from a file.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from modsweep.cleaner.hooks import Approver, EmptinessPredicate, OsArtifactFilter
from modsweep.core.errors import ConfigFileError
from modsweep.core.paths import get_settings_path

DEFAULT_PATTERNS: tuple[str, ...] = ("default:safe",)
DEFAULT_MODULES_DIR = "node_modules"
SETTINGS_TABLE = "clean"


class CleanSettings(BaseModel):
    """Plain-data cleanup options, as stored in the settings file.

    Attributes:
        patterns: Ruleset references ("source:name").
        additional_patterns: Extra allow patterns.
        ignore_patterns: Extra ignore patterns.
        no_dirs: Exclude directories from deletion candidacy.
        ignore_case: Match names case-insensitively.
        dot_files: Include dotfiles.
        modules_dir: Folder name appended to the working directory unless it
            already ends with it. None disables anchoring.
        remove_empty_dirs: Remove directories left empty after deletion.
        error_halt: Stop the run at the first filesystem error.
        dry_run: Report deletions without touching the filesystem
            (also accepted as ``test``).
        follow_symlink: Also delete inside symlinked packages.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    patterns: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_PATTERNS), description="Ruleset references"),
    ]
    additional_patterns: Annotated[list[str], Field(default_factory=list)]
    ignore_patterns: Annotated[list[str], Field(default_factory=list)]
    no_dirs: bool = False
    ignore_case: bool = True
    dot_files: bool = True
    modules_dir: str | None = DEFAULT_MODULES_DIR
    remove_empty_dirs: bool = True
    error_halt: bool = False
    dry_run: Annotated[
        bool,
        Field(validation_alias=AliasChoices("dry_run", "test")),
    ] = False
    follow_symlink: bool = False

    @field_validator("modules_dir", mode="before")
    @classmethod
    def disable_empty_modules_dir(cls, v: object) -> object:
        """Treat ``""`` and ``false`` as "no anchoring" (TOML has no null)."""
        if v == "" or v is False:
            return None
        return v


@dataclass(frozen=True, slots=True)
class CleanConfig:
    """Immutable configuration for one cleanup run.

    See :class:`CleanSettings` for the data options. Additionally:

    Attributes:
        cwd: Directory to search in.
        process: Approver asked before each deletion; None approves all.
        empty_dir_filter: Entries it matches do not prevent a directory from
            counting as empty; None requires strict emptiness.
    """

    cwd: Path = field(default_factory=Path.cwd)
    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    additional_patterns: tuple[str, ...] = ()
    ignore_patterns: tuple[str, ...] = ()
    no_dirs: bool = False
    ignore_case: bool = True
    dot_files: bool = True
    process: Approver | None = None
    modules_dir: str | None = DEFAULT_MODULES_DIR
    remove_empty_dirs: bool = True
    empty_dir_filter: EmptinessPredicate | None = field(default_factory=OsArtifactFilter)
    error_halt: bool = False
    dry_run: bool = False
    follow_symlink: bool = False

    @property
    def root(self) -> Path:
        """Working directory anchored at ``modules_dir``.

        ``modules_dir`` is appended unless it is None or ``cwd`` already
        ends with it.
        """
        if self.modules_dir and self.cwd.name != self.modules_dir:
            return self.cwd / self.modules_dir
        return self.cwd

    @classmethod
    def from_settings(
        cls,
        settings: CleanSettings,
        *,
        cwd: Path | None = None,
        process: Approver | None = None,
        empty_dir_filter: EmptinessPredicate | None = None,
    ) -> "CleanConfig":
        """Build a run configuration from stored settings plus hooks.

        Args:
            settings: Data options.
            cwd: Directory to search in (defaults to the current directory).
            process: Optional approver.
            empty_dir_filter: Emptiness predicate; defaults to OsArtifactFilter.
        """
        return cls(
            cwd=cwd if cwd is not None else Path.cwd(),
            patterns=tuple(settings.patterns),
            additional_patterns=tuple(settings.additional_patterns),
            ignore_patterns=tuple(settings.ignore_patterns),
            no_dirs=settings.no_dirs,
            ignore_case=settings.ignore_case,
            dot_files=settings.dot_files,
            process=process,
            modules_dir=settings.modules_dir,
            remove_empty_dirs=settings.remove_empty_dirs,
            empty_dir_filter=empty_dir_filter if empty_dir_filter is not None else OsArtifactFilter(),
            error_halt=settings.error_halt,
            dry_run=settings.dry_run,
            follow_symlink=settings.follow_symlink,
        )


def load_clean_settings(path: Path | None = None) -> CleanSettings:
    """Load cleanup settings from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Settings file. If None, uses the default settings path.

    Returns:
        Validated CleanSettings.

    Raises:
        ConfigFileError: If the file cannot be read, parsed or validated.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return CleanSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise ConfigFileError(f"Failed to read settings: {e}") from e

    section: Any = data.get(SETTINGS_TABLE, {})
    if not isinstance(section, dict):
        raise ConfigFileError(f"[{SETTINGS_TABLE}] in {settings_path} must be a table")

    try:
        return CleanSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigFileError(f"Invalid settings in {settings_path}: {e}") from e


def save_clean_settings(settings: CleanSettings, path: Path | None = None) -> Path:
    """Save cleanup settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigFileError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    dumped = settings.model_dump()
    if dumped["modules_dir"] is None:
        dumped["modules_dir"] = ""
    data = {SETTINGS_TABLE: dumped}

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigFileError(f"Failed to write settings: {e}") from e

    return settings_path
