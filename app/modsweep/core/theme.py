"""Console colors for modsweep output.

The bundled ``data/theme.toml`` supplies every color; a ``[colors]`` table in
the user's ``theme.toml`` may override any subset of them.
"""

import functools
import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from modsweep.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Hex colors for each role in modsweep's output."""

    model_config = ConfigDict(extra="forbid")

    # Tables
    path: str = "#ffffff"
    heading: str = "#69B9A1"
    border: str = "#29526d"
    muted: str = "#b2bec3"

    # Messages
    info: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"

    # Per-path outcome
    deleted: str = "#f53263"
    skipped: str = "#faf870"
    dry_run: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            raise ValueError(f"expected a #RGB or #RRGGBB color, got {value!r}")
        return value.strip()


def _parse_colors(text: str, origin: str) -> dict[str, object]:
    """Return the ``[colors]`` table of a theme document.

    Raises:
        ValueError: If the document is not TOML or ``colors`` is not a table.
    """
    try:
        colors = tomllib.loads(text).get("colors", {})
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{origin} is not valid TOML: {e}") from e
    if not isinstance(colors, dict):
        raise ValueError(f"{origin}: 'colors' must be a table")
    return colors


def _user_overrides(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}
    try:
        overrides = _parse_colors(path.read_text(encoding="utf-8"), str(path))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}
    logger.debug("Theme overrides from %s: %s", path, ", ".join(overrides) or "none")
    return overrides


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled colors merged with the user's overrides.

    An override file that fails validation is ignored as a whole.

    Args:
        user_path: Override file (defaults to ~/.config/modsweep/theme.toml).
    """
    bundled_file = resources.files("modsweep.data").joinpath("theme.toml")
    bundled = _parse_colors(bundled_file.read_text(encoding="utf-8"), "bundled theme")
    overrides = _user_overrides(user_path or get_user_theme_path())

    try:
        return ThemeColors.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme overrides, using bundled colors: %s", e)
        return ThemeColors.model_validate(bundled)


def get_rich_theme(colors: ThemeColors) -> Theme:
    """Map theme colors to the style names used in modsweep markup."""
    return Theme(
        {
            "path": f"bold {colors.path}",
            "bold_header": f"bold {colors.heading}",
            "border": colors.border,
            "muted": colors.muted,
            "dim": colors.muted,
            "info": colors.info,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "deleted": colors.deleted,
            "skipped": colors.skipped,
            "dry_run": colors.dry_run,
        }
    )


@functools.cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return get_rich_theme(load_theme())
