"""Rule source references, loaders and the source registry.

A rule source is addressed by an identifier. Identifiers that contain a
path separator are file sources (``.toml`` or ``.json``); anything else is
a named source looked up in a :class:`RuleSourceRegistry`. Names that are
not registered fall back to importing the conventional module
``modsweep_patterns_<name>`` and reading its ``PATTERNS`` mapping.
"""

import importlib
import json
import logging
import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from modsweep.core.errors import RuleSourceNotFoundError, RuleSourceParseError
from modsweep.rules.models import RuleSource

logger = logging.getLogger(__name__)

NAMESPACE_PREFIX = "modsweep-patterns-"
MODULE_PREFIX = "modsweep_patterns_"
SUPPORTED_SUFFIXES: tuple[str, ...] = (".toml", ".json")

SourceLoader = Callable[[], Mapping[str, object]]


@dataclass(frozen=True, slots=True)
class NamedSource:
    """Reference to a rule source by registry name."""

    name: str


@dataclass(frozen=True, slots=True)
class FileSource:
    """Reference to a rule source stored in a TOML or JSON file."""

    path: Path


RuleSourceRef = NamedSource | FileSource


def _strip_namespace(name: str) -> str:
    if name.startswith(NAMESPACE_PREFIX):
        return name[len(NAMESPACE_PREFIX) :]
    return name


def parse_source_ref(source_id: str) -> RuleSourceRef:
    """Classify a source identifier as a file or a named source.

    Args:
        source_id: Identifier as written in a ruleset reference.

    Returns:
        FileSource for identifiers containing a path separator (relative
        paths are resolved against the current working directory),
        NamedSource otherwise.
    """
    if "/" in source_id or os.sep in source_id:
        path = Path(source_id).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return FileSource(path=path)
    return NamedSource(name=_strip_namespace(source_id))


def load_rule_file(path: Path) -> Mapping[str, object]:
    """Read a rule source document from disk.

    Args:
        path: Path to a ``.toml`` or ``.json`` file.

    Returns:
        The decoded document.

    Raises:
        RuleSourceNotFoundError: If the file does not exist.
        RuleSourceParseError: If the extension is unsupported or the
            content cannot be decoded.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise RuleSourceParseError(f'Invalid pattern module "{path}" provided')

    if not path.is_file():
        raise RuleSourceNotFoundError(f'Unable to find patterns file "{path}"')

    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path, encoding="utf-8") as f:
            data: object = json.load(f)
    except tomllib.TOMLDecodeError as e:
        raise RuleSourceParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RuleSourceParseError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise RuleSourceParseError(f"Failed to read patterns file {path}: {e}") from e

    if not isinstance(data, Mapping):
        raise RuleSourceParseError(f'Patterns "{path}" did not return an object')
    return data


def load_bundled_default() -> Mapping[str, object]:
    """Load the built-in ``default`` rule source shipped with the package."""
    bundled = resources.files("modsweep.data").joinpath("default_patterns.toml")
    with bundled.open("rb") as f:
        return tomllib.load(f)


class RuleSourceRegistry:
    """Explicit mapping from source name to loader function.

    Loaders are called lazily, once per :meth:`load` call. Callers that
    need a source more than once per run should keep the returned
    :class:`RuleSource`.

    Args:
        loaders: Initial name to loader mapping.
    """

    def __init__(self, loaders: Mapping[str, SourceLoader] | None = None) -> None:
        self._loaders: dict[str, SourceLoader] = {}
        for name, loader in (loaders or {}).items():
            self.register(name, loader)

    def register(self, name: str, loader: SourceLoader) -> None:
        """Register (or replace) a named source loader."""
        self._loaders[_strip_namespace(name)] = loader

    def names(self) -> list[str]:
        """Registered source names, in registration order."""
        return list(self._loaders)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _strip_namespace(name) in self._loaders

    def load(self, source: str | RuleSourceRef) -> RuleSource:
        """Load and validate a rule source.

        Args:
            source: Source identifier or an already parsed reference.

        Returns:
            Validated RuleSource.

        Raises:
            ConfigurationError: If the source cannot be located, read or
                validated.
        """
        ref = parse_source_ref(source) if isinstance(source, str) else source

        if isinstance(ref, FileSource):
            logger.debug("Loading rule source from file %s", ref.path)
            return RuleSource.from_mapping(str(ref.path), load_rule_file(ref.path))

        loader = self._loaders.get(ref.name)
        if loader is not None:
            logger.debug("Loading registered rule source %s", ref.name)
            return RuleSource.from_mapping(ref.name, loader())

        return RuleSource.from_mapping(ref.name, self._import_conventional(ref.name))

    @staticmethod
    def _import_conventional(name: str) -> object:
        """Import ``modsweep_patterns_<name>`` and return its PATTERNS."""
        module_name = MODULE_PREFIX + name.replace("-", "_").replace(".", "_")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise RuleSourceNotFoundError(
                f'Unable to find patterns plugin "{NAMESPACE_PREFIX}{name}", is it installed?'
            ) from e

        logger.debug("Loaded rule source module %s", module_name)
        patterns = getattr(module, "PATTERNS", None)
        if patterns is None:
            raise RuleSourceParseError(f'Patterns module "{module_name}" defines no PATTERNS')
        return patterns


def default_registry() -> RuleSourceRegistry:
    """Create a registry holding the built-in sources."""
    return RuleSourceRegistry({"default": load_bundled_default})
