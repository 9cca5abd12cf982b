"""Glob matching of allow/ignore patterns against a directory tree.

Allow patterns are matched against entry names at any depth, so ``"*.md"``
finds Markdown files anywhere below the root. Ignore patterns without a
slash are matched against entry names as well; ignore patterns with a
slash are matched against the POSIX path relative to the root, where
``**/`` may also match nothing and ``/**`` also matches the directory
itself.

With ``dot`` disabled, dot-directories are not descended into and dotfiles
only match patterns that start with a dot.
"""

import fnmatch
import logging
import os
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass

from modsweep.core.errors import FilesystemError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling one scan.

    Attributes:
        cwd: Root directory; results are relative to it.
        dot: Include dotfiles and descend into dot-directories.
        nocase: Match case-insensitively.
        ignore: Patterns excluding otherwise-matching paths.
        nodir: Never return directories.
    """

    cwd: str
    dot: bool = True
    nocase: bool = True
    ignore: tuple[str, ...] = ()
    nodir: bool = False


class _Matcher:
    """Pre-normalized allow/ignore patterns for one scan."""

    def __init__(self, allow: Sequence[str], options: ScanOptions) -> None:
        self._nocase = options.nocase
        self._dot = options.dot
        self._allow = [self._norm(p) for p in allow]
        self._ignore_names = [self._norm(p) for p in options.ignore if "/" not in p]
        self._ignore_paths = [self._norm(p) for p in options.ignore if "/" in p]

    def _norm(self, value: str) -> str:
        return value.lower() if self._nocase else value

    def allows(self, name: str) -> bool:
        name = self._norm(name)
        for pattern in self._allow:
            if not self._dot and name.startswith(".") and not pattern.startswith("."):
                continue
            if fnmatch.fnmatchcase(name, pattern):
                return True
        return False

    def ignores(self, rel_path: str, name: str) -> bool:
        name = self._norm(name)
        rel_path = self._norm(rel_path)
        if any(fnmatch.fnmatchcase(name, p) for p in self._ignore_names):
            return True
        return any(_path_matches(rel_path, p) for p in self._ignore_paths)


def _path_matches(rel_path: str, pattern: str) -> bool:
    if fnmatch.fnmatchcase(rel_path, pattern):
        return True
    if pattern.startswith("**/") and _path_matches(rel_path, pattern[3:]):
        return True
    return pattern.endswith("/**") and fnmatch.fnmatchcase(rel_path, pattern[:-3])


def find_matches(allow: Sequence[str], options: ScanOptions) -> list[str]:
    """Walk ``options.cwd`` and return paths whose name matches an allow pattern.

    Symlinked directories are reported when their name matches but are
    never descended into.

    Args:
        allow: Allow patterns (name globs).
        options: Scan options.

    Returns:
        POSIX-style paths relative to ``options.cwd``, top-down: each
        directory's entries (sorted by name) before its subdirectories'.

    Raises:
        FilesystemError: If the root is missing or cannot be read.
    """
    root = options.cwd
    if not os.path.isdir(root):
        raise FilesystemError(f"Scan root is not a directory: {root}", path=root)

    matcher = _Matcher(allow, options)
    matches: list[str] = []

    def _on_error(error: OSError) -> None:
        if error.filename and os.path.normpath(error.filename) == os.path.normpath(root):
            raise FilesystemError(f"Cannot read {root}: {error}", path=root) from error
        logger.warning("Cannot read %s during scan: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel_dir = os.path.relpath(dirpath, root)
        rel_dir = "" if rel_dir == "." else rel_dir.replace(os.sep, "/")

        entries = [(name, True) for name in dirnames] + [(name, False) for name in filenames]
        entries.sort(key=lambda entry: entry[0])

        # Dot-directories can still match explicitly but are not descended into
        if not options.dot:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        dirnames.sort()

        for name, is_dir in entries:
            if is_dir and options.nodir:
                continue
            if not matcher.allows(name):
                continue
            rel_path = posixpath.join(rel_dir, name) if rel_dir else name
            if matcher.ignores(rel_path, name):
                continue
            matches.append(rel_path)

    return matches
