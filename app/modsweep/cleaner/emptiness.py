"""Directory emptiness checks used by the empty-directory sweep."""

import asyncio
import os
import stat
from collections.abc import Sequence

from modsweep.cleaner.hooks import EmptinessPredicate
from modsweep.core.errors import FilesystemError


def entries_are_empty(entries: Sequence[str], predicate: EmptinessPredicate | None) -> bool:
    """Decide emptiness for a known list of entry names.

    Args:
        entries: Names of the entries directly inside a directory.
        predicate: Entries it matches do not count. None allows no entries.

    Returns:
        True if there are no entries, or every entry matches the predicate.
    """
    if not entries:
        return True
    if predicate is None:
        return False
    return all(predicate.matches(entry) for entry in entries)


def _read_entries(path: str) -> list[str] | None:
    st = os.stat(path)
    if not stat.S_ISDIR(st.st_mode):
        return None
    return os.listdir(path)


async def is_empty(
    target: str | os.PathLike[str] | Sequence[str],
    predicate: EmptinessPredicate | None = None,
) -> bool:
    """Check whether a directory (or an entry list) is empty enough to remove.

    Only the direct entries are considered; subdirectories count as entries.

    Args:
        target: Directory path, or an already listed sequence of entry names.
        predicate: Entries it matches are ignored. None means strictly empty.

    Returns:
        True when the entries are empty under ``predicate``. A path that is
        not a directory is never empty.

    Raises:
        TypeError: If ``target`` is neither a path nor a sequence of names.
        FilesystemError: If the directory cannot be statted or listed.
    """
    if isinstance(target, (str, os.PathLike)):
        path = os.fspath(target)
        try:
            entries = await asyncio.to_thread(_read_entries, path)
        except OSError as e:
            raise FilesystemError(f"Cannot check {path}: {e}", path=path) from e
        if entries is None:
            return False
        return entries_are_empty(entries, predicate)

    if isinstance(target, Sequence):
        return entries_are_empty(list(target), predicate)

    msg = "expected a directory or a list of entry names"
    raise TypeError(msg)
