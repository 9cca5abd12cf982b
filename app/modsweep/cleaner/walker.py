"""Recursive subdirectory enumeration.

The walker never follows symbolic links: a symlinked directory is neither
returned nor descended into. Children of a directory are enumerated
concurrently; the result is assembled in sorted name order, depth-first,
so it is stable for an unchanged tree.
"""

import asyncio
import logging
import os
import stat

from modsweep.core.errors import FilesystemError

logger = logging.getLogger(__name__)


def _list_names(path: str) -> list[str]:
    return sorted(os.listdir(path))


async def _walk_branch(path: str, depth: int, max_depth: int | None) -> list[str]:
    """Collect ``path`` and its subdirectories, or nothing if unusable."""
    if max_depth is not None and depth > max_depth:
        return []

    try:
        st = await asyncio.to_thread(os.lstat, path)
    except OSError as e:
        logger.warning("Cannot stat %s, skipping branch: %s", path, e)
        return []

    # lstat: a symlink to a directory is not S_ISDIR
    if not stat.S_ISDIR(st.st_mode):
        return []

    try:
        names = await asyncio.to_thread(_list_names, path)
    except OSError as e:
        logger.warning("Cannot read %s, skipping branch: %s", path, e)
        return []

    branches = await asyncio.gather(
        *(_walk_branch(os.path.join(path, name), depth + 1, max_depth) for name in names)
    )
    return [path, *(sub for branch in branches for sub in branch)]


async def walk(root: str | os.PathLike[str], max_depth: int | None = None) -> list[str]:
    """List all subdirectories below ``root``.

    Args:
        root: Directory to enumerate. It is not part of the result.
        max_depth: Deepest level to include, counted from 0 for the direct
            children of ``root``. None means unbounded.

    Returns:
        Absolute directory paths, depth-first (each directory before its
        own subdirectories). Empty if ``root`` is not a directory.

    Raises:
        FilesystemError: If ``root`` cannot be statted or listed.
    """
    root_path = os.path.abspath(os.fspath(root))

    try:
        st = await asyncio.to_thread(os.lstat, root_path)
    except OSError as e:
        raise FilesystemError(f"Cannot stat {root_path}: {e}", path=root_path) from e

    if not stat.S_ISDIR(st.st_mode):
        return []

    try:
        names = await asyncio.to_thread(_list_names, root_path)
    except OSError as e:
        raise FilesystemError(f"Cannot read {root_path}: {e}", path=root_path) from e

    branches = await asyncio.gather(
        *(_walk_branch(os.path.join(root_path, name), 0, max_depth) for name in names)
    )
    return [sub for branch in branches for sub in branch]
