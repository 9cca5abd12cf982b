"""Filesystem removal of matched paths and empty directories."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def remove_path(path: str) -> bool:
    """Remove a file, symlink or directory tree.

    Directories (but not symlinks to directories) are removed recursively.
    Symlinks are unlinked without touching their target. A path that no
    longer exists is left alone, which happens when a matched directory
    was already removed together with its parent.

    Args:
        path: Absolute path to remove.

    Returns:
        True if something was removed, False if the path did not exist.

    Raises:
        OSError: If removal fails.
    """
    target = Path(path)

    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
        return True

    if target.exists() or target.is_symlink():
        target.unlink()
        return True

    logger.debug("Already gone: %s", path)
    return False
