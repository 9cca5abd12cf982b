"""Cleanup engine: scan, gate, delete, then sweep empty directories.

The engine resolves its patterns when it is constructed, so configuration
errors surface before anything is touched. A run then goes through
``scanning -> processing -> empty_sweep -> complete``. Filesystem errors
are recorded and the run continues, except when ``error_halt`` is set:
then the first recorded error ends the run. ``complete`` is always
emitted.
"""

from __future__ import annotations

import asyncio
import logging
import os
import posixpath
import shutil
import stat
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from modsweep.cleaner.emptiness import is_empty
from modsweep.cleaner.errors import ErrorRecord, ErrorSink
from modsweep.cleaner.events import Event, Handler, Notifier
from modsweep.cleaner.hooks import ask_approver
from modsweep.cleaner.models import EngineState, RunSummary
from modsweep.cleaner.removal import remove_path
from modsweep.cleaner.scanner import ScanOptions, find_matches
from modsweep.cleaner.walker import walk
from modsweep.core.errors import FilesystemError, ModsweepError
from modsweep.rules.resolver import PatternResolver

if TYPE_CHECKING:
    from modsweep.core.config import CleanConfig
    from modsweep.rules.models import ResolvedPatterns

logger = logging.getLogger(__name__)


class RunHalted(ModsweepError):
    """Raised inside a run when halt-on-error stops the pipeline.

    Attributes:
        record: The error record that triggered the halt.
    """

    def __init__(self, record: ErrorRecord) -> None:
        super().__init__(f"Run halted after error in {record.method}: {record.error}")
        self.record = record


class CleanupEngine:
    """Runs one cleanup over a dependency tree.

    Args:
        config: Immutable run configuration.
        resolver: Pattern resolver (defaults to one over the built-in sources).
        handlers: Event handlers to register before anything runs.

    Raises:
        ConfigurationError: If the configured rulesets cannot be resolved.
    """

    def __init__(
        self,
        config: CleanConfig,
        *,
        resolver: PatternResolver | None = None,
        handlers: Mapping[Event, Handler | Sequence[Handler]] | None = None,
    ) -> None:
        self.config = config
        self.notifier = Notifier()
        for event, registered in (handlers or {}).items():
            if callable(registered):
                registered = [registered]
            for handler in registered:
                self.notifier.on(event, handler)

        self.root = str(config.root)
        self.state = EngineState.IDLE
        self._errors = ErrorSink(self.notifier)
        self._removed_empty_dirs: list[str] = []

        resolver = resolver or PatternResolver()
        self.patterns: ResolvedPatterns = resolver.resolve(
            config.patterns,
            config.additional_patterns,
            config.ignore_patterns,
        )

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        """Errors recorded so far, in order of occurrence."""
        return self._errors.records

    def on(self, event: Event, handler: Handler) -> None:
        """Register an event handler."""
        self.notifier.on(event, handler)

    def _record(
        self,
        error: BaseException,
        method: str,
        context: dict[str, Any] | None = None,
        event: Event | None = Event.ERROR,
    ) -> ErrorRecord:
        record = self._errors.record(error, method, context, event)
        if self.config.error_halt:
            raise RunHalted(record)
        return record

    async def run(self) -> RunSummary:
        """Scan, delete, and sweep empty directories.

        Returns:
            Summary of the run, including recorded errors and whether the
            run halted early.
        """
        matches: list[str] = []
        deleted: list[str] = []
        empty_dirs: list[str] = []
        halted = False
        self._removed_empty_dirs = []

        self.notifier.emit(Event.START)
        try:
            self.state = EngineState.SCANNING
            matches = await self.scan()

            self.state = EngineState.PROCESSING
            deleted = await self.process_matches(matches)

            if self.config.remove_empty_dirs:
                self.state = EngineState.EMPTY_SWEEP
                empty_dirs = await self.clean_empty_dirs()
        except RunHalted as e:
            halted = True
            logger.warning("%s", e)
        except (FilesystemError, OSError) as e:
            # Already recorded by the stage that raised it
            logger.warning("Run stopped early: %s", e)
        finally:
            self.state = EngineState.COMPLETE
            self.notifier.emit(Event.COMPLETE)

        return RunSummary(
            root=self.root,
            matches=tuple(matches),
            deleted=tuple(deleted),
            empty_dirs=tuple(empty_dirs),
            removed_empty_dirs=tuple(self._removed_empty_dirs),
            errors=self.errors,
            halted=halted,
            dry_run=self.config.dry_run,
        )

    async def scan(self) -> list[str]:
        """Find paths below the root whose name matches an allow pattern.

        Returns:
            Relative POSIX paths; empty if the scan failed.
        """
        options = ScanOptions(
            cwd=self.root,
            dot=self.config.dot_files,
            nocase=self.config.ignore_case,
            ignore=self.patterns.ignore,
            nodir=self.config.no_dirs,
        )
        self.notifier.emit(Event.BEFORE_SCAN, list(self.patterns.allow), options)

        try:
            matches = await asyncio.to_thread(find_matches, self.patterns.allow, options)
        except (FilesystemError, OSError) as e:
            self._record(e, "scan")
            return []

        logger.debug("Scan of %s found %d match(es)", self.root, len(matches))
        self.notifier.emit(Event.FILES_FOUND, matches)
        return matches

    async def process_matches(self, matches: Sequence[str]) -> list[str]:
        """Gate and delete each match.

        A match is skipped when its parent directory is a symlink (unless
        ``follow_symlink``) or when the approver answers ``False``.

        Args:
            matches: Relative paths from :meth:`scan`.

        Returns:
            Paths deleted successfully, in input order.
        """
        if not matches:
            return []

        self.notifier.emit(Event.BEFORE_PROCESS, list(matches))
        results: list[str] = []

        for match in matches:
            if not self.config.follow_symlink and await self._parent_is_symlink(match):
                logger.debug("Skipping %s: parent directory is a symlink", match)
                continue

            try:
                approved = await ask_approver(self.config.process, match, matches)
            except Exception as e:  # approver is caller code
                self._record(e, "process", {"file": match})
                continue

            if not approved:
                logger.debug("Skipping %s: not approved", match)
                continue

            if await self._delete_file(match):
                results.append(match)

        self.notifier.emit(Event.FINISH, results)
        return results

    async def _parent_is_symlink(self, match: str) -> bool:
        # A trailing separator would make lstat follow a symlinked root
        parent_rel = posixpath.dirname(match)
        parent = os.path.join(self.root, parent_rel) if parent_rel else self.root
        try:
            st = await asyncio.to_thread(os.lstat, parent)
        except OSError:
            # Not evidence of a symlink
            return False
        return stat.S_ISLNK(st.st_mode)

    async def _delete_file(self, match: str) -> bool:
        path = os.path.join(self.root, match)
        if not self.config.dry_run:
            try:
                removed = await asyncio.to_thread(remove_path, path)
            except OSError as e:
                self._record(e, "delete", {"file": match}, Event.FILE_ERROR)
                return False
            if not removed:
                # Removed along with an earlier match; still reported as deleted
                logger.debug("%s was already gone", match)

        self.notifier.emit(Event.DELETED, match)
        return True

    async def clean_empty_dirs(self) -> list[str]:
        """Find and remove directories left empty.

        Does nothing in dry-run mode or when ``remove_empty_dirs`` is off.

        Returns:
            Directories judged empty (including any whose removal failed).
        """
        if self.config.dry_run or not self.config.remove_empty_dirs:
            return []

        self.notifier.emit(Event.BEFORE_EMPTY_SWEEP)
        dirs = await self.find_empty_dirs()
        removed = await self.remove_empty_dirs(dirs)
        self.notifier.emit(Event.AFTER_EMPTY_SWEEP, removed)
        return dirs

    async def find_empty_dirs(self) -> list[str]:
        """List subdirectories of the root that are empty under the filter.

        Raises:
            FilesystemError: If the root cannot be walked or any directory
                cannot be checked. The error is recorded first.
        """
        try:
            subdirs = await walk(self.root)
        except FilesystemError as e:
            self._record(e, "find_empty_dirs")
            raise

        results: list[str] = []
        for directory in subdirs:
            try:
                empty = await is_empty(directory, self.config.empty_dir_filter)
            except FilesystemError as e:
                self._record(e, "find_empty_dirs", {"dir": directory})
                raise
            if empty:
                results.append(directory)

        self.notifier.emit(Event.EMPTY_DIRS_FOUND, results)
        return results

    async def remove_empty_dirs(self, dirs: Sequence[str]) -> list[str]:
        """Remove each directory in ``dirs`` together with filtered leftovers.

        Returns:
            Directories removed successfully.
        """
        removed: list[str] = []
        self._removed_empty_dirs = removed
        for directory in dirs:
            try:
                await asyncio.to_thread(shutil.rmtree, directory)
            except OSError as e:
                self._record(e, "remove_empty_dirs", {"dir": directory}, Event.EMPTY_DIR_ERROR)
                continue
            removed.append(directory)
            self.notifier.emit(Event.DELETED_EMPTY_DIR, directory)

        return removed
