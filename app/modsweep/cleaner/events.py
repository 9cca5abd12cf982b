"""Lifecycle notifications emitted by the cleanup engine.

Handlers are registered per engine instance on a :class:`Notifier`.
Events are delivered synchronously, in registration order.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


class Event(str, Enum):
    """Lifecycle events of a cleanup run, with the payload they carry.

    Attributes:
        START: Run started (no payload).
        BEFORE_SCAN: Allow patterns and ScanOptions about to be scanned.
        FILES_FOUND: MatchSet produced by the scan.
        BEFORE_PROCESS: MatchSet about to be processed.
        DELETED: One path deleted (or reported in dry-run).
        FINISH: List of successfully deleted paths.
        BEFORE_EMPTY_SWEEP: Empty-directory sweep starting (no payload).
        EMPTY_DIRS_FOUND: Directories judged empty.
        DELETED_EMPTY_DIR: One empty directory removed.
        AFTER_EMPTY_SWEEP: List of removed empty directories.
        ERROR: ErrorRecord from scan or sweep stages.
        FILE_ERROR: ErrorRecord for a failed file deletion.
        EMPTY_DIR_ERROR: ErrorRecord for a failed empty-directory removal.
        COMPLETE: Run finished (no payload), always emitted.
    """

    START = "start"
    BEFORE_SCAN = "before_scan"
    FILES_FOUND = "files_found"
    BEFORE_PROCESS = "before_process"
    DELETED = "deleted"
    FINISH = "finish"
    BEFORE_EMPTY_SWEEP = "before_empty_sweep"
    EMPTY_DIRS_FOUND = "empty_dirs_found"
    DELETED_EMPTY_DIR = "deleted_empty_dir"
    AFTER_EMPTY_SWEEP = "after_empty_sweep"
    ERROR = "error"
    FILE_ERROR = "file_error"
    EMPTY_DIR_ERROR = "empty_dir_error"
    COMPLETE = "complete"


class Notifier:
    """Typed publish/subscribe channels for one engine instance."""

    def __init__(self) -> None:
        self._handlers: defaultdict[Event, list[Handler]] = defaultdict(list)

    def on(self, event: Event, handler: Handler) -> None:
        """Register ``handler`` for ``event``."""
        self._handlers[Event(event)].append(handler)

    def off(self, event: Event, handler: Handler) -> None:
        """Unregister a previously registered handler (no-op if absent)."""
        handlers = self._handlers.get(Event(event), [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Event, *payload: object) -> None:
        """Deliver ``payload`` to every handler registered for ``event``."""
        logger.debug("event %s", event.value)
        for handler in list(self._handlers.get(event, ())):
            handler(*payload)
