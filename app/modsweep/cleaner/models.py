"""Run state and result models for the cleanup engine."""

from dataclasses import dataclass
from enum import Enum

from modsweep.cleaner.errors import ErrorRecord


class EngineState(str, Enum):
    """Stage a cleanup engine is currently in.

    Attributes:
        IDLE: Constructed, not yet running.
        SCANNING: Matching patterns against the tree.
        PROCESSING: Gating and deleting matches.
        EMPTY_SWEEP: Finding and removing empty directories.
        COMPLETE: Run finished (with or without recorded errors).
    """

    IDLE = "idle"
    SCANNING = "scanning"
    PROCESSING = "processing"
    EMPTY_SWEEP = "empty_sweep"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcome of one cleanup run.

    Attributes:
        root: Anchored root directory the run operated on.
        matches: Relative paths found by the scan.
        deleted: Relative paths deleted (or reported deleted in dry-run).
        empty_dirs: Absolute directories judged empty.
        removed_empty_dirs: Absolute directories actually removed.
        errors: Errors recorded during the run, in order.
        halted: Whether halt-on-error stopped the run early.
        dry_run: Whether deletions were simulated.
    """

    root: str
    matches: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    empty_dirs: tuple[str, ...] = ()
    removed_empty_dirs: tuple[str, ...] = ()
    errors: tuple[ErrorRecord, ...] = ()
    halted: bool = False
    dry_run: bool = False

    @property
    def success(self) -> bool:
        """True when no error was recorded."""
        return not self.errors
