"""Cleanup engine and its building blocks.

This module provides pattern scanning, gated deletion, directory walking,
emptiness checks and the engine that ties them into one run.
"""

from modsweep.cleaner.emptiness import entries_are_empty, is_empty
from modsweep.cleaner.engine import CleanupEngine, RunHalted
from modsweep.cleaner.errors import ErrorRecord, ErrorSink
from modsweep.cleaner.events import Event, Notifier
from modsweep.cleaner.hooks import (
    Approver,
    EmptinessPredicate,
    FunctionApprover,
    OsArtifactFilter,
    ask_approver,
)
from modsweep.cleaner.models import EngineState, RunSummary
from modsweep.cleaner.scanner import ScanOptions, find_matches
from modsweep.cleaner.walker import walk

__all__ = [
    "Approver",
    "CleanupEngine",
    "EmptinessPredicate",
    "EngineState",
    "ErrorRecord",
    "ErrorSink",
    "Event",
    "FunctionApprover",
    "Notifier",
    "OsArtifactFilter",
    "RunHalted",
    "RunSummary",
    "ScanOptions",
    "ask_approver",
    "entries_are_empty",
    "find_matches",
    "is_empty",
    "walk",
]
