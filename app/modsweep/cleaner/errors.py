"""Error collection for cleanup runs.

Errors raised inside a run are turned into :class:`ErrorRecord` values,
kept in chronological order and republished as events. The pipeline
keeps going unless the engine decides to halt.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from modsweep.cleaner.events import Event, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """A failure recorded during a run.

    Attributes:
        error: The underlying exception.
        method: Pipeline stage that raised it (e.g. "scan", "delete").
        context: Extra data such as the affected path.
        event_name: Event the record was published on, None if unpublished.
    """

    error: BaseException
    method: str
    context: dict[str, Any] = field(default_factory=dict)
    event_name: Event | None = Event.ERROR

    @property
    def message(self) -> str:
        """Human-readable one-line description."""
        where = self.context.get("file") or self.context.get("dir")
        suffix = f" ({where})" if where else ""
        return f"{self.method}: {self.error}{suffix}"


class ErrorSink:
    """Append-only error log that publishes each record.

    Args:
        notifier: Channels the records are published on.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._records: list[ErrorRecord] = []

    def record(
        self,
        error: BaseException,
        method: str,
        context: dict[str, Any] | None = None,
        event: Event | None = Event.ERROR,
    ) -> ErrorRecord:
        """Store an error and publish it.

        Args:
            error: Exception to record.
            method: Pipeline stage name.
            context: Optional extra key/value data.
            event: Event to publish on; None records without publishing.

        Returns:
            The stored ErrorRecord.
        """
        entry = ErrorRecord(error=error, method=method, context=dict(context or {}), event_name=event)
        self._records.append(entry)
        logger.warning("Error in %s: %s", method, entry.message)
        if event is not None:
            self._notifier.emit(event, entry)
        return entry

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        """All records in order of occurrence."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)
