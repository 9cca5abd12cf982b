"""Caller-supplied hooks for the cleanup engine.

Two capabilities can be plugged into a run:

- an :class:`Approver`, asked before each candidate is deleted;
- an :class:`EmptinessPredicate`, deciding which directory entries still
  count as "empty" during the empty-directory sweep.

``None`` is the "not configured" value for both: no approver approves
everything, no predicate means a directory must be truly empty.
"""

import inspect
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, runtime_checkable

ApprovalResult = bool | None


@runtime_checkable
class Approver(Protocol):
    """Decides whether a matched path may be deleted.

    ``approve`` may return a value directly or an awaitable. Any result
    other than ``False`` approves the deletion.
    """

    def approve(
        self, path: str, matches: Sequence[str]
    ) -> ApprovalResult | Awaitable[ApprovalResult]: ...


@runtime_checkable
class EmptinessPredicate(Protocol):
    """Returns True for directory entries that do not prevent emptiness."""

    def matches(self, entry: str) -> bool: ...


class FunctionApprover:
    """Adapts a plain function (sync or async) to the Approver protocol.

    The function is called with the candidate path, and also with the full
    match list when it accepts a second positional argument.

    Args:
        func: Callable returning a boolean-ish value or an awaitable of one.
    """

    def __init__(self, func: Callable[..., object]) -> None:
        self._func = func
        self._wants_matches = _accepts_two_args(func)

    def approve(self, path: str, matches: Sequence[str]) -> object:
        if self._wants_matches:
            return self._func(path, matches)
        return self._func(path)

    def __repr__(self) -> str:
        return f"FunctionApprover({getattr(self._func, '__name__', self._func)!r})"


def _accepts_two_args(func: Callable[..., object]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2


async def ask_approver(approver: Approver | None, path: str, matches: Sequence[str]) -> bool:
    """Ask an approver about ``path``, awaiting the answer if needed.

    Returns:
        False only when the approver answered ``False``.
    """
    if approver is None:
        return True
    result = approver.approve(path, matches)
    if inspect.isawaitable(result):
        result = await result
    return result is not False


# Thumbs.db / .DS_Store, matched as a case-insensitive suffix
_OS_ARTIFACT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Thumbs\.db$", re.IGNORECASE),
    re.compile(r"\.DS_Store$", re.IGNORECASE),
)


class OsArtifactFilter:
    """Treats operating-system artifact files as not preventing emptiness.

    Args:
        patterns: Regular expressions searched in each entry name. Defaults
            to ``Thumbs.db`` and ``.DS_Store``.
    """

    def __init__(self, patterns: Sequence[re.Pattern[str]] | None = None) -> None:
        self._patterns = tuple(patterns) if patterns is not None else _OS_ARTIFACT_PATTERNS

    def matches(self, entry: str) -> bool:
        return any(pattern.search(entry) for pattern in self._patterns)

    def __repr__(self) -> str:
        return f"OsArtifactFilter({[p.pattern for p in self._patterns]!r})"
