"""Shared Rich display functions for cleanup results and patterns."""

import json

from rich.markup import escape
from rich.table import Table

from modsweep.cleaner.models import RunSummary
from modsweep.rules.models import ResolvedPatterns
from modsweep.utils.formatting import console, create_path_table, print_info, print_success, print_warning


def create_deleted_table(summary: RunSummary) -> Table:
    """Create a table of deleted (or would-be deleted) paths.

    Args:
        summary: Run summary to display.

    Returns:
        Rich Table with one row per deleted path and removed empty directory.
    """
    title = "Cleanup Results (Dry Run)" if summary.dry_run else "Cleanup Results"
    table = create_path_table(title)

    status = "[dry_run]dry-run[/]" if summary.dry_run else "[deleted]deleted[/]"
    for path in summary.deleted:
        table.add_row(escape(path), status)
    for directory in summary.removed_empty_dirs:
        table.add_row(escape(directory), "[muted]empty dir[/]")

    return table


def create_errors_table(summary: RunSummary) -> Table:
    """Create a table of errors recorded during a run."""
    table = Table(
        title="Errors",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Stage", width=18)
    table.add_column("Path", overflow="fold")
    table.add_column("Error", style="error")

    for record in summary.errors:
        where = record.context.get("file") or record.context.get("dir") or "-"
        table.add_row(record.method, escape(str(where)), escape(str(record.error)))

    return table


def print_summary(summary: RunSummary) -> None:
    """Print result tables and a one-line summary for a run."""
    if summary.deleted or summary.removed_empty_dirs:
        console.print(create_deleted_table(summary))
    if summary.errors:
        console.print(create_errors_table(summary))

    if summary.halted:
        print_warning("Run halted on the first error.")

    if summary.dry_run:
        print_info(f"Dry-run: {len(summary.deleted)} path(s) would be deleted in {summary.root}.")
    elif summary.errors:
        print_warning(
            f"Deleted {len(summary.deleted)} path(s) and "
            f"{len(summary.removed_empty_dirs)} empty director(ies), "
            f"{len(summary.errors)} error(s)."
        )
    elif not summary.deleted and not summary.removed_empty_dirs:
        print_success(f"Nothing to clean in {summary.root}.")
    else:
        print_success(
            f"Deleted {len(summary.deleted)} path(s) and "
            f"{len(summary.removed_empty_dirs)} empty director(ies)."
        )


def summary_to_dict(summary: RunSummary) -> dict[str, object]:
    """Convert a RunSummary into JSON-serializable data."""
    return {
        "root": summary.root,
        "dry_run": summary.dry_run,
        "halted": summary.halted,
        "matches": list(summary.matches),
        "deleted": list(summary.deleted),
        "empty_dirs": list(summary.empty_dirs),
        "removed_empty_dirs": list(summary.removed_empty_dirs),
        "errors": [
            {
                "method": record.method,
                "error": str(record.error),
                "context": {key: str(value) for key, value in record.context.items()},
            }
            for record in summary.errors
        ],
    }


def print_summary_json(summary: RunSummary) -> None:
    """Print a RunSummary as JSON."""
    console.print_json(json.dumps(summary_to_dict(summary)))


def create_patterns_table(patterns: ResolvedPatterns) -> Table:
    """Create a table listing resolved allow and ignore patterns."""
    table = Table(
        title="Resolved Patterns",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", width=8)
    table.add_column("Pattern", style="path")

    for pattern in patterns.allow:
        table.add_row("[deleted]allow[/]", escape(pattern))
    for pattern in patterns.ignore:
        table.add_row("[skipped]ignore[/]", escape(pattern))

    return table
