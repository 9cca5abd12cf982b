"""Clean command implementation.

Removes files matching the configured rulesets from a dependency tree,
then removes the directories left empty.
"""

import asyncio
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape

from modsweep.cleaner.engine import CleanupEngine
from modsweep.cleaner.events import Event
from modsweep.cleaner.errors import ErrorRecord
from modsweep.cli.display import print_summary, print_summary_json
from modsweep.core.config import CleanConfig, CleanSettings, load_clean_settings
from modsweep.core.errors import ConfigurationError
from modsweep.utils.formatting import console, print_error, print_info, print_warning

app = typer.Typer(
    help="Remove unnecessary files from a dependency tree.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


class ConfirmApprover:
    """Asks on the terminal before each deletion."""

    def approve(self, path: str, matches: Sequence[str]) -> bool:
        return typer.confirm(f"Delete {path}?", default=True)


def build_settings(base: CleanSettings, **overrides: Any) -> CleanSettings:
    """Apply CLI overrides (ignoring unset ones) on top of stored settings."""
    update = {key: value for key, value in overrides.items() if value is not None}
    return base.model_copy(update=update)


@app.callback(invoke_without_command=True)
def clean(
    ctx: typer.Context,
    cwd: Annotated[
        Path | None,
        typer.Option(
            "--cwd",
            "-C",
            help="Directory to clean (defaults to the current directory).",
            file_okay=False,
        ),
    ] = None,
    patterns: Annotated[
        list[str] | None,
        typer.Option("--patterns", "-p", help="Ruleset reference, e.g. default:safe (repeatable)."),
    ] = None,
    additional_patterns: Annotated[
        list[str] | None,
        typer.Option("--additional-patterns", "-a", help="Extra allow pattern (repeatable)."),
    ] = None,
    ignore_patterns: Annotated[
        list[str] | None,
        typer.Option("--ignore", "-I", help="Extra ignore pattern (repeatable)."),
    ] = None,
    no_dirs: Annotated[
        bool,
        typer.Option("--no-dirs", help="Never delete directories matched by patterns."),
    ] = False,
    case_sensitive: Annotated[
        bool,
        typer.Option("--case-sensitive", help="Match pattern case exactly."),
    ] = False,
    no_dotfiles: Annotated[
        bool,
        typer.Option("--no-dotfiles", help="Skip dotfiles and dot-directories."),
    ] = False,
    modules_dir: Annotated[
        str | None,
        typer.Option("--modules-dir", "-m", help="Dependency folder appended to the directory."),
    ] = None,
    no_modules_dir: Annotated[
        bool,
        typer.Option("--no-modules-dir", help="Clean the directory itself, without anchoring."),
    ] = False,
    keep_empty: Annotated[
        bool,
        typer.Option("--keep-empty", help="Do not remove empty directories."),
    ] = False,
    error_halt: Annotated[
        bool,
        typer.Option("--error-halt", help="Stop at the first filesystem error."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "--test", "-n", help="Show what would be deleted."),
    ] = False,
    follow_symlink: Annotated[
        bool,
        typer.Option("--follow-symlink", help="Also delete inside symlinked packages."),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Confirm each deletion."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Settings file to use instead of the default."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Remove files matching the rulesets, then empty directories."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    verbose = bool(obj.get("verbose"))
    quiet = bool(obj.get("quiet"))

    try:
        settings = build_settings(
            load_clean_settings(config_path),
            patterns=patterns or None,
            additional_patterns=additional_patterns or None,
            ignore_patterns=ignore_patterns or None,
            no_dirs=True if no_dirs else None,
            ignore_case=False if case_sensitive else None,
            dot_files=False if no_dotfiles else None,
            modules_dir=modules_dir,
            remove_empty_dirs=False if keep_empty else None,
            error_halt=True if error_halt else None,
            dry_run=True if dry_run else None,
            follow_symlink=True if follow_symlink else None,
        )
        if no_modules_dir:
            settings = settings.model_copy(update={"modules_dir": None})

        config = CleanConfig.from_settings(
            settings,
            cwd=(cwd or Path.cwd()).resolve(),
            process=ConfirmApprover() if interactive else None,
        )
        engine = CleanupEngine(config, handlers=_build_handlers(verbose, quiet))
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    if not quiet and output_format == OutputFormat.TABLE:
        print_info(f"Cleaning {engine.root}")

    summary = asyncio.run(engine.run())

    if output_format == OutputFormat.JSON:
        print_summary_json(summary)
    elif not quiet:
        print_summary(summary)

    if summary.halted or not summary.success:
        raise typer.Exit(code=1)


def _build_handlers(verbose: bool, quiet: bool) -> dict[Event, Any]:
    """Event handlers printing progress for the chosen verbosity."""
    handlers: dict[Event, Any] = {}

    if not quiet:

        def _on_file_error(record: ErrorRecord) -> None:
            print_warning(f"Could not delete {record.context.get('file')}: {record.error}")

        def _on_dir_error(record: ErrorRecord) -> None:
            print_warning(f"Could not remove {record.context.get('dir')}: {record.error}")

        handlers[Event.FILE_ERROR] = _on_file_error
        handlers[Event.EMPTY_DIR_ERROR] = _on_dir_error

    if verbose:
        handlers[Event.FILES_FOUND] = lambda matches: console.print(
            f"[muted]Found {len(matches)} matching path(s)[/]"
        )
        handlers[Event.DELETED] = lambda path: console.print(f"[deleted]-[/] {escape(path)}")
        handlers[Event.DELETED_EMPTY_DIR] = lambda path: console.print(
            f"[muted]- {escape(path)}/[/]"
        )

    return handlers
