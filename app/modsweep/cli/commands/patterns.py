"""Pattern inspection commands.

Shows resolved patterns, lists the rulesets of a source, and exports a
resolved pattern set as a reusable TOML rule source.
"""

import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
import typer
from rich.markup import escape
from rich.table import Table

from modsweep.cli.display import create_patterns_table
from modsweep.core.config import DEFAULT_PATTERNS
from modsweep.core.errors import ConfigurationError
from modsweep.rules.models import DEFAULT_KEY, ResolvedPatterns
from modsweep.rules.resolver import PatternResolver
from modsweep.rules.sources import default_registry
from modsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect and export cleanup patterns.",
    no_args_is_help=True,
)

PatternsOption = Annotated[
    list[str] | None,
    typer.Option("--patterns", "-p", help="Ruleset reference (repeatable)."),
]
AdditionalOption = Annotated[
    list[str] | None,
    typer.Option("--additional-patterns", "-a", help="Extra allow pattern (repeatable)."),
]
IgnoreOption = Annotated[
    list[str] | None,
    typer.Option("--ignore", "-I", help="Extra ignore pattern (repeatable)."),
]


def _resolve_or_exit(
    patterns: list[str] | None,
    additional: list[str] | None,
    ignore: list[str] | None,
) -> ResolvedPatterns:
    try:
        return PatternResolver().resolve(
            patterns or list(DEFAULT_PATTERNS),
            additional or [],
            ignore or [],
        )
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e


@app.command()
def show(
    patterns: PatternsOption = None,
    additional_patterns: AdditionalOption = None,
    ignore_patterns: IgnoreOption = None,
) -> None:
    """Show the allow and ignore patterns a run would use."""
    resolved = _resolve_or_exit(patterns, additional_patterns, ignore_patterns)
    console.print(create_patterns_table(resolved))
    console.print(
        f"\n[dim]{len(resolved.allow)} allow pattern(s), "
        f"{len(resolved.ignore)} ignore pattern(s)[/dim]"
    )


@app.command("list")
def list_rulesets(
    source: Annotated[
        str,
        typer.Argument(help="Source name or path to a .toml/.json rule file."),
    ] = "default",
) -> None:
    """List the rulesets defined by a rule source."""
    try:
        loaded = default_registry().load(source)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    table = Table(
        title=f"Rulesets in {escape(loaded.name)}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Ruleset", style="path")
    table.add_column("Patterns", justify="right")
    table.add_column("Ignore", justify="right")
    table.add_column("", width=8)

    for name in loaded.ruleset_names:
        spec = loaded.get(name)
        marker = "[info]default[/]" if name == loaded.default else ""
        table.add_row(escape(name), str(len(spec.patterns)), str(len(spec.ignore)), marker)

    console.print(table)


@app.command()
def export(
    output: Annotated[Path, typer.Argument(help="TOML file to write.")],
    name: Annotated[
        str,
        typer.Option("--name", help="Ruleset name inside the exported source."),
    ] = "custom",
    patterns: PatternsOption = None,
    additional_patterns: AdditionalOption = None,
    ignore_patterns: IgnoreOption = None,
) -> None:
    """Write the resolved patterns as a TOML rule source."""
    resolved = _resolve_or_exit(patterns, additional_patterns, ignore_patterns)

    output = output.resolve()
    if output.is_dir():
        print_error(f"Export path is a directory: {output}")
        raise typer.Exit(code=1)

    ruleset: dict[str, list[str]] = {"patterns": list(resolved.allow)}
    if resolved.ignore:
        ruleset["ignore"] = list(resolved.ignore)
    data = {DEFAULT_KEY: name, name: ruleset}

    tmp_path: Path | None = None
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(mode="wb", dir=output.parent, delete=False, suffix=".tmp") as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(output))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Exported {len(resolved.allow)} pattern(s) to {output}")
    print_info(f"Use it with: modsweep clean --patterns {output}")
