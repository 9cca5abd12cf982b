"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from modsweep import __version__
from modsweep.cli.commands import clean, config, patterns
from modsweep.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="modsweep",
    help="Prune unnecessary files from dependency trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"modsweep version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """modsweep - prune unnecessary files from dependency trees.

    Deletes files matching named pattern rulesets (docs, tests, tooling
    configs) and then removes the directories left empty.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(clean.app, name="clean")
app.add_typer(patterns.app, name="patterns")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
