"""Settings file commands.

Shows the effective cleanup settings and writes a default settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from modsweep.core.config import CleanSettings, load_clean_settings, save_clean_settings
from modsweep.core.errors import ConfigFileError
from modsweep.core.paths import ensure_config_dir, get_settings_path
from modsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the modsweep settings file.",
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", help="Settings file (defaults to ~/.config/modsweep/config.toml)."),
]


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Show the effective cleanup settings."""
    path = config_path or get_settings_path()
    try:
        settings = load_clean_settings(path)
    except ConfigFileError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    source = str(path) if path.exists() else "built-in defaults"
    table = Table(
        title=f"Settings ({escape(source)})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Option", style="path")
    table.add_column("Value")

    for key, value in settings.model_dump().items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(key, escape(str(value)))

    console.print(table)


@app.command()
def init(
    config_path: ConfigPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default options."""
    path = config_path or get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=0)

    try:
        if config_path is None:
            ensure_config_dir()
        saved = save_clean_settings(CleanSettings(), path)
    except (ConfigFileError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")
