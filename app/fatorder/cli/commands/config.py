"""Settings commands.

Provides `fatorder config init|show|path` for managing the settings
file that holds the defaults of `fatorder sort`.
"""

from typing import Annotated

import tomli_w
import typer

from fatorder.core.paths import get_settings_path
from fatorder.core.settings import (
    ConfigError,
    SorterSettings,
    load_settings_or_default,
    save_settings,
    settings_to_dict,
)
from fatorder.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    safe_markup,
)

app = typer.Typer(
    help="Manage fatorder settings.",
    no_args_is_help=True,
)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing settings file.",
        ),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {safe_markup(str(path))}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(SorterSettings(), path)
    except ConfigError as e:
        print_error(safe_markup(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {safe_markup(str(saved))}")


@app.command()
def show() -> None:
    """Show the effective settings as TOML."""
    try:
        settings = load_settings_or_default()
    except ConfigError as e:
        print_error(safe_markup(str(e)))
        raise typer.Exit(code=1) from e

    console.print(tomli_w.dumps(settings_to_dict(settings)), markup=False, highlight=False)


@app.command()
def path() -> None:
    """Print the location of the settings file."""
    typer.echo(str(get_settings_path()))
