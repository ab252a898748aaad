"""Configuration commands.

Provides commands to create and inspect the treepack config file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from treepack.config import (
    ConfigError,
    config_exists,
    default_config,
    load_config,
    save_config,
)
from treepack.core.paths import get_config_path
from treepack.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create and inspect the configuration file.",
    invoke_without_command=True,
    no_args_is_help=True,
)

ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Config file (default: ~/.config/treepack/config.toml)."),
]


@app.command()
def init(
    config_path: ConfigOpt = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file populated with defaults."""
    path = config_path or get_config_path()

    if config_exists(path) and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_config(default_config(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def show(config_path: ConfigOpt = None) -> None:
    """Print the effective configuration as TOML."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    data = config.model_dump(mode="json", exclude_none=True)
    console.print(tomli_w.dumps(data), markup=False, highlight=False)
