"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from treepack import __version__
from treepack.cli.commands import config, select
from treepack.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="treepack",
    help="Select directory trees into archive namespaces.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treepack version {__version__}")
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
    """treepack - select directory trees into archive namespaces.

    Walk a directory flat or recursively, filter it by glob, regex or an
    ignore list, and store the result under a prefix inside a zip archive.
    """
    configure_logging(verbose=verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="add")(select.add)
app.command(name="ls")(select.ls)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
