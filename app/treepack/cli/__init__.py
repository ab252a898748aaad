"""CLI package for treepack.

This package contains the Typer application and all subcommands.
"""

from treepack.cli.main import app

__all__ = ["app"]
