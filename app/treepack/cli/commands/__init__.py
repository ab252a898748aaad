"""CLI commands for treepack.

This package contains all subcommand implementations.
"""

from treepack.cli.commands import config, select

__all__ = ["config", "select"]
