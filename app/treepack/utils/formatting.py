"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

THEME = Theme(
    {
        "muted": "#b2bec3",
        "header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "#f53263",
        "info": "#0ec1c8",
        "directory": "#0e8ac8",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def configure_logging(verbose: bool = False) -> None:
    """Route treepack log records to stderr through Rich.

    Args:
        verbose: Emit DEBUG records instead of warnings only.
    """
    logger = logging.getLogger("treepack")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def create_entry_table(title: str = "Selected Entries") -> Table:
    """Create a pre-configured table for displaying selected entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with name, type and size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("Local Name", no_wrap=True)
    table.add_column("Type", width=9)
    table.add_column("Size", style="info", justify="right")
    return table


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string."""
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
