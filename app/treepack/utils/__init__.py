"""Utility modules for treepack.

This module exports commonly used utility functions.
"""

from treepack.utils.formatting import (
    configure_logging,
    console,
    create_entry_table,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
)

__all__ = [
    "configure_logging",
    "console",
    "create_entry_table",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
]
