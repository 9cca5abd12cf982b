"""Utility modules for modsweep.

This module exports commonly used utility functions.
"""

from modsweep.utils.formatting import (
    configure_logging,
    console,
    create_path_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "configure_logging",
    "console",
    "create_path_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
