"""Utility modules for packmate.

This module exports commonly used utility functions.
"""

from packmate.utils.formatting import (
    console,
    create_results_table,
    err_console,
    format_result_row,
    format_status,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_results_table",
    "err_console",
    "format_result_row",
    "format_status",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
