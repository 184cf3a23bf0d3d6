"""Utility modules for savectl.

This module exports commonly used utility functions.
"""

from savectl.utils.formatting import (
    console,
    create_backup_table,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from savectl.utils.shell import CommandResult, command_exists, stream_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_backup_table",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "stream_command",
]
