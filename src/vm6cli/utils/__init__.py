"""Utility functions and helpers."""

from .helpers import (
    async_to_sync,
    ordered_group,
    run_with_spinner,
)
from .log import setup_logging
from .output import (
    confirm,
    console,
    create_table,
    err_console,
    format_mib,
    get_state_color,
    print_cancelled,
    print_data,
    print_error,
    print_info,
    print_success,
    print_warning,
    prompt,
)

__all__ = [
    "async_to_sync",
    "confirm",
    "console",
    "create_table",
    "err_console",
    "format_mib",
    "get_state_color",
    "ordered_group",
    "print_cancelled",
    "print_data",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "prompt",
    "run_with_spinner",
    "setup_logging",
]
