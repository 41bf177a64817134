"""CLI utility functions"""

from .output import (
    console,
    format_convert_result,
    format_deploy_result,
    format_json,
    format_status,
    format_warnings,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from .progress import spinner, run_with_progress

__all__ = [
    # Output utilities
    'console',
    'format_convert_result',
    'format_deploy_result',
    'format_json',
    'format_status',
    'format_warnings',
    'print_error',
    'print_info',
    'print_success',
    'print_warning',

    # Progress utilities
    'spinner',
    'run_with_progress',
]
