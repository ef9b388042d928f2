"""Utility modules for the Noir registry CLI."""

from .console import (
    _rich_success,
    _rich_error,
    _rich_warning,
    _rich_info,
    _rich_echo,
    _rich_blank_line,
    _get_console,
    STATUS_SYMBOLS
)
from .helpers import is_tool_available

__all__ = [
    '_rich_success',
    '_rich_error',
    '_rich_warning',
    '_rich_info',
    '_rich_echo',
    '_rich_blank_line',
    '_get_console',
    'STATUS_SYMBOLS',
    'is_tool_available',
]
