"""Console utility functions for formatting and output."""

import click
from typing import Optional

from colorama import Fore, Style, init
from rich.console import Console
from rich.text import Text

init(autoreset=True)


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'success': '✅',
    'package': '📦',
    'fetch': '📥',
    'upload': '📤',
    'lock': '🔐',
    'info': '💡',
    'warning': '⚠️',
    'error': '❌',
    'clean': '🧹',
}

_COLORAMA_MAP = {
    'red': Fore.RED,
    'green': Fore.GREEN,
    'yellow': Fore.YELLOW,
    'blue': Fore.BLUE,
    'cyan': Fore.CYAN,
    'white': Fore.WHITE,
    'magenta': Fore.MAGENTA,
    'muted': Fore.WHITE,
}


def _get_console() -> Optional[Console]:
    """Get a Rich console bound to the current stdout."""
    try:
        return Console()
    except Exception:
        return None


def _rich_echo(message: str, color: str = "white", style: str = None, bold: bool = False, symbol: str = None):
    """Echo message with Rich formatting or colorama fallback."""
    if style is not None:
        color = style

    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"

    console = _get_console()
    if console:
        style_str = "dim" if color == "muted" else color
        if bold:
            style_str = f"bold {style_str}"
        # Messages carry paths, URLs and TOML table names; print them verbatim
        console.print(
            Text(message, style=style_str),
            soft_wrap=True,
            highlight=False,
        )
        return

    color_code = _COLORAMA_MAP.get(color, Fore.WHITE)
    style_code = Style.BRIGHT if bold else ""
    click.echo(f"{color_code}{style_code}{message}{Style.RESET_ALL}")


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color."""
    _rich_echo(message, color="red", symbol=symbol)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow", symbol=symbol)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _rich_blank_line():
    """Print a blank line."""
    console = _get_console()
    if console:
        console.print()
    else:
        click.echo()

