# -*- coding: utf-8 -*-
"""Console output utilities for CLI using Rich library."""

import io
import json
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.json import JSON


# Centralized style configuration
CONSOLE_CONFIG = {
    "success": {
        "emoji": "✓",
        "style": "bold green",
    },
    "error": {
        "emoji": "✗",
        "style": "bold red",
    },
    "warning": {
        "emoji": "⚠",
        "style": "bold yellow",
    },
    "info": {
        "emoji": "ℹ",
        "style": "bold blue",
    },
}

# Module-level console instances (lazy initialization)
_console = None
_err_console = None


def _get_console() -> Console:
    """Get or create the shared console instance for stdout."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def _get_err_console() -> Console:
    """Get or create the shared console instance for stderr."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def _echo(kind: str, message: str, console: Console, **kwargs) -> None:
    config = CONSOLE_CONFIG[kind]
    # Messages carry "[service/phase]" prefixes that are not Rich markup
    kwargs.setdefault("markup", False)
    formatted_message = f"{config['emoji']} {message}"
    console.print(formatted_message, style=config["style"], **kwargs)


def echo_success(message: str, **kwargs) -> None:
    """
    Print success message in green with checkmark.

    Args:
        message: Message to display
        **kwargs: Additional Rich Console.print() parameters

    Example:
        >>> echo_success("placement-api is serving")
        ✓ placement-api is serving
    """
    _echo("success", message, _get_console(), **kwargs)


def echo_error(message: str, **kwargs) -> None:
    """
    Print error message in red with X mark to stderr.

    Args:
        message: Message to display
        **kwargs: Additional Rich Console.print() parameters
    """
    _echo("error", message, _get_err_console(), **kwargs)


def echo_warning(message: str, **kwargs) -> None:
    """Print warning message in yellow with warning symbol."""
    _echo("warning", message, _get_console(), **kwargs)


def echo_info(message: str, **kwargs) -> None:
    """Print info message in blue with info symbol."""
    _echo("info", message, _get_console(), **kwargs)


def format_json(data: Any, indent: int = 2) -> str:
    """
    Format data as JSON with syntax highlighting.

    Args:
        data: Data to format as JSON
        indent: Indentation level (default: 2)

    Returns:
        Rendered JSON as a string with syntax highlighting
    """
    # Rich's JSON requires a string, not an object
    json_string = json.dumps(data, indent=indent, default=str)

    string_io = io.StringIO()
    temp_console = Console(file=string_io, force_terminal=True)
    temp_console.print(JSON(json_string, indent=indent))
    return string_io.getvalue()


def format_status_info(status: dict) -> str:
    """
    Format lifecycle status using Rich Table.

    Args:
        status: Dictionary returned by LifecycleController.status()

    Returns:
        Rendered status info as a string
    """
    # Create table with no header for key-value pairs
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="bold cyan")
    table.add_column("Value", style="white")

    table.add_row("Service", status["service"])
    table.add_row("State", status["state"])
    table.add_row("Backend", status["backend_mode"] or "-")
    table.add_row("Handle", status["handle"] or "-")
    table.add_row("URL", status["url"])
    table.add_row("Running", "yes" if status["is_running"] else "no")
    table.add_row("Updated", status["updated_at"] or "-")

    for name, seconds in sorted(status.get("timings", {}).items()):
        table.add_row(f"Time {name}", f"{seconds:.2f}s")

    string_io = io.StringIO()
    temp_console = Console(file=string_io, force_terminal=True)
    temp_console.print(table)
    return string_io.getvalue()
