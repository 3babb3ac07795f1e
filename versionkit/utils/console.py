"""
Rich console helpers for versionkit commands.

Everything a command shows the user goes through this module: one-line
status messages, tables of versions and activations, and the panel used
for conflict reports. Diagnostics belong in :mod:`versionkit.utils.logger`.

Library names, requirement strings and conflict explanations are user
data and may contain square brackets, so they are escaped before Rich
sees them. Table cells are the exception: callers may pass markup there
on purpose (see :func:`colorize_update_type`).
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.markup import escape
from rich.console import Console

VERSIONKIT_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
        "library": "bold cyan",
        "version": "bold green",
    }
)

#: Environment variables that force plain output when set to anything.
_PLAIN_OUTPUT_ENV = ("NO_COLOR", "CI")

#: Default prefix printed before each kind of status message.
_STATUS_PREFIXES: Mapping[str, str] = {
    "success": "[OK]",
    "error": "[ERROR]",
    "warning": "[WARNING]",
}

#: Markup color for each label returned by ``get_update_type``.
_CHANGE_COLORS: Mapping[str, str] = {
    "major": "red",
    "downgrade": "red",
    "minor": "yellow",
    "patch": "green",
    "pre-release": "cyan",
    "new": "cyan",
}

RowStyler = Callable[[Dict[str, Any]], Optional[str]]

_console: Optional[Console] = None
_console_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Console lifecycle
# ---------------------------------------------------------------------------


def _should_use_color() -> bool:
    """Decide whether output may be colored.

    Plain output is used in CI, when ``NO_COLOR`` is set, and whenever
    stdout is not a terminal (or cannot tell).
    """
    if any(os.environ.get(name) for name in _PLAIN_OUTPUT_ENV):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _build_console() -> Console:
    colored = _should_use_color()
    return Console(theme=VERSIONKIT_THEME, no_color=not colored, highlight=colored)


def _get_console() -> Console:
    """Return the shared console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                _console = _build_console()
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call rebuilds it.

    The CLI calls this after ``--color/--no-color`` rewrites ``NO_COLOR``.
    """
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the shared Rich console for output not covered here."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------


def _print_status(style: str, message: str, prefix: Optional[str]) -> None:
    if prefix is None:
        prefix = _STATUS_PREFIXES[style]
    _get_console().print(escape(f"{prefix} {message}"), style=style)


def print_success(message: str, *, prefix: Optional[str] = None) -> None:
    """Print a success message, ``[OK]`` by default."""
    _print_status("success", message, prefix)


def print_error(message: str, *, prefix: Optional[str] = None) -> None:
    """Print an error message, ``[ERROR]`` by default."""
    _print_status("error", message, prefix)


def print_warning(message: str, *, prefix: Optional[str] = None) -> None:
    """Print a warning message, ``[WARNING]`` by default."""
    _print_status("warning", message, prefix)


# ---------------------------------------------------------------------------
# Tables and reports
# ---------------------------------------------------------------------------


def _add_columns(
    table: Table,
    headers: List[str],
    column_styles: Mapping[str, Mapping[str, Any]],
) -> None:
    for header in headers:
        options = column_styles.get(header, {})
        table.add_column(
            header,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
            width=options.get("width"),
            overflow=options.get("overflow", "fold"),
        )


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Mapping[str, Mapping[str, Any]]] = None,
    row_styler: Optional[RowStyler] = None,
    show_row_lines: bool = False,
) -> None:
    """Print rows of versions or activations as a table.

    Nothing is printed for an empty ``data`` list.

    Args:
        data: One dictionary per row. Cell values are converted with ``str``
            and may contain Rich markup.
        headers: Columns to show, in order. Defaults to the first row's keys.
        title: Table title.
        caption: Table caption.
        column_styles: Options per column: ``style``, ``justify``,
            ``no_wrap``, ``width`` and ``overflow``.
        row_styler: Called with each row; returns a style for it or ``None``.
        show_row_lines: Draw separators between rows.
    """
    if not data:
        return

    columns = headers if headers is not None else list(data[0])
    table = Table(
        title=title,
        caption=caption,
        header_style="bold",
        show_lines=show_row_lines,
    )
    _add_columns(table, columns, column_styles or {})

    for row in data:
        cells = [str(row.get(column, "")) for column in columns]
        table.add_row(*cells, style=row_styler(row) if row_styler else None)

    _get_console().print(table)


def print_report(body: str, *, title: str, style: str = "error") -> None:
    """Print a multi-line report, such as a conflict explanation, in a panel."""
    _get_console().print(
        Panel(escape(body), title=title, border_style=style, expand=False)
    )


def colorize_update_type(update_type: str) -> str:
    """Wrap a version-change label in color markup for a table cell.

    Args:
        update_type: Label from
            :func:`versionkit.utils.version_utils.get_update_type`.
            Unknown labels, ``same`` and ``unknown`` are returned as is.
    """
    color = _CHANGE_COLORS.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type
