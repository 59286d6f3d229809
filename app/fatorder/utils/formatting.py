"""Rich consoles and message helpers shared by the CLI commands.

Regular output goes to ``console``; warnings, errors and log records go
to ``err_console`` so ``--json`` output on stdout stays parseable.
"""

import os
import sys

from rich.console import Console
from rich.markup import escape

from fatorder.core.theme import get_theme

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _make_console(*, stderr: bool) -> Console:
    stream = sys.stderr if stderr else sys.stdout
    # Hex theme colors need truecolor; let Rich decide when not on a TTY
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console(stderr=False)
err_console = _make_console(stderr=True)


def format_size(size_bytes: int | None) -> str:
    """Render a byte count with binary units, e.g. ``1.5 KB``."""
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in _SIZE_UNITS[:-1]:
        if abs(size) < 1024:
            return f"{int(size)} B" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {_SIZE_UNITS[-1]}"


def safe_markup(text: str) -> str:
    """Make a path or OS message safe to embed in Rich markup.

    Undecodable filename bytes (surrogate escapes from ``os.fsdecode``)
    become U+FFFD and markup brackets are escaped.
    """
    try:
        raw = os.fsencode(text)
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "replace")
    return escape(raw.decode("utf-8", "replace"))


def print_info(message: str) -> None:
    console.print(f"[info]{message}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {message}")
