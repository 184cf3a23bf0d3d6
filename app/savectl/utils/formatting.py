"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from savectl.core.theme import get_theme, reload_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size_bytes: int) -> str:
    """Format a byte count for humans (1024-based).

    Args:
        size_bytes: Number of bytes.

    Returns:
        String like "512 B", "1.5 KB" or "2.0 GB".
    """
    size = float(size_bytes)
    for unit in _SIZE_UNITS:
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size_bytes} B"


def create_backup_table(title: str = "Backups") -> Table:
    """Create a pre-configured table for displaying tracked items.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for backup display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Item", style="item", no_wrap=True)
    table.add_column("Snapshots", justify="right")
    table.add_column("Newest", style="snapshot")
    table.add_column("Size", style="size", justify="right")
    return table


def apply_console_theme(name: str) -> None:
    """Switch both consoles to another palette, re-reading user overrides."""
    theme = reload_theme(name)
    console.push_theme(theme)
    err_console.push_theme(theme)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
