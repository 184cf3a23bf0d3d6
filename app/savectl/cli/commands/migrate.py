"""Migrate command for relocating the backup root.

This module provides the `savectl migrate` command, which moves every
snapshot to a new location and points the backup_path setting there.
"""

from pathlib import Path
from typing import Annotated

import typer

from savectl.cli.types import get_settings_store, get_sinks, is_quiet, run_with_store
from savectl.core.status import OperationCoordinator
from savectl.transfer.migration import MigrationEngine, MigrationError
from savectl.utils.formatting import console, format_size, print_error


def migrate_backups(
    ctx: typer.Context,
    destination: Annotated[
        Path,
        typer.Argument(help="New backup root."),
    ],
    source: Annotated[
        Path | None,
        typer.Option(
            "--source",
            "-s",
            help="Backup root to move (default: configured backup path).",
        ),
    ] = None,
    preserve_failed: Annotated[
        bool,
        typer.Option(
            "--preserve-failed",
            help="Keep source directories containing entries that failed to move.",
        ),
    ] = False,
) -> None:
    """Move all backups to a new location.

    Files are moved one by one; entries that cannot be moved are reported
    and the rest of the tree is still processed. The backup path setting
    is switched to DESTINATION afterwards, also when the source does not
    exist yet.

    Examples:
        savectl migrate ~/Backups/GSM
        savectl migrate /mnt/usb/GSM --source ~/old-backups
        savectl migrate /mnt/usb/GSM --preserve-failed
    """
    store = get_settings_store()
    source_dir = source or Path(store.get().backup_path)
    progress, notifier = get_sinks(quiet=is_quiet(ctx.obj))
    engine = MigrationEngine(
        store,
        OperationCoordinator(),
        progress,
        notifier,
        preserve_failed=preserve_failed,
    )

    try:
        result = run_with_store(store, lambda: engine.migrate(source_dir, destination))
    except MigrationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(
        f"[dim]Moved {format_size(result.moved_bytes)} of "
        f"{format_size(result.total_bytes)} to {result.destination}[/dim]"
    )
    if not result.success:
        raise typer.Exit(code=1)
