"""Export command for archiving the newest backups.

This module provides the `savectl export` command, which packs the newest
snapshots of every item into one GSMBackup-<timestamp>.gsm archive.
"""

from pathlib import Path
from typing import Annotated

import typer

from savectl.archive.exporter import ArchiveExporter
from savectl.cli.types import get_settings_store, get_sinks, is_quiet, run_with_store
from savectl.core.status import OperationCoordinator
from savectl.utils.formatting import print_error

app = typer.Typer(
    name="export",
    help="Export the newest backups into an archive.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def export_backups(
    ctx: typer.Context,
    count: Annotated[
        int | None,
        typer.Option(
            "--count",
            "-n",
            min=1,
            help="Snapshots per item (default: maxBackups setting).",
        ),
    ] = None,
    dest: Annotated[
        Path | None,
        typer.Option(
            "--dest",
            "-d",
            help="Folder receiving the archive (default: exportPath setting or cwd).",
        ),
    ] = None,
) -> None:
    """Export the newest snapshots of every item.

    Requires the 7-Zip command line tool (7zz, 7za or 7z on PATH, or the
    SAVECTL_7Z environment variable).

    Examples:
        savectl export                  # Use settings for count and folder
        savectl export -n 1 -d ~/Desktop
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    store = get_settings_store()
    settings = store.get()
    snapshot_count = count if count is not None else settings.max_backups
    folder = dest or (Path(settings.export_path) if settings.export_path else Path.cwd())

    progress, notifier = get_sinks(quiet=is_quiet(ctx.obj))
    exporter = ArchiveExporter(store, OperationCoordinator(), progress, notifier)
    result = run_with_store(store, lambda: exporter.export_backups(snapshot_count, folder))

    if result.skipped:
        print_error("An export is already running.")
        raise typer.Exit(code=1)
    if not result.success:
        raise typer.Exit(code=1)
