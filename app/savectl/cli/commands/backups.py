"""Backups commands for inspecting the backup root."""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from savectl.backups.snapshots import (
    format_snapshot_time,
    list_items,
    list_snapshots,
    newest_snapshot,
)
from savectl.cli.types import get_settings_store
from savectl.transfer.sizing import directory_size
from savectl.utils.formatting import console, create_backup_table, format_size, print_info

app = typer.Typer(
    help="Inspect stored backups.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command(name="list")
def list_backups(
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Backup root (default: configured backup path).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """List backed up items with their newest snapshot and size."""
    backup_root = root or Path(get_settings_store().get().backup_path)
    items = list_items(backup_root)

    if not items:
        print_info(f"No backups found in {backup_root}")
        return

    rows = []
    for item_id in items:
        item_dir = backup_root / item_id
        rows.append(
            {
                "item": item_id,
                "snapshots": len(list_snapshots(item_dir)),
                "newest": format_snapshot_time(newest_snapshot(backup_root, item_id)),
                "size": directory_size(item_dir),
            }
        )

    if json_output:
        console.print_json(json.dumps(rows, ensure_ascii=False))
        return

    table = create_backup_table(title=f"Backups ({backup_root})")
    for row in rows:
        table.add_row(
            escape(row["item"]),
            str(row["snapshots"]),
            row["newest"] or "-",
            format_size(row["size"]),
        )
    console.print(table)

    total_size = sum(row["size"] for row in rows)
    console.print(f"\n[dim]{len(rows)} item(s), {format_size(total_size)} total[/dim]")
