"""Backup-root layout helpers.

A backup root holds one directory per tracked item, each containing
timestamp-named snapshot directories.
"""

from savectl.backups.snapshots import (
    SNAPSHOT_FORMAT,
    list_items,
    list_snapshots,
    newest_snapshot,
    snapshot_name,
)

__all__ = [
    "SNAPSHOT_FORMAT",
    "list_items",
    "list_snapshots",
    "newest_snapshot",
    "snapshot_name",
]
