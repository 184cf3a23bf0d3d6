"""Snapshot naming and lookup inside a backup root.

Layout: <root>/<item id>/<YYYY-MM-DD_HH-mm>/...

Snapshot names sort lexicographically in chronological order, so "newest
first" is a plain descending name sort.
"""

import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "%Y-%m-%d_%H-%M"
DISPLAY_FORMAT = "%Y/%m/%d %H:%M"


def snapshot_name(when: datetime) -> str:
    """Format a timestamp as a snapshot directory name."""
    return when.strftime(SNAPSHOT_FORMAT)


def _subdirectories(path: Path) -> list[str]:
    """Names of the real (non-symlink) subdirectories of path."""
    return [
        entry.name for entry in path.iterdir() if entry.is_dir() and not entry.is_symlink()
    ]


def list_items(root: Path) -> list[str]:
    """List tracked item identifiers in a backup root.

    Args:
        root: Backup root directory.

    Returns:
        Item directory names in ascending order (empty if root is missing).
    """
    if not root.is_dir():
        return []
    return sorted(_subdirectories(root))


def list_snapshots(item_dir: Path) -> list[str]:
    """List the snapshots of one item, newest first.

    Args:
        item_dir: Directory of one tracked item.

    Returns:
        Snapshot directory names sorted descending (empty if missing).
    """
    if not item_dir.is_dir():
        return []
    return sorted(_subdirectories(item_dir), reverse=True)


def newest_snapshot(root: Path, item_id: str) -> datetime | None:
    """Get the time of the newest snapshot of an item.

    Args:
        root: Backup root directory.
        item_id: Tracked item identifier.

    Returns:
        Timestamp of the newest snapshot, or None when the item has no
        snapshot with a parseable name.
    """
    for name in list_snapshots(root / item_id):
        try:
            return datetime.strptime(name, SNAPSHOT_FORMAT)
        except ValueError:
            logger.debug("Ignoring snapshot with unexpected name: %s/%s", item_id, name)
    return None


def format_snapshot_time(when: datetime | None) -> str | None:
    """Format a snapshot time for display ("YYYY/MM/DD HH:mm")."""
    return when.strftime(DISPLAY_FORMAT) if when is not None else None
