"""Recursive size accounting for backup trees."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Per-item metadata written next to the snapshots; not part of the save data
METADATA_FILENAME = "backup_info.json"


def directory_size(path: Path | str, ignore_metadata: bool = True) -> int:
    """Get the size in bytes of a file or directory tree.

    For files, returns the file size. For directories, returns the sum of
    every entry, recursively. Symbolic links count as the link itself and
    are never followed.

    A missing path or an unreadable entry is logged and counts as 0, so
    one bad subtree does not abort the whole computation.

    Args:
        path: File or directory to measure.
        ignore_metadata: Skip entries named exactly ``backup_info.json``
            at every level.

    Returns:
        Size in bytes.
    """
    target = Path(path)
    try:
        if target.is_symlink() or not target.is_dir():
            return target.lstat().st_size

        total = 0
        for entry in target.iterdir():
            if ignore_metadata and entry.name == METADATA_FILENAME:
                continue
            total += directory_size(entry, ignore_metadata)
        return total
    except OSError as e:
        logger.warning("Error calculating size for %s: %s", target, e)
        return 0
