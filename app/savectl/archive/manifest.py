"""Selection of the snapshots that go into an export archive."""

import logging
from dataclasses import dataclass
from pathlib import Path

from savectl.backups.snapshots import list_items, list_snapshots

logger = logging.getLogger(__name__)

# Shared catalog of user-defined entries, stored at the backup-root level
CUSTOM_ENTRIES_FILENAME = "custom_entries.json"


@dataclass(frozen=True, slots=True)
class ArchiveManifest:
    """Ordered backup-root-relative paths selected for one export.

    Attributes:
        root: Backup root the paths are relative to.
        paths: Selected paths, shared metadata first, then per item.
    """

    root: Path
    paths: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)


def build_manifest(root: Path, count: int) -> ArchiveManifest:
    """Select the newest `count` snapshots of every tracked item.

    Args:
        root: Backup root.
        count: Snapshots kept per item (at least 1).

    Returns:
        ArchiveManifest with "custom_entries.json" (if present) followed by
        "<item>/<snapshot>" paths, items ascending, snapshots newest first.

    Raises:
        ValueError: If count is smaller than 1.
        OSError: If the backup root cannot be read.
    """
    if count < 1:
        msg = f"count must be at least 1, got {count}"
        raise ValueError(msg)

    paths: list[str] = []
    if (root / CUSTOM_ENTRIES_FILENAME).is_file():
        paths.append(CUSTOM_ENTRIES_FILENAME)

    for item_id in list_items(root):
        for snapshot in list_snapshots(root / item_id)[:count]:
            paths.append(str(Path(item_id) / snapshot))

    logger.debug("Selected %d path(s) from %s", len(paths), root)
    return ArchiveManifest(root=root, paths=tuple(paths))
