"""Plain recursive copy of a directory tree."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_tree(source: Path | str, target: Path | str) -> int:
    """Copy a directory tree into target, creating directories as needed.

    Existing files in target are overwritten; files only present in target
    are kept. File data is copied without metadata.

    Args:
        source: Directory to copy.
        target: Destination directory.

    Returns:
        Number of files copied.

    Raises:
        OSError: If a directory cannot be listed or a file cannot be copied.
    """
    src = Path(source)
    dst = Path(target)
    dst.mkdir(parents=True, exist_ok=True)

    copied = 0
    for entry in sorted(src.iterdir()):
        destination = dst / entry.name
        if entry.is_dir():
            copied += copy_tree(entry, destination)
        else:
            shutil.copyfile(entry, destination)
            copied += 1

    logger.debug("Copied %d file(s) from %s to %s", copied, src, dst)
    return copied
