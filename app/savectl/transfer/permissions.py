"""Permission normalization for backup trees.

Restored or migrated saves sometimes carry read-only bits from the source
medium, which later makes overwriting or deleting them fail.
"""

import logging
import stat
from pathlib import Path

logger = logging.getLogger(__name__)

# rw for owner, group and other
WRITABLE_MODE = 0o666


def ensure_writable(path: Path | str) -> list[Path]:
    """Make every file under a path writable.

    Files without the owner-write bit get mode 0o666. Missing paths are
    ignored. A file that cannot be changed is logged and skipped; the
    traversal continues with its siblings.

    Args:
        path: File or directory to normalize.

    Returns:
        Files whose mode was changed (empty when everything was writable).
    """
    changed: list[Path] = []
    _normalize(Path(path), changed)
    return changed


def _normalize(target: Path, changed: list[Path]) -> None:
    try:
        mode = target.stat().st_mode
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("Cannot stat %s: %s", target, e)
        return

    if stat.S_ISDIR(mode):
        try:
            entries = sorted(target.iterdir())
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", target, e)
            return
        for entry in entries:
            _normalize(entry, changed)
        return

    if mode & stat.S_IWUSR:
        return

    try:
        target.chmod(WRITABLE_MODE)
    except OSError as e:
        logger.warning("Cannot change permissions for %s: %s", target, e)
        return
    logger.info("Changed permissions for file: %s", target)
    changed.append(target)
