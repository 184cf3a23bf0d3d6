"""Outcome records of the long-running operations."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Result of moving a backup root.

    Attributes:
        source: Backup root that was moved.
        destination: New backup root.
        errors: One message per file or directory that failed.
        moved_bytes: Bytes copied to the destination.
        total_bytes: Size of the source tree before the move.
        skipped: True if another migration was already running.
    """

    source: Path
    destination: Path
    errors: tuple[str, ...] = ()
    moved_bytes: int = 0
    total_bytes: int = 0
    skipped: bool = False

    @property
    def success(self) -> bool:
        """Check if the migration ran and every item moved."""
        return not self.skipped and not self.errors


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result of exporting backups into an archive.

    Attributes:
        archive: Path of the written archive, None if nothing was written.
        paths: Backup-root-relative paths that were selected.
        error: Error message if the export failed, None otherwise.
        skipped: True if another export was already running.
    """

    archive: Path | None = None
    paths: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        """Check if the archive was written."""
        return not self.skipped and self.error is None and self.archive is not None
