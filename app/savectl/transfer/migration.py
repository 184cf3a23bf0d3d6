"""Progress-tracked relocation of the backup root.

MigrationEngine moves every file of the current backup root to a new
location, reporting byte-level progress, and then points the backup_path
setting at the new location. Failures are isolated per file or directory:
they are collected and reported together, and the remaining entries are
still moved.
"""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from savectl.core.settings import SettingsStore
from savectl.core.sinks import (
    NotificationSink,
    NullNotificationSink,
    NullProgressSink,
    ProgressSink,
)
from savectl.core.status import Operation, OperationCoordinator
from savectl.models.progress import ProgressMarker, Severity
from savectl.models.results import MigrationResult
from savectl.transfer.sizing import directory_size
from savectl.transfer.tasks import (
    CopyFile,
    MakeDir,
    MoveLink,
    RemoveDir,
    WalkFailure,
    iter_transfer_tasks,
)

logger = logging.getLogger(__name__)

PROGRESS_ID = "migrate-backups"
PROGRESS_TITLE = "Migrating backups"

DEFAULT_CHUNK_SIZE = 64 * 1024


class MigrationError(ValueError):
    """Raised when a migration request is invalid."""


@dataclass(slots=True)
class _ProgressTracker:
    """Byte counter producing non-decreasing whole percentages."""

    total: int
    moved: int = 0
    last: int = 0

    def advance(self, count: int) -> int:
        self.moved += count
        if self.total <= 0:
            percent = 100
        else:
            percent = min(100, self.moved * 100 // self.total)
        self.last = max(self.last, percent)
        return self.last


class MigrationEngine:
    """Moves a backup root to a new location.

    Attributes:
        _settings: Store whose backup_path is updated after the move.
        _coordinator: Guards against concurrent migrations.
        _progress: Receives start/percentage/end updates.
        _notifier: Receives the final success or error alert.
        _chunk_size: Bytes copied between two progress updates.
        _preserve_failed: Keep source directories that contain entries
            which failed to move instead of deleting them.
    """

    def __init__(
        self,
        settings: SettingsStore,
        coordinator: OperationCoordinator,
        progress: ProgressSink | None = None,
        notifier: NotificationSink | None = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        preserve_failed: bool = False,
    ) -> None:
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)
        self._settings = settings
        self._coordinator = coordinator
        self._progress = progress if progress is not None else NullProgressSink()
        self._notifier = notifier if notifier is not None else NullNotificationSink()
        self._chunk_size = chunk_size
        self._preserve_failed = preserve_failed

    async def migrate(self, source_dir: Path | str, dest_dir: Path | str) -> MigrationResult:
        """Move source_dir into dest_dir and make dest_dir the backup root.

        A missing source_dir moves nothing. Either way, and even when some
        entries failed, backup_path is set to dest_dir afterwards and the
        restore table is refreshed: files that already moved must stay
        reachable.

        Args:
            source_dir: Current backup root.
            dest_dir: New backup root. Relative paths are resolved against
                the current working directory before anything is stored.

        Returns:
            MigrationResult with collected errors; skipped=True if another
            migration was already running.

        Raises:
            MigrationError: If dest_dir is source_dir or lies inside it.
        """
        source = Path(source_dir).resolve()
        destination = Path(dest_dir).resolve()
        self._check_paths(source, destination)

        if self._coordinator.is_running(Operation.MIGRATING):
            logger.warning("Migration already running, ignoring request for %s", destination)
            return MigrationResult(source=source, destination=destination, skipped=True)

        with self._coordinator.claim(Operation.MIGRATING):
            if source.exists():
                result = await self._move_tree(source, destination)
            else:
                logger.info("Backup root %s does not exist, nothing to move", source)
                result = MigrationResult(source=source, destination=destination)

            await self._settings.set("backup_path", str(destination))
            self._settings.hooks.refresh_restore_table()
            return result

    async def _move_tree(self, source: Path, destination: Path) -> MigrationResult:
        """Execute the transfer tasks of one tree and report the outcome."""
        tracker = _ProgressTracker(total=directory_size(source, ignore_metadata=False))
        errors: list[str] = []
        failed: list[Path] = []
        unavailable: list[Path] = []

        logger.info("Moving %s to %s (%d bytes)", source, destination, tracker.total)
        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, ProgressMarker.START)

        for task in iter_transfer_tasks(source, destination):
            if isinstance(task, WalkFailure):
                errors.append(task.error)
                failed.append(task.source)
                continue

            if isinstance(task, RemoveDir):
                self._remove_source_dir(task, failed, errors)
                continue

            if any(task.source.is_relative_to(d) for d in unavailable):
                continue

            if isinstance(task, MakeDir):
                try:
                    task.destination.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    errors.append(f"Error creating directory {task.destination}: {e}")
                    failed.append(task.source)
                    if task.source == source:
                        # Nothing can be moved without a destination root
                        break
                    unavailable.append(task.source)
            elif isinstance(task, CopyFile):
                try:
                    await self._move_file(task, tracker)
                except OSError as e:
                    errors.append(f"Error moving file {task.source}: {e}")
                    failed.append(task.source)
            elif isinstance(task, MoveLink):
                try:
                    self._move_link(task, tracker)
                except OSError as e:
                    errors.append(f"Error moving link {task.source}: {e}")
                    failed.append(task.source)

        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, ProgressMarker.END)

        if errors:
            for message in errors:
                logger.error(message)
            self._notifier.on_alert(
                Severity.MODAL, "Errors occurred during backup migration", list(errors)
            )
        else:
            self._notifier.on_alert(Severity.SUCCESS, "Backups migrated successfully")

        return MigrationResult(
            source=source,
            destination=destination,
            errors=tuple(errors),
            moved_bytes=tracker.moved,
            total_bytes=tracker.total,
        )

    async def _move_file(self, task: CopyFile, tracker: _ProgressTracker) -> None:
        """Stream one file to its destination, then delete the source.

        Raises:
            OSError: If reading, writing, stamping or deleting fails.
        """
        stat = task.source.stat()
        with task.source.open("rb") as reader, task.destination.open("wb") as writer:
            while True:
                chunk = reader.read(self._chunk_size)
                if not chunk:
                    break
                writer.write(chunk)
                self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, tracker.advance(len(chunk)))
                # Yield to the event loop between chunks
                await asyncio.sleep(0)

        os.utime(task.destination, ns=(stat.st_atime_ns, stat.st_mtime_ns))
        task.source.unlink()

    def _move_link(self, task: MoveLink, tracker: _ProgressTracker) -> None:
        """Recreate a symbolic link with the same target, then delete the source link.

        Raises:
            OSError: If the link cannot be read, created or deleted.
        """
        size = task.source.lstat().st_size
        target = os.readlink(task.source)
        os.symlink(target, task.destination, target_is_directory=task.source.is_dir())
        task.source.unlink()
        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, tracker.advance(size))

    def _remove_source_dir(self, task: RemoveDir, failed: list[Path], errors: list[str]) -> None:
        if self._preserve_failed and any(p.is_relative_to(task.source) for p in failed):
            logger.warning("Keeping %s: some entries could not be moved", task.source)
            return
        try:
            shutil.rmtree(task.source)
        except FileNotFoundError:
            return
        except OSError as e:
            errors.append(f"Error removing directory {task.source}: {e}")

    @staticmethod
    def _check_paths(source: Path, destination: Path) -> None:
        if destination.is_relative_to(source):
            msg = f"Destination {destination} must not be inside {source}"
            raise MigrationError(msg)
