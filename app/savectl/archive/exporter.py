"""Export of the newest backups into a single archive.

The exporter picks the newest N snapshots of every tracked item, hands
them to a compressor running in the backup root, and reports progress and
the outcome through the sinks. The progress bar always reaches its end
state and the exporting permit is always released.
"""

import logging
from datetime import datetime
from pathlib import Path

from savectl.archive.base import Compressor, CompressorError
from savectl.archive.manifest import ArchiveManifest, build_manifest
from savectl.archive.sevenzip import SevenZipCompressor
from savectl.backups.snapshots import snapshot_name
from savectl.core.settings import SettingsStore
from savectl.core.sinks import (
    NotificationSink,
    NullNotificationSink,
    NullProgressSink,
    ProgressSink,
)
from savectl.core.status import Operation, OperationCoordinator
from savectl.models.progress import ProgressMarker, Severity
from savectl.models.results import ExportResult

logger = logging.getLogger(__name__)

PROGRESS_ID = "export"
PROGRESS_TITLE = "Exporting backups"

ARCHIVE_PREFIX = "GSMBackup-"
ARCHIVE_SUFFIX = ".gsm"


class ExportError(Exception):
    """Raised when there is nothing to export."""


def archive_filename(when: datetime) -> str:
    """Build the archive file name for an export started at `when`."""
    return f"{ARCHIVE_PREFIX}{snapshot_name(when)}{ARCHIVE_SUFFIX}"


class ArchiveExporter:
    """Packages the newest snapshots of every item into one archive."""

    def __init__(
        self,
        settings: SettingsStore,
        coordinator: OperationCoordinator,
        progress: ProgressSink | None = None,
        notifier: NotificationSink | None = None,
        compressor: Compressor | None = None,
    ) -> None:
        self._settings = settings
        self._coordinator = coordinator
        self._progress = progress if progress is not None else NullProgressSink()
        self._notifier = notifier if notifier is not None else NullNotificationSink()
        self._compressor = compressor if compressor is not None else SevenZipCompressor()
        self._last_percent = 0

    async def export_backups(self, count: int, destination_folder: Path | str) -> ExportResult:
        """Write the newest `count` snapshots of every item to an archive.

        A call while another export is running does nothing.

        Args:
            count: Snapshots per item.
            destination_folder: Folder receiving GSMBackup-<timestamp>.gsm.
                A relative folder is taken from the current working directory.

        Returns:
            ExportResult with the archive path, or the error message.
        """
        if self._coordinator.is_running(Operation.EXPORTING):
            logger.warning("Export already running, ignoring request")
            return ExportResult(skipped=True)

        with self._coordinator.claim(Operation.EXPORTING):
            return await self._export(count, Path(destination_folder).resolve())

    async def _export(self, count: int, destination_folder: Path) -> ExportResult:
        root = Path(self._settings.get().backup_path)
        manifest = ArchiveManifest(root=root, paths=())
        self._last_percent = 0
        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, ProgressMarker.START)

        try:
            manifest = build_manifest(root, count)
            if not manifest:
                raise ExportError(f"No backups found in {root}")

            destination_folder.mkdir(parents=True, exist_ok=True)
            archive = destination_folder / archive_filename(datetime.now())
            logger.info("Exporting %d path(s) from %s to %s", len(manifest), root, archive)

            await self._compressor.add(
                archive,
                manifest.paths,
                cwd=root,
                on_progress=self._forward_progress,
            )
        except (CompressorError, ExportError, OSError, ValueError) as e:
            logger.error("An error occurred while exporting backups: %s", e)
            return self._fail(manifest, str(e))
        except Exception as e:
            logger.exception("Unexpected error while exporting backups")
            return self._fail(manifest, str(e) or type(e).__name__)

        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, ProgressMarker.END)
        self._notifier.on_alert(Severity.SUCCESS, "Backups exported", str(archive))
        return ExportResult(archive=archive, paths=manifest.paths)

    def _fail(self, manifest: ArchiveManifest, message: str) -> ExportResult:
        """Report a failed export and close the progress bar."""
        self._notifier.on_alert(Severity.MODAL, "Error during export", message)
        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, ProgressMarker.END)
        return ExportResult(paths=manifest.paths, error=message)

    def _forward_progress(self, percent: float) -> None:
        """Forward whole, non-decreasing percentages to the progress sink."""
        value = min(100, int(percent))
        if value <= 0 or value < self._last_percent:
            return
        self._last_percent = value
        self._progress.on_progress(PROGRESS_ID, PROGRESS_TITLE, value)
