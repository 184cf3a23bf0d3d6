"""Unit tests for the migration engine.

Async operations are driven with asyncio.run inside plain test functions.
"""

# pyright: reportPrivateUsage=false

import asyncio
import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from savectl.core.settings import SettingsStore
from savectl.core.status import Operation, OperationCoordinator
from savectl.models.progress import ProgressMarker, Severity
from savectl.models.results import MigrationResult
from savectl.transfer.migration import (
    PROGRESS_ID,
    MigrationEngine,
    MigrationError,
    _ProgressTracker,
)
from savectl.transfer.tasks import CopyFile


def _files(root: Path) -> dict[Path, bytes]:
    return {p.relative_to(root): p.read_bytes() for p in root.rglob("*") if p.is_file()}


def _migrate(
    engine: MigrationEngine, store: SettingsStore, source: Path, dest: Path
) -> MigrationResult:
    async def run() -> MigrationResult:
        try:
            return await engine.migrate(source, dest)
        finally:
            await store.close()

    return asyncio.run(run())


_original_move_file = MigrationEngine._move_file


async def _failing_move_file(
    self: MigrationEngine, task: CopyFile, tracker: _ProgressTracker
) -> None:
    if task.source.name == "bad.dat":
        raise PermissionError("denied")
    await _original_move_file(self, task, tracker)


class TestProgressTracker:
    """Tests for _ProgressTracker."""

    def test_percentages(self) -> None:
        """Percentages are whole numbers of the total."""
        tracker = _ProgressTracker(total=200)

        assert tracker.advance(50) == 25
        assert tracker.advance(150) == 100

    def test_empty_total_is_complete(self) -> None:
        """A total of zero reports 100."""
        assert _ProgressTracker(total=0).advance(0) == 100

    def test_caps_at_100(self) -> None:
        """Files that grew while moving do not exceed 100."""
        tracker = _ProgressTracker(total=10)

        assert tracker.advance(15) == 100


class TestMigrate:
    """Tests for MigrationEngine.migrate."""

    def test_structural_move(
        self, backup_root: Path, tmp_path: Path, store: SettingsStore, recorder: Any
    ) -> None:
        """Every file ends up under the destination and the source is gone."""
        before = _files(backup_root)
        dest = tmp_path / "new-root"
        engine = MigrationEngine(store, OperationCoordinator(), recorder, recorder, chunk_size=4)

        result = _migrate(engine, store, backup_root, dest)

        assert result.success
        assert result.errors == ()
        assert _files(dest) == before
        assert not backup_root.exists()
        assert result.moved_bytes == result.total_bytes == sum(len(b) for b in before.values())

    def test_commits_backup_path_and_refreshes(
        self, backup_root: Path, tmp_path: Path, store: SettingsStore, hooks: MagicMock
    ) -> None:
        """backup_path points at the destination, on disk and in memory."""
        dest = tmp_path / "new-root"
        engine = MigrationEngine(store, OperationCoordinator())

        _migrate(engine, store, backup_root, dest)

        assert store.get().backup_path == str(dest.resolve())
        assert json.loads(store.path.read_text())["backupPath"] == str(dest.resolve())
        hooks.refresh_restore_table.assert_called_once()

    def test_relative_destination_is_stored_absolute(
        self,
        backup_root: Path,
        tmp_path: Path,
        store: SettingsStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A relative destination is resolved before it becomes backup_path."""
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.chdir(work)
        engine = MigrationEngine(store, OperationCoordinator())

        result = _migrate(engine, store, backup_root, Path("moved"))

        expected = (work / "moved").resolve()
        assert result.success
        assert store.get().backup_path == str(expected)
        assert Path(store.get().backup_path).is_absolute()
        assert (expected / "hades" / "2024-01-01_10-00" / "save.dat").is_file()

    def test_progress_is_ordered(
        self, backup_root: Path, tmp_path: Path, store: SettingsStore, recorder: Any
    ) -> None:
        """Progress starts, rises monotonically to 100 and ends."""
        engine = MigrationEngine(store, OperationCoordinator(), recorder, recorder, chunk_size=3)

        _migrate(engine, store, backup_root, tmp_path / "new-root")

        values = recorder.values(PROGRESS_ID)
        assert values[0] is ProgressMarker.START
        assert values[-1] is ProgressMarker.END
        percents = values[1:-1]
        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert recorder.alerts == [(Severity.SUCCESS, "Backups migrated successfully", None)]

    def test_missing_source_still_commits(
        self, tmp_path: Path, store: SettingsStore, hooks: MagicMock, recorder: Any
    ) -> None:
        """A missing source moves nothing but still updates the setting."""
        dest = tmp_path / "fresh"
        engine = MigrationEngine(store, OperationCoordinator(), recorder, recorder)

        result = _migrate(engine, store, tmp_path / "missing", dest)

        assert result.errors == ()
        assert result.moved_bytes == 0
        assert store.get().backup_path == str(dest.resolve())
        hooks.refresh_restore_table.assert_called_once()
        assert recorder.progress == []

    def test_preserves_timestamps(self, tmp_path: Path, store: SettingsStore) -> None:
        """Moved files keep their modification time."""
        source = tmp_path / "src"
        source.mkdir()
        save = source / "save.dat"
        save.write_text("data")
        os.utime(save, (1_600_000_000, 1_600_000_000))
        dest = tmp_path / "dst"

        _migrate(MigrationEngine(store, OperationCoordinator()), store, source, dest)

        assert int((dest / "save.dat").stat().st_mtime) == 1_600_000_000

    def test_symlinks_are_recreated(
        self, tmp_path: Path, store: SettingsStore, recorder: Any
    ) -> None:
        """Links move as links, including ones whose target is gone."""
        outside = tmp_path / "outside.dat"
        outside.write_text("shared")
        source = tmp_path / "src"
        source.mkdir()
        (source / "save.dat").write_text("data")
        (source / "shared.dat").symlink_to(outside)
        (source / "relative.dat").symlink_to("save.dat")
        (source / "dangling.dat").symlink_to(tmp_path / "missing.dat")
        dest = tmp_path / "dst"
        engine = MigrationEngine(store, OperationCoordinator(), recorder, recorder)

        result = _migrate(engine, store, source, dest)

        assert result.errors == ()
        assert result.moved_bytes == result.total_bytes
        assert (dest / "shared.dat").is_symlink()
        assert os.readlink(dest / "shared.dat") == str(outside)
        assert os.readlink(dest / "relative.dat") == "save.dat"
        assert (dest / "relative.dat").read_text() == "data"
        assert os.readlink(dest / "dangling.dat") == str(tmp_path / "missing.dat")
        assert outside.read_text() == "shared"
        assert not source.exists()

    def test_failed_file_is_reported_and_siblings_move(
        self, tmp_path: Path, store: SettingsStore, recorder: Any
    ) -> None:
        """A failing file is collected as an error; the rest still moves."""
        source = tmp_path / "src"
        (source / "item").mkdir(parents=True)
        (source / "item" / "bad.dat").write_text("bad")
        (source / "item" / "good.dat").write_text("good")
        (source / "other.dat").write_text("other")
        dest = tmp_path / "dst"
        engine = MigrationEngine(store, OperationCoordinator(), recorder, recorder)

        with patch.object(MigrationEngine, "_move_file", _failing_move_file):
            result = _migrate(engine, store, source, dest)

        assert result.errors == (f"Error moving file {source / 'item' / 'bad.dat'}: denied",)
        assert (dest / "item" / "good.dat").read_text() == "good"
        assert (dest / "other.dat").read_text() == "other"
        assert not (dest / "item" / "bad.dat").exists()
        # Source directories are removed after their walk
        assert not source.exists()
        assert store.get().backup_path == str(dest.resolve())
        severity, title, detail = recorder.alerts[-1]
        assert severity is Severity.MODAL
        assert title == "Errors occurred during backup migration"
        assert detail == list(result.errors)

    def test_preserve_failed_keeps_failed_entries(
        self, tmp_path: Path, store: SettingsStore
    ) -> None:
        """With preserve_failed, directories holding failed files stay."""
        source = tmp_path / "src"
        (source / "item").mkdir(parents=True)
        (source / "clean").mkdir()
        (source / "item" / "bad.dat").write_text("bad")
        (source / "item" / "good.dat").write_text("good")
        (source / "clean" / "fine.dat").write_text("fine")
        dest = tmp_path / "dst"
        engine = MigrationEngine(store, OperationCoordinator(), preserve_failed=True)

        with patch.object(MigrationEngine, "_move_file", _failing_move_file):
            _migrate(engine, store, source, dest)

        assert (source / "item" / "bad.dat").read_text() == "bad"
        assert not (source / "item" / "good.dat").exists()
        assert not (source / "clean").exists()

    def test_retry_does_not_copy_moved_files_again(
        self, tmp_path: Path, store: SettingsStore
    ) -> None:
        """A second run only moves what the first run left behind."""
        source = tmp_path / "src"
        source.mkdir()
        (source / "bad.dat").write_text("bad")
        (source / "good.dat").write_text("good-data")
        dest = tmp_path / "dst"
        engine = MigrationEngine(store, OperationCoordinator(), preserve_failed=True)

        with patch.object(MigrationEngine, "_move_file", _failing_move_file):
            _migrate(engine, store, source, dest)
        retry = _migrate(engine, store, source, dest)

        assert retry.success
        assert retry.moved_bytes == len("bad")
        assert (dest / "good.dat").read_text() == "good-data"
        assert (dest / "bad.dat").read_text() == "bad"

    def test_destination_inside_source_is_rejected(
        self, backup_root: Path, store: SettingsStore
    ) -> None:
        """Moving a tree into itself raises MigrationError."""
        coordinator = OperationCoordinator()
        engine = MigrationEngine(store, coordinator)

        with pytest.raises(MigrationError):
            _migrate(engine, store, backup_root, backup_root / "nested")

        assert not coordinator.is_running(Operation.MIGRATING)
        assert (backup_root / "custom_entries.json").exists()

    def test_skips_when_already_running(
        self, backup_root: Path, tmp_path: Path, store: SettingsStore
    ) -> None:
        """A second migration while one runs does nothing."""
        coordinator = OperationCoordinator()
        coordinator.acquire(Operation.MIGRATING)
        engine = MigrationEngine(store, coordinator)

        result = _migrate(engine, store, backup_root, tmp_path / "dst")

        assert result.skipped
        assert not result.success
        assert backup_root.exists()
        assert store.get().backup_path != str(tmp_path / "dst")

    def test_releases_permit_on_error(
        self, backup_root: Path, tmp_path: Path, store: SettingsStore
    ) -> None:
        """The migrating permit is released when the move raises."""
        coordinator = OperationCoordinator()
        engine = MigrationEngine(store, coordinator)

        with (
            patch(
                "savectl.transfer.migration.iter_transfer_tasks",
                side_effect=RuntimeError("boom"),
            ),
            pytest.raises(RuntimeError, match="boom"),
        ):
            _migrate(engine, store, backup_root, tmp_path / "dst")

        assert not coordinator.is_running(Operation.MIGRATING)

    def test_rejects_non_positive_chunk_size(self, store: SettingsStore) -> None:
        """chunk_size must be positive."""
        with pytest.raises(ValueError, match="chunk_size"):
            MigrationEngine(store, OperationCoordinator(), chunk_size=0)
