"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from savectl.core.paths import CONFIG_HOME_ENV
from savectl.core.settings import SettingsStore
from savectl.core.sinks import NotificationSink, ProgressSink, SurfaceHooks
from savectl.models.progress import ProgressValue, Severity

ITEMS = ("celeste", "hades", "stardew")
SNAPSHOTS = (
    "2024-01-01_10-00",
    "2024-02-01_10-00",
    "2024-03-01_10-00",
    "2024-04-01_10-00",
)


class RecordingSink(ProgressSink, NotificationSink):
    """Records every progress update and alert it receives."""

    def __init__(self) -> None:
        self.progress: list[tuple[str, str, ProgressValue]] = []
        self.alerts: list[tuple[Severity, str, str | list[str] | None]] = []

    def on_progress(self, operation_id: str, title: str, value: ProgressValue) -> None:
        self.progress.append((operation_id, title, value))

    def on_alert(
        self, severity: Severity, title: str, detail: str | list[str] | None = None
    ) -> None:
        self.alerts.append((severity, title, detail))

    def values(self, operation_id: str) -> list[ProgressValue]:
        """Progress values reported for one operation, in order."""
        return [value for op, _, value in self.progress if op == operation_id]


@pytest.fixture(autouse=True)
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the savectl config directory into the test's tmp_path."""
    home = tmp_path / "config-home"
    monkeypatch.setenv(CONFIG_HOME_ENV, str(home))
    return home


@pytest.fixture(autouse=True)
def reset_savectl_logger() -> object:
    """Drop handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("savectl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def recorder() -> RecordingSink:
    """Sink recording progress and alerts."""
    return RecordingSink()


@pytest.fixture
def hooks() -> MagicMock:
    """Surface hooks mock (change_language is an AsyncMock)."""
    return MagicMock(spec=SurfaceHooks)


@pytest.fixture
def store(tmp_path: Path, hooks: MagicMock) -> SettingsStore:
    """Settings store writing to tmp_path/settings.json."""
    return SettingsStore(path=tmp_path / "settings.json", hooks=hooks)


@pytest.fixture
def backup_root(tmp_path: Path) -> Path:
    """Backup root with three items of four snapshots each.

    Layout:
        custom_entries.json
        <item>/backup_info.json
        <item>/<snapshot>/save.dat   (10 bytes)
    """
    root = tmp_path / "backups"
    root.mkdir()
    (root / "custom_entries.json").write_text("[]")
    for item in ITEMS:
        item_dir = root / item
        item_dir.mkdir()
        (item_dir / "backup_info.json").write_text("{}")
        for snapshot in SNAPSHOTS:
            snapshot_dir = item_dir / snapshot
            snapshot_dir.mkdir()
            (snapshot_dir / "save.dat").write_bytes(b"0123456789")
    return root
