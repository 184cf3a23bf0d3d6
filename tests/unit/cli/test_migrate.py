"""Unit tests for migrate command."""

import json
from pathlib import Path

from savectl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def _write_settings(config_home: Path, **data: object) -> Path:
    path = config_home / "savectl" / "settings.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


class TestMigrateCommand:
    """Tests for savectl migrate."""

    def test_help(self) -> None:
        """Migrate command shows help."""
        result = runner.invoke(app, ["migrate", "--help"])

        assert result.exit_code == 0
        assert "Move all backups" in result.stdout

    def test_moves_configured_root(
        self, backup_root: Path, tmp_path: Path, config_home: Path
    ) -> None:
        """The configured backup root is moved and the setting follows."""
        settings_file = _write_settings(config_home, backupPath=str(backup_root))
        dest = tmp_path / "moved"

        result = runner.invoke(app, ["migrate", str(dest), "--preserve-failed"])

        assert result.exit_code == 0, result.output
        assert (dest / "hades" / "2024-04-01_10-00" / "save.dat").read_bytes() == b"0123456789"
        assert not backup_root.exists()
        assert json.loads(settings_file.read_text())["backupPath"] == str(dest.resolve())
        assert "Backups migrated successfully" in result.output

    def test_explicit_source(self, backup_root: Path, tmp_path: Path, config_home: Path) -> None:
        """--source overrides the configured root."""
        dest = tmp_path / "moved"

        result = runner.invoke(app, ["-q", "migrate", str(dest), "--source", str(backup_root)])

        assert result.exit_code == 0, result.output
        assert (dest / "custom_entries.json").exists()

    def test_missing_source_only_updates_setting(self, tmp_path: Path, config_home: Path) -> None:
        """A missing source still points the setting at the destination."""
        settings_file = _write_settings(config_home, backupPath=str(tmp_path / "missing"))
        dest = tmp_path / "fresh"

        result = runner.invoke(app, ["migrate", str(dest)])

        assert result.exit_code == 0, result.output
        assert json.loads(settings_file.read_text())["backupPath"] == str(dest.resolve())

    def test_destination_inside_source_fails(self, backup_root: Path) -> None:
        """Moving a root into itself is rejected."""
        result = runner.invoke(
            app, ["migrate", str(backup_root / "inner"), "--source", str(backup_root)]
        )

        assert result.exit_code == 1
        assert "Error" in result.output
        assert (backup_root / "custom_entries.json").exists()
