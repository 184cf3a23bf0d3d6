"""Unit tests for the main CLI application."""

from pathlib import Path

from savectl import __version__
from savectl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"savectl version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help lists every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("migrate", "export", "config", "size", "fix-perms", "backups"):
            assert command in result.stdout

    def test_log_writes_to_config_dir(self, config_home: Path) -> None:
        """--log appends the debug log to <config dir>/savectl.log."""
        result = runner.invoke(app, ["--log", "placeholders", "compact", "x"])

        assert result.exit_code == 0
        assert (config_home / "savectl" / "savectl.log").exists()
