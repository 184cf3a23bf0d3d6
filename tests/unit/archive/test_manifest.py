"""Unit tests for export manifest selection."""

from pathlib import Path

import pytest
from savectl.archive.manifest import CUSTOM_ENTRIES_FILENAME, build_manifest


class TestBuildManifest:
    """Tests for build_manifest function."""

    def test_selects_newest_per_item(self, backup_root: Path) -> None:
        """count=2 picks the two greatest snapshot names of every item."""
        manifest = build_manifest(backup_root, 2)

        assert manifest.paths == (
            CUSTOM_ENTRIES_FILENAME,
            str(Path("celeste") / "2024-04-01_10-00"),
            str(Path("celeste") / "2024-03-01_10-00"),
            str(Path("hades") / "2024-04-01_10-00"),
            str(Path("hades") / "2024-03-01_10-00"),
            str(Path("stardew") / "2024-04-01_10-00"),
            str(Path("stardew") / "2024-03-01_10-00"),
        )
        assert manifest.root == backup_root
        assert len(manifest) == 7

    def test_single_item_example(self, tmp_path: Path) -> None:
        """Item 1001 with three snapshots exports the two newest."""
        for name in ("2024-01-01_10-00", "2024-01-02_10-00", "2024-01-03_10-00"):
            (tmp_path / "1001" / name).mkdir(parents=True)

        manifest = build_manifest(tmp_path, 2)

        assert manifest.paths == (
            str(Path("1001") / "2024-01-03_10-00"),
            str(Path("1001") / "2024-01-02_10-00"),
        )

    def test_count_larger_than_available(self, backup_root: Path) -> None:
        """All snapshots are taken when fewer than count exist."""
        manifest = build_manifest(backup_root, 10)

        assert len(manifest) == 1 + 3 * 4

    def test_without_custom_entries(self, backup_root: Path) -> None:
        """The shared metadata file is only included when present."""
        (backup_root / CUSTOM_ENTRIES_FILENAME).unlink()

        assert CUSTOM_ENTRIES_FILENAME not in build_manifest(backup_root, 1).paths

    def test_empty_root(self, tmp_path: Path) -> None:
        """An empty or missing root gives an empty manifest."""
        assert not build_manifest(tmp_path / "missing", 1)

    def test_rejects_count_below_one(self, backup_root: Path) -> None:
        """count must be at least 1."""
        with pytest.raises(ValueError, match="count must be at least 1"):
            build_manifest(backup_root, 0)
