"""Unit tests for directory size accounting."""

import os
from pathlib import Path

import pytest
from savectl.transfer.sizing import METADATA_FILENAME, directory_size


class TestDirectorySize:
    """Tests for directory_size function."""

    def test_file_returns_own_size(self, tmp_path: Path) -> None:
        """A regular file counts its own size."""
        file_path = tmp_path / "save.dat"
        file_path.write_bytes(b"x" * 123)

        assert directory_size(file_path) == 123

    def test_sums_nested_tree(self, tmp_path: Path) -> None:
        """Directories sum all files at every depth."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "b").mkdir()
        (tmp_path / "one.bin").write_bytes(b"1" * 10)
        (tmp_path / "a" / "two.bin").write_bytes(b"2" * 20)
        (tmp_path / "a" / "b" / "three.bin").write_bytes(b"3" * 30)

        assert directory_size(tmp_path) == 60

    def test_skips_metadata_at_every_level(self, tmp_path: Path) -> None:
        """backup_info.json is ignored at the root and in subdirectories."""
        (tmp_path / "sub").mkdir()
        (tmp_path / METADATA_FILENAME).write_bytes(b"m" * 100)
        (tmp_path / "sub" / METADATA_FILENAME).write_bytes(b"m" * 100)
        (tmp_path / "sub" / "save.dat").write_bytes(b"s" * 7)

        assert directory_size(tmp_path) == 7
        assert directory_size(tmp_path, ignore_metadata=False) == 207

    def test_equals_sum_of_children_without_metadata(self, backup_root: Path) -> None:
        """Size of a tree is the sum of its non-metadata children."""
        children = [p for p in backup_root.iterdir() if p.name != METADATA_FILENAME]

        assert directory_size(backup_root) == sum(directory_size(p) for p in children)

    def test_only_exact_name_is_skipped(self, tmp_path: Path) -> None:
        """Names that merely contain the metadata name are counted."""
        (tmp_path / f"old_{METADATA_FILENAME}").write_bytes(b"x" * 5)

        assert directory_size(tmp_path) == 5

    def test_missing_path_counts_as_zero(self, tmp_path: Path) -> None:
        """A missing path is logged and counts as 0."""
        assert directory_size(tmp_path / "missing") == 0

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory has size 0."""
        assert directory_size(tmp_path) == 0

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlink_is_not_followed(self, tmp_path: Path) -> None:
        """A symlink to a directory counts as the link, not its target."""
        target = tmp_path / "target"
        target.mkdir()
        (target / "big.bin").write_bytes(b"b" * 1000)
        measured = tmp_path / "measured"
        measured.mkdir()
        (measured / "link").symlink_to(target, target_is_directory=True)

        assert directory_size(measured) < 1000
