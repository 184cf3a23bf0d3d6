"""Backup transfer module.

This module provides size accounting, permission normalization and the
progress-tracked migration of a backup root.
"""

from savectl.transfer.copy import copy_tree
from savectl.transfer.migration import MigrationEngine
from savectl.transfer.permissions import ensure_writable
from savectl.transfer.sizing import METADATA_FILENAME, directory_size

__all__ = [
    "METADATA_FILENAME",
    "MigrationEngine",
    "copy_tree",
    "directory_size",
    "ensure_writable",
]
