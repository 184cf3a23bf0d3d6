"""Data models for savectl.

This module exports all core data models used throughout the application.
"""

from savectl.models.progress import ProgressMarker, ProgressValue, Severity
from savectl.models.results import ExportResult, MigrationResult
from savectl.models.settings import Settings, detect_language

__all__ = [
    "ExportResult",
    "MigrationResult",
    "ProgressMarker",
    "ProgressValue",
    "Settings",
    "Severity",
    "detect_language",
]
