"""Backup export module.

This module provides manifest selection, the external 7-Zip compressor and
the exporter that ties them together.
"""

from savectl.archive.base import Compressor, CompressorError
from savectl.archive.exporter import ArchiveExporter
from savectl.archive.manifest import ArchiveManifest, build_manifest
from savectl.archive.sevenzip import SevenZipCompressor

__all__ = [
    "ArchiveExporter",
    "ArchiveManifest",
    "Compressor",
    "CompressorError",
    "SevenZipCompressor",
    "build_manifest",
]
