"""Abstract base class for archive compressors.

This module defines the Compressor interface that the exporter uses to
turn a list of backup-root-relative paths into one archive.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path


class CompressorError(Exception):
    """Raised when an archive cannot be written."""


class CompressorNotFoundError(CompressorError):
    """Raised when the compression executable is not installed."""


class Compressor(ABC):
    """Abstract base class for all compressors.

    Example:
        >>> compressor = SevenZipCompressor()
        >>> if compressor.is_available():
        ...     await compressor.add(archive, ["1001/2024-01-03_10-00"], cwd=root)
    """

    @abstractmethod
    async def add(
        self,
        archive: Path,
        paths: Sequence[str],
        *,
        cwd: Path,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        """Add paths (relative to cwd) to an archive, recursively.

        Args:
            archive: Archive file to create or update.
            paths: Inputs, relative to cwd; stored under these names.
            cwd: Working directory of the compression run.
            on_progress: Called with the completion percentage (0-100).

        Raises:
            CompressorError: If the archive could not be written.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this compressor can be used on the system.

        Returns:
            True if the compressor can be used, False otherwise.
        """
