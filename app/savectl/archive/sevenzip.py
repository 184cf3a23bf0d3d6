"""7-Zip compressor.

Runs the 7-Zip command line tool as a subprocess on the event loop and
parses the percentages it prints while working (``-bsp1``).

The executable is looked up as 7zz, 7za or 7z on PATH; the SAVECTL_7Z
environment variable points to a specific binary instead.
"""

import logging
import os
import re
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from savectl.archive.base import Compressor, CompressorError, CompressorNotFoundError
from savectl.utils.shell import command_exists, stream_command

logger = logging.getLogger(__name__)

BINARY_ENV = "SAVECTL_7Z"
BINARY_CANDIDATES: tuple[str, ...] = ("7zz", "7za", "7z")

# -y: assume yes, -r: recurse, -bsp1: progress to stdout,
# -bso0: no regular output, -bse2: errors to stderr
SWITCHES: tuple[str, ...] = ("-y", "-r", "-bsp1", "-bso0", "-bse2")

_PERCENT_PATTERN = re.compile(rb"(\d{1,3})%")
# Enough to hold a percentage split across two reads
_TAIL_SIZE = 8


def find_7z() -> str | None:
    """Locate the 7-Zip executable.

    Returns:
        Command name or path, or None if 7-Zip is not installed.
    """
    override = os.environ.get(BINARY_ENV)
    if override:
        return override
    for name in BINARY_CANDIDATES:
        path = shutil.which(name)
        if path:
            return path
    return None


class ProgressParser:
    """Extracts percentages from 7-Zip's progress stream.

    7-Zip redraws its progress line with backspaces, so percentages are
    searched in the raw byte stream rather than line by line.
    """

    def __init__(self, callback: Callable[[float], None]) -> None:
        self._callback = callback
        self._tail = b""

    def feed(self, chunk: bytes) -> None:
        """Consume one chunk of stdout."""
        data = self._tail + chunk
        consumed = 0
        for match in _PERCENT_PATTERN.finditer(data):
            percent = int(match.group(1))
            if percent <= 100:
                self._callback(float(percent))
            consumed = match.end()
        self._tail = data[consumed:][-_TAIL_SIZE:]


class SevenZipCompressor(Compressor):
    """Writes archives with the 7-Zip command line tool.

    Attributes:
        _binary: Explicit executable, or None to look it up on each run.
    """

    def __init__(self, binary: str | None = None) -> None:
        self._binary = binary

    @property
    def binary(self) -> str | None:
        """Executable used for the next run."""
        return self._binary or find_7z()

    def is_available(self) -> bool:
        """Check if the 7-Zip executable can be found."""
        binary = self.binary
        return binary is not None and command_exists(binary)

    @staticmethod
    def build_args(binary: str, archive: Path, paths: Sequence[str]) -> list[str]:
        """Build the command line for adding paths to an archive.

        Switches come before "--" so input names starting with a dash are
        not taken for switches.
        """
        return [binary, "a", *SWITCHES, "--", str(archive), *paths]

    async def add(
        self,
        archive: Path,
        paths: Sequence[str],
        *,
        cwd: Path,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        """Add paths (relative to cwd) to an archive with 7-Zip.

        Raises:
            CompressorNotFoundError: If 7-Zip is not installed.
            CompressorError: If 7-Zip cannot be started or exits non-zero.
        """
        binary = self.binary
        if binary is None:
            msg = f"7-Zip executable not found (install 7-Zip or set {BINARY_ENV})"
            raise CompressorNotFoundError(msg)

        args = self.build_args(binary, archive, paths)
        parser = ProgressParser(on_progress) if on_progress is not None else None
        logger.debug("Running %s in %s", " ".join(args[:7]), cwd)

        try:
            result = await stream_command(
                args,
                cwd=cwd,
                on_output=parser.feed if parser is not None else None,
            )
        except OSError as e:
            raise CompressorError(f"Cannot run 7-Zip: {e}") from e

        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise CompressorError(f"7-Zip failed: {detail}")
