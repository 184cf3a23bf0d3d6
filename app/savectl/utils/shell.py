"""Shell execution utilities.

Provides PATH lookups and asyncio subprocess streaming for long-running
tools that report progress.
"""

import asyncio
import contextlib
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

# Bytes read from a streamed process per iteration
STREAM_CHUNK_SIZE = 4096


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


async def stream_command(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    on_output: Callable[[bytes], None] | None = None,
) -> CommandResult:
    """Run a command on the event loop, feeding stdout to a callback as it arrives.

    stdout is delivered in raw chunks (progress bars often redraw with
    backspaces instead of newlines) and also collected for the result.
    stderr is drained concurrently so a chatty process cannot block on a
    full pipe. If on_output raises or the caller is cancelled, the process
    is killed and reaped before the exception propagates.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the process. The caller's own working
            directory is never changed.
        on_output: Called with every stdout chunk.

    Returns:
        CommandResult with decoded stdout, stderr and the exit code.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If the process cannot be started.
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd is not None else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stderr_task: asyncio.Future[bytes] | None = None
    try:
        if process.stdout is None or process.stderr is None:
            msg = f"No output pipes for {args[0]}"
            raise OSError(msg)

        stderr_task = asyncio.ensure_future(process.stderr.read())
        collected: list[bytes] = []
        while True:
            chunk = await process.stdout.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            collected.append(chunk)
            if on_output is not None:
                on_output(chunk)

        stderr = await stderr_task
        returncode = await process.wait()
    finally:
        # Reap the child when the callback raised or the task was cancelled
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
        if stderr_task is not None and not stderr_task.done():
            stderr_task.cancel()

    return CommandResult(
        stdout=b"".join(collected).decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        returncode=returncode,
    )
