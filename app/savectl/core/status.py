"""Mutual exclusion for long-running operations.

Each named operation can be held by at most one caller at a time. Permits
are taken through OperationCoordinator.claim(), which releases them on
every exit path, including exceptions.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Long-running operations guarded by the coordinator.

    Attributes:
        BACKING_UP: Creating snapshots.
        RESTORING: Restoring snapshots into game directories.
        MIGRATING: Moving the backup root.
        UPDATING_DB: Refreshing the game catalog.
        EXPORTING: Writing an export archive.
    """

    BACKING_UP = "backing_up"
    RESTORING = "restoring"
    MIGRATING = "migrating"
    UPDATING_DB = "updating_db"
    EXPORTING = "exporting"


class OperationBusyError(RuntimeError):
    """Raised when an operation is claimed while it is already running."""

    def __init__(self, operation: Operation) -> None:
        super().__init__(f"Operation already running: {operation.value}")
        self.operation = operation


class OperationCoordinator:
    """Owns the running/not-running state of every Operation.

    Acquire and release do not suspend, so on a single event loop a
    check followed by a claim cannot interleave with another task.
    """

    def __init__(self) -> None:
        self._active: set[Operation] = set()

    def is_running(self, operation: Operation) -> bool:
        """Check if an operation currently holds its permit."""
        return operation in self._active

    def acquire(self, operation: Operation) -> None:
        """Take the permit for an operation.

        Raises:
            OperationBusyError: If the operation is already running.
        """
        if operation in self._active:
            raise OperationBusyError(operation)
        self._active.add(operation)
        logger.debug("Acquired %s", operation.value)

    def release(self, operation: Operation) -> None:
        """Return the permit for an operation (no-op if not held)."""
        self._active.discard(operation)
        logger.debug("Released %s", operation.value)

    @contextmanager
    def claim(self, operation: Operation) -> Iterator[None]:
        """Hold an operation's permit for the duration of a with-block.

        Raises:
            OperationBusyError: If the operation is already running.
        """
        self.acquire(operation)
        try:
            yield
        finally:
            self.release(operation)

    def snapshot(self) -> dict[str, bool]:
        """Get the state of every operation, keyed by operation name."""
        return {op.value: op in self._active for op in Operation}
