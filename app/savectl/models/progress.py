"""Progress and notification value types.

These are the values passed to the front end through the progress and
notification sinks.
"""

from enum import Enum


class ProgressMarker(str, Enum):
    """Lifecycle markers sent around percentage updates.

    Attributes:
        START: The operation began; the front end shows a progress bar.
        END: The operation finished (successfully or not); the bar is removed.
    """

    START = "start"
    END = "end"


# An integer percentage (0-100) or a lifecycle marker
ProgressValue = int | ProgressMarker


class Severity(str, Enum):
    """Severity of a user-facing alert.

    Attributes:
        INFO: Informational message.
        WARNING: Something degraded but the operation went on.
        MODAL: Error that must be acknowledged by the user.
        SUCCESS: Operation completed successfully.
        CRITICAL: Unrecoverable error.
    """

    INFO = "info"
    WARNING = "warning"
    MODAL = "modal"
    SUCCESS = "success"
    CRITICAL = "critical"
