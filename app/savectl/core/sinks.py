"""Interfaces between the core and the front end.

The core reports progress and alerts through these sinks and asks the
front end to refresh itself through SurfaceHooks. A desktop UI, the CLI
and tests each provide their own implementation.
"""

from abc import ABC, abstractmethod

from savectl.models.progress import ProgressValue, Severity


class ProgressSink(ABC):
    """Receives progress updates of long-running operations."""

    @abstractmethod
    def on_progress(self, operation_id: str, title: str, value: ProgressValue) -> None:
        """Report progress for one operation.

        Args:
            operation_id: Stable identifier of the operation (e.g. "export").
            title: Human-readable title of the operation.
            value: Percentage 0-100, or ProgressMarker.START / END.
        """


class NotificationSink(ABC):
    """Receives user-facing alerts."""

    @abstractmethod
    def on_alert(
        self, severity: Severity, title: str, detail: str | list[str] | None = None
    ) -> None:
        """Show an alert.

        Args:
            severity: How the alert is presented.
            title: Short headline.
            detail: Optional message or list of messages.
        """


class NullProgressSink(ProgressSink):
    """Discards progress updates."""

    def on_progress(self, operation_id: str, title: str, value: ProgressValue) -> None:
        return None


class NullNotificationSink(NotificationSink):
    """Discards alerts."""

    def on_alert(
        self, severity: Severity, title: str, detail: str | list[str] | None = None
    ) -> None:
        return None


class SurfaceHooks:
    """Reactions of the open surfaces (windows, consoles) to state changes.

    Every hook defaults to doing nothing; front ends override what they
    support.
    """

    def apply_theme(self, theme: str) -> None:
        """Re-theme every open surface."""

    def refresh_backup_table(self) -> None:
        """Reload the table of tracked items on the main surface."""

    def refresh_restore_table(self) -> None:
        """Reload the table of restorable snapshots."""

    async def change_language(self, language: str) -> None:
        """Switch the active locale; returns once the switch completed."""

    def apply_language(self) -> None:
        """Re-render every open surface in the active locale."""

    def rebuild_menu(self) -> None:
        """Rebuild the application menu."""
