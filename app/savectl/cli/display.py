"""Console front end for the core sinks and hooks.

RichProgressSink draws one rich progress bar per running operation,
ConsoleNotifier prints alerts with the shared print_* helpers and
CliHooks re-themes the consoles when the theme setting changes.
"""

import logging

from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskID, TaskProgressColumn, TextColumn

from savectl.core.sinks import NotificationSink, ProgressSink, SurfaceHooks
from savectl.models.progress import ProgressMarker, ProgressValue, Severity
from savectl.utils.formatting import (
    apply_console_theme,
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


class RichProgressSink(ProgressSink):
    """Renders progress updates as rich progress bars."""

    def __init__(self, progress: Progress | None = None) -> None:
        self._progress = progress or Progress(
            TextColumn("[info]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            auto_refresh=False,
        )
        self._tasks: dict[str, TaskID] = {}

    def on_progress(self, operation_id: str, title: str, value: ProgressValue) -> None:
        if value is ProgressMarker.START:
            if not self._tasks:
                self._progress.start()
            self._tasks[operation_id] = self._progress.add_task(title, total=100)
            return

        task_id = self._tasks.get(operation_id)
        if task_id is None:
            return

        if value is ProgressMarker.END:
            del self._tasks[operation_id]
            if not self._tasks:
                self._progress.stop()
            return

        self._progress.update(task_id, completed=value, refresh=True)


class ConsoleNotifier(NotificationSink):
    """Prints alerts to the console."""

    def on_alert(
        self, severity: Severity, title: str, detail: str | list[str] | None = None
    ) -> None:
        if severity in (Severity.MODAL, Severity.CRITICAL):
            print_error(title)
        elif severity is Severity.WARNING:
            print_warning(title)
        elif severity is Severity.SUCCESS:
            print_success(title)
        else:
            print_info(title)

        if detail is None:
            return
        lines = [detail] if isinstance(detail, str) else detail
        target = err_console if severity in (Severity.MODAL, Severity.CRITICAL) else console
        for line in lines:
            target.print(f"  [muted]{escape(line)}[/]", highlight=False)


class CliHooks(SurfaceHooks):
    """Surface hooks of the command line front end."""

    def apply_theme(self, theme: str) -> None:
        apply_console_theme(theme)

    async def change_language(self, language: str) -> None:
        logger.debug("Language changed to %s", language)
