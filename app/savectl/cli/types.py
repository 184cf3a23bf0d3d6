"""Shared helpers for CLI commands.

Builds the settings store and the sinks that every command wires into
the core, and runs coroutines so the settings writer is always drained.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from savectl.cli.display import CliHooks, ConsoleNotifier, RichProgressSink
from savectl.core.settings import SettingsStore
from savectl.core.sinks import NotificationSink, NullProgressSink, ProgressSink

T = TypeVar("T")


def get_settings_store() -> SettingsStore:
    """Get a settings store bound to the default settings file."""
    return SettingsStore(hooks=CliHooks())


def get_sinks(quiet: bool = False) -> tuple[ProgressSink, NotificationSink]:
    """Get the progress and notification sinks for a command.

    Args:
        quiet: Suppress the progress bar.

    Returns:
        Tuple of (progress sink, notification sink).
    """
    progress: ProgressSink = NullProgressSink() if quiet else RichProgressSink()
    return progress, ConsoleNotifier()


def run_with_store(store: SettingsStore, action: Callable[[], Awaitable[T]]) -> T:
    """Run an async action, then flush queued settings writes.

    Args:
        store: Store whose pending writes must reach the disk.
        action: Coroutine factory to run on a fresh event loop.

    Returns:
        The action's result.
    """

    async def _run() -> T:
        try:
            return await action()
        finally:
            await store.close()

    return asyncio.run(_run())


def is_quiet(obj: object) -> bool:
    """Read the global --quiet flag from a Typer context object."""
    return isinstance(obj, dict) and bool(obj.get("quiet"))
