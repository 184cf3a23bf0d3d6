"""Persistent settings store.

Settings live in memory and in one JSON file. Updates are visible to
readers immediately; persisting them is asynchronous and goes through a
single writer task that drains a FIFO queue, so two updates can never
write the file at the same time and the last update always wins on disk.

Storage location: <config dir>/settings.json
"""

import asyncio
import contextlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from pydantic import ValidationError

from savectl.core.paths import get_settings_path
from savectl.core.sinks import SurfaceHooks
from savectl.models.settings import Settings

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsKeyError(SettingsError):
    """Raised when an unknown setting is updated."""


@dataclass(slots=True)
class _WriteRequest:
    """One queued persist operation."""

    field: str
    value: Any
    done: "asyncio.Future[bool]"


class SettingsStore:
    """Owns the settings object and the settings file.

    Attributes:
        path: Location of the settings file.
        hooks: Front-end reactions fired after a setting was persisted.
    """

    def __init__(self, path: Path | None = None, hooks: SurfaceHooks | None = None) -> None:
        """Initialize SettingsStore.

        Args:
            path: Optional override for the settings file.
                  Default: <config dir>/settings.json
            hooks: Front-end reactions; defaults to no-ops.
        """
        self.path = path if path is not None else get_settings_path()
        self.hooks = hooks if hooks is not None else SurfaceHooks()
        self._settings: Settings | None = None
        self._queue: asyncio.Queue[_WriteRequest] | None = None
        self._writer: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def load(self) -> Settings:
        """Read the settings file, merging it over the defaults.

        A missing, unreadable or unparseable file is replaced by the
        defaults. A single invalid value falls back to its default while the
        rest of the file is kept. Failures are logged and never raised.

        Returns:
            The loaded settings.
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                msg = "settings file must contain a JSON object"
                raise ValueError(msg)
            settings, rejected = Settings.from_file_dict(data)
            for key in rejected:
                logger.warning("Invalid value for %s in %s, using the default", key, self.path)
        except FileNotFoundError:
            logger.info("No settings file at %s, writing defaults", self.path)
            settings = self._reset()
        except (OSError, ValueError, ValidationError) as e:
            logger.error("Error loading settings from %s, using defaults: %s", self.path, e)
            settings = self._reset()

        self._settings = settings
        return settings

    def get(self) -> Settings:
        """Get the current settings, loading them on first use.

        Returns:
            The live settings object; it reflects every set() immediately.
        """
        if self._settings is None:
            return self.load()
        return self._settings

    def enqueue(self, key: str, value: Any) -> "asyncio.Future[bool]":
        """Update one setting and queue the file write.

        The in-memory value changes before this method returns. The returned
        future resolves once the queued write (and its side effects) ran:
        True if the file was written, False if the write failed. Must be
        called from a running event loop.

        Args:
            key: Field name (snake_case) or file key (camelCase).
            value: New value, validated against the settings model.

        Returns:
            Future resolved when the write completed.

        Raises:
            SettingsKeyError: If the key is not a known setting.
            SettingsError: If the value is invalid for the setting.
        """
        field = Settings.field_for_key(key)
        if field is None:
            raise SettingsKeyError(f"Unknown setting: {key}")

        settings = self.get()
        try:
            setattr(settings, field, value)
        except ValidationError as e:
            raise SettingsError(f"Invalid value for {key}: {e}") from e

        loop = asyncio.get_running_loop()
        request = _WriteRequest(
            field=field,
            value=getattr(settings, field),
            done=loop.create_future(),
        )
        self._queue_for(loop).put_nowait(request)
        return request.done

    async def set(self, key: str, value: Any) -> bool:
        """Update one setting and wait until it was persisted.

        Returns:
            True if the file was written, False if the write failed.

        Raises:
            SettingsKeyError: If the key is not a known setting.
            SettingsError: If the value is invalid for the setting.
        """
        return await self.enqueue(key, value)

    async def drain(self) -> None:
        """Wait until every queued write has been processed."""
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def close(self) -> None:
        """Drain the queue and stop the writer task."""
        await self.drain()
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._writer
        self._writer = None
        self._queue = None
        self._loop = None

    def _queue_for(self, loop: asyncio.AbstractEventLoop) -> "asyncio.Queue[_WriteRequest]":
        """Get the write queue of the running loop, starting its writer if needed."""
        stale = self._loop is not loop or self._writer is None or self._writer.done()
        if self._queue is None or stale:
            self._queue = asyncio.Queue()
            self._loop = loop
            self._writer = loop.create_task(self._run_writer(self._queue), name="settings-writer")
        return self._queue

    async def _run_writer(self, queue: "asyncio.Queue[_WriteRequest]") -> None:
        """Persist queued requests one at a time, in order."""
        while True:
            request = await queue.get()
            try:
                ok = await self._persist(request)
                if not request.done.done():
                    request.done.set_result(ok)
            finally:
                queue.task_done()

    async def _persist(self, request: _WriteRequest) -> bool:
        """Write the whole current settings object, then fire side effects."""
        try:
            self._write(self.get())
        except OSError as e:
            logger.error("Error saving settings (%s): %s", request.field, e)
            return False

        logger.info("Settings updated successfully: %s: %s", request.field, request.value)
        try:
            await self._apply_side_effects(request.field, request.value)
        except Exception:
            # Hooks belong to the front end; a broken hook must not stop the queue
            logger.exception("Error applying setting %s", request.field)
        return True

    async def _apply_side_effects(self, field: str, value: Any) -> None:
        """Notify the front end about a persisted change."""
        if field == "theme":
            self.hooks.apply_theme(value)
        elif field == "game_installs":
            self.hooks.refresh_backup_table()
        elif field == "language":
            await self.hooks.change_language(value)
            self.hooks.apply_language()
            self.hooks.rebuild_menu()

    def _reset(self) -> Settings:
        """Build default settings and try to write them out."""
        settings = Settings()
        try:
            self._write(settings)
        except OSError as e:
            logger.error("Error writing default settings to %s: %s", self.path, e)
        return settings

    def _write(self, settings: Settings) -> None:
        """Write settings atomically (temporary file + os.replace).

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(settings.to_json_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise
