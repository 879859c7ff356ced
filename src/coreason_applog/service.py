# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

from pathlib import Path
from typing import Any, List, Optional

import aiofiles
import yaml
from anyio import to_thread

from coreason_applog.cleanup import Age
from coreason_applog.core import FileLog
from coreason_applog.schemas import LogSettings, SourceLocation
from coreason_applog.utils.logger import logger


class FileLogAsync:
    """Async facade over a FileLog.

    Each call runs the blocking operation in a worker thread, so the event loop
    never waits on file I/O. Ordering and locking stay with the wrapped FileLog.
    """

    def __init__(self, file_log: Optional[FileLog] = None):
        """Initializes the facade.

        Args:
            file_log: Optional FileLog to wrap. If None, one will be created and
                closed on exit.
        """
        self._internal_log = file_log is None
        self._log = file_log or FileLog()

    @property
    def file_log(self) -> FileLog:
        return self._log

    async def __aenter__(self) -> "FileLogAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._internal_log:
            await to_thread.run_sync(self._log.close)

    async def load_settings(self, settings_path: Path) -> LogSettings:
        """Loads and validates LogSettings from a YAML file asynchronously."""
        if not await to_thread.run_sync(settings_path.exists):
            raise FileNotFoundError(f"Settings file not found: {settings_path}")

        logger.info(f"Loading log settings from {settings_path}")
        async with aiofiles.open(settings_path, "r", encoding="utf-8") as f:
            content = await f.read()
            data = await to_thread.run_sync(yaml.safe_load, content)

        return LogSettings(**(data or {}))

    async def configure(self, settings: LogSettings) -> List[Path]:
        return await to_thread.run_sync(self._log.configure, settings)

    async def log(self, message: str, location: Optional[SourceLocation] = None) -> None:
        await to_thread.run_sync(self._log.log, message, location)

    async def debug_log(self, message: str, location: Optional[SourceLocation] = None) -> None:
        # Skip the thread hop entirely when debug output is off.
        if not self._log.debug:
            return
        await to_thread.run_sync(self._log.debug_log, message, location)

    async def delete_old_files(self, older_than: Age) -> List[Path]:
        return await to_thread.run_sync(self._log.delete_old_files, older_than)
