# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import IO, Any, Callable, List, Optional, Tuple, Union

from coreason_applog import cleanup
from coreason_applog.formatting import LineFormatter
from coreason_applog.paths import PathProvider, get_path_provider
from coreason_applog.schemas import LogSettings, SourceLocation
from coreason_applog.utils.logger import logger

DEFAULT_APP_NAME = "coreason_applog"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_SUFFIX = ".log"

PathLike = Union[str, "os.PathLike[str]"]
Clock = Callable[[], datetime]


class LogFileError(RuntimeError):
    """Raised when the log file cannot be opened."""

    pass


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class FileLog:
    """Append-only log file bound to an application and a log name.

    Every operation runs under one lock. The file is opened on the first write,
    and reopened when a path-affecting setting changes while it is open.
    """

    def __init__(self, provider: Optional[PathProvider] = None, clock: Optional[Clock] = None):
        """Initializes an unconfigured, closed log.

        Args:
            provider: Platform defaults. If None, the running platform's provider is used.
            clock: Source of the current time. Defaults to UTC wall-clock time.
        """
        self._provider = provider or get_path_provider()
        self._clock = clock or utc_now
        self._lock = threading.Lock()
        self._file: Optional[IO[str]] = None
        self._directory: Optional[Path] = None
        self._app_name: Optional[str] = None
        self._log_name: Optional[str] = None
        self._timestamp_format: Optional[str] = None
        self._debug = False

    def __enter__(self) -> "FileLog":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # Resolution

    def resolve_directory(self) -> Path:
        if self._directory is None:
            return self._provider.default_data_directory()
        return self._directory

    def resolve_application_name(self) -> str:
        return self._app_name or DEFAULT_APP_NAME

    def resolve_log_name(self) -> str:
        return self._log_name or str(self._provider.current_process_id())

    def resolve_timestamp_format(self) -> str:
        return self._timestamp_format or DEFAULT_TIMESTAMP_FORMAT

    def resolve_path(self) -> Path:
        """Returns ``<directory>/<application name>/<log name>.log``."""
        return self.resolve_directory() / self.resolve_application_name() / (self.resolve_log_name() + LOG_SUFFIX)

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def debug(self) -> bool:
        return self._debug

    # File handle lifecycle

    def _open(self) -> IO[str]:
        path = self.resolve_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file = open(path, "a", encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not open file: {path}: {e}")
            raise LogFileError(f"Could not open file: {path}") from e
        self._file = file
        logger.info(f"Opened log file {path}")
        return file

    def _close(self) -> None:
        if self._file is not None:
            file, self._file = self._file, None
            file.close()

    def _reopen_if_open(self) -> None:
        if self._file is not None:
            self._close()
            self._open()

    def _open_if_closed(self) -> IO[str]:
        if self._file is None:
            return self._open()
        return self._file

    def close(self) -> None:
        """Releases the file handle. The next write opens it again."""
        with self._lock:
            self._close()

    # Configuration

    @staticmethod
    def _as_directory(path: Optional[PathLike]) -> Optional[Path]:
        if path is None or str(path) in ("", "."):
            return None
        directory = Path(path)
        if not directory.is_absolute():
            raise ValueError(f"Log directory must be absolute: {path}")
        return directory

    def _path_fields(self) -> Tuple[Optional[Path], Optional[str], Optional[str]]:
        return self._directory, self._app_name, self._log_name

    def set_directory(self, path: Optional[PathLike]) -> None:
        """
        Overrides the log root directory. Empty or None restores the platform default.

        Raises:
            ValueError: If the path is relative.
            LogFileError: If the file was open and cannot be reopened at the new path.
        """
        directory = self._as_directory(path)
        with self._lock:
            if directory == self._directory:
                return
            self._directory = directory
            self._reopen_if_open()

    def set_application_name(self, name: Optional[str]) -> None:
        """
        Overrides the application subdirectory name. Empty or None restores the default.

        Raises:
            LogFileError: If the file was open and cannot be reopened at the new path.
        """
        with self._lock:
            name = name or None
            if name == self._app_name:
                return
            self._app_name = name
            self._reopen_if_open()

    def set_log_name(self, name: Optional[str]) -> None:
        """
        Overrides the log file stem. Empty or None restores the process id.

        Raises:
            LogFileError: If the file was open and cannot be reopened at the new path.
        """
        with self._lock:
            name = name or None
            if name == self._log_name:
                return
            self._log_name = name
            self._reopen_if_open()

    def set_timestamp_format(self, pattern: Optional[str]) -> None:
        """Sets the strftime pattern. Never touches the file; bad patterns fail at write time."""
        with self._lock:
            self._timestamp_format = pattern or None

    def set_debug(self, enabled: bool) -> None:
        """Turns `debug_log` output on or off."""
        with self._lock:
            self._debug = enabled

    def configure(self, settings: LogSettings) -> List[Path]:
        """
        Applies a settings document in one step.

        All fields change under a single lock hold, and an open file is reopened
        at most once, directly at the final path.

        Returns:
            Files removed by the retention sweep, if ``retention_days`` is set.
        """
        directory = self._as_directory(settings.directory)
        with self._lock:
            before = self._path_fields()
            self._directory = directory
            self._app_name = settings.application_name or None
            self._log_name = settings.log_name or None
            self._timestamp_format = settings.timestamp_format or None
            self._debug = settings.debug
            if self._path_fields() != before:
                self._reopen_if_open()
        if settings.retention_days is None:
            return []
        return self.delete_old_files(timedelta(days=settings.retention_days))

    # Writing

    def log(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """
        Appends one timestamped line and flushes it.

        Args:
            message: The text to log.
            location: Optional call site, rendered as `` [<file>:<line>]``.

        Raises:
            ValueError: If the timestamp pattern is rejected.
            LogFileError: If the file has to be opened and cannot be.
            OSError: If writing or flushing fails. The file stays open.
        """
        with self._lock:
            now = self._clock()
            line = LineFormatter.format_line(message, now, self.resolve_timestamp_format(), location)
            file = self._open_if_closed()
            file.write(line)
            file.flush()

    def debug_log(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Same as `log`, but does nothing at all unless debug output is enabled."""
        if not self._debug:
            return
        self.log(message, location)

    # Maintenance

    def delete_old_files(self, older_than: cleanup.Age) -> List[Path]:
        """
        Deletes files in ``<directory>/<application name>`` older than ``older_than``.

        The open handle is left as is, even if its file gets deleted.

        Returns:
            The deleted paths.
        """
        with self._lock:
            directory = self.resolve_directory() / self.resolve_application_name()
            return cleanup.delete_old_files(directory, older_than, now=self._clock())
