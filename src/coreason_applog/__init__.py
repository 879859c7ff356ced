# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

"""coreason-applog: process-wide append-only application log files.

Lines go to ``<data dir>/<application>/<log name>.log``, where the data
directory follows the platform convention and the log name defaults to the
process id. The module-level functions operate on one shared FileLog created
on first use and closed at interpreter exit.
"""

__version__ = "0.1.0"

import atexit
import threading
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Union

from .core import DEFAULT_APP_NAME, DEFAULT_TIMESTAMP_FORMAT, FileLog, LogFileError, PathLike
from .paths import PathProvider, PlatformPathError, get_path_provider
from .schemas import LogSettings, SourceLocation, load_settings
from .service import FileLogAsync

_default_log: Optional[FileLog] = None
_default_lock = threading.Lock()


def get_default_log() -> FileLog:
    """Returns the shared FileLog, creating it on first use."""
    global _default_log
    if _default_log is not None:
        return _default_log
    with _default_lock:
        if _default_log is None:
            _default_log = FileLog()
            atexit.register(_default_log.close)
        return _default_log


def set_directory(path: Optional[PathLike]) -> None:
    get_default_log().set_directory(path)


def set_application_name(name: Optional[str]) -> None:
    get_default_log().set_application_name(name)


def set_log_name(name: Optional[str]) -> None:
    get_default_log().set_log_name(name)


def set_timestamp_format(pattern: Optional[str]) -> None:
    get_default_log().set_timestamp_format(pattern)


def set_debug(enabled: bool) -> None:
    get_default_log().set_debug(enabled)


def configure(settings: LogSettings) -> List[Path]:
    return get_default_log().configure(settings)


def log(message: str, location: Optional[SourceLocation] = None) -> None:
    get_default_log().log(message, location)


def debug_log(message: str, location: Optional[SourceLocation] = None) -> None:
    get_default_log().debug_log(message, location)


def delete_old_files(older_than: Union[timedelta, int, float]) -> List[Path]:
    return get_default_log().delete_old_files(older_than)


__all__ = [
    "DEFAULT_APP_NAME",
    "DEFAULT_TIMESTAMP_FORMAT",
    "FileLog",
    "FileLogAsync",
    "LogFileError",
    "LogSettings",
    "PathProvider",
    "PlatformPathError",
    "SourceLocation",
    "configure",
    "debug_log",
    "delete_old_files",
    "get_default_log",
    "get_path_provider",
    "load_settings",
    "log",
    "set_application_name",
    "set_debug",
    "set_directory",
    "set_log_name",
    "set_timestamp_format",
]
