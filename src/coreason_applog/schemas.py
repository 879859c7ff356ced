# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

import inspect
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceLocation(BaseModel):
    """Call site appended to a log message."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Source file name")
    line: int = Field(..., ge=0, description="Line number within the file")

    @classmethod
    def caller(cls, depth: int = 1) -> "SourceLocation":
        """
        Captures the location of the code that called this method.

        Args:
            depth: How many frames above the caller to look (1 = the caller itself).
        """
        frame = inspect.currentframe()
        try:
            for _ in range(depth):
                if frame is None:
                    break
                frame = frame.f_back
            if frame is None:
                raise ValueError(f"No caller frame at depth {depth}")
            return cls(file=frame.f_code.co_filename, line=frame.f_lineno)
        finally:
            del frame

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


class LogSettings(BaseModel):
    """Settings document for a FileLog. Unset fields fall back to the defaults."""

    directory: Optional[Path] = Field(None, description="Absolute root directory for log files")
    application_name: Optional[str] = Field(None, description="Subdirectory named after the application")
    log_name: Optional[str] = Field(None, description="Log file stem; defaults to the process id")
    timestamp_format: Optional[str] = Field(None, description="strftime pattern for line timestamps")
    debug: bool = Field(False, description="Emit debug_log lines")
    retention_days: Optional[float] = Field(
        None, ge=0.0, description="Delete log files older than this many days when applied"
    )

    @field_validator("directory", mode="before")
    @classmethod
    def empty_directory_is_default(cls, value: object) -> object:
        return None if value == "" else value

    @field_validator("directory")
    @classmethod
    def directory_must_be_absolute(cls, value: Optional[Path]) -> Optional[Path]:
        if value is not None and not value.is_absolute():
            raise ValueError(f"Log directory must be absolute: {value}")
        return value


def load_settings(settings_path: Union[str, Path]) -> LogSettings:
    """
    Loads and validates LogSettings from a YAML file.

    Args:
        settings_path: Path to the YAML file.

    Returns:
        Validated LogSettings object. An empty document yields all defaults.
    """
    path = Path(settings_path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return LogSettings(**(data or {}))
