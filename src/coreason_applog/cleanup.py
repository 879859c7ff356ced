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
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Union

from coreason_applog.utils.logger import logger

Age = Union[timedelta, int, float]


def as_timedelta(older_than: Age) -> timedelta:
    """
    Normalises an age given as a timedelta or a number of seconds.

    Raises:
        ValueError: If the age is negative.
    """
    age = older_than if isinstance(older_than, timedelta) else timedelta(seconds=older_than)
    if age < timedelta(0):
        raise ValueError(f"Age threshold must not be negative: {older_than}")
    return age


def modified_at(stat_result: os.stat_result) -> datetime:
    """Converts a stat mtime to an aware UTC wall-clock time."""
    return datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc)


def delete_old_files(directory: Path, older_than: Age, now: Optional[datetime] = None) -> List[Path]:
    """
    Deletes regular files directly inside ``directory`` whose age exceeds ``older_than``.

    Only regular files are considered, never through a symlink. A missing
    directory is not an error.

    Args:
        directory: The directory to scan (not recursed into).
        older_than: Files strictly older than this are removed.
        now: Reference time; defaults to the current UTC time.

    Returns:
        The paths that were deleted.
    """
    threshold = as_timedelta(older_than)
    now = now or datetime.now(timezone.utc)
    deleted: List[Path] = []

    try:
        entries = list(os.scandir(directory))
    except FileNotFoundError:
        logger.debug(f"Cleanup skipped, {directory} does not exist.")
        return deleted

    for entry in entries:
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
            age = now - modified_at(entry.stat(follow_symlinks=False))
            if age > threshold:
                os.remove(entry.path)
                deleted.append(Path(entry.path))
                logger.info(f"Deleted stale log file {entry.path} (age {age}).")
        except FileNotFoundError:
            # Removed by someone else between listing and delete.
            logger.debug(f"{entry.path} vanished during cleanup.")

    return deleted
