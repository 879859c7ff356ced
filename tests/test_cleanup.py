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
from unittest.mock import MagicMock, patch

import pytest

from coreason_applog.cleanup import as_timedelta, delete_old_files

# Whole seconds keep mtime arithmetic exact.
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
THRESHOLD = timedelta(hours=48)


def _touch(path: Path, age: timedelta) -> Path:
    path.write_text("log line\n")
    mtime = int((NOW - age).timestamp())
    os.utime(path, (mtime, mtime))
    return path


def test_missing_directory_is_silent(tmp_path: Path) -> None:
    assert delete_old_files(tmp_path / "absent", THRESHOLD, now=NOW) == []


def test_age_boundary_is_strict(tmp_path: Path) -> None:
    at_threshold = _touch(tmp_path / "edge.log", THRESHOLD)
    one_older = _touch(tmp_path / "old.log", THRESHOLD + timedelta(seconds=1))
    fresh = _touch(tmp_path / "fresh.log", timedelta(minutes=5))

    deleted = delete_old_files(tmp_path, THRESHOLD, now=NOW)

    assert deleted == [one_older]
    assert at_threshold.exists()
    assert fresh.exists()
    assert not one_older.exists()


def test_directories_are_never_deleted(tmp_path: Path) -> None:
    sub = tmp_path / "archive"
    sub.mkdir()
    nested = _touch(sub / "nested.log", timedelta(days=30))
    mtime = int((NOW - timedelta(days=30)).timestamp())
    os.utime(sub, (mtime, mtime))

    assert delete_old_files(tmp_path, THRESHOLD, now=NOW) == []
    assert sub.is_dir()
    assert nested.exists()


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks need POSIX")
def test_symlinks_are_never_deleted(tmp_path: Path) -> None:
    target_dir = tmp_path / "elsewhere"
    target_dir.mkdir()
    target = _touch(target_dir / "target.log", timedelta(days=30))

    scan_dir = tmp_path / "scan"
    scan_dir.mkdir()
    link = scan_dir / "link.log"
    link.symlink_to(target)
    mtime = int((NOW - timedelta(days=30)).timestamp())
    os.utime(link, (mtime, mtime), follow_symlinks=False)

    assert delete_old_files(scan_dir, THRESHOLD, now=NOW) == []
    assert link.is_symlink()
    assert target.exists()


def test_numeric_age_is_seconds(tmp_path: Path) -> None:
    old = _touch(tmp_path / "old.log", timedelta(seconds=120))
    keep = _touch(tmp_path / "keep.log", timedelta(seconds=30))

    assert delete_old_files(tmp_path, 60, now=NOW) == [old]
    assert keep.exists()


def test_negative_age_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        as_timedelta(timedelta(seconds=-1))
    with pytest.raises(ValueError):
        as_timedelta(-5)


def test_vanished_file_is_tolerated(tmp_path: Path) -> None:
    first = _touch(tmp_path / "a.log", timedelta(days=5))
    second = _touch(tmp_path / "b.log", timedelta(days=5))

    real_remove = os.remove

    def racing_remove(path: str) -> None:
        if path == str(first):
            real_remove(path)
            raise FileNotFoundError(path)
        real_remove(path)

    with patch("coreason_applog.cleanup.os.remove", side_effect=racing_remove):
        deleted = delete_old_files(tmp_path, THRESHOLD, now=NOW)

    assert deleted == [second]
    assert not first.exists()
    assert not second.exists()


def test_directory_vanishing_before_scan(tmp_path: Path) -> None:
    with patch("coreason_applog.cleanup.os.scandir", side_effect=FileNotFoundError("gone")):
        assert delete_old_files(tmp_path, THRESHOLD, now=NOW) == []


@patch("coreason_applog.cleanup.logger")
def test_deletions_are_logged(mock_logger: MagicMock, tmp_path: Path) -> None:
    old = _touch(tmp_path / "old.log", timedelta(days=3))
    delete_old_files(tmp_path, THRESHOLD, now=NOW)
    mock_logger.info.assert_called_once()
    assert str(old) in mock_logger.info.call_args[0][0]
