# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from coreason_applog.core import FileLog
from coreason_applog.paths import PathProvider

FIXED_PID = 4242
FIXED_INSTANT = datetime(2024, 3, 9, 17, 5, 42, 987654, tzinfo=timezone.utc)


class StubPathProvider(PathProvider):
    """Deterministic platform defaults rooted in a temporary directory."""

    def __init__(self, data_dir: Path, pid: int = FIXED_PID):
        self.data_dir = data_dir
        self.pid = pid
        self.directory_calls = 0

    def default_data_directory(self) -> Path:
        self.directory_calls += 1
        return self.data_dir

    def current_process_id(self) -> int:
        return self.pid


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def provider(data_dir: Path) -> StubPathProvider:
    return StubPathProvider(data_dir)


@pytest.fixture
def file_log(provider: StubPathProvider) -> Generator[FileLog, None, None]:
    log = FileLog(provider=provider, clock=lambda: FIXED_INSTANT)
    yield log
    log.close()
