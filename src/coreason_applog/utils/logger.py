# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

import sys

from loguru import logger

LIBRARY_NAMESPACE = "coreason_applog"

# Library diagnostics stay silent until the host opts in.
logger.disable(LIBRARY_NAMESPACE)


def enable_diagnostics(level: str = "INFO") -> int:
    """
    Turns on the package's own diagnostics and routes them to stderr.

    Args:
        level: Minimum loguru level for the stderr sink.

    Returns:
        The loguru sink id, usable with ``logger.remove``.
    """
    logger.enable(LIBRARY_NAMESPACE)
    return logger.add(sys.stderr, level=level, filter=LIBRARY_NAMESPACE)


def disable_diagnostics() -> None:
    """Silences the package's diagnostics again."""
    logger.disable(LIBRARY_NAMESPACE)


__all__ = ["logger", "enable_diagnostics", "disable_diagnostics"]
