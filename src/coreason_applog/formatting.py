# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

import re
from datetime import datetime
from typing import Optional

from coreason_applog.schemas import SourceLocation

# Directives documented for datetime.strftime on every platform, plus ISO 8601 week fields.
STRFTIME_DIRECTIVES = frozenset("aAwdbBmyYHIpMSfzZjUWcxXGuV%")
_DIRECTIVE = re.compile(r"%(.?)", re.DOTALL)


class LineFormatter:
    """
    Builds the text lines written to a log file.
    """

    @staticmethod
    def format_timestamp(now: datetime, pattern: str) -> str:
        """
        Renders ``now`` at whole-second resolution.

        Args:
            now: The instant to render.
            pattern: A strftime pattern.

        Raises:
            ValueError: If the pattern has an unknown directive or a dangling ``%``.
        """
        LineFormatter.check_pattern(pattern)
        return now.replace(microsecond=0).strftime(pattern)

    @staticmethod
    def check_pattern(pattern: str) -> None:
        """Raises ValueError unless every ``%`` starts a supported directive."""
        for match in _DIRECTIVE.finditer(pattern):
            directive = match.group(1)
            if not directive:
                raise ValueError(f"Invalid timestamp format {pattern!r}: dangling '%' at end")
            if directive not in STRFTIME_DIRECTIVES:
                raise ValueError(f"Invalid timestamp format {pattern!r}: unknown directive '%{directive}'")

    @staticmethod
    def with_location(message: str, location: Optional[SourceLocation]) -> str:
        if location is None:
            return message
        return f"{message} [{location.file}:{location.line}]"

    @staticmethod
    def format_line(
        message: str, now: datetime, pattern: str, location: Optional[SourceLocation] = None
    ) -> str:
        """
        Composes ``"<timestamp> <message>\\n"``.

        A location rewrites the message to ``"<message> [<file>:<line>]"`` first.
        The result always ends in exactly one newline added here.
        """
        timestamp = LineFormatter.format_timestamp(now, pattern)
        return f"{timestamp} {LineFormatter.with_location(message, location)}\n"
