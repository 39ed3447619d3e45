"""
Human-readable rendering of elapsed time and reminder intervals.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Tuple

CLOCK_FORMAT = "%H:%M:%S"


def split_seconds(total_seconds: int) -> Tuple[int, int, int]:
    """Split a non-negative number of seconds into (hours, minutes, seconds)."""
    total_seconds = max(0, int(total_seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return hours, minutes, seconds


def pluralize(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def format_clock(total_seconds: int) -> str:
    """Short form used by the tray tooltip, e.g. ``01:05:09``. Hours are not wrapped at 24."""
    hours, minutes, seconds = split_seconds(total_seconds)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_duration(total_seconds: int, *, include_seconds: bool = True) -> str:
    """
    Long form such as ``1 hour, 5 minutes, 1 second``.

    With ``include_seconds`` False the seconds part is dropped when it is
    zero, and the minutes part is dropped as well when both are zero, so a
    reminder on the hour reads ``2 hours``.
    """
    hours, minutes, seconds = split_seconds(total_seconds)
    show_seconds = include_seconds or seconds != 0
    parts: List[str] = [pluralize(hours, "hour")]
    if minutes or show_seconds:
        parts.append(pluralize(minutes, "minute"))
    if show_seconds:
        parts.append(pluralize(seconds, "second"))
    return ", ".join(parts)


def format_time_of_day(moment: datetime) -> str:
    return moment.strftime(CLOCK_FORMAT)


def format_interval(minutes: int) -> str:
    """Describe a reminder interval, e.g. ``every 5 minutes``."""
    return "every " + pluralize(minutes, "minute")
