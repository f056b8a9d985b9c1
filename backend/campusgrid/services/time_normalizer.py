"""Clock-time parsing for stored lecture times.

Lecture times arrive as ``"HH:MM:SS+00"`` strings or as full timestamps. The
wall-clock value as written is authoritative: the UTC offset is never applied.
"""
from __future__ import annotations

import re
from typing import NamedTuple

# Either the start of the string or the date/time separator of a timestamp.
CLOCK_PATTERN = re.compile(r"(?:^|[T\s])(\d{1,2}):(\d{2})")


class ClockTime(NamedTuple):
    hour: int
    minute: int

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute


def parse_clock_time(value: str | None) -> ClockTime | None:
    """Return the written hour and minute of ``value``, or ``None`` if unparseable."""
    if not value:
        return None
    match = CLOCK_PATTERN.search(value.strip())
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return ClockTime(hour, minute)


def to_12_hour(clock: ClockTime) -> str:
    minute = f"{clock.minute:02d}"
    if clock.hour == 0:
        return f"12:{minute} AM"
    if clock.hour < 12:
        return f"{clock.hour}:{minute} AM"
    if clock.hour == 12:
        return f"12:{minute} PM"
    return f"{clock.hour - 12}:{minute} PM"


def format_12_hour(value: str | None) -> str:
    """Render ``value`` as ``H:MM AM/PM``; unparseable input is returned unchanged."""
    clock = parse_clock_time(value)
    if clock is None:
        return value or ""
    return to_12_hour(clock)


def format_time_range(start: str | None, end: str | None) -> str:
    return f"{format_12_hour(start)} - {format_12_hour(end)}"
