"""
Conversions between "HH:MM" wall-clock strings and minutes from midnight.

All times are naive, provider-local 24-hour clock values. Parsing is strict
only in ``is_valid_time``; the conversion helpers assume well-formed input
and let ``int()`` raise ``ValueError`` for anything else.
"""

import re

import pendulum

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def time_to_minutes(time: str) -> int:
    """Convert "HH:MM" to minutes from midnight."""
    hours, minutes = time.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to zero-padded "HH:MM"."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def add_minutes(time: str, minutes: int) -> str:
    """
    Shift a wall-clock time by ``minutes``, wrapping around midnight.

    Example: add_minutes("23:30", 60) -> "00:30"
    """
    return minutes_to_time((time_to_minutes(time) + minutes) % MINUTES_PER_DAY)


def is_valid_time(value: str) -> bool:
    """Check that ``value`` is a 24-hour "HH:MM" string."""
    return bool(_TIME_PATTERN.fullmatch(value))


def format_time_display(time: str) -> str:
    """
    Format "HH:MM" for display on a 12-hour clock.

    Example: "14:05" -> "2:05 PM", "00:30" -> "12:30 AM"
    """
    hours, minutes = divmod(time_to_minutes(time), 60)
    return pendulum.time(hours, minutes).format("h:mm A", locale="en")
