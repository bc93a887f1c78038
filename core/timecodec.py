"""
Time Notation
-------------
Converts durations between integer seconds (the wire form) and the
composite display form used by Everhour users: "1h 30m 45s", "90m", "45s".
"""

import re

from .errors import FormatError


# Units appear in fixed order, each optional, whitespace between them optional
_DURATION_PATTERN = re.compile(
    r"^\s*(?:(?P<hours>\d+)h)?\s*(?:(?P<minutes>\d+)m)?\s*(?:(?P<seconds>\d+)s)?\s*$"
)

FORMAT_HINT = 'Use format like "1h 30m 45s", "90m", or "3600s"'


def format_duration(seconds: int) -> str:
    """
    Render seconds as "{h}h {m}m {s}s", dropping leading zero units.

    The seconds segment is always present: 0 -> "0s", 3661 -> "1h 1m 1s".
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise TypeError(f"seconds must be an int, got {type(seconds).__name__}")
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining = seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {remaining}s"
    if minutes > 0:
        return f"{minutes}m {remaining}s"
    return f"{remaining}s"


def parse_duration(text: str) -> int:
    """
    Parse "1h 30m", "90m", "5400s" (any subset of h/m/s, in that order).

    Raises FormatError when the text carries no unit at all, including
    the empty string, or has anything besides the three segments.
    """
    if not isinstance(text, str):
        raise FormatError(f"Invalid time format: expected text. {FORMAT_HINT}")

    match = _DURATION_PATTERN.match(text)
    if match is None or not any(match.groupdict().values()):
        raise FormatError(f"Invalid time format: {text!r}. {FORMAT_HINT}")

    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = int(match.group("seconds") or 0)

    return hours * 3600 + minutes * 60 + seconds


def to_seconds(value) -> int:
    """Accept either integer seconds or duration text."""
    if isinstance(value, str):
        return parse_duration(value)
    return int(value)
