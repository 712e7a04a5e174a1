"""
Time formatting for the report lines.

Both helpers are pure: they only look at the durations they are given.
All components are truncated, never rounded, and the result is right-aligned
in a 6 character column so that consecutive report lines stay aligned.
"""

from datetime import timedelta
from typing import Union

COLUMN_WIDTH = 6

Seconds = Union[float, timedelta]


def _seconds(value: Seconds) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def format_elapsed(elapsed: Seconds) -> str:
    """
    Formats the time elapsed since the run started.

    Examples: "   42s", " 3m12s", " 1h15m".

    Args:
        elapsed: Elapsed time, in seconds or as a timedelta.

    Returns:
        str: The formatted duration, right-aligned to 6 characters.
    """
    total = _seconds(elapsed)
    hours = int(total // 3600)
    minutes = int(total // 60) % 60
    seconds = int(total) % 60

    if hours > 0:
        text = f"{hours}h{minutes}m"
    elif minutes > 0:
        text = f"{minutes}m{seconds}s"
    else:
        text = f"{seconds}s"
    return f"{text:>{COLUMN_WIDTH}}"


def format_remaining(expected: Seconds, elapsed: Seconds) -> str:
    """
    Formats how much of the expected time is left.

    Once the elapsed time exceeds the expected time the overrun is shown with
    an "ago" suffix, e.g. "2m0s ago", instead of a negative duration.

    Args:
        expected: The time the monitored service was expected to need.
        elapsed: Elapsed time since the run started.

    Returns:
        str: The formatted remaining time, right-aligned to 6 characters.
    """
    remaining = _seconds(expected) - _seconds(elapsed)
    suffix = "ago" if remaining < 0 else "remaining"

    magnitude = abs(remaining)
    minutes = int(magnitude // 60)
    seconds = int(magnitude) % 60

    if minutes != 0:
        text = f"{minutes}m{seconds}s {suffix}"
    else:
        text = f"{seconds}s {suffix}"
    return f"{text:>{COLUMN_WIDTH}}"
