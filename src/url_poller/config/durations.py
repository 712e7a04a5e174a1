"""
Duration parsing for the URL poller.

Durations are written the way operators write them for Go tools:
a possibly signed sequence of decimal numbers, each with an optional
fraction and a unit suffix, such as "300ms", "1.5h" or "2h45m".
Valid units are "ns", "us" (or "µs"), "ms", "s", "m", "h".
"""

import re
from datetime import timedelta
from typing import Dict

# Length of each unit in microseconds, the resolution of timedelta
_UNIT_MICROSECONDS: Dict[str, float] = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,  # U+00B5 micro sign
    "μs": 1,  # U+03BC greek small letter mu
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}

# "ms" must be tried before "m" and "s"
_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """
    Parses a duration string such as "10m" or "1h30m" into a timedelta.

    Args:
        value: The duration string.

    Returns:
        timedelta: The parsed duration.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    # A bare zero is the only unit-less duration
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f'invalid duration "{value}"')

    total: float = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f'invalid duration "{value}"')
        number, unit = match.groups()
        total += float(number) * _UNIT_MICROSECONDS[unit]
        position = match.end()

    return timedelta(microseconds=sign * total)
