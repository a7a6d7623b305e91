"""Human-readable duration parsing for the refresh interval.

Accepts strings such as ``15s``, ``500ms``, ``1m 30s`` or ``2h15m``.
Every number needs a unit.
"""

import re
from datetime import timedelta

from .errors import InvalidDuration

# Unit suffix -> seconds
UNITS = {
    "ns": 1e-9, "nsec": 1e-9,
    "us": 1e-6, "usec": 1e-6,
    "ms": 1e-3, "msec": 1e-3, "millis": 1e-3,
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
}

TERM_PATTERN = re.compile(r'\s*(\d+(?:\.\d+)?)\s*([a-z]+)\s*')


def parse_duration(text: str) -> timedelta:
    """Parse a duration like ``1m 30s`` into a timedelta.

    Raises:
        InvalidDuration: If the text is empty, has an unknown unit,
            a number without a unit, or adds up to zero
    """
    value = text.strip().lower()
    if not value:
        raise InvalidDuration(text, "empty duration")

    total = 0.0
    position = 0
    while position < len(value):
        match = TERM_PATTERN.match(value, position)
        if not match:
            raise InvalidDuration(text, f"expected <number><unit> at {value[position:]!r}")

        number, unit = match.groups()
        if unit not in UNITS:
            raise InvalidDuration(text, f"unknown unit {unit!r}")

        total += float(number) * UNITS[unit]
        position = match.end()

    duration = timedelta(seconds=total)
    if duration <= timedelta(0):
        raise InvalidDuration(text, "duration must be at least 1us")

    return duration


def format_duration(duration: timedelta) -> str:
    """Render a timedelta in the same notation parse_duration accepts."""
    total_us = duration // timedelta(microseconds=1)
    hours, remainder = divmod(total_us, 3600 * 10**6)
    minutes, remainder = divmod(remainder, 60 * 10**6)
    seconds, remainder = divmod(remainder, 10**6)
    millis, micros = divmod(remainder, 1000)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    if millis:
        parts.append(f"{millis}ms")
    if micros:
        parts.append(f"{micros}us")
    return " ".join(parts) or "0s"
