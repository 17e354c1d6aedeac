"""Parsing primitives for time-of-day and duration tokens.

Start times are 4-digit military clock strings ("0800", "2359"). Durations
use the compact unit notation found in Go and systemd configs: a sequence of
decimal numbers with unit suffixes, e.g. "8h", "1h30m", "8h59m59s", "1.5h".
"""

import re
from datetime import datetime, timedelta

from protoschedule.domain.errors import ParseError

# strptime layout for 24-hour clock without separator
MILITARY_TIME_FORMAT = "%H%M"

_MIDNIGHT = datetime.strptime("0000", MILITARY_TIME_FORMAT)

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5
    "μs": 1_000,  # U+03BC
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

# Largest magnitude a duration may have, about 2562047h (signed 64-bit ns)
MAX_DURATION_NANOSECONDS = 2**63 - 1

_COMPONENT = re.compile(r"(\d*\.?\d*)([a-zµμ]+)")


def parse_time_of_day(token: str) -> timedelta:
    """Parse a military time token into an offset from midnight.

    Args:
        token: Clock string such as "0800" or "1730".

    Returns:
        Offset from civil midnight.

    Raises:
        ParseError: If the token is not a valid 24-hour clock time.
    """
    try:
        parsed = datetime.strptime(token, MILITARY_TIME_FORMAT)
    except (TypeError, ValueError) as exc:
        raise ParseError(
            f"invalid start time {token!r}, expected HHMM",
            field="start",
            value=token,
        ) from exc
    return parsed - _MIDNIGHT


def parse_duration(token: str) -> timedelta:
    """Parse a duration expression like "1h30m" into a timedelta.

    A sign may prefix the whole expression and "0" is accepted without a
    unit. Components are summed in whole nanoseconds, then truncated to
    microseconds.

    Raises:
        ParseError: If the expression is empty, has an unknown unit, a
            component is missing its number, or the total exceeds
            MAX_DURATION_NANOSECONDS.
    """
    if not isinstance(token, str):
        raise ParseError(f"invalid duration {token!r}", field="duration", value=token)

    text = token
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ParseError(f"invalid duration {token!r}", field="duration", value=token)

    total = 0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if not match or match.end() == pos:
            raise ParseError(f"invalid duration {token!r}", field="duration", value=token)
        number, unit = match.groups()
        if number in ("", "."):
            raise ParseError(f"invalid duration {token!r}", field="duration", value=token)
        if unit not in _UNIT_NANOSECONDS:
            raise ParseError(
                f"unknown unit {unit!r} in duration {token!r}",
                field="duration",
                value=token,
            )
        whole, _, fraction = number.partition(".")
        scale = _UNIT_NANOSECONDS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > MAX_DURATION_NANOSECONDS:
            raise ParseError(
                f"duration {token!r} is out of range",
                field="duration",
                value=token,
            )
        pos = match.end()

    return sign * timedelta(microseconds=total // 1_000)
