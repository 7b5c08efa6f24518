"""Free-text relative durations such as ``"3d 2h"``."""

from __future__ import annotations

import re
from typing import Optional

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
# Calendar-approximate: a month is 30 days and a year is 12 such months
MONTH = 30 * DAY
YEAR = 12 * MONTH

_UNIT_ALIASES = (
    (("s", "sec", "secs", "second", "seconds"), 1),
    (("m", "min", "mins", "minute", "minutes"), MINUTE),
    (("h", "hr", "hrs", "hour", "hours"), HOUR),
    (("d", "day", "days"), DAY),
    (("w", "wk", "wks", "week", "weeks"), WEEK),
    (("mo", "mos", "month", "months"), MONTH),
    (("y", "yr", "yrs", "year", "years"), YEAR),
)
UNITS: dict[str, int] = {alias: seconds for aliases, seconds in _UNIT_ALIASES for alias in aliases}

# Units are letters only so "1d2h" splits into two tokens
_TOKEN_RE = re.compile(r"(\d+)\s*([^\W\d_]+)")

_FORMAT_ORDER = (("y", YEAR), ("mo", MONTH), ("w", WEEK), ("d", DAY), ("h", HOUR), ("m", MINUTE), ("s", 1))


class InvalidDurationError(ValueError):
    """Raised when text does not describe a duration."""


def parse_duration(text: Optional[str]) -> int:
    """Return the total number of seconds described by ``text``.

    Every ``<integer><unit>`` token is summed, so ``"1d 1d"`` is two days.
    One unrecognised unit fails the whole parse rather than yielding a
    partial total.
    """
    matches = _TOKEN_RE.findall(text or "")
    if not matches:
        raise InvalidDurationError("invalid format")
    total = 0
    for amount, unit in matches:
        multiplier = UNITS.get(unit.lower())
        if multiplier is None:
            raise InvalidDurationError(f"unknown unit: {unit}")
        total += int(amount) * multiplier
    return total


def format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return "permanent"
    if seconds <= 0:
        return "0s"
    parts: list[str] = []
    remaining = seconds
    for suffix, size in _FORMAT_ORDER:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{suffix}")
    return " ".join(parts)


__all__ = ["InvalidDurationError", "UNITS", "format_duration", "parse_duration"]
