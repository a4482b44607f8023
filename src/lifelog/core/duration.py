"""Duration normalization.

The activity log stores durations in one of two native encodings: a
wall-clock/elapsed time value, or a fraction of a 24-hour day (the
spreadsheet date-serial convention, 1.0 == 24 hours). Both are converted
to a plain number of hours here.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import time, timedelta
from typing import Any

_ELAPSED_PATTERN = re.compile(r"^\s*(\d+):([0-5]?\d)(?::([0-5]?\d)(?:\.\d+)?)?\s*$")


@dataclass(frozen=True)
class TimeOfDay:
    """An elapsed time value split into components.

    ``hours`` is not bounded to 23 so elapsed values such as ``25:30``
    survive intact.
    """

    hours: int
    minutes: int = 0
    seconds: int = 0


@dataclass(frozen=True)
class FractionalDay:
    """A numeric duration expressed as a fraction of a day."""

    value: float


@dataclass(frozen=True)
class UnknownDuration:
    """A duration cell whose shape was not recognized."""

    raw: Any = None


DurationRaw = TimeOfDay | FractionalDay | UnknownDuration


def classify_duration(value: Any) -> DurationRaw:
    """Map a raw cell value onto the duration union.

    Recognized shapes:
        - ``datetime.time`` (wraps at 24h by construction of the type)
        - ``datetime.timedelta``
        - ``"H:MM"`` / ``"H:MM:SS"`` strings, hours unbounded
        - ``int`` / ``float`` fractions of a day

    Anything else, including booleans, negative, NaN or infinite numbers,
    becomes ``UnknownDuration``.
    """
    if isinstance(value, (TimeOfDay, FractionalDay, UnknownDuration)):
        return value

    if isinstance(value, time):
        return TimeOfDay(value.hour, value.minute, value.second)

    if isinstance(value, timedelta):
        total = int(value.total_seconds())
        if total < 0:
            return UnknownDuration(value)
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        return TimeOfDay(hours, minutes, seconds)

    if isinstance(value, bool):
        return UnknownDuration(value)

    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            return UnknownDuration(value)
        return FractionalDay(float(value))

    if isinstance(value, str):
        match = _ELAPSED_PATTERN.match(value)
        if match:
            hours, minutes, seconds = match.groups()
            return TimeOfDay(int(hours), int(minutes), int(seconds or 0))

    return UnknownDuration(value)


def to_hours(raw: DurationRaw) -> float:
    """Convert a classified duration to hours.

    Values built directly rather than through ``classify_duration`` may be
    negative or NaN; those count as 0 like any unknown duration.
    """
    if isinstance(raw, TimeOfDay):
        hours = raw.hours + raw.minutes / 60 + raw.seconds / 3600
    elif isinstance(raw, FractionalDay):
        hours = raw.value * 24
    else:
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        return 0.0
    return hours


def normalize_duration(value: Any) -> float:
    """Return the duration in hours. Never raises; unknown shapes give 0."""
    return to_hours(classify_duration(value))


__all__ = [
    "DurationRaw",
    "FractionalDay",
    "TimeOfDay",
    "UnknownDuration",
    "classify_duration",
    "normalize_duration",
    "to_hours",
]
