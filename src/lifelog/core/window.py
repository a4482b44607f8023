"""Time windows and record filtering.

Windows are closed intervals covering whole calendar days in a fixed
reference time zone, ending at 23:59:59.999 on the last day.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo

from .models import RawRecord, TimeWindow

DEFAULT_TIMEZONE = ZoneInfo("Asia/Tokyo")

END_OF_DAY = time(23, 59, 59, 999000)


class WeekStart(Enum):
    """First day of a reporting week (values match ``date.weekday()``)."""

    MONDAY = 0
    SUNDAY = 6


class BoundaryDay(Enum):
    """How a reference date falling on the week-start day is treated.

    STARTS_WEEK: the reference date is day 1 of the current window.
    ENDS_WEEK: the reference date is day 7 of the window, i.e. the window
        is the seven days ending on the reference date. Suits a job that
        runs shortly after the week boundary has passed.
    """

    STARTS_WEEK = "starts_week"
    ENDS_WEEK = "ends_week"


def local_date(reference: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> date:
    """Calendar date of ``reference`` in ``tz``. Naive values are taken as local."""
    if reference.tzinfo is None:
        return reference.date()
    return reference.astimezone(tz).date()


def span_window(first_day: date, days: int, tz: tzinfo = DEFAULT_TIMEZONE) -> TimeWindow:
    """Window from midnight of ``first_day`` to the end of its ``days``-th day."""
    last_day = first_day + timedelta(days=days - 1)
    return TimeWindow(
        start=datetime.combine(first_day, time.min, tzinfo=tz),
        end=datetime.combine(last_day, END_OF_DAY, tzinfo=tz),
    )


def day_window(
    reference: datetime,
    offset_days: int = 0,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> TimeWindow:
    """One-day window containing ``reference``, shifted by ``offset_days``."""
    day = local_date(reference, tz) + timedelta(days=offset_days)
    return span_window(day, 1, tz)


def week_window(
    reference: datetime,
    offset_weeks: int = 0,
    week_start: WeekStart = WeekStart.MONDAY,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
    boundary: BoundaryDay = BoundaryDay.STARTS_WEEK,
) -> TimeWindow:
    """Seven-day window for the week of ``reference``.

    Args:
        reference: Instant the report is computed for.
        offset_weeks: 0 for the week containing ``reference``, -1 for the
            week before, and so on.
        week_start: First day of the week.
        tz: Reference time zone for day boundaries.
        boundary: Convention applied when ``reference`` falls on the
            week-start day.

    Returns:
        TimeWindow spanning exactly seven calendar days.
    """
    ref_date = local_date(reference, tz)
    days_since_start = (ref_date.weekday() - week_start.value) % 7

    if days_since_start == 0 and boundary is BoundaryDay.ENDS_WEEK:
        first_day = ref_date - timedelta(days=6)
    else:
        first_day = ref_date - timedelta(days=days_since_start)

    first_day += timedelta(weeks=offset_weeks)
    return span_window(first_day, 7, tz)


def _align(timestamp: datetime, reference: datetime) -> datetime:
    if timestamp.tzinfo is None and reference.tzinfo is not None:
        return timestamp.replace(tzinfo=reference.tzinfo)
    if timestamp.tzinfo is not None and reference.tzinfo is None:
        return timestamp.replace(tzinfo=None)
    return timestamp


def filter_records(records: Iterable[RawRecord], window: TimeWindow) -> list[RawRecord]:
    """Select records whose timestamp lies within ``window``.

    Order is preserved. Records without a valid timestamp are excluded.
    Naive timestamps are read in the window's time zone.
    """
    selected: list[RawRecord] = []
    for record in records:
        timestamp = record.timestamp
        if not isinstance(timestamp, datetime):
            continue
        if window.contains(_align(timestamp, window.start)):
            selected.append(record)
    return selected


__all__ = [
    "DEFAULT_TIMEZONE",
    "END_OF_DAY",
    "BoundaryDay",
    "WeekStart",
    "day_window",
    "filter_records",
    "local_date",
    "span_window",
    "week_window",
]
