"""Per-category aggregation of activity records."""

import math
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import timedelta

from .category import extract_category
from .duration import normalize_duration
from .models import CategoryStat, DailyBreakdown, RawRecord, TimeWindow
from .window import filter_records, local_date

CategoryExtractor = Callable[[str], str | None]


def aggregate(
    records: Iterable[RawRecord],
    extractor: CategoryExtractor = extract_category,
) -> dict[str, CategoryStat]:
    """Group records by category and total their counts and hours.

    Records without a category are dropped. Hours are summed with
    ``math.fsum`` so the result does not depend on input order.
    """
    hours_by_category: dict[str, list[float]] = defaultdict(list)

    for record in records:
        category = extractor(record.title)
        if category is None:
            continue
        hours_by_category[category].append(normalize_duration(record.duration_raw))

    return {
        category: CategoryStat(count=len(values), hours=math.fsum(values))
        for category, values in hours_by_category.items()
    }


def total_hours(stats: dict[str, CategoryStat]) -> float:
    """Sum of hours across all categories."""
    return math.fsum(stat.hours for stat in stats.values())


def daily_breakdown(
    records: Iterable[RawRecord],
    window: TimeWindow,
    extractor: CategoryExtractor = extract_category,
) -> DailyBreakdown:
    """Build a day x category matrix of hours for ``window``.

    Every calendar day of the window gets a row, including days without
    records. Categories are sorted by name.
    """
    tz = window.start.tzinfo
    first_day = window.start.date()
    day_count = (window.end.date() - first_day).days + 1
    days = [first_day + timedelta(days=offset) for offset in range(day_count)]

    cells: dict[tuple[int, str], list[float]] = defaultdict(list)
    for record in filter_records(records, window):
        category = extractor(record.title)
        if category is None:
            continue
        timestamp = record.timestamp
        day = local_date(timestamp, tz) if tz is not None else timestamp.date()  # type: ignore[union-attr]
        index = (day - first_day).days
        cells[(index, category)].append(normalize_duration(record.duration_raw))

    categories = sorted({category for _, category in cells})
    hours = [
        [math.fsum(cells.get((index, category), [])) for category in categories]
        for index in range(day_count)
    ]
    return DailyBreakdown(days=days, categories=categories, hours=hours)


__all__ = ["CategoryExtractor", "aggregate", "daily_breakdown", "total_hours"]
