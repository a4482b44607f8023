"""Current vs baseline period comparison."""

import math
from collections.abc import Mapping

from .models import CategoryStat, ComparisonRow

_EMPTY = CategoryStat()


def composition_ratio(hours: float, total: float) -> float:
    """Share of ``total`` as a percentage rounded to one decimal, 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(hours / total * 100, 1)


def compare(
    current: Mapping[str, CategoryStat],
    baseline: Mapping[str, CategoryStat],
    *,
    with_ratio: bool = True,
) -> list[ComparisonRow]:
    """Merge two aggregation results into comparison rows.

    Categories missing on one side count as zero activity there. Rows are
    sorted by current hours descending, ties by category name.

    Args:
        current: Statistics for the current period.
        baseline: Statistics for the baseline period.
        with_ratio: Whether to fill in each row's composition ratio.

    Returns:
        One ComparisonRow per category found in either input.
    """
    total = math.fsum(stat.hours for stat in current.values())
    rows: list[ComparisonRow] = []

    for category in set(current) | set(baseline):
        cur = current.get(category, _EMPTY)
        pre = baseline.get(category, _EMPTY)
        rows.append(
            ComparisonRow(
                category=category,
                current_count=cur.count,
                current_hours=cur.hours,
                previous_count=pre.count,
                previous_hours=pre.hours,
                diff_count=cur.count - pre.count,
                diff_hours=cur.hours - pre.hours,
                ratio=composition_ratio(cur.hours, total) if with_ratio else None,
            )
        )

    rows.sort(key=lambda row: (-row.current_hours, row.category))
    return rows


__all__ = ["compare", "composition_ratio"]
