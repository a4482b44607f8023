"""Data models shared by the aggregation engine."""

from dataclasses import dataclass
from datetime import date, datetime

from .duration import DurationRaw, UnknownDuration


@dataclass(frozen=True)
class RawRecord:
    """One row of the activity log.

    Attributes:
        title: Free text, may embed a category marker
        duration_raw: Duration in one of the store's native encodings
        timestamp: Parsed date/time of the record, None when unparseable
    """

    title: str
    duration_raw: DurationRaw = UnknownDuration()
    timestamp: datetime | None = None


@dataclass
class CategoryStat:
    """Count and summed hours for one category within one window."""

    count: int = 0
    hours: float = 0.0


@dataclass(frozen=True)
class TimeWindow:
    """Closed time interval; a record matches iff start <= timestamp <= end."""

    start: datetime
    end: datetime

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp <= self.end


@dataclass(frozen=True)
class ComparisonRow:
    """Current vs baseline statistics for one category."""

    category: str
    current_count: int
    current_hours: float
    previous_count: int
    previous_hours: float
    diff_count: int
    diff_hours: float
    ratio: float | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        data: dict[str, object] = {
            "category": self.category,
            "currentCount": self.current_count,
            "currentHours": round(self.current_hours, 2),
            "previousCount": self.previous_count,
            "previousHours": round(self.previous_hours, 2),
            "diffCount": self.diff_count,
            "diffHours": round(self.diff_hours, 2),
        }
        if self.ratio is not None:
            data["ratio"] = self.ratio
        return data


@dataclass(frozen=True)
class DailyBreakdown:
    """Hours per day and category for a multi-day window.

    ``hours[i][j]`` is the total for ``days[i]`` and ``categories[j]``.
    """

    days: list[date]
    categories: list[str]
    hours: list[list[float]]

    @property
    def is_empty(self) -> bool:
        return not self.categories


__all__ = [
    "CategoryStat",
    "ComparisonRow",
    "DailyBreakdown",
    "RawRecord",
    "TimeWindow",
]
