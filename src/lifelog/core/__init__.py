"""Category aggregation and period comparison engine.

Pure functions over in-memory records:
- Duration normalization
- Category extraction from titles
- Day/week window calculation and filtering
- Per-category aggregation and current-vs-baseline comparison
"""

from .aggregate import aggregate, daily_breakdown, total_hours
from .category import extract_category
from .compare import compare, composition_ratio
from .duration import (
    DurationRaw,
    FractionalDay,
    TimeOfDay,
    UnknownDuration,
    classify_duration,
    normalize_duration,
)
from .models import CategoryStat, ComparisonRow, DailyBreakdown, RawRecord, TimeWindow
from .window import (
    DEFAULT_TIMEZONE,
    BoundaryDay,
    WeekStart,
    day_window,
    filter_records,
    week_window,
)

__all__ = [
    "DEFAULT_TIMEZONE",
    "BoundaryDay",
    "CategoryStat",
    "ComparisonRow",
    "DailyBreakdown",
    "DurationRaw",
    "FractionalDay",
    "RawRecord",
    "TimeOfDay",
    "TimeWindow",
    "UnknownDuration",
    "WeekStart",
    "aggregate",
    "classify_duration",
    "compare",
    "composition_ratio",
    "daily_breakdown",
    "day_window",
    "extract_category",
    "filter_records",
    "normalize_duration",
    "total_hours",
    "week_window",
]
