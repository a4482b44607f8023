"""Daily report generation.

Provides today's activity breakdown by category, compared with yesterday,
formatted as a chat message.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Protocol

from lifelog.core.aggregate import CategoryExtractor, aggregate, total_hours
from lifelog.core.category import extract_category
from lifelog.core.compare import compare
from lifelog.core.models import ComparisonRow, RawRecord
from lifelog.core.window import DEFAULT_TIMEZONE, day_window, filter_records

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ("月", "火", "水", "木", "金", "土", "日")


class RecordSource(Protocol):
    """Protocol for reading the activity log."""

    def read_all_records(self) -> list[RawRecord]:
        """Read a snapshot of every record."""
        ...


@dataclass
class DailyReport:
    """Summary of a single day's activities."""

    date: date
    rows: list[ComparisonRow]  # categories recorded today, by hours
    total_hours: float
    record_count: int
    message: str


def format_signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.1f}"


def format_daily_message(day: date, rows: list[ComparisonRow], total: float) -> str:
    """Format the chat message for a day's statistics."""
    lines = [
        "【本日の活動実績】",
        f"📅 {day.strftime('%Y/%m/%d')}({WEEKDAY_LABELS[day.weekday()]})",
        "",
    ]
    for row in rows:
        lines.append(f"■{row.category}")
        lines.append(
            f"  {row.current_count}回 / {row.current_hours:.1f}h"
            f" (前日比 {format_signed(row.diff_hours)}h)"
        )
    lines.append("")
    lines.append(f"合計記録時間: {total:.1f}h")
    lines.append("今日もお疲れ様でした！")
    return "\n".join(lines)


class DailyReportGenerator:
    """Generates the daily activity report.

    Reads the activity log once and compares today's window with
    yesterday's.
    """

    def __init__(
        self,
        source: RecordSource,
        tz: tzinfo = DEFAULT_TIMEZONE,
        extractor: CategoryExtractor = extract_category,
    ) -> None:
        """Initialize report generator.

        Args:
            source: Activity log
            tz: Reference time zone for day boundaries
            extractor: Category extractor
        """
        self._source = source
        self._tz = tz
        self._extractor = extractor

    def generate(self, reference: datetime | None = None) -> DailyReport | None:
        """Generate the report for the day of ``reference``.

        Args:
            reference: Instant within the target day. Defaults to now.

        Returns:
            DailyReport, or None when nothing has been recorded for the day

        Raises:
            MissingSourceError: If the activity log cannot be read
        """
        reference = reference or datetime.now(self._tz)
        records = self._source.read_all_records()

        today_window = day_window(reference, 0, tz=self._tz)
        yesterday_window = day_window(reference, -1, tz=self._tz)

        today_records = filter_records(records, today_window)
        if not today_records:
            logger.info("No records for today yet; daily report skipped")
            return None

        current = aggregate(today_records, self._extractor)
        baseline = aggregate(filter_records(records, yesterday_window), self._extractor)

        rows = [
            row
            for row in compare(current, baseline, with_ratio=False)
            if row.current_count > 0
        ]
        total = total_hours(current)
        day = today_window.start.date()

        return DailyReport(
            date=day,
            rows=rows,
            total_hours=total,
            record_count=len(today_records),
            message=format_daily_message(day, rows, total),
        )


__all__ = [
    "DailyReport",
    "DailyReportGenerator",
    "RecordSource",
    "format_daily_message",
]
