"""Unit tests for the daily report."""

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from lifelog.core.duration import FractionalDay, TimeOfDay
from lifelog.core.models import ComparisonRow, RawRecord
from lifelog.errors import MissingSourceError
from lifelog.reports.daily import DailyReportGenerator, format_daily_message

TOKYO = ZoneInfo("Asia/Tokyo")
NOW = datetime(2024, 1, 17, 21, 0, tzinfo=TOKYO)  # Wednesday


class FakeSource:
    """In-memory activity log."""

    def __init__(self, records: list[RawRecord]) -> None:
        self.records = records
        self.reads = 0

    def read_all_records(self) -> list[RawRecord]:
        self.reads += 1
        return self.records


def at(days_ago: int, hour: int) -> datetime:
    return datetime(2024, 1, 17, hour, 0, tzinfo=TOKYO) - timedelta(days=days_ago)


class TestFormatDailyMessage:
    """Tests for format_daily_message."""

    def test_layout(self) -> None:
        rows = [ComparisonRow("仕事", 2, 3.0, 1, 1.0, 1, 2.0)]
        message = format_daily_message(date(2024, 1, 17), rows, 3.0)

        lines = message.split("\n")
        assert lines[0] == "【本日の活動実績】"
        assert lines[1] == "📅 2024/01/17(水)"
        assert "■仕事" in lines
        assert "  2回 / 3.0h (前日比 +2.0h)" in lines
        assert "合計記録時間: 3.0h" in lines
        assert lines[-1] == "今日もお疲れ様でした！"

    def test_negative_diff(self) -> None:
        rows = [ComparisonRow("休憩", 1, 0.5, 1, 2.0, 0, -1.5)]
        assert "(前日比 -1.5h)" in format_daily_message(date(2024, 1, 17), rows, 0.5)


class TestDailyReportGenerator:
    """Tests for DailyReportGenerator."""

    def test_generate(self) -> None:
        source = FakeSource(
            [
                RawRecord("【仕事】会議", TimeOfDay(1, 30), at(0, 10)),
                RawRecord("【仕事】資料", FractionalDay(0.125), at(0, 14)),
                RawRecord("【休憩】昼", TimeOfDay(1), at(0, 12)),
                RawRecord("メモ", TimeOfDay(5), at(0, 9)),
                RawRecord("【仕事】昨日", TimeOfDay(2), at(1, 10)),
                RawRecord("【運動】昨日だけ", TimeOfDay(1), at(1, 18)),
            ]
        )

        report = DailyReportGenerator(source, tz=TOKYO).generate(NOW)

        assert report is not None
        assert source.reads == 1
        assert report.date == date(2024, 1, 17)
        assert report.record_count == 4
        assert report.total_hours == 5.5
        assert [row.category for row in report.rows] == ["仕事", "休憩"]
        assert report.rows[0].diff_hours == 2.5
        assert "■運動" not in report.message
        assert "合計記録時間: 5.5h" in report.message

    def test_nothing_today(self) -> None:
        source = FakeSource([RawRecord("【仕事】昨日", TimeOfDay(2), at(1, 10))])
        assert DailyReportGenerator(source, tz=TOKYO).generate(NOW) is None

    def test_only_uncategorized_today(self) -> None:
        source = FakeSource([RawRecord("メモ", TimeOfDay(1), at(0, 10))])
        report = DailyReportGenerator(source, tz=TOKYO).generate(NOW)
        assert report is not None
        assert report.rows == []
        assert report.total_hours == 0.0

    def test_source_error_propagates(self) -> None:
        source = MagicMock()
        source.read_all_records.side_effect = MissingSourceError("DB sheet not found")
        with pytest.raises(MissingSourceError):
            DailyReportGenerator(source, tz=TOKYO).generate(NOW)
