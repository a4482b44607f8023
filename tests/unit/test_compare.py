"""Unit tests for period comparison."""

import math
from datetime import datetime
from zoneinfo import ZoneInfo

from lifelog.core.aggregate import aggregate
from lifelog.core.compare import compare, composition_ratio
from lifelog.core.duration import FractionalDay
from lifelog.core.models import CategoryStat, ComparisonRow, RawRecord

TOKYO = ZoneInfo("Asia/Tokyo")


class TestCompare:
    """Tests for compare."""

    def test_empty_periods(self) -> None:
        assert compare({}, {}) == []

    def test_single_category_two_windows(self) -> None:
        timestamp = datetime(2024, 1, 17, 10, 0, tzinfo=TOKYO)
        current = aggregate([RawRecord("【Work】task", FractionalDay(0.125), timestamp)])
        baseline = aggregate([RawRecord("【Work】old", FractionalDay(0.25), timestamp)])

        rows = compare(current, baseline)

        assert len(rows) == 1
        row = rows[0]
        assert row.category == "Work"
        assert row.current_count == 1
        assert row.current_hours == 3.0
        assert row.previous_count == 1
        assert row.previous_hours == 6.0
        assert row.diff_count == 0
        assert row.diff_hours == -3.0
        assert row.ratio == 100.0

    def test_category_only_in_baseline(self) -> None:
        rows = compare({}, {"Rest": CategoryStat(count=1, hours=2.0)})
        assert rows == [
            ComparisonRow(
                category="Rest",
                current_count=0,
                current_hours=0.0,
                previous_count=1,
                previous_hours=2.0,
                diff_count=-1,
                diff_hours=-2.0,
                ratio=0.0,
            )
        ]

    def test_category_only_in_current(self) -> None:
        rows = compare({"Study": CategoryStat(2, 1.5)}, {})
        assert rows[0].previous_count == 0
        assert rows[0].diff_hours == 1.5

    def test_sorted_by_current_hours_descending(self) -> None:
        current = {
            "A": CategoryStat(1, 1.0),
            "B": CategoryStat(1, 5.0),
            "C": CategoryStat(1, 3.0),
        }
        assert [row.category for row in compare(current, {})] == ["B", "C", "A"]

    def test_ties_broken_by_name(self) -> None:
        current = {"b": CategoryStat(1, 2.0), "a": CategoryStat(1, 2.0)}
        baseline = {"c": CategoryStat(1, 9.0)}
        assert [row.category for row in compare(current, baseline)] == ["a", "b", "c"]

    def test_union_of_categories(self) -> None:
        rows = compare({"A": CategoryStat(1, 1.0)}, {"B": CategoryStat(1, 1.0)})
        assert {row.category for row in rows} == {"A", "B"}

    def test_ratios(self) -> None:
        current = {"A": CategoryStat(1, 1.0), "B": CategoryStat(1, 2.0)}
        ratios = {row.category: row.ratio for row in compare(current, {})}
        assert ratios == {"A": 33.3, "B": 66.7}

    def test_without_ratio(self) -> None:
        rows = compare({"A": CategoryStat(1, 1.0)}, {}, with_ratio=False)
        assert rows[0].ratio is None

    def test_invalid_durations_do_not_break_ordering(self) -> None:
        timestamp = datetime(2024, 1, 17, 10, 0, tzinfo=TOKYO)
        records = [
            RawRecord("【A】a", FractionalDay(0.1), timestamp),
            RawRecord("【B】b", FractionalDay(math.nan), timestamp),
            RawRecord("【C】c", FractionalDay(0.5), timestamp),
            RawRecord("【D】d", FractionalDay(-0.5), timestamp),
        ]

        rows = compare(aggregate(records), {})

        assert [row.category for row in rows] == ["C", "A", "B", "D"]
        assert [row.current_count for row in rows] == [1, 1, 1, 1]
        assert [row.ratio for row in rows] == [83.3, 16.7, 0.0, 0.0]

    def test_inputs_not_modified(self) -> None:
        current = {"A": CategoryStat(1, 1.0)}
        compare(current, {"B": CategoryStat(1, 1.0)})
        assert current == {"A": CategoryStat(1, 1.0)}


class TestCompositionRatio:
    def test_zero_total(self) -> None:
        assert composition_ratio(0.0, 0.0) == 0.0

    def test_rounded_to_one_decimal(self) -> None:
        assert composition_ratio(1.0, 3.0) == 33.3


class TestComparisonRowToDict:
    def test_camel_case_keys(self) -> None:
        row = ComparisonRow("Work", 2, 3.456, 1, 1.0, 1, 2.456, ratio=50.0)
        assert row.to_dict() == {
            "category": "Work",
            "currentCount": 2,
            "currentHours": 3.46,
            "previousCount": 1,
            "previousHours": 1.0,
            "diffCount": 1,
            "diffHours": 2.46,
            "ratio": 50.0,
        }

    def test_ratio_omitted_when_absent(self) -> None:
        row = ComparisonRow("Work", 1, 1.0, 0, 0.0, 1, 1.0)
        assert "ratio" not in row.to_dict()
