"""Unit tests for the calendar client and calendar-to-log sync."""

from datetime import date, datetime, timedelta
from functools import partial
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import httplib2
import pytest
from googleapiclient.errors import HttpError

from lifelog.calendar.client import CalendarClient, CalendarEvent
from lifelog.calendar.sync import CalendarSync, event_to_row, format_elapsed
from lifelog.core.category import extract_category

TOKYO = ZoneInfo("Asia/Tokyo")
DAY = date(2024, 1, 15)


def event(title: str, hour: int, minutes: int = 60) -> CalendarEvent:
    start = datetime(2024, 1, 15, hour, 0, tzinfo=TOKYO)
    return CalendarEvent(title=title, start=start, end=start + timedelta(minutes=minutes))


class TestFormatElapsed:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0:00:00"), (5400, "1:30:00"), (90061, "25:01:01")],
    )
    def test_format(self, seconds: float, expected: str) -> None:
        assert format_elapsed(seconds) == expected


class TestEventToRow:
    """Tests for event_to_row."""

    def test_timed_event(self) -> None:
        row = event_to_row(event("【Work】standup", 9, 90), TOKYO)
        assert row == [
            "【Work】standup",
            "2024/01/15 09:00:00",
            "2024/01/15 10:30:00",
            "1:30:00",
            "Work",
            "2024/01/15",
        ]

    def test_all_day_event_has_blank_duration(self) -> None:
        start = datetime(2024, 1, 15, tzinfo=TOKYO)
        row = event_to_row(CalendarEvent("【Trip】Kyoto", start, start + timedelta(days=1)), TOKYO)
        assert row[3] == ""
        assert row[4] == "Trip"

    def test_uncategorized_event(self) -> None:
        assert event_to_row(event("dentist", 14), TOKYO)[4] == ""

    def test_custom_extractor(self) -> None:
        extractor = partial(extract_category, open_marker="[", close_marker="]")
        assert event_to_row(event("[Gym] legs", 7), TOKYO, extractor)[4] == "Gym"


class TestCalendarClient:
    """Tests for CalendarClient.list_events."""

    def test_paginates_and_skips_cancelled(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.side_effect = [
            {
                "items": [
                    {
                        "summary": "【Work】a",
                        "start": {"dateTime": "2024-01-15T09:00:00+09:00"},
                        "end": {"dateTime": "2024-01-15T10:00:00+09:00"},
                    },
                    {"status": "cancelled", "summary": "gone"},
                ],
                "nextPageToken": "page-2",
            },
            {
                "items": [
                    {
                        "summary": "【Trip】b",
                        "start": {"date": "2024-01-15"},
                        "end": {"date": "2024-01-16"},
                    }
                ]
            },
        ]
        client = CalendarClient(service, tz=TOKYO)
        start = datetime(2024, 1, 15, tzinfo=TOKYO)

        events = client.list_events("primary", start, start + timedelta(days=1))

        assert [e.title for e in events] == ["【Work】a", "【Trip】b"]
        assert events[1].is_all_day_span
        calls = service.events.return_value.list.call_args_list
        assert calls[0].kwargs["singleEvents"] is True
        assert calls[1].kwargs["pageToken"] == "page-2"

    def test_missing_summary(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.return_value = {
            "items": [
                {
                    "start": {"dateTime": "2024-01-15T09:00:00+09:00"},
                    "end": {"dateTime": "2024-01-15T09:30:00+09:00"},
                }
            ]
        }
        start = datetime(2024, 1, 15, tzinfo=TOKYO)
        events = CalendarClient(service, tz=TOKYO).list_events("primary", start, start)
        assert events[0].title == ""


class TestCalendarSync:
    """Tests for CalendarSync."""

    @pytest.fixture
    def source(self) -> MagicMock:
        source = MagicMock()
        source.read_rows.return_value = [["title", "start"]]
        source.append_rows.side_effect = lambda rows: len(rows)
        return source

    def test_appends_events_from_all_calendars(self, source: MagicMock) -> None:
        calendar = MagicMock()
        calendar.list_events.side_effect = [[event("【Work】a", 9)], [event("【Rest】b", 12)]]
        sync = CalendarSync(source, calendar, ["primary", "family"], tz=TOKYO)

        assert sync.sync_day(DAY) == 2

        rows = source.append_rows.call_args.args[0]
        assert [row[0] for row in rows] == ["【Work】a", "【Rest】b"]
        first_call = calendar.list_events.call_args_list[0]
        assert first_call.args[1] == datetime(2024, 1, 15, tzinfo=TOKYO)
        assert first_call.args[2] == datetime(2024, 1, 16, tzinfo=TOKYO)

    def test_skips_events_already_logged(self, source: MagicMock) -> None:
        # 45306.375 is 2024-01-15 09:00 as a spreadsheet serial
        source.read_rows.return_value = [
            ["title", "start"],
            ["【Work】a", 45306.375, 45306.4166, "1:00:00", "Work", 45306],
        ]
        calendar = MagicMock()
        calendar.list_events.return_value = [event("【Work】a", 9), event("【Work】b", 10)]
        sync = CalendarSync(source, calendar, ["primary"], tz=TOKYO)

        assert sync.sync_day(DAY) == 1
        rows = source.append_rows.call_args.args[0]
        assert [row[0] for row in rows] == ["【Work】b"]

    def test_duplicates_across_calendars_added_once(self, source: MagicMock) -> None:
        calendar = MagicMock()
        calendar.list_events.return_value = [event("【Work】shared", 9)]
        sync = CalendarSync(source, calendar, ["primary", "shared"], tz=TOKYO)

        assert sync.sync_day(DAY) == 1

    def test_unreadable_calendar_skipped(self, source: MagicMock) -> None:
        calendar = MagicMock()
        calendar.list_events.side_effect = [
            HttpError(httplib2.Response({"status": 404}), b"not found"),
            [event("【Rest】b", 12)],
        ]
        sync = CalendarSync(source, calendar, ["missing", "family"], tz=TOKYO)

        assert sync.sync_day(DAY) == 1

    def test_no_calendars_configured(self, source: MagicMock) -> None:
        calendar = MagicMock()
        sync = CalendarSync(source, calendar, ["", ""], tz=TOKYO)

        assert sync.sync_day(DAY) == 0
        calendar.list_events.assert_not_called()
        source.append_rows.assert_not_called()

    def test_defaults_to_yesterday(self, source: MagicMock) -> None:
        calendar = MagicMock()
        calendar.list_events.return_value = []
        sync = CalendarSync(source, calendar, ["primary"], tz=TOKYO)

        sync.sync_day()

        start = calendar.list_events.call_args.args[1]
        assert start.date() == datetime.now(TOKYO).date() - timedelta(days=1)
