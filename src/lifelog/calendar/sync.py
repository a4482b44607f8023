"""Copy a day's calendar events into the activity log.

Events already present in the log (same title and start time) are left
alone, so the sync can run repeatedly for the same day.
"""

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

from googleapiclient.errors import HttpError

from lifelog.core.aggregate import CategoryExtractor
from lifelog.core.category import extract_category
from lifelog.core.window import DEFAULT_TIMEZONE, local_date
from lifelog.storage.sheets import START_COLUMN, TITLE_COLUMN, SheetRecordSource, parse_timestamp

from .client import CalendarClient, CalendarEvent

logger = logging.getLogger(__name__)

EventKey = tuple[str, datetime]


def format_elapsed(seconds: float) -> str:
    """Format seconds as ``H:MM:SS`` with unbounded hours."""
    total = int(round(abs(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def event_to_row(
    event: CalendarEvent,
    tz: tzinfo = DEFAULT_TIMEZONE,
    extractor: CategoryExtractor = extract_category,
) -> list[Any]:
    """Build an activity log row for an event.

    The duration is left blank for events spanning exactly 24 hours
    (all-day entries), and the category is blank when the title has none.
    """
    start = event.start.astimezone(tz)
    end = event.end.astimezone(tz)
    duration = "" if event.is_all_day_span else format_elapsed((end - start).total_seconds())
    return [
        event.title,
        start.strftime("%Y/%m/%d %H:%M:%S"),
        end.strftime("%Y/%m/%d %H:%M:%S"),
        duration,
        extractor(event.title) or "",
        start.strftime("%Y/%m/%d"),
    ]


class CalendarSync:
    """Appends calendar events for a day to the activity log."""

    def __init__(
        self,
        source: SheetRecordSource,
        calendar: CalendarClient,
        calendar_ids: list[str],
        tz: tzinfo = DEFAULT_TIMEZONE,
        extractor: CategoryExtractor = extract_category,
    ) -> None:
        """Initialize the sync.

        Args:
            source: Activity log to append to.
            calendar: Calendar client.
            calendar_ids: Calendars to copy from.
            tz: Reference time zone for day boundaries.
            extractor: Category extractor for the category column.
        """
        self._source = source
        self._calendar = calendar
        self._calendar_ids = [cid for cid in calendar_ids if cid]
        self._tz = tz
        self._extractor = extractor

    def fetch_events(self, target_day: date) -> list[CalendarEvent]:
        """Fetch the day's events from every configured calendar.

        A calendar that cannot be read is skipped with a warning.
        """
        start = datetime.combine(target_day, time.min, tzinfo=self._tz)
        end = start + timedelta(days=1)

        events: list[CalendarEvent] = []
        for calendar_id in self._calendar_ids:
            try:
                events.extend(self._calendar.list_events(calendar_id, start, end))
            except HttpError as e:
                logger.warning(f"Skipping calendar {calendar_id}: {e}")
        return events

    def existing_keys(self, target_day: date) -> set[EventKey]:
        """Title/start pairs already logged for ``target_day``."""
        keys: set[EventKey] = set()
        for row in self._source.read_rows()[1:]:
            if len(row) <= START_COLUMN:
                continue
            started = parse_timestamp(row[START_COLUMN], self._tz)
            if started is not None and local_date(started, self._tz) == target_day:
                keys.add((str(row[TITLE_COLUMN]), started))
        return keys

    def sync_day(self, target_day: date | None = None) -> int:
        """Append the events of ``target_day`` missing from the log.

        Args:
            target_day: Day to sync. Defaults to yesterday.

        Returns:
            Number of rows appended.
        """
        if target_day is None:
            target_day = datetime.now(self._tz).date() - timedelta(days=1)

        if not self._calendar_ids:
            logger.warning("No calendar IDs configured; calendar sync skipped")
            return 0

        events = self.fetch_events(target_day)
        seen = self.existing_keys(target_day)

        rows: list[list[Any]] = []
        for event in events:
            key = (event.title, event.start)
            if key in seen:
                continue
            seen.add(key)
            rows.append(event_to_row(event, self._tz, self._extractor))

        logger.info(
            f"Calendar sync for {target_day}: {len(events)} events, {len(rows)} new"
        )
        return self._source.append_rows(rows)


__all__ = ["CalendarSync", "event_to_row", "format_elapsed"]
