"""Google Calendar API client.

Handles:
- Service construction from service account credentials
- Listing events of a calendar within a time range
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any

from google.auth import default as default_credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build

from lifelog.core.window import DEFAULT_TIMEZONE
from lifelog.errors import ConfigError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event reduced to what the activity log stores."""

    title: str
    start: datetime
    end: datetime

    @property
    def is_all_day_span(self) -> bool:
        """True when the event lasts exactly 24 hours."""
        return abs((self.end - self.start).total_seconds()) == 24 * 3600


def build_calendar_service(credentials_file: str | None = None) -> Any:
    """Build a Calendar API v3 service.

    Args:
        credentials_file: Service account key file. Application default
            credentials are used when omitted.

    Raises:
        ConfigError: If no usable credentials are found.
    """
    try:
        if credentials_file:
            credentials = service_account.Credentials.from_service_account_file(
                credentials_file, scopes=SCOPES
            )
        else:
            credentials, _ = default_credentials(scopes=SCOPES)
    except (GoogleAuthError, OSError, ValueError) as e:
        raise ConfigError(f"Cannot authenticate to Google Calendar: {e}") from e
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def _parse_event_time(value: dict[str, Any], tz: tzinfo) -> datetime | None:
    if value.get("dateTime"):
        parsed = datetime.fromisoformat(value["dateTime"])
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)
    if value.get("date"):
        day = date.fromisoformat(value["date"])
        return datetime(day.year, day.month, day.day, tzinfo=tz)
    return None


class CalendarClient:
    """Client for reading events from Google Calendar."""

    def __init__(self, service: Any, tz: tzinfo = DEFAULT_TIMEZONE) -> None:
        """Initialize the client.

        Args:
            service: Calendar API service from ``build_calendar_service``.
            tz: Time zone applied to all-day events.
        """
        self._service = service
        self._tz = tz

    def list_events(
        self, calendar_id: str, start: datetime, end: datetime
    ) -> list[CalendarEvent]:
        """List events overlapping ``[start, end)``, recurring events expanded.

        Raises:
            googleapiclient.errors.HttpError: If the calendar cannot be read.
        """
        events: list[CalendarEvent] = []
        page_token: str | None = None

        while True:
            response = (
                self._service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=start.isoformat(),
                    timeMax=end.isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                    pageToken=page_token,
                )
                .execute()
            )

            for item in response.get("items", []):
                if item.get("status") == "cancelled":
                    continue
                event_start = _parse_event_time(item.get("start", {}), self._tz)
                event_end = _parse_event_time(item.get("end", {}), self._tz)
                if event_start is None or event_end is None:
                    continue
                events.append(
                    CalendarEvent(
                        title=item.get("summary", ""),
                        start=event_start,
                        end=event_end,
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Fetched {len(events)} events from calendar {calendar_id}")
        return events


__all__ = ["CalendarClient", "CalendarEvent", "build_calendar_service"]
