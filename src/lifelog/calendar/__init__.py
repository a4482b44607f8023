"""Calendar integration: copies calendar events into the activity log."""

from .client import CalendarClient, CalendarEvent, build_calendar_service
from .sync import CalendarSync, event_to_row

__all__ = [
    "CalendarClient",
    "CalendarEvent",
    "CalendarSync",
    "build_calendar_service",
    "event_to_row",
]
