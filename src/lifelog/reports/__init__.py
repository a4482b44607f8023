"""Report module for lifelog.

Provides daily (chat) and weekly (email) activity reports.
"""

from .daily import DailyReport, DailyReportGenerator, format_daily_message
from .jobs import run_calendar_sync, run_daily_report, run_weekly_report
from .weekly import WeeklyReport, WeeklyReportGenerator, render_html, render_text

__all__ = [
    "DailyReport",
    "DailyReportGenerator",
    "WeeklyReport",
    "WeeklyReportGenerator",
    "format_daily_message",
    "render_html",
    "render_text",
    "run_calendar_sync",
    "run_daily_report",
    "run_weekly_report",
]
