"""Scheduled report jobs.

Each job is one linear run: read the activity log, build the report,
deliver it. Source and delivery failures are logged with the job name
and re-raised; everything else degrades to a partial report.
"""

import logging
from datetime import date, datetime
from functools import partial

from lifelog.calendar.sync import CalendarSync
from lifelog.chart.renderer import render_daily_chart
from lifelog.commentary.service import CommentaryService
from lifelog.config import LifelogConfig
from lifelog.email.sender import SMTPEmailSender
from lifelog.errors import DeliveryError, MissingSourceError
from lifelog.line.messenger import LineMessenger

from .daily import DailyReport, DailyReportGenerator, RecordSource
from .weekly import WeeklyReport, WeeklyReportGenerator, render_html, render_text

logger = logging.getLogger(__name__)


def run_daily_report(
    config: LifelogConfig,
    source: RecordSource,
    messenger: LineMessenger | None,
    reference: datetime | None = None,
    dry_run: bool = False,
) -> DailyReport | None:
    """Build today's report and broadcast it on LINE.

    Args:
        config: Lifelog configuration.
        source: Activity log.
        messenger: LINE messenger, None to skip delivery.
        reference: Instant within the target day. Defaults to now.
        dry_run: Build the report without sending it.

    Returns:
        The report, or None when nothing was recorded for the day.
    """
    generator = DailyReportGenerator(
        source,
        tz=config.report.tzinfo,
        extractor=config.report.category_extractor,
    )

    try:
        report = generator.generate(reference)
    except MissingSourceError as e:
        logger.error(f"Daily report failed to read activity log: {e}")
        raise

    if report is None or dry_run:
        return report

    if messenger is None:
        logger.warning("Daily report built but no LINE messenger configured")
        return report

    try:
        messenger.broadcast(report.message)
    except DeliveryError as e:
        logger.error(f"Daily report delivery failed: {e}")
        raise

    return report


def run_weekly_report(
    config: LifelogConfig,
    source: RecordSource,
    sender: SMTPEmailSender | None,
    commentary: CommentaryService | None = None,
    reference: datetime | None = None,
    dry_run: bool = False,
) -> WeeklyReport:
    """Build the weekly report and email it.

    Args:
        config: Lifelog configuration.
        source: Activity log.
        sender: Email sender, None to skip delivery.
        commentary: Commentary service. Built from config when omitted.
        reference: Instant within the target week. Defaults to now.
        dry_run: Build the report without sending it.
    """
    settings = config.report
    generator = WeeklyReportGenerator(
        source,
        commentary or CommentaryService.from_config(config.commentary),
        tz=settings.tzinfo,
        week_start=settings.week_start_day,
        boundary=settings.boundary_day,
        with_ratio=settings.with_ratio,
        extractor=settings.category_extractor,
        chart_renderer=partial(render_daily_chart, font_families=config.chart.font_families),
    )

    try:
        report = generator.generate(reference)
    except MissingSourceError as e:
        logger.error(f"Weekly report failed to read activity log: {e}")
        raise

    if dry_run:
        return report

    if sender is None:
        logger.warning("Weekly report built but email is not configured")
        return report

    try:
        sender.send_report(
            report.subject,
            render_html(report),
            render_text(report),
            report.chart_png,
        )
    except DeliveryError as e:
        logger.error(f"Weekly report delivery failed: {e}")
        raise

    return report


def run_calendar_sync(sync: CalendarSync, target_day: date | None = None) -> int:
    """Copy a day's calendar events into the activity log."""
    try:
        return sync.sync_day(target_day)
    except MissingSourceError as e:
        logger.error(f"Calendar sync failed to access activity log: {e}")
        raise


__all__ = ["run_calendar_sync", "run_daily_report", "run_weekly_report"]
