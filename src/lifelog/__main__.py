"""Lifelog report entry point.

Usage:
    python -m lifelog [OPTIONS] COMMAND

Commands:
    daily            Broadcast today's activity summary on LINE
    weekly           Email the weekly comparison report
    sync-calendar    Copy a day's calendar events into the activity log
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from . import __version__
from .config import LifelogConfig
from .config.loader import load_config
from .errors import ConfigError, LifelogError

if TYPE_CHECKING:
    from .storage.sheets import SheetRecordSource


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="lifelog",
        description="Lifelog reports - category statistics from calendar activity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lifelog daily                        # Today's summary to LINE
  lifelog weekly --dry-run             # Build the weekly report, print it
  lifelog sync-calendar --date 2024-01-15

Environment:
  LIFELOG_CONFIG, LIFELOG_SPREADSHEET_ID, LIFELOG_CALENDAR_ID(2),
  GOOGLE_APPLICATION_CREDENTIALS, ANTHROPIC_API_KEY, LINE_CHANNEL_TOKEN,
  EMAIL_ADDRESS, SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"lifelog v{__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    daily = subparsers.add_parser("daily", help="Broadcast today's summary on LINE")
    daily.add_argument("--dry-run", action="store_true", help="Print instead of sending")

    weekly = subparsers.add_parser("weekly", help="Email the weekly report")
    weekly.add_argument("--dry-run", action="store_true", help="Print instead of sending")

    sync = subparsers.add_parser("sync-calendar", help="Copy calendar events to the log")
    sync.add_argument(
        "--date",
        type=str,
        default=None,
        help="Day to sync (YYYY-MM-DD). Defaults to yesterday.",
    )

    return parser.parse_args(argv)


def _record_source(config: LifelogConfig) -> "SheetRecordSource":
    from .storage.sheets import SheetRecordSource, build_sheets_service

    service = build_sheets_service(config.sheet.credentials_file)
    return SheetRecordSource(
        service,
        config.sheet.spreadsheet_id,
        config.sheet.worksheet,
        tz=config.report.tzinfo,
    )


def run_daily(config: LifelogConfig, dry_run: bool) -> int:
    from .line.messenger import LineMessenger
    from .reports.jobs import run_daily_report

    messenger = None if dry_run else LineMessenger(settings=config.line)
    report = run_daily_report(config, _record_source(config), messenger, dry_run=dry_run)
    if report is None:
        print("No activity recorded today.")
    elif dry_run:
        print(report.message)
    return 0


def run_weekly(config: LifelogConfig, dry_run: bool) -> int:
    from .email.config import EmailConfig
    from .email.sender import SMTPEmailSender
    from .reports.jobs import run_weekly_report
    from .reports.weekly import render_text

    sender = None
    if not dry_run:
        email_config = EmailConfig.from_env()
        sender = SMTPEmailSender(email_config) if email_config else None

    report = run_weekly_report(config, _record_source(config), sender, dry_run=dry_run)
    if dry_run:
        print(report.subject)
        print()
        print(render_text(report))
    return 0


def run_sync(config: LifelogConfig, day: str | None) -> int:
    from .calendar.client import CalendarClient, build_calendar_service
    from .calendar.sync import CalendarSync
    from .reports.jobs import run_calendar_sync

    target_day: date | None = None
    if day:
        try:
            target_day = datetime.strptime(day, "%Y-%m-%d").date()
        except ValueError:
            print(f"Error: Invalid date format '{day}'. Use YYYY-MM-DD.", file=sys.stderr)
            return 1

    tz = config.report.tzinfo
    calendar = CalendarClient(build_calendar_service(config.calendar.credentials_file), tz=tz)
    sync = CalendarSync(
        _record_source(config),
        calendar,
        config.calendar.calendar_ids,
        tz=tz,
        extractor=config.report.category_extractor,
    )
    added = run_calendar_sync(sync, target_day)
    print(f"Added {added} events.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for lifelog reports.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)

    try:
        config = load_config(path=args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.logging.level)
    logger = logging.getLogger("lifelog")
    logger.debug(f"lifelog v{__version__}, command: {args.command}")

    try:
        if args.command == "daily":
            return run_daily(config, args.dry_run)
        if args.command == "weekly":
            return run_weekly(config, args.dry_run)
        return run_sync(config, args.date)
    except LifelogError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
