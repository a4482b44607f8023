"""Configuration module for lifelog reports.

This module provides the typed configuration passed to the report jobs.
Secrets are not stored here; each client reads its own credential from
the environment.
"""

from dataclasses import dataclass, field
from functools import partial
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lifelog.core.aggregate import CategoryExtractor
from lifelog.core.category import extract_category
from lifelog.core.window import BoundaryDay, WeekStart
from lifelog.errors import ConfigError

DEFAULT_FONT_FAMILIES = ("IPAexGothic", "Noto Sans CJK JP", "Hiragino Sans", "DejaVu Sans")


@dataclass
class SheetConfig:
    """Activity log spreadsheet location."""

    spreadsheet_id: str = ""
    worksheet: str = "DB"
    credentials_file: str | None = None


@dataclass
class CalendarConfig:
    """Calendars copied into the activity log."""

    calendar_ids: list[str] = field(default_factory=list)
    credentials_file: str | None = None


@dataclass
class ReportConfig:
    """Aggregation settings shared by the daily and weekly jobs."""

    timezone: str = "Asia/Tokyo"
    open_marker: str = "【"
    close_marker: str = "】"
    week_start: str = "monday"
    boundary: str = "starts_week"
    with_ratio: bool = True

    @property
    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone}") from e

    @property
    def week_start_day(self) -> WeekStart:
        try:
            return WeekStart[self.week_start.upper()]
        except KeyError as e:
            raise ConfigError(
                f"Invalid week_start '{self.week_start}' (expected monday or sunday)"
            ) from e

    @property
    def category_extractor(self) -> CategoryExtractor:
        if not (self.open_marker and self.close_marker):
            raise ConfigError("Category markers open_marker and close_marker must not be empty")
        return partial(
            extract_category,
            open_marker=self.open_marker,
            close_marker=self.close_marker,
        )

    @property
    def boundary_day(self) -> BoundaryDay:
        try:
            return BoundaryDay(self.boundary.lower())
        except ValueError as e:
            raise ConfigError(
                f"Invalid boundary '{self.boundary}' (expected starts_week or ends_week)"
            ) from e


@dataclass
class CommentaryConfig:
    """Language model commentary configuration."""

    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    max_retries: int = 2
    retry_delay: float = 0.5


@dataclass
class LineConfig:
    """LINE Messaging API configuration."""

    endpoint: str = "https://api.line.me/v2/bot/message/broadcast"
    timeout_seconds: float = 10.0


@dataclass
class ChartConfig:
    """Weekly chart appearance."""

    font_families: list[str] = field(default_factory=lambda: list(DEFAULT_FONT_FAMILIES))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class LifelogConfig:
    """Main lifelog configuration."""

    sheet: SheetConfig = field(default_factory=SheetConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    commentary: CommentaryConfig = field(default_factory=CommentaryConfig)
    line: LineConfig = field(default_factory=LineConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Public API
__all__ = [
    "DEFAULT_FONT_FAMILIES",
    "CalendarConfig",
    "ChartConfig",
    "CommentaryConfig",
    "LifelogConfig",
    "LineConfig",
    "LoggingConfig",
    "ReportConfig",
    "SheetConfig",
]
