"""Weekly report generation.

Provides this week's category statistics compared with the previous week,
a stacked daily chart and AI commentary, rendered as an HTML email.
"""

import html
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from lifelog.chart.renderer import render_daily_chart
from lifelog.commentary.service import CommentaryService
from lifelog.core.aggregate import CategoryExtractor, aggregate, daily_breakdown
from lifelog.core.category import extract_category
from lifelog.core.compare import compare
from lifelog.core.models import ComparisonRow, DailyBreakdown, TimeWindow
from lifelog.core.window import (
    DEFAULT_TIMEZONE,
    BoundaryDay,
    WeekStart,
    filter_records,
    week_window,
)

from .daily import RecordSource, format_signed

logger = logging.getLogger(__name__)

ChartRenderer = Callable[[DailyBreakdown], bytes | None]

POSITIVE_COLOR = "#4285F4"
NEGATIVE_COLOR = "#EA4335"
NEUTRAL_COLOR = "#333"


@dataclass
class WeeklyReport:
    """Summary of a week's activities."""

    current_window: TimeWindow
    previous_window: TimeWindow
    rows: list[ComparisonRow]
    breakdown: DailyBreakdown
    chart_png: bytes | None
    commentary: str

    @property
    def date_range(self) -> str:
        start = self.current_window.start.strftime("%Y/%m/%d")
        end = self.current_window.end.strftime("%Y/%m/%d")
        return f"{start} - {end}"

    @property
    def subject(self) -> str:
        return f"[週次レポート] {self.date_range} カレンダー集計"


class WeeklyReportGenerator:
    """Generates weekly reports with period comparison.

    The activity log is read once; both weeks are filtered from the same
    snapshot.
    """

    def __init__(
        self,
        source: RecordSource,
        commentary: CommentaryService,
        tz: tzinfo = DEFAULT_TIMEZONE,
        week_start: WeekStart = WeekStart.MONDAY,
        boundary: BoundaryDay = BoundaryDay.STARTS_WEEK,
        with_ratio: bool = True,
        extractor: CategoryExtractor = extract_category,
        chart_renderer: ChartRenderer = render_daily_chart,
    ) -> None:
        self._source = source
        self._commentary = commentary
        self._tz = tz
        self._week_start = week_start
        self._boundary = boundary
        self._with_ratio = with_ratio
        self._extractor = extractor
        self._chart_renderer = chart_renderer

    def _window(self, reference: datetime, offset_weeks: int) -> TimeWindow:
        return week_window(
            reference,
            offset_weeks,
            self._week_start,
            tz=self._tz,
            boundary=self._boundary,
        )

    def generate(self, reference: datetime | None = None) -> WeeklyReport:
        """Generate the report for the week of ``reference``.

        Args:
            reference: Instant within the target week. Defaults to now.

        Returns:
            WeeklyReport with comparison rows, chart and commentary

        Raises:
            MissingSourceError: If the activity log cannot be read
        """
        reference = reference or datetime.now(self._tz)
        records = self._source.read_all_records()

        current_window = self._window(reference, 0)
        previous_window = self._window(reference, -1)

        current = aggregate(filter_records(records, current_window), self._extractor)
        previous = aggregate(filter_records(records, previous_window), self._extractor)
        rows = compare(current, previous, with_ratio=self._with_ratio)
        logger.info(
            f"Weekly comparison: {len(rows)} categories "
            f"({len(current)} this week, {len(previous)} last week)"
        )

        breakdown = daily_breakdown(records, current_window, self._extractor)
        chart_png = self._chart_renderer(breakdown)
        if chart_png is None:
            logger.info("Weekly report has no chart")

        commentary = self._commentary.get_commentary(rows)

        return WeeklyReport(
            current_window=current_window,
            previous_window=previous_window,
            rows=rows,
            breakdown=breakdown,
            chart_png=chart_png,
            commentary=commentary,
        )


def _diff_color(value: float) -> str:
    if value > 0:
        return POSITIVE_COLOR
    if value < 0:
        return NEGATIVE_COLOR
    return NEUTRAL_COLOR


def render_html(report: WeeklyReport) -> str:
    """Render the report as an HTML email body."""
    cell = "border: 1px solid #ddd; padding: 10px;"
    show_ratio = any(row.ratio is not None for row in report.rows)

    table_rows = []
    for row in report.rows:
        ratio_cell = (
            f'<td style="{cell} text-align: center;">{row.ratio:.1f}%</td>'
            if show_ratio and row.ratio is not None
            else ""
        )
        table_rows.append(
            "<tr>"
            f'<td style="{cell} font-weight: bold;">【{html.escape(row.category)}】</td>'
            f'<td style="{cell} text-align: center;">{row.current_count}回</td>'
            f'<td style="{cell} text-align: center;">{row.current_hours:.1f}h</td>'
            f"{ratio_cell}"
            f'<td style="{cell} text-align: center; color: {_diff_color(row.diff_hours)};">'
            f"{format_signed(row.diff_hours)}h</td>"
            "</tr>"
        )

    ratio_header = f'<th style="{cell}">構成比</th>' if show_ratio else ""
    chart_html = ""
    if report.chart_png:
        chart_html = (
            '<div style="margin: 30px 0; text-align: center;">'
            '<img src="cid:chart" style="width: 100%; max-width: 600px; '
            'border: 1px solid #eee; border-radius: 12px;" /></div>'
        )

    return f"""
<div style="font-family: 'Hiragino Kaku Gothic ProN', 'Meiryo', sans-serif; max-width: 650px; margin: 0 auto; padding: 20px; color: #333;">
  <h2 style="color: {POSITIVE_COLOR}; border-left: 6px solid {POSITIVE_COLOR}; padding: 10px 15px; background-color: #f8f9fa;">週次ライフログ・レポート</h2>
  <p style="margin: 20px 0;"><strong>[対象期間]</strong> {report.date_range}</p>
  <h3 style="border-bottom: 2px solid #eee; padding-bottom: 5px;">(集計) カテゴリー別統計</h3>
  <table style="border-collapse: collapse; width: 100%; margin-top: 15px;">
    <thead>
      <tr style="background-color: #f2f2f2;">
        <th style="{cell} text-align: left;">カテゴリー</th>
        <th style="{cell}">回数</th>
        <th style="{cell}">累計時間</th>
        {ratio_header}
        <th style="{cell}">前週比</th>
      </tr>
    </thead>
    <tbody>
      {"".join(table_rows)}
    </tbody>
  </table>
  {chart_html}
  <h3 style="border-bottom: 2px solid #eee; padding-bottom: 5px; margin-top: 40px;">AI Insight</h3>
  <div style="background-color: #f1f3f4; padding: 25px; border-radius: 12px; border-left: 8px solid {POSITIVE_COLOR}; line-height: 1.8; white-space: pre-wrap;">{html.escape(report.commentary)}</div>
  <footer style="margin-top: 50px; padding-top: 20px; border-top: 1px solid #eee; font-size: 0.85em; color: #777; text-align: center;">
    このメールは自動送信されています。
  </footer>
</div>
"""


def render_text(report: WeeklyReport) -> str:
    """Render a plain-text fallback of the report."""
    lines = [f"週次ライフログ・レポート {report.date_range}", ""]
    for row in report.rows:
        ratio = f" ({row.ratio:.1f}%)" if row.ratio is not None else ""
        lines.append(
            f"【{row.category}】 {row.current_count}回 / {row.current_hours:.1f}h{ratio}"
            f" 前週比 {format_signed(row.diff_hours)}h"
        )
    lines.append("")
    lines.append(report.commentary)
    return "\n".join(lines)


__all__ = [
    "ChartRenderer",
    "WeeklyReport",
    "WeeklyReportGenerator",
    "render_html",
    "render_text",
]
