"""Stacked daily chart rendering.

Draws one column per day with one stacked segment per category and
returns the image as PNG bytes.
"""

import io
import logging
from collections.abc import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import matplotlib_fontja  # noqa: E402, F401  registers IPAexGothic
from matplotlib import font_manager  # noqa: E402

from lifelog.config import DEFAULT_FONT_FAMILIES  # noqa: E402
from lifelog.core.models import DailyBreakdown  # noqa: E402

logger = logging.getLogger(__name__)

CHART_TITLE = "Daily hours by category (h)"
FIGURE_SIZE = (6.0, 4.0)
DPI = 100
FALLBACK_FONT = "DejaVu Sans"


def resolve_font_families(families: Sequence[str]) -> list[str]:
    """Keep the installed font families, in order.

    Category names are usually Japanese, so the list should lead with a
    CJK font. Falls back to matplotlib's bundled font when none is found.
    """
    installed = {entry.name for entry in font_manager.fontManager.ttflist}
    resolved = [family for family in families if family in installed]
    if not resolved:
        logger.warning(f"None of the chart fonts {list(families)} are installed")
        return [FALLBACK_FONT]
    return resolved


def render_daily_chart(
    breakdown: DailyBreakdown,
    font_families: Sequence[str] = DEFAULT_FONT_FAMILIES,
) -> bytes | None:
    """Render a stacked column chart of hours per day and category.

    Args:
        breakdown: Day x category hours matrix.
        font_families: Preferred fonts; the first installed one that has a
            glyph is used for each character.

    Returns:
        PNG image bytes, or None when there is nothing to draw or the
        rendering fails.
    """
    if breakdown.is_empty:
        logger.info("No categorized records in window; chart skipped")
        return None

    fig = None
    try:
        with plt.rc_context({"font.family": resolve_font_families(font_families)}):
            fig, ax = plt.subplots(figsize=FIGURE_SIZE)
            x_vals = list(range(len(breakdown.days)))
            bottom = [0.0] * len(breakdown.days)

            for index, category in enumerate(breakdown.categories):
                vals = [row[index] for row in breakdown.hours]
                ax.bar(x_vals, vals, bottom=bottom, label=category)
                bottom = [b + v for b, v in zip(bottom, vals, strict=True)]

            ax.set_xticks(x_vals)
            ax.set_xticklabels([day.strftime("%m/%d") for day in breakdown.days], fontsize=9)
            ax.set_xlabel("Date")
            ax.set_ylabel("Hours (h)")
            ax.set_title(CHART_TITLE)
            ax.legend(
                ncol=min(len(breakdown.categories), 4),
                fontsize=8,
                loc="upper center",
                bbox_to_anchor=(0.5, -0.15),
            )
            ax.grid(axis="y", linestyle=":", alpha=0.4)
            fig.tight_layout()

            buffer = io.BytesIO()
            fig.savefig(buffer, format="png", dpi=DPI)
            return buffer.getvalue()

    except Exception as e:
        logger.error(f"Chart rendering failed: {e}")
        return None

    finally:
        if fig is not None:
            plt.close(fig)


__all__ = ["render_daily_chart", "resolve_font_families"]
