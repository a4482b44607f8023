"""Chart rendering for weekly reports."""

from .renderer import render_daily_chart

__all__ = ["render_daily_chart"]
