"""Lifelog reports - category statistics from calendar activity.

Lifelog turns a calendar-fed activity log into:
- A daily category summary broadcast on LINE
- A weekly email comparing this week with the last, with a chart and
  AI commentary

Usage:
    python -m lifelog daily
    python -m lifelog weekly --config config/default.yaml
"""

__version__ = "0.1.0"

from .config import LifelogConfig
from .config.loader import load_config

__all__ = [
    "LifelogConfig",
    "__version__",
    "load_config",
]
