"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Environment overrides for deployment-specific values
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from lifelog.errors import ConfigError

from . import (
    CalendarConfig,
    ChartConfig,
    CommentaryConfig,
    LifelogConfig,
    LineConfig,
    LoggingConfig,
    ReportConfig,
    SheetConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> LifelogConfig:
    """Convert raw dict to typed LifelogConfig dataclass."""
    lifelog_data = data.get("lifelog", {}) or {}

    def safe_get(key: str) -> dict[str, Any]:
        value = lifelog_data.get(key, {})
        return value if value is not None else {}

    try:
        return LifelogConfig(
            sheet=SheetConfig(**safe_get("sheet")),
            calendar=CalendarConfig(**safe_get("calendar")),
            report=ReportConfig(**safe_get("report")),
            commentary=CommentaryConfig(**safe_get("commentary")),
            line=LineConfig(**safe_get("line")),
            chart=ChartConfig(**safe_get("chart")),
            logging=LoggingConfig(**safe_get("logging")),
        )
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def apply_env_overrides(config: LifelogConfig) -> LifelogConfig:
    """Apply environment variables on top of file configuration.

    Recognized variables:
    - LIFELOG_SPREADSHEET_ID: Activity log spreadsheet
    - LIFELOG_CALENDAR_ID, LIFELOG_CALENDAR_ID2: Calendars to sync
    - GOOGLE_APPLICATION_CREDENTIALS: Service account key file
    - LIFELOG_LOG_LEVEL: Logging level
    """
    spreadsheet_id = os.environ.get("LIFELOG_SPREADSHEET_ID", "").strip()
    if spreadsheet_id:
        config.sheet.spreadsheet_id = spreadsheet_id

    calendar_ids = [
        value
        for value in (
            os.environ.get("LIFELOG_CALENDAR_ID", "").strip(),
            os.environ.get("LIFELOG_CALENDAR_ID2", "").strip(),
        )
        if value
    ]
    if calendar_ids:
        config.calendar.calendar_ids = calendar_ids

    credentials = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "").strip()
    if credentials:
        config.sheet.credentials_file = config.sheet.credentials_file or credentials
        config.calendar.credentials_file = config.calendar.credentials_file or credentials

    level = os.environ.get("LIFELOG_LOG_LEVEL", "").strip()
    if level:
        config.logging.level = level

    return config


def load_config(path: str | Path | None = None) -> LifelogConfig:
    """Load lifelog configuration.

    Args:
        path: Path to a YAML config file. Defaults to LIFELOG_CONFIG or
            config/default.yaml; built-in defaults are used when neither
            exists.

    Returns:
        Parsed LifelogConfig with environment overrides applied
    """
    if path is not None:
        raw_config = load_yaml_with_inheritance(Path(path))
    else:
        env_path = os.environ.get("LIFELOG_CONFIG", "").strip()
        candidate = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        if candidate.exists():
            raw_config = load_yaml_with_inheritance(candidate)
        else:
            logger.debug(f"No config file at {candidate}, using defaults")
            raw_config = {}

    return apply_env_overrides(dict_to_config(raw_config))


__all__ = [
    "apply_env_overrides",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
