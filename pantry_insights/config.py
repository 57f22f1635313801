"""Key-value settings storage backed by the SQLite settings table.

Analytics thresholds and limits live here.  Defaults come from
AnalyticsConfig; any value stored in the settings table under the same key
overrides the default.

Known keys: every field of AnalyticsConfig (e.g. low_stock_threshold,
recommendation_threshold, dashboard_timeout_seconds).
"""

import logging
import math
from dataclasses import dataclass, fields, asdict

from pantry_insights.db.database import get_connection

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsConfig:
    """Tunable thresholds and result-size caps for the analytics reports."""

    expiry_lookahead_days: int = 7
    expiring_limit: int = 6
    low_stock_threshold: float = 2.0
    low_stock_limit: int = 6
    recommendation_threshold: float = 90.0
    recommendation_limit: int = 6
    latest_limit: int = 4
    top_recipes_limit: int = 6
    ingredient_usage_limit: int = 8
    search_page_size: int = 20
    dashboard_timeout_seconds: float = 10.0


def get_setting(key: str, default: str = None) -> str:
    """Return the value for a settings key, or default if not found."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else default
    finally:
        conn.close()


def set_setting(key: str, value: str) -> None:
    """Insert or update a settings key-value pair (upsert)."""
    conn = get_connection()
    try:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )
        conn.commit()
    finally:
        conn.close()


def load_analytics_config() -> AnalyticsConfig:
    """Return AnalyticsConfig with stored settings overlaid on the defaults.

    A stored value that can't be converted to the field's type, or that
    isn't a finite number, is ignored and the default is kept.
    """
    config = AnalyticsConfig()
    for f in fields(AnalyticsConfig):
        raw = get_setting(f.name)
        if raw is None or raw == "":
            continue
        cast = type(getattr(config, f.name))
        try:
            number = float(raw)
            if not math.isfinite(number):
                raise ValueError(raw)
            setattr(config, f.name, cast(number))
        except (ValueError, OverflowError):
            logger.warning(f"Ignoring malformed setting {f.name}={raw!r}")
    return config


def save_analytics_config(**values) -> AnalyticsConfig:
    """Validate and persist analytics settings. Return the resulting config.

    Raises ValueError for unknown keys and for values that are not finite,
    non-negative numbers.
    """
    known = {f.name for f in fields(AnalyticsConfig)}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"Unknown analytics setting: {key}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be a number") from None
        if not math.isfinite(number):
            raise ValueError(f"{key} must be a finite number")
        if number < 0:
            raise ValueError(f"{key} cannot be negative")
    for key, value in values.items():
        set_setting(key, str(value))
    return load_analytics_config()


def config_as_dict(config: AnalyticsConfig) -> dict:
    return asdict(config)
