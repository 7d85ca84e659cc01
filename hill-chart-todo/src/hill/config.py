"""Hill chart runtime configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.config_utils import env_float, env_int, env_str


@dataclass(frozen=True)
class HillChartConfig:
    """Configuration for the hill chart app.

    Environment variables:
    - HILL_CHART_WIDTH / HILL_CHART_HEIGHT: logical drawing area in px (default: 800 x 320)
    - HILL_AMPLITUDE_RATIO: hill height as a fraction of chart height (default: 0.6)
    - HILL_HIT_RADIUS: vertical distance in px a press may be from an item (default: 30)
    - HILL_STALE_AFTER_DAYS: business days without movement before an item is stale (default: 2)
    - HILL_REFRESH_SECONDS: chart redraw period, 0 disables (default: 60)
    - HILL_STATE_PARAM: query parameter carrying the encoded state (default: state)
    - HILL_LOG_LEVEL: root log level (default: INFO)

    Bad numbers fall back to the defaults rather than failing the page.
    """

    chart_width: int
    chart_height: int
    amplitude_ratio: float
    hit_radius: float
    stale_after_days: int
    refresh_seconds: int
    state_param: str
    log_level: str

    @classmethod
    def from_env(cls) -> "HillChartConfig":
        return cls(
            chart_width=env_int("HILL_CHART_WIDTH", 800, minimum=100),
            chart_height=env_int("HILL_CHART_HEIGHT", 320, minimum=60),
            amplitude_ratio=env_float("HILL_AMPLITUDE_RATIO", 0.6, minimum=0.05, maximum=1.0),
            hit_radius=env_float("HILL_HIT_RADIUS", 30.0, minimum=1.0),
            stale_after_days=env_int("HILL_STALE_AFTER_DAYS", 2, minimum=1),
            refresh_seconds=env_int("HILL_REFRESH_SECONDS", 60, minimum=0),
            state_param=env_str("HILL_STATE_PARAM", "state") or "state",
            log_level=env_str("HILL_LOG_LEVEL", "INFO").upper() or "INFO",
        )


_config: Optional[HillChartConfig] = None


def get_config() -> HillChartConfig:
    """Get the hill chart configuration (cached)."""
    global _config
    if _config is None:
        _config = HillChartConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the env."""
    global _config
    _config = None
