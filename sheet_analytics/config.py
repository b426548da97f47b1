from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any
import os

from dotenv import load_dotenv

load_dotenv()


def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _getenv_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ("http://localhost:5173", "http://127.0.0.1:5173")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    type_threshold: float
    outlier_z_threshold: float
    forecast_periods: int
    histogram_bins: int
    volatile_r_squared: float
    stable_slope: float
    min_trend_points: int
    cors_origins: tuple[str, ...]


settings = Settings(
    type_threshold=_getenv_float("ANALYTICS_TYPE_THRESHOLD", 0.7),
    outlier_z_threshold=_getenv_float("ANALYTICS_OUTLIER_Z", 2.0),
    forecast_periods=_getenv_int("ANALYTICS_FORECAST_PERIODS", 5),
    histogram_bins=_getenv_int("ANALYTICS_HISTOGRAM_BINS", 10),
    volatile_r_squared=_getenv_float("ANALYTICS_VOLATILE_R2", 0.3),
    stable_slope=_getenv_float("ANALYTICS_STABLE_SLOPE", 0.1),
    min_trend_points=_getenv_int("ANALYTICS_MIN_TREND_POINTS", 3),
    cors_origins=_split_origins(os.getenv("ANALYTICS_CORS_ORIGINS")),
)

_RUNTIME_OVERRIDES: dict[str, Any] = {}

_INT_FIELDS = {"forecast_periods", "histogram_bins", "min_trend_points"}
_FLOAT_FIELDS = {
    "type_threshold",
    "outlier_z_threshold",
    "volatile_r_squared",
    "stable_slope",
}


def get_settings() -> Settings:
    if not _RUNTIME_OVERRIDES:
        return settings
    return replace(settings, **_RUNTIME_OVERRIDES)


def update_settings(overrides: dict[str, Any]) -> Settings:
    normalized: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in _INT_FIELDS:
            normalized[key] = int(value)
        elif key in _FLOAT_FIELDS:
            normalized[key] = float(value)
        elif key == "cors_origins":
            normalized[key] = tuple(value)
        else:
            raise KeyError(f"Unknown setting '{key}'")
    _RUNTIME_OVERRIDES.update(normalized)
    return get_settings()


def reset_settings() -> Settings:
    _RUNTIME_OVERRIDES.clear()
    return settings
