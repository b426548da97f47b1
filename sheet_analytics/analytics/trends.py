"""Ordinal linear regression, trend labelling and forecasting per numeric column."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import Settings, get_settings
from .grid import Table
from .models import DataSummary, TrendAnalysis, TrendDirection
from .profiler import numeric_series
from .values import finite_or, scale_down

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Regression:
    slope: float
    intercept: float
    r_squared: float


def linear_regression(values: Sequence[float]) -> Regression:
    """Least-squares fit of ``values`` against their 0-based positions.

    R² is 0 when the values have no variance.
    """
    y, scale = scale_down(np.asarray(values, dtype=float))
    n = len(y)
    if n < 2:
        return Regression(0.0, float(y[0]) * scale if n else 0.0, 0.0)
    x = np.arange(n, dtype=float)
    sxx = float(np.dot(x - x.mean(), x - x.mean()))
    slope = float(np.dot(x - x.mean(), y - y.mean())) / sxx
    intercept = float(y.mean() - slope * x.mean())
    residuals = y - (slope * x + intercept)
    ss_res = float(np.dot(residuals, residuals))
    ss_tot = float(np.dot(y - y.mean(), y - y.mean()))
    r_squared = 0.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot
    return Regression(finite_or(slope * scale), finite_or(intercept * scale), finite_or(r_squared))


def classify_trend(slope: float, r_squared: float, settings: Settings | None = None) -> TrendDirection:
    settings = settings or get_settings()
    if r_squared < settings.volatile_r_squared:
        return "volatile"
    if abs(slope) < settings.stable_slope:
        return "stable"
    return "increasing" if slope > 0 else "decreasing"


def forecast(last_value: float, slope: float, periods: int) -> list[float]:
    return [finite_or(last_value + slope * k) for k in range(1, periods + 1)]


def analyze_trends(
    table: Table,
    summary: DataSummary,
    settings: Settings | None = None,
) -> list[TrendAnalysis]:
    settings = settings or get_settings()
    trends: list[TrendAnalysis] = []
    for idx, profile in enumerate(summary.profiles):
        if profile.kind != "numeric":
            continue
        values = numeric_series(table.column(idx)).tolist()
        if len(values) < settings.min_trend_points:
            logger.debug("Skipping trend for %s: %d values", profile.header, len(values))
            continue
        fit = linear_regression(values)
        trends.append(
            TrendAnalysis(
                column=profile.header,
                trend=classify_trend(fit.slope, fit.r_squared, settings),
                slope=fit.slope,
                intercept=fit.intercept,
                r_squared=fit.r_squared,
                forecast=forecast(values[-1], fit.slope, settings.forecast_periods),
            )
        )
    return trends
