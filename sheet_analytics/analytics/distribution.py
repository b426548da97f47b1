"""Central tendency, shape statistics and histograms per numeric column."""
from __future__ import annotations

import math
from collections import Counter
from typing import Sequence

import numpy as np

from ..config import Settings, get_settings
from .grid import Table
from .models import DataSummary, DistributionData, HistogramBin
from .profiler import numeric_series
from .values import finite_or, scale_down


def median(sorted_values: Sequence[float]) -> float:
    n = len(sorted_values)
    mid = n // 2
    if n % 2 == 0:
        total = sorted_values[mid - 1] + sorted_values[mid]
        if math.isfinite(total):
            return total / 2
        return sorted_values[mid - 1] / 2 + sorted_values[mid] / 2
    return sorted_values[mid]


def mode(sorted_values: Sequence[float]) -> float:
    """Most frequent value; ties go to the smallest."""
    counts = Counter(sorted_values)
    best = sorted_values[0]
    for value in sorted_values:
        if counts[value] > counts[best]:
            best = value
    return best


def skewness(values: np.ndarray, mean: float, std: float) -> float | None:
    n = len(values)
    if n < 3:
        return None
    if std == 0:
        return 0.0
    z = (values - mean) / std
    return float(n / ((n - 1) * (n - 2)) * np.sum(z ** 3))


def kurtosis(values: np.ndarray, mean: float, std: float) -> float | None:
    """Excess kurtosis; None below four values."""
    n = len(values)
    if n < 4:
        return None
    if std == 0:
        return 0.0
    z = (values - mean) / std
    scale = (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3))
    correction = 3 * (n - 1) ** 2 / ((n - 2) * (n - 3))
    return float(scale * np.sum(z ** 4) - correction)


def quartiles(sorted_values: Sequence[float]) -> tuple[float, float, float]:
    n = len(sorted_values)
    return tuple(sorted_values[min(int(math.floor(n * p)), n - 1)] for p in (0.25, 0.5, 0.75))


def histogram(sorted_values: Sequence[float], bins: int = 10) -> list[HistogramBin]:
    """Equal-width bins over [min, max]; each bin is half-open except the last."""
    low = sorted_values[0]
    high = sorted_values[-1]
    width = (high - low) / bins
    if not math.isfinite(width):
        width = high / bins - low / bins
    edges = [_edge(low, high, width, i, bins) for i in range(bins + 1)]
    counts = [0] * bins
    for value in sorted_values:
        counts[_bin_position(value, low, width, edges)] += 1
    return [
        HistogramBin(bin=f"{edges[i]:.1f}-{edges[i + 1]:.1f}", count=counts[i])
        for i in range(bins)
    ]


def _edge(low: float, high: float, width: float, i: int, bins: int) -> float:
    edge = low + i * width
    if math.isfinite(edge):
        return edge
    t = i / bins
    return low * (1 - t) + high * t


def _bin_position(value: float, low: float, width: float, edges: list[float]) -> int:
    bins = len(edges) - 1
    if width == 0:
        return bins - 1
    offset = value - low
    ratio = offset / width if math.isfinite(offset) else (value / 2 - low / 2) / (width / 2)
    if not math.isfinite(ratio):
        return bins - 1
    position = min(max(int(ratio), 0), bins - 1)
    # snap to the same edges the labels are printed from
    if position < bins - 1 and value >= edges[position + 1]:
        position += 1
    elif position > 0 and value < edges[position]:
        position -= 1
    return position


def describe(values: Sequence[float], column: str, bins: int = 10) -> DistributionData:
    ordered = sorted(values)
    scaled, scale = scale_down(np.asarray(ordered, dtype=float))
    mean_s = float(scaled.mean())
    variance_s = float(np.mean((scaled - mean_s) ** 2))
    std_s = math.sqrt(variance_s)
    std = finite_or(std_s * scale)
    return DistributionData(
        column=column,
        mean=finite_or(mean_s * scale),
        median=finite_or(median(ordered)),
        mode=float(mode(ordered)),
        standard_deviation=std,
        variance=finite_or(variance_s * scale * scale),
        skewness=skewness(scaled, mean_s, std_s),
        kurtosis=kurtosis(scaled, mean_s, std_s),
        quartiles=quartiles(ordered),
        histogram=histogram(ordered, bins),
    )


def analyze_distributions(
    table: Table,
    summary: DataSummary,
    settings: Settings | None = None,
) -> list[DistributionData]:
    settings = settings or get_settings()
    distributions: list[DistributionData] = []
    for idx, profile in enumerate(summary.profiles):
        if profile.kind != "numeric":
            continue
        values = numeric_series(table.column(idx)).tolist()
        if not values:
            continue
        distributions.append(describe(values, profile.header, settings.histogram_bins))
    return distributions
