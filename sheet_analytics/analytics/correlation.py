"""Pearson correlation matrix over numeric columns."""
from __future__ import annotations

import math

import numpy as np
import pandas as pd

from .grid import Table
from .models import CorrelationMatrix, DataSummary
from .profiler import numeric_series
from .values import scale_down


def pearson(x: pd.Series, y: pd.Series) -> float:
    """Correlation over rows where both series hold a value; 0.0 when undefined."""
    paired = pd.concat([x, y], axis=1, join="inner").dropna()
    n = len(paired)
    if n == 0:
        return 0.0
    # correlation is scale-free, so huge columns are shrunk before squaring
    a, _ = scale_down(paired.iloc[:, 0].to_numpy(dtype=float))
    b, _ = scale_down(paired.iloc[:, 1].to_numpy(dtype=float))
    da = a - a.mean()
    db = b - b.mean()
    denominator = math.sqrt(float(np.dot(da, da))) * math.sqrt(float(np.dot(db, db)))
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    r = float(np.dot(da, db)) / denominator
    if not math.isfinite(r):
        return 0.0
    return max(-1.0, min(1.0, r))


def correlation_matrix(table: Table, summary: DataSummary) -> CorrelationMatrix:
    indices = [i for i, p in enumerate(summary.profiles) if p.kind == "numeric"]
    series = [numeric_series(table.column(i)) for i in indices]
    size = len(indices)
    matrix = [[0.0] * size for _ in range(size)]
    for i in range(size):
        matrix[i][i] = 1.0
        for j in range(i + 1, size):
            r = pearson(series[i], series[j])
            matrix[i][j] = r
            matrix[j][i] = r
    return CorrelationMatrix(
        columns=[summary.profiles[i].header for i in indices],
        matrix=matrix,
    )
