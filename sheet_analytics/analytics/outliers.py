"""Z-score outlier detection per numeric column."""
from __future__ import annotations

import numpy as np

from ..config import Settings, get_settings
from .grid import Table
from .models import DataSummary, OutlierData, OutlierPoint
from .profiler import numeric_series
from .values import scale_down


def detect_outliers(
    table: Table,
    summary: DataSummary,
    settings: Settings | None = None,
) -> list[OutlierData]:
    """Flag values at least ``outlier_z_threshold`` population standard deviations from the mean.

    Constant columns report nothing; columns without outliers are omitted.
    """
    settings = settings or get_settings()
    results: list[OutlierData] = []
    for idx, profile in enumerate(summary.profiles):
        if profile.kind != "numeric":
            continue
        series = numeric_series(table.column(idx))
        if series.empty:
            continue
        values, scale = scale_down(series.to_numpy(dtype=float))
        mean = float(values.mean())
        std = float(np.sqrt(np.mean((values - mean) ** 2)))
        if std == 0 or not np.isfinite(std):
            continue

        flagged = []
        for data_index, value in series.items():
            z = abs(value / scale - mean) / std
            # >= so a lone spike among five values (z exactly 2.0) is still flagged
            if z >= settings.outlier_z_threshold:
                flagged.append(
                    OutlierPoint(row=table.sheet_row(int(data_index)), value=float(value), z_score=float(z))
                )
        if flagged:
            flagged.sort(key=lambda point: point.z_score, reverse=True)
            results.append(OutlierData(column=profile.header, outliers=flagged))
    return results
