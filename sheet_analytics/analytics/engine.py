"""Run every analytical pass over a single table snapshot."""
from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from ..config import Settings, get_settings
from .charts import build_chart
from .correlation import correlation_matrix
from .distribution import analyze_distributions
from .formula import FormulaEvaluator
from .grid import Table, build_table
from .models import Cell, ChartConfig, ChartRequest, DataAnalytics, DataSummary
from .outliers import detect_outliers
from .profiler import profile_table
from .trends import analyze_trends

logger = logging.getLogger(__name__)

CellMap = Mapping[str, Cell | Mapping[str, Any]]


class DataAnalyticsEngine:
    """Analytics over one snapshot of a sheet.

    The table is built once on construction and never mutated, so an engine
    can be handed to another thread; build a new engine for each snapshot.
    """

    def __init__(
        self,
        cells: CellMap,
        evaluator: FormulaEvaluator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._table = build_table(cells, evaluator)

    @property
    def table(self) -> Table:
        return self._table

    @property
    def headers(self) -> list[str]:
        return list(self._table.headers)

    def generate_summary(self) -> DataSummary:
        return profile_table(self._table, self._settings.type_threshold)

    def generate_analytics(self) -> DataAnalytics:
        start = time.perf_counter()
        summary = self.generate_summary()
        result = DataAnalytics(
            summary=summary,
            correlations=correlation_matrix(self._table, summary),
            trends=analyze_trends(self._table, summary, self._settings),
            outliers=detect_outliers(self._table, summary, self._settings),
            distributions=analyze_distributions(self._table, summary, self._settings),
        )
        logger.info(
            "Analyzed %d rows x %d columns (%d numeric) in %.1f ms",
            summary.total_rows,
            summary.total_columns,
            len(summary.numeric_columns),
            (time.perf_counter() - start) * 1000,
        )
        return result

    def generate_chart(self, config: ChartRequest | Mapping[str, Any]) -> ChartConfig:
        return build_chart(self._table, config)


def analyze(
    cells: CellMap,
    evaluator: FormulaEvaluator | None = None,
    settings: Settings | None = None,
) -> DataAnalytics:
    return DataAnalyticsEngine(cells, evaluator=evaluator, settings=settings).generate_analytics()
