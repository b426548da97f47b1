"""Statistical analytics over sparse spreadsheet cell maps."""
from .errors import (
    AnalyticsError,
    InvalidAddressError,
    FormulaError,
    ChartValidationError,
)
from .models import (
    Cell,
    ChartConfig,
    ChartRequest,
    ChartType,
    ColumnKind,
    ColumnProfile,
    CorrelationMatrix,
    DataAnalytics,
    DataSummary,
    DistributionData,
    HistogramBin,
    OutlierData,
    OutlierPoint,
    TrendAnalysis,
    DEFAULT_CHART_COLORS,
)
from .addressing import column_to_letters, format_address, letters_to_column, parse_address
from .formula import ArithmeticEvaluator, FormulaEvaluator
from .grid import Table, build_table
from .profiler import profile_table
from .engine import DataAnalyticsEngine, analyze

__all__ = [
    "AnalyticsError",
    "InvalidAddressError",
    "FormulaError",
    "ChartValidationError",
    "Cell",
    "ChartConfig",
    "ChartRequest",
    "ChartType",
    "ColumnKind",
    "ColumnProfile",
    "CorrelationMatrix",
    "DataAnalytics",
    "DataSummary",
    "DistributionData",
    "HistogramBin",
    "OutlierData",
    "OutlierPoint",
    "TrendAnalysis",
    "DEFAULT_CHART_COLORS",
    "column_to_letters",
    "format_address",
    "letters_to_column",
    "parse_address",
    "ArithmeticEvaluator",
    "FormulaEvaluator",
    "Table",
    "build_table",
    "profile_table",
    "DataAnalyticsEngine",
    "analyze",
]
