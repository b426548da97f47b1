from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .addressing import parse_address


ColumnKind = Literal["numeric", "date", "text"]

CellType = Literal["text", "number", "formula", "date"]

TrendDirection = Literal["increasing", "decreasing", "stable", "volatile"]

ChartType = Literal["line", "bar", "pie", "scatter", "histogram", "heatmap"]

DEFAULT_CHART_COLORS: tuple[str, ...] = (
    "#2563EB",
    "#059669",
    "#EA580C",
    "#7C3AED",
    "#DC2626",
)


class _Frozen(BaseModel):
    """Immutable value object serialized with camelCase keys for the UI."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Cell(_Frozen):
    """A single spreadsheet cell as held by the cell store.

    ``row`` and ``col`` may be omitted; they are then derived from ``id``.
    """
    id: str
    row: int = Field(..., ge=1)
    col: int = Field(..., ge=1)
    value: Any = None
    formula: str | None = None
    type: CellType | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_position(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("id"):
            if values.get("row") is None or values.get("col") is None:
                row, col = parse_address(values["id"])
                values = {**values}
                if values.get("row") is None:
                    values["row"] = row
                if values.get("col") is None:
                    values["col"] = col
        return values


class ColumnProfile(_Frozen):
    """Per-column classification and counts."""
    header: str
    kind: ColumnKind
    missing_count: int
    unique_count: int


class DataSummary(_Frozen):
    total_rows: int
    total_columns: int
    numeric_columns: list[str] = Field(default_factory=list)
    text_columns: list[str] = Field(default_factory=list)
    date_columns: list[str] = Field(default_factory=list)
    missing_values: dict[str, int] = Field(default_factory=dict)
    unique_values: dict[str, int] = Field(default_factory=dict)
    profiles: list[ColumnProfile] = Field(default_factory=list)


class CorrelationMatrix(_Frozen):
    columns: list[str] = Field(default_factory=list)
    matrix: list[list[float]] = Field(default_factory=list)


class TrendAnalysis(_Frozen):
    column: str
    trend: TrendDirection
    slope: float
    intercept: float
    r_squared: float
    forecast: list[float]


class OutlierPoint(_Frozen):
    row: int
    value: float
    z_score: float


class OutlierData(_Frozen):
    column: str
    outliers: list[OutlierPoint]


class HistogramBin(_Frozen):
    bin: str
    count: int


class DistributionData(_Frozen):
    """Shape statistics for one numeric column.

    ``skewness`` is None below three values and ``kurtosis`` below four.
    """
    column: str
    mean: float
    median: float
    mode: float
    standard_deviation: float
    variance: float
    skewness: float | None = None
    kurtosis: float | None = None
    quartiles: tuple[float, float, float]
    histogram: list[HistogramBin]


class DataAnalytics(_Frozen):
    """Aggregate result of a single analysis run."""
    summary: DataSummary
    correlations: CorrelationMatrix
    trends: list[TrendAnalysis] = Field(default_factory=list)
    outliers: list[OutlierData] = Field(default_factory=list)
    distributions: list[DistributionData] = Field(default_factory=list)


class ChartRequest(_Frozen):
    type: ChartType = "bar"
    x_axis: str | None = None
    y_axis: str | None = None
    title: str | None = None


class ChartConfig(_Frozen):
    """Chart-ready payload; renderers read ``data`` only."""
    type: ChartType
    title: str
    x_axis: str
    y_axis: str
    data: list[dict[str, Any]]
    colors: list[str] = Field(default_factory=lambda: list(DEFAULT_CHART_COLORS))
