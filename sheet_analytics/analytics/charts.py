"""Pair two columns into chart-ready point data."""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from .errors import ChartValidationError
from .grid import Table
from .models import ChartConfig, ChartRequest


def build_chart(table: Table, config: ChartRequest | Mapping[str, Any]) -> ChartConfig:
    """Build a ChartConfig for ``config.y_axis`` against ``config.x_axis``.

    Rows where either value is None are left out.
    """
    if not isinstance(config, ChartRequest):
        try:
            config = ChartRequest.model_validate(dict(config))
        except ValidationError as exc:
            raise ChartValidationError(f"Invalid chart config: {exc}") from exc

    if not config.x_axis or not config.y_axis:
        raise ChartValidationError("X-axis and Y-axis must be specified")

    x_index = table.index_of(config.x_axis)
    y_index = table.index_of(config.y_axis)
    missing = [name for name, idx in ((config.x_axis, x_index), (config.y_axis, y_index)) if idx is None]
    if missing:
        raise ChartValidationError(f"Columns not found: {', '.join(missing)}")

    xs = table.column(x_index).tolist()
    ys = table.column(y_index).tolist()
    data = [
        {config.x_axis: x, config.y_axis: y}
        for x, y in zip(xs, ys)
        if x is not None and y is not None
    ]
    return ChartConfig(
        type=config.type,
        title=config.title or f"{config.y_axis} vs {config.x_axis}",
        x_axis=config.x_axis,
        y_axis=config.y_axis,
        data=data,
    )
