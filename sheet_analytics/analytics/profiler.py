"""Classify table columns and compute the dataset summary."""
from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from .grid import Table
from .models import ColumnKind, ColumnProfile, DataSummary
from .values import is_date, is_empty, parse_number

logger = logging.getLogger(__name__)


def non_empty_values(series: pd.Series) -> list[Any]:
    return [value for value in series.tolist() if not is_empty(value)]


def numeric_series(series: pd.Series) -> pd.Series:
    """Numeric values of a column keyed by data-row index; non-numeric entries are dropped."""
    parsed = series.map(parse_number)
    return pd.to_numeric(parsed, errors="coerce").dropna().astype(float)


def classify_values(values: list[Any], threshold: float) -> ColumnKind:
    """Numeric first, then date, else text; an empty column is text."""
    if not values:
        return "text"
    total = len(values)
    numeric_count = sum(1 for v in values if parse_number(v) is not None)
    if numeric_count >= total * threshold:
        return "numeric"
    date_count = sum(1 for v in values if is_date(v))
    if date_count >= total * threshold:
        return "date"
    return "text"


def profile_table(table: Table, threshold: float = 0.7) -> DataSummary:
    """Build a DataSummary with a ColumnProfile per header.

    Missing counts are taken against the number of data rows, so the header
    row is never counted.
    """
    row_count = table.row_count
    profiles: list[ColumnProfile] = []
    buckets: dict[ColumnKind, list[str]] = {"numeric": [], "date": [], "text": []}
    missing: dict[str, int] = {}
    unique: dict[str, int] = {}

    for idx, header in enumerate(table.headers):
        values = non_empty_values(table.column(idx))
        kind = classify_values(values, threshold)
        profile = ColumnProfile(
            header=header,
            kind=kind,
            missing_count=row_count - len(values),
            unique_count=_distinct_count(values),
        )
        profiles.append(profile)
        buckets[kind].append(header)
        missing[header] = profile.missing_count
        unique[header] = profile.unique_count

    logger.debug(
        "Profiled %d columns: %d numeric, %d date, %d text",
        len(profiles), len(buckets["numeric"]), len(buckets["date"]), len(buckets["text"]),
    )
    return DataSummary(
        total_rows=row_count,
        total_columns=table.column_count,
        numeric_columns=buckets["numeric"],
        text_columns=buckets["text"],
        date_columns=buckets["date"],
        missing_values=missing,
        unique_values=unique,
        profiles=profiles,
    )


def _distinct_count(values: list[Any]) -> int:
    seen: set[Any] = set()
    for value in values:
        try:
            seen.add(value)
        except TypeError:
            seen.add(repr(value))
    return len(seen)
