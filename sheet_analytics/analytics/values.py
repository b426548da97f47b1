"""Explicit scalar parsing for raw cell values."""
from __future__ import annotations

import datetime as dt
import math
import warnings
from typing import Any

import numpy as np
import pandas as pd

# squares of magnitudes up to this stay well inside float range
_SAFE_MAGNITUDE = 1e150


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_number(value: Any) -> float | None:
    """Return the finite float a cell value represents, or None when it is not numeric.

    Booleans, blank strings and integers beyond float range are not numbers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        source = value
    elif isinstance(value, str):
        source = value.strip()
        if not source:
            return None
    else:
        return None
    try:
        number = float(source)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def finite_or(value: float, default: float = 0.0) -> float:
    """``value`` as a float, or ``default`` when it is NaN or infinite."""
    value = float(value)
    return value if math.isfinite(value) else default


def scale_down(values: np.ndarray) -> tuple[np.ndarray, float]:
    """Divide by the largest magnitude when squaring the values could overflow.

    Returns the scaled array and the factor to multiply location/spread results by.
    """
    if len(values) == 0:
        return values, 1.0
    scale = float(np.max(np.abs(values)))
    if scale <= _SAFE_MAGNITUDE or not math.isfinite(scale):
        return values, 1.0
    return values / scale, scale


def is_date(value: Any) -> bool:
    """True for date objects and for non-numeric strings with a digit that pandas can read as a date."""
    if isinstance(value, (dt.date, dt.datetime, pd.Timestamp)):
        return not pd.isna(value)
    if not isinstance(value, str) or not value.strip():
        return False
    # bare month or weekday names are text, not dates
    if not any(ch.isdigit() for ch in value):
        return False
    if parse_number(value) is not None:
        return False
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(value.strip(), errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return False
    return not pd.isna(parsed)
