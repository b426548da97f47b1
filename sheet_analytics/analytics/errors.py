from __future__ import annotations


class AnalyticsError(Exception):
    """Base error class for spreadsheet analytics."""


class InvalidAddressError(AnalyticsError, ValueError):
    """Raised when a cell address or column index cannot be encoded or decoded."""


class FormulaError(AnalyticsError):
    """Raised by a formula evaluator when a formula cannot be resolved to a value."""


class ChartValidationError(AnalyticsError):
    """Raised when a chart request names a missing axis, an unknown column or kind."""
