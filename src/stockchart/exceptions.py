"""
Custom exceptions for the StockChart package.
Provides specific error types for ingestion and scale failures.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class StockChartError(Exception):
    """
    Base exception class for all StockChart errors.

    Attributes:
        message: Error description
        details: Additional context dictionary
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details if available"""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class DataValidationError(StockChartError):
    """
    Raised when an OHLCV record cannot be ingested.

    Common scenarios:
        - non-numeric or non-finite price field
        - missing or unparseable date
        - missing required column in a DataFrame / CSV
    """

    def __init__(self, message: str, row: Optional[int] = None,
                 field: Optional[str] = None, **kwargs):
        details = kwargs
        if row is not None:
            details['row'] = row
        if field is not None:
            details['field'] = field

        super().__init__(message, details)
        self.row = row
        self.field = field


class EmptyDomainError(StockChartError):
    """Raised when scales are requested for a series with no records."""


__all__ = ["StockChartError", "DataValidationError", "EmptyDomainError"]
