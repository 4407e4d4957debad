"""
Trailing moving average of closing prices.

For index i the window is series[max(0, i - window_size) .. i] inclusive, so
the window expands from a single close at the start and reaches its full
size (window_size + 1 closes) once i >= window_size. The default lookback of
49 averages 50 closes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List

import numpy as np

from ..data.series import TimeSeries

DEFAULT_WINDOW = 49


@dataclass(frozen=True)
class MovingAveragePoint:
    date: datetime
    average: float


def trailing_mean(values: np.ndarray, window_size: int) -> np.ndarray:
    """Expanding-then-sliding mean over [max(0, i - window_size), i]."""
    values = np.asarray(values, dtype=float)
    n = values.size
    if n == 0:
        return np.empty(0)
    csum = np.concatenate(([0.0], np.cumsum(values)))
    idx = np.arange(n)
    start = np.maximum(0, idx - window_size)
    return (csum[idx + 1] - csum[start]) / (idx + 1 - start)


def compute(series: TimeSeries, window_size: int = DEFAULT_WINDOW) -> List[MovingAveragePoint]:
    """
    Compute one MovingAveragePoint per record, index-aligned with the series.

    Args:
        series: source records
        window_size: lookback in records (>= 0)

    Returns:
        list of MovingAveragePoint, same length as series
    """
    if window_size < 0:
        raise ValueError(f"window_size must be >= 0 (got {window_size})")
    if len(series) == 0:
        return []
    averages = trailing_mean(series.closes, window_size)
    return [MovingAveragePoint(record.date, float(avg)) for record, avg in zip(series, averages)]


class MovingAverageCalculator:
    """Moving average with a fixed lookback, reused across renders."""

    def __init__(self, window_size: int = DEFAULT_WINDOW):
        if window_size < 0:
            raise ValueError(f"window_size must be >= 0 (got {window_size})")
        self.window_size = window_size

    def compute(self, series: TimeSeries) -> List[MovingAveragePoint]:
        return compute(series, self.window_size)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(window_size={self.window_size})"


__all__ = ["MovingAveragePoint", "MovingAverageCalculator", "compute", "trailing_mean", "DEFAULT_WINDOW"]
