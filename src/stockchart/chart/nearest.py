"""
Nearest-record lookup by date.

Uses a left insertion-point search starting at offset 1 over the series
dates, then picks whichever neighbour is closer to the target (ties go to
the earlier record). Dates are cached per index so pointer moves never
rebuild or sort them.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from ..data.series import OhlcvRecord, TimeSeries
from ..exceptions import EmptyDomainError


def insertion_point(dates: np.ndarray, target: int, lo: int = 1) -> int:
    """Leftmost index >= lo where target could be inserted keeping dates ordered."""
    return lo + int(np.searchsorted(dates[lo:], target, side="left"))


class NearestPointIndex:
    """Nearest-point lookup over one series, built once per render."""

    def __init__(self, series: TimeSeries):
        self._series = series
        self._dates = series.dates

    def __len__(self) -> int:
        return len(self._series)

    def locate(self, target_date: Any) -> OhlcvRecord:
        """Return the record whose date is closest to target_date."""
        n = len(self._series)
        if n == 0:
            raise EmptyDomainError("Cannot locate a record in an empty series")

        target = pd.Timestamp(target_date).value
        i = insertion_point(self._dates, target)
        if i == 0:
            return self._series[0]
        if i >= n:
            return self._series[n - 1]

        before, after = int(self._dates[i - 1]), int(self._dates[i])
        if target - before > after - target:
            return self._series[i]
        return self._series[i - 1]


def locate(series: TimeSeries, target_date: Any) -> OhlcvRecord:
    """One-shot lookup; prefer NearestPointIndex when locating repeatedly."""
    return NearestPointIndex(series).locate(target_date)


__all__ = ["NearestPointIndex", "locate", "insertion_point"]
