"""
Series builders shared by the StockChart tests.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from stockchart.data.series import TimeSeries


def make_series(closes: Sequence[float], volumes: Optional[Sequence] = None,
                start: str = "2024-01-01", freq: str = "D") -> TimeSeries:
    """Series with the given closes; open/high/low are derived from the close."""
    dates = pd.date_range(start, periods=len(closes), freq=freq)
    rows = []
    for i, (date, close) in enumerate(zip(dates, closes)):
        rows.append({
            "date": date.to_pydatetime(),
            "open": close - 0.5,
            "high": close + 1.0,
            "low": close - 1.0,
            "close": close,
            "volume": None if volumes is None else volumes[i],
        })
    return TimeSeries.from_records(rows)


def make_trending_series(n=120, slope=0.2, noise=1.0, seed=123) -> TimeSeries:
    """Random-walk-with-drift daily series with positive volumes."""
    rng = np.random.default_rng(seed)
    closes = 100.0 + np.arange(n) * slope + rng.normal(0, noise, size=n).cumsum()
    volumes = rng.integers(1_000, 50_000, size=n).astype(float)
    return make_series(closes.tolist(), volumes.tolist())
