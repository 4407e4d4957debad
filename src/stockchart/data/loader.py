"""
IO utilities for daily OHLCV files.

Functions:
- read_frame(path) -> pd.DataFrame with a normalized 'date' column
- load_csv(path) -> TimeSeries
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd
from loguru import logger

from ..exceptions import DataValidationError
from .series import PRICE_FIELDS, TimeSeries

DATE_CANDIDATES = ["date", "datetime", "time", "timestamp"]


def read_frame(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a CSV or Parquet file into a DataFrame. Normalize column names,
    rename the first recognised date column to 'date' and parse it.
    Rows are sorted by date and duplicate dates keep the last row.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Data file not found: {p}")

    if p.suffix.lower() in (".parquet", ".pq"):
        df = pd.read_parquet(p)
    else:
        df = pd.read_csv(p)

    df.columns = [str(c).strip().lower() for c in df.columns]

    date_col = next((c for c in DATE_CANDIDATES if c in df.columns), None)
    if date_col is None:
        raise DataValidationError(f"No date column found (expected one of {DATE_CANDIDATES})")
    if date_col != "date":
        df = df.rename(columns={date_col: "date"})

    missing = [c for c in PRICE_FIELDS if c not in df.columns]
    if missing:
        raise DataValidationError(f"Missing required columns: {missing}")

    try:
        df["date"] = pd.to_datetime(df["date"])
    except (ValueError, TypeError) as e:
        raise DataValidationError(f"Unparseable date column: {e}", field="date") from e

    df = df.sort_values("date", kind="stable")
    duplicated = df["date"].duplicated(keep="last")
    if duplicated.any():
        logger.warning("Dropping {} rows with duplicate dates from {}", int(duplicated.sum()), p)
        df = df[~duplicated]

    return df.reset_index(drop=True)


def load_csv(path: Union[str, Path]) -> TimeSeries:
    """Load a date-ordered TimeSeries from a CSV/Parquet file."""
    df = read_frame(path)
    series = TimeSeries.from_frame(df)
    if len(series):
        logger.info("Loaded {} records from {} ({} -> {})", len(series), path,
                    series[0].date, series[-1].date)
    else:
        logger.info("Loaded empty series from {}", path)
    return series


__all__ = ["read_frame", "load_csv"]
