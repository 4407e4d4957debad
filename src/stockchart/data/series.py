"""
OHLCV data model.

OhlcvRecord is a validated, immutable record; TimeSeries is an immutable
ordered sequence of records with cached numpy views (dates as int64
nanoseconds, closes, volumes) used by the scale and lookup code.
Date ordering is the caller's responsibility: nothing here sorts.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from functools import cached_property
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Union, overload

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..exceptions import DataValidationError

# Field order used by the crosshair legend
LEGEND_FIELDS = ("date", "open", "high", "low", "close", "volume")
PRICE_FIELDS = ("open", "high", "low", "close")


class OhlcvRecord(BaseModel):
    """One daily market data record."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: datetime
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        if v is None or v is pd.NaT:
            raise ValueError("date is missing")
        if isinstance(v, np.datetime64):
            return pd.Timestamp(v).to_pydatetime()
        return v

    @field_validator("volume", mode="before")
    @classmethod
    def _null_volume(cls, v: Any) -> Any:
        # NaN volume coming from pandas means "no volume reported"
        if v is not None and not isinstance(v, str) and pd.isna(v):
            return None
        return v

    @property
    def has_volume(self) -> bool:
        return self.volume is not None and self.volume != 0


RecordLike = Union[OhlcvRecord, Mapping[str, Any]]


class TimeSeries(Sequence[OhlcvRecord]):
    """Immutable, date-ordered sequence of OHLCV records."""

    def __init__(self, records: Iterable[OhlcvRecord] = ()):
        self._records: tuple = tuple(records)

    @classmethod
    def from_records(cls, rows: Iterable[RecordLike]) -> "TimeSeries":
        """
        Build a series from records or mappings, validating every row.

        Raises:
            DataValidationError: on the first row that fails validation
        """
        records: List[OhlcvRecord] = []
        for i, row in enumerate(rows):
            if isinstance(row, OhlcvRecord):
                records.append(row)
                continue
            try:
                records.append(OhlcvRecord.model_validate(dict(row)))
            except ValidationError as e:
                err = e.errors()[0]
                field = ".".join(str(part) for part in err.get("loc", ())) or None
                raise DataValidationError(
                    f"Invalid OHLCV record: {err.get('msg', 'validation failed')}",
                    row=i,
                    field=field,
                ) from e
            except (TypeError, ValueError) as e:
                raise DataValidationError(f"Invalid OHLCV record: {e}", row=i) from e
        return cls(records)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, date_column: Optional[str] = None) -> "TimeSeries":
        """
        Build a series from a DataFrame with open/high/low/close[/volume]
        columns and either a date column or a DatetimeIndex.
        """
        frame = df.copy()
        frame.columns = [str(c).strip().lower() for c in frame.columns]
        if date_column is None:
            date_column = "date"
        if date_column not in frame.columns:
            if isinstance(frame.index, pd.DatetimeIndex):
                frame = frame.rename_axis(date_column).reset_index()
            else:
                raise DataValidationError("No date column found", field=date_column)

        missing = [c for c in PRICE_FIELDS if c not in frame.columns]
        if missing:
            raise DataValidationError(f"Missing required columns: {missing}")

        columns = [date_column, *PRICE_FIELDS]
        if "volume" in frame.columns:
            columns.append("volume")
        frame = frame[columns].rename(columns={date_column: "date"})
        return cls.from_records(frame.to_dict("records"))

    # ----- Sequence protocol -----

    @overload
    def __getitem__(self, index: int) -> OhlcvRecord: ...

    @overload
    def __getitem__(self, index: slice) -> "TimeSeries": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return TimeSeries(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[OhlcvRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        if not self._records:
            return "TimeSeries(empty)"
        return f"TimeSeries(n={len(self)}, {self._records[0].date} -> {self._records[-1].date})"

    # ----- numpy views -----

    @cached_property
    def index(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex([r.date for r in self._records]).as_unit("ns")

    @property
    def tz(self) -> Optional[tzinfo]:
        return self.index.tz

    @cached_property
    def dates(self) -> np.ndarray:
        """Dates as int64 nanoseconds since epoch (UTC for tz-aware series)."""
        return self.index.asi8

    @cached_property
    def closes(self) -> np.ndarray:
        return np.fromiter((r.close for r in self._records), dtype=float, count=len(self._records))

    @cached_property
    def volumes(self) -> np.ndarray:
        """Volumes with NaN where no volume was reported."""
        return np.array(
            [np.nan if r.volume is None else r.volume for r in self._records], dtype=float
        )

    def with_volume(self) -> "TimeSeries":
        """Records with a non-null, non-zero volume, in original order."""
        return TimeSeries(r for r in self._records if r.has_volume)


__all__ = ["OhlcvRecord", "TimeSeries", "LEGEND_FIELDS", "PRICE_FIELDS"]
