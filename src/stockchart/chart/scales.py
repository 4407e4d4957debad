"""
Coordinate scales for the price chart.

- TimeScale: continuous time -> pixel mapping (linear over elapsed time)
- LinearScale: continuous numeric -> pixel mapping (price, volume)
- ScaleModel: the three scales of one render, derived from a TimeSeries
  and a Viewport

Scales accept scalars or arrays and return floats or numpy arrays.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..data.series import TimeSeries
from ..exceptions import EmptyDomainError

DEFAULT_MIN_TIME_SPAN = pd.Timedelta(days=1)

# (pandas frequency, approximate duration) from finest to coarsest
_TIME_TICK_INTERVALS = [
    ("1h", pd.Timedelta(hours=1)),
    ("3h", pd.Timedelta(hours=3)),
    ("6h", pd.Timedelta(hours=6)),
    ("12h", pd.Timedelta(hours=12)),
    ("1D", pd.Timedelta(days=1)),
    ("2D", pd.Timedelta(days=2)),
    ("W-SUN", pd.Timedelta(days=7)),
    ("MS", pd.Timedelta(days=30)),
    ("3MS", pd.Timedelta(days=91)),
    ("YS", pd.Timedelta(days=365)),
]


def _nice_step(span: float, count: int) -> float:
    """1-2-5 tick step covering span with about count ticks."""
    if span <= 0 or count <= 0:
        return 0.0
    raw = span / count
    power = math.floor(math.log10(raw))
    error = raw / 10 ** power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    return factor * 10 ** power


def _unwrap(values: np.ndarray):
    return float(values) if np.ndim(values) == 0 else values


@dataclass(frozen=True)
class Margins:
    top: float = 50.0
    right: float = 50.0
    bottom: float = 30.0
    left: float = 50.0


@dataclass(frozen=True)
class Viewport:
    """Outer chart size in pixels plus the margins around the plot area."""

    width: float
    height: float
    margins: Margins = field(default_factory=Margins)

    @property
    def plot_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def plot_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def is_drawable(self) -> bool:
        return self.plot_width > 0 and self.plot_height > 0

    def resized(self, width: float, height: float) -> "Viewport":
        return Viewport(width, height, self.margins)

    @classmethod
    def from_window(cls, window_width: float, window_height: float,
                    margins: Optional[Margins] = None, height_ratio: float = 0.85) -> "Viewport":
        """Full window width and a share of its height, like a page-level chart."""
        return cls(float(window_width), float(window_height) * height_ratio, margins or Margins())


class LinearScale:
    """Linear numeric scale; a degenerate domain is widened by half a unit each side."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        d0, d1 = float(domain[0]), float(domain[1])
        if d0 == d1:
            d0, d1 = d0 - 0.5, d1 + 0.5
        self.domain = (d0, d1)
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: Any):
        d0, d1 = self.domain
        r0, r1 = self.range
        v = np.asarray(value, dtype=float)
        return _unwrap(r0 + (v - d0) / (d1 - d0) * (r1 - r0))

    def invert(self, pixel: Any):
        d0, d1 = self.domain
        r0, r1 = self.range
        p = np.asarray(pixel, dtype=float)
        return _unwrap(d0 + (p - r0) / (r1 - r0) * (d1 - d0))

    def ticks(self, count: int = 10) -> np.ndarray:
        lo, hi = sorted(self.domain)
        step = _nice_step(hi - lo, count)
        if step == 0:
            return np.array([lo])
        start = math.ceil(lo / step)
        stop = math.floor(hi / step)
        return np.arange(start, stop + 1) * step

    def tick_format(self, values: Sequence[float]) -> List[str]:
        values = np.asarray(values, dtype=float)
        if values.size > 1:
            step = float(np.min(np.abs(np.diff(values))))
            decimals = max(0, -math.floor(math.log10(step))) if step > 0 else 0
        else:
            decimals = 0
        return [f"{v:,.{decimals}f}" for v in values]

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


class TimeScale:
    """
    Time scale over int64 nanoseconds. Accepts datetimes, pandas Timestamps,
    DatetimeIndex or int64 nanosecond arrays; invert returns pd.Timestamp in
    the domain's timezone.
    """

    def __init__(self, domain: Tuple[Any, Any], range_: Tuple[float, float],
                 min_span: pd.Timedelta = DEFAULT_MIN_TIME_SPAN):
        t0, t1 = pd.Timestamp(domain[0]), pd.Timestamp(domain[1])
        self.tz: Optional[tzinfo] = t0.tz
        n0, n1 = t0.value, t1.value
        if n0 == n1:
            half = pd.Timedelta(min_span).value // 2
            n0, n1 = n0 - half, n1 + half
        self._ns = (n0, n1)
        self.range = (float(range_[0]), float(range_[1]))

    @property
    def domain(self) -> Tuple[pd.Timestamp, pd.Timestamp]:
        return (self._timestamp(self._ns[0]), self._timestamp(self._ns[1]))

    def _timestamp(self, ns: int) -> pd.Timestamp:
        return pd.Timestamp(int(ns), tz=self.tz)

    @staticmethod
    def _to_ns(value: Any):
        if isinstance(value, np.ndarray) and value.dtype.kind == "i":
            return value
        if isinstance(value, (pd.DatetimeIndex, pd.Series, np.ndarray, list, tuple)):
            return pd.DatetimeIndex(value).as_unit("ns").asi8
        return pd.Timestamp(value).value

    def __call__(self, value: Any):
        n0, n1 = self._ns
        r0, r1 = self.range
        offset = np.asarray(self._to_ns(value), dtype=np.int64) - n0
        return _unwrap(r0 + offset.astype(float) / (n1 - n0) * (r1 - r0))

    def invert(self, pixel: float) -> pd.Timestamp:
        n0, n1 = self._ns
        r0, r1 = self.range
        offset = (float(pixel) - r0) / (r1 - r0) * (n1 - n0)
        return self._timestamp(n0 + int(round(offset)))

    def ticks(self, count: int = 10) -> List[pd.Timestamp]:
        t0, t1 = self.domain
        span = t1 - t0
        freq = None
        for candidate, duration in _TIME_TICK_INTERVALS:
            if span / duration <= count:
                freq = candidate
                break
        if freq is None:
            years = span / pd.Timedelta(days=365)
            freq = f"{max(1, int(_nice_step(years, count)))}YS"
        start = t0.floor("h") if freq.endswith("h") else t0.normalize()
        ticks = pd.date_range(start=start, end=t1, freq=freq)
        return [t for t in ticks if t >= t0]

    def tick_format(self, values: Sequence[pd.Timestamp]) -> List[str]:
        labels = []
        for ts in values:
            if ts.hour or ts.minute:
                labels.append(ts.strftime("%I:%M %p"))
            elif ts.month == 1 and ts.day == 1:
                labels.append(ts.strftime("%Y"))
            elif ts.day == 1:
                labels.append(ts.strftime("%B"))
            else:
                labels.append(ts.strftime("%b %d"))
        return labels

    def __repr__(self) -> str:
        return f"TimeScale(domain={self.domain}, range={self.range})"


def axis_ticks(scale, count: int = 10) -> List[Tuple[float, str]]:
    """(pixel position, label) pairs for an axis drawn from scale."""
    values = scale.ticks(count)
    if len(values) == 0:
        return []
    labels = scale.tick_format(values)
    positions = scale(list(values))
    return [(float(p), label) for p, label in zip(np.atleast_1d(positions), labels)]


@dataclass(frozen=True)
class ScaleModel:
    """Scales of one render. Recomputed on every render and resize."""

    x: TimeScale
    y: LinearScale
    volume: Optional[LinearScale]
    pixel_width: float
    pixel_height: float

    @property
    def x_domain(self) -> Tuple[pd.Timestamp, pd.Timestamp]:
        return self.x.domain

    @property
    def y_domain(self) -> Tuple[float, float]:
        return self.y.domain

    @property
    def volume_domain(self) -> Optional[Tuple[float, float]]:
        return self.volume.domain if self.volume is not None else None

    @property
    def baseline(self) -> float:
        return self.pixel_height

    @classmethod
    def compute(cls, series: Optional[TimeSeries], viewport: Viewport,
                price_padding: float = 5.0, volume_band: float = 0.25,
                min_time_span: pd.Timedelta = DEFAULT_MIN_TIME_SPAN) -> "ScaleModel":
        """
        Derive scales from the series extent.

        - x: [min(date), max(date)] -> [0, plot_width]
        - y: [min(close) - price_padding, max(close)] -> [plot_height, 0]
        - volume: [min, max] of non-null, non-zero volumes -> bottom band
          [plot_height, plot_height * (1 - volume_band)]

        Raises:
            EmptyDomainError: if the series has no records
        """
        if series is None or len(series) == 0:
            raise EmptyDomainError("Cannot derive scales from an empty series")

        width, height = viewport.plot_width, viewport.plot_height
        dates = series.dates
        tz = series.tz
        x = TimeScale(
            (pd.Timestamp(int(dates.min()), tz=tz), pd.Timestamp(int(dates.max()), tz=tz)),
            (0.0, width),
            min_span=min_time_span,
        )

        closes = series.closes
        y = LinearScale((float(closes.min()) - price_padding, float(closes.max())), (height, 0.0))

        volumes = series.volumes
        volumes = volumes[~np.isnan(volumes) & (volumes != 0)]
        volume = None
        if volumes.size:
            volume = LinearScale(
                (float(volumes.min()), float(volumes.max())),
                (height, height * (1.0 - volume_band)),
            )

        return cls(x=x, y=y, volume=volume, pixel_width=width, pixel_height=height)


__all__ = [
    "Margins",
    "Viewport",
    "LinearScale",
    "TimeScale",
    "ScaleModel",
    "axis_ticks",
]
