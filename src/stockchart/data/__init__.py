from .series import OhlcvRecord, TimeSeries, LEGEND_FIELDS
from .loader import load_csv, read_frame

__all__ = ["OhlcvRecord", "TimeSeries", "LEGEND_FIELDS", "load_csv", "read_frame"]
