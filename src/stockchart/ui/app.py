"""
Desktop launcher: show a CSV of daily OHLCV records as an interactive chart.

Usage:
  python -m stockchart.ui.app data/AAPL.csv [--config configs/default.yaml] [--window 49]
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from loguru import logger
from PySide6.QtWidgets import QApplication

from ..data.loader import load_csv
from ..utils.config import get_config, load_config
from ..utils.logging import setup_logging
from .chart_widget import DEFAULT_WINDOW_SIZE, ChartWidget


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive daily OHLCV chart")
    parser.add_argument("path", help="CSV or Parquet file with date/open/high/low/close/volume columns")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--window", type=int, default=None, help="moving average lookback in records")
    parser.add_argument("--title", default=None, help="window title")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    settings = load_config(args.config) if args.config else get_config()
    if args.window is not None:
        settings = settings.model_copy(
            update={"chart": settings.chart.model_copy(update={"ma_window": args.window})}
        )
    if args.title:
        settings = settings.model_copy(update={"app": settings.app.model_copy(update={"title": args.title})})
    setup_logging(settings)

    series = load_csv(args.path)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    widget = ChartWidget(settings)
    widget.resize(*DEFAULT_WINDOW_SIZE)
    widget.set_series(series)
    widget.show()
    logger.info("Chart window opened for {}", args.path)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
