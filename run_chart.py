#!/usr/bin/env python3
"""
Run chart helper: executes the desktop launcher using package context.

Usage:
  python run_chart.py data/AAPL.csv [--window 49]

This ensures the stockchart package under src/ is importable regardless of
the current working directory or whether it was installed.
"""
import runpy
import sys
from pathlib import Path

# Ensure src/ is on sys.path
SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

runpy.run_module("stockchart.ui.app", run_name="__main__")
