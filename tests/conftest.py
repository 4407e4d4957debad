"""
Pytest configuration and shared fixtures for the StockChart test suite.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stockchart.chart.scales import Viewport
from stockchart.chart.surface import MemorySurface
from stockchart.data.series import TimeSeries
from stockchart.utils.config import Settings

from tests.chart_utils import make_trending_series


@pytest.fixture
def memory_surface() -> MemorySurface:
    return MemorySurface()


@pytest.fixture
def settings() -> Settings:
    """Built-in defaults, independent of configs/default.yaml and the environment."""
    return Settings()


@pytest.fixture
def viewport() -> Viewport:
    # default margins leave a 500x320 plot area
    return Viewport(600, 400)


@pytest.fixture
def trending_series() -> TimeSeries:
    return make_trending_series()
