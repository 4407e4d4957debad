"""
Chart computation and interaction engine.

- scales: time/price/volume coordinate mappings
- moving_average: trailing mean of closes
- nearest: nearest record by date
- volume: volume bar colors
- renderer: static layers through a DrawingSurface
- crosshair: pointer state machine and legend
- layout: aspect-preserving resize
- engine: StockChart orchestrator
"""

from .crosshair import CrosshairController, CrosshairMode, CrosshairState
from .engine import StockChart
from .layout import ResizeEvents, ResponsiveLayout
from .moving_average import MovingAverageCalculator, MovingAveragePoint
from .nearest import NearestPointIndex, locate
from .renderer import ChartRenderer, CrosshairHandles
from .scales import Margins, ScaleModel, Viewport
from .surface import DrawingSurface, MemorySurface
from .volume import VolumeColor, classify

__all__ = [
    "ChartRenderer",
    "CrosshairController",
    "CrosshairHandles",
    "CrosshairMode",
    "CrosshairState",
    "DrawingSurface",
    "Margins",
    "MemorySurface",
    "MovingAverageCalculator",
    "MovingAveragePoint",
    "NearestPointIndex",
    "ResizeEvents",
    "ResponsiveLayout",
    "ScaleModel",
    "StockChart",
    "Viewport",
    "VolumeColor",
    "classify",
    "locate",
]
