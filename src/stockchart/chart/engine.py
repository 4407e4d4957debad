"""
StockChart: one interactive chart instance.

The host calls on_data_changed(series) whenever a new series arrives and
forwards container resizes through a ResizeEvents registry. Each render runs
scales -> moving average / volume colors -> static layers -> crosshair
attachment, in that order, against the chart's own surface group.
"""

from __future__ import annotations

import uuid
from typing import Optional

import pandas as pd
from loguru import logger

from ..data.series import TimeSeries
from ..utils.config import Settings, get_config
from . import moving_average
from .crosshair import CrosshairController, LegendStyle
from .layout import ResizeEvents, ResponsiveLayout
from .nearest import NearestPointIndex
from .renderer import ChartRenderer, CrosshairHandles, RenderStyle
from .scales import Margins, ScaleModel, Viewport
from .surface import DrawingSurface
from .volume import classify


def viewport_from_settings(settings: Settings, window_width: float, window_height: float) -> Viewport:
    m = settings.chart.margins
    return Viewport.from_window(
        window_width,
        window_height,
        margins=Margins(top=m.top, right=m.right, bottom=m.bottom, left=m.left),
        height_ratio=settings.chart.height_ratio,
    )


class StockChart:
    """Price line, moving average, volume histogram and crosshair for one series."""

    def __init__(self, surface: DrawingSurface, viewport: Viewport,
                 settings: Optional[Settings] = None, chart_id: Optional[str] = None,
                 resize_events: Optional[ResizeEvents] = None):
        self.surface = surface
        self.settings = settings or get_config()
        self.chart_id = chart_id or uuid.uuid4().hex[:8]
        self.group = f"chart.{self.chart_id}"
        self.viewport = viewport

        self.renderer = ChartRenderer(surface, self.group, RenderStyle.from_settings(self.settings))
        self.legend_style = LegendStyle.from_config(self.settings.legend)
        self.layout = ResponsiveLayout(self.chart_id, self.render, resize_events)

        self.series: Optional[TimeSeries] = None
        self.scales: Optional[ScaleModel] = None
        self.handles: Optional[CrosshairHandles] = None
        self.crosshair: Optional[CrosshairController] = None

    def on_data_changed(self, series: Optional[TimeSeries]) -> None:
        """Entry point for the host: a new (possibly empty) series arrived."""
        self.series = series
        logger.debug("Chart {} received {} records", self.chart_id, len(series) if series else 0)
        self.render()

    def render(self, viewport: Optional[Viewport] = None) -> None:
        if viewport is not None:
            self.viewport = viewport
        viewport = self.viewport
        # registered even when this cycle is skipped below
        self.layout.attach(viewport)
        if not viewport.is_drawable:
            logger.warning("Skipping render of chart {}: plot area {}x{}",
                           self.chart_id, viewport.plot_width, viewport.plot_height)
            return

        self._detach_crosshair()
        self.surface.set_plot_area(viewport.plot_width, viewport.plot_height)

        series = self.series
        if series is None or len(series) == 0:
            self.scales = None
            self.renderer.render_empty(viewport)
            return

        chart_cfg = self.settings.chart
        scales = ScaleModel.compute(
            series,
            viewport,
            price_padding=chart_cfg.price_padding,
            volume_band=chart_cfg.volume_band,
            min_time_span=pd.Timedelta(days=chart_cfg.min_time_span_days),
        )
        ma_series = moving_average.compute(series, chart_cfg.ma_window)
        volume_colors = classify(series)

        self.handles = self.renderer.render(series, scales, ma_series, volume_colors)
        self.scales = scales

        self.crosshair = CrosshairController(
            self.surface, self.group, scales, NearestPointIndex(series), self.handles, self.legend_style
        )
        self.surface.subscribe_pointer(self.group, (scales.pixel_width, scales.pixel_height), self.crosshair)

    def _detach_crosshair(self) -> None:
        self.surface.unsubscribe_pointer(self.group)
        if self.crosshair is not None:
            self.crosshair.detach()
        self.crosshair = None
        self.handles = None

    def dispose(self) -> None:
        """Remove everything this chart drew and its listeners."""
        self._detach_crosshair()
        self.layout.detach()
        self.renderer.clear()


__all__ = ["StockChart", "viewport_from_settings"]
