"""
Static chart layers.

ChartRenderer clears its group on the surface, then draws, in order: the
bottom time axis, the right price axis, the price stroke, the smoothed
moving-average stroke, the volume histogram, and finally the hidden
crosshair primitives whose handles it returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from ..data.series import TimeSeries
from ..utils.config import Settings
from .curves import BASIS, LINEAR
from .moving_average import MovingAveragePoint
from .scales import ScaleModel, Viewport
from .surface import DrawingSurface, Element, Orientation, PathStyle, TextStyle
from .volume import VolumeColor, VolumePalette


@dataclass(frozen=True)
class RenderStyle:
    price: PathStyle = PathStyle(color="#4682b4", width=1.5)
    moving_average: PathStyle = PathStyle(color="#FF8900", width=1.0, curve=BASIS)
    guide: PathStyle = PathStyle(color="#67809f", width=1.5, dash=(3.0, 3.0))
    marker: PathStyle = PathStyle(color="#000000", marker_radius=4.5)
    palette: VolumePalette = field(default_factory=VolumePalette)
    bar_width: float = 1.0
    x_ticks: int = 10
    y_ticks: int = 10
    message: TextStyle = TextStyle(color="rgba(0, 0, 0, 0.6)", font_size=16.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderStyle":
        chart, colors, crosshair, legend = settings.chart, settings.colors, settings.crosshair, settings.legend
        return cls(
            price=PathStyle(color=colors.price, width=chart.price_stroke_width, curve=LINEAR),
            moving_average=PathStyle(color=colors.moving_average, width=chart.ma_stroke_width, curve=BASIS),
            guide=PathStyle(color=crosshair.color, width=crosshair.width,
                            dash=tuple(crosshair.dash) or None),
            marker=PathStyle(color=crosshair.marker_color, marker_radius=crosshair.marker_radius),
            palette=VolumePalette(rising=colors.rising, falling=colors.falling),
            bar_width=chart.volume_bar_width,
            x_ticks=chart.x_ticks,
            y_ticks=chart.y_ticks,
            message=TextStyle(color=legend.color, font_family=legend.font_family,
                              font_size=legend.font_size, font_weight=legend.font_weight),
        )


@dataclass(frozen=True)
class CrosshairHandles:
    """Per-chart crosshair primitives, created hidden."""
    marker: Element
    horizontal: Element
    vertical: Element

    def all(self) -> Tuple[Element, Element, Element]:
        return (self.marker, self.horizontal, self.vertical)


class ChartRenderer:
    """Draws one chart instance's static layers into its surface group."""

    def __init__(self, surface: DrawingSurface, group: str, style: Optional[RenderStyle] = None):
        self.surface = surface
        self.group = group
        self.style = style or RenderStyle()

    def clear(self) -> None:
        self.surface.remove_all(self.group)

    def render(self, series: TimeSeries, scales: ScaleModel,
               ma_series: Sequence[MovingAveragePoint],
               volume_colors: Sequence[VolumeColor]) -> CrosshairHandles:
        """
        Draw every static layer, replacing any previous output of this chart.

        Returns:
            CrosshairHandles for the hidden marker and guides
        """
        self.clear()
        surface, group, style = self.surface, self.group, self.style

        surface.create_axis(group, scales.x, Orientation.BOTTOM, style.x_ticks)
        surface.create_axis(group, scales.y, Orientation.RIGHT, style.y_ticks)

        price_points = np.column_stack([scales.x(series.dates), scales.y(series.closes)])
        surface.create_path(group, price_points, style.price)

        if ma_series:
            ma_dates = pd.DatetimeIndex([p.date for p in ma_series]).as_unit("ns").asi8
            ma_values = np.fromiter((p.average for p in ma_series), dtype=float, count=len(ma_series))
            surface.create_path(group, np.column_stack([scales.x(ma_dates), scales.y(ma_values)]),
                                style.moving_average)

        bars = self._draw_volume(series, scales, volume_colors)

        marker = surface.create_path(group, [[0.0, 0.0]], style.marker)
        horizontal = surface.create_path(group, [[0.0, 0.0], [0.0, 0.0]], style.guide)
        vertical = surface.create_path(group, [[0.0, 0.0], [0.0, 0.0]], style.guide)
        handles = CrosshairHandles(marker=marker, horizontal=horizontal, vertical=vertical)
        for element in handles.all():
            surface.set_visible(element, False)

        logger.debug("Rendered {} records, {} volume bars into group {}", len(series), len(bars), group)
        return handles

    def _draw_volume(self, series: TimeSeries, scales: ScaleModel,
                     volume_colors: Sequence[VolumeColor]) -> List[Element]:
        bars = series.with_volume()
        if len(bars) != len(volume_colors):
            raise ValueError(
                f"Expected one volume color per plotted bar ({len(bars)}), got {len(volume_colors)}"
            )
        if scales.volume is None or len(bars) == 0:
            return []

        xs = scales.x(bars.dates)
        tops = scales.volume(bars.volumes)
        baseline = scales.baseline
        palette, width = self.style.palette, self.style.bar_width
        return [
            self.surface.create_rect(self.group, x, top, width, baseline - top, palette.color_for(color))
            for x, top, color in zip(np.atleast_1d(xs), np.atleast_1d(tops), volume_colors)
        ]

    def render_empty(self, viewport: Viewport, message: str = "No data") -> Element:
        """Clear the chart and show a placeholder message."""
        self.clear()
        position = (max(viewport.plot_width, 0.0) / 2, max(viewport.plot_height, 0.0) / 2)
        return self.surface.create_text(self.group, message, position, self.style.message)


__all__ = ["ChartRenderer", "CrosshairHandles", "RenderStyle"]
