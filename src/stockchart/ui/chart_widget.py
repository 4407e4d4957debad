"""
Desktop host for a StockChart: a QWidget wrapping a pyqtgraph PlotWidget.
"""
from __future__ import annotations

from typing import Optional

from loguru import logger
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..chart.engine import StockChart, viewport_from_settings
from ..chart.layout import ResizeEvents
from ..data.series import TimeSeries
from ..utils.config import Settings, get_config
from .pyqtgraph_surface import PyQtGraphSurface

DEFAULT_WINDOW_SIZE = (960, 640)


class ChartWidget(QWidget):
    """
    Hosts one chart: forwards data, container resizes and pointer leave
    events to the engine.
    """

    def __init__(self, settings: Optional[Settings] = None, parent: Optional[QWidget] = None,
                 chart_id: Optional[str] = None):
        super().__init__(parent)
        self.settings = settings or get_config()
        self.setWindowTitle(self.settings.app.title)
        self.setMinimumSize(320, 240)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.surface = PyQtGraphSurface(background=self.settings.colors.background,
                                        axis_color=self.settings.colors.axis)
        layout.addWidget(self.surface.plot_widget)

        self.resize_events = ResizeEvents()
        viewport = viewport_from_settings(self.settings, *DEFAULT_WINDOW_SIZE)
        self.chart = StockChart(self.surface, viewport, self.settings, chart_id, self.resize_events)

    def set_series(self, series: Optional[TimeSeries]) -> None:
        self.chart.on_data_changed(series)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resize_events.emit(event.size().width())

    def leaveEvent(self, event):
        self.surface.dispatch_leave()
        super().leaveEvent(event)

    def closeEvent(self, event):
        logger.debug("Disposing chart {}", self.chart.chart_id)
        self.chart.dispose()
        super().closeEvent(event)


__all__ = ["ChartWidget"]
