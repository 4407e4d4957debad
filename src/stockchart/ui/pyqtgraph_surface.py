"""
PyQtGraph drawing surface.

The plot ViewBox is locked to the chart's pixel space (x to the right, y
downwards) so the engine's pixel coordinates are used as-is. Axes are the
PlotItem's bottom and right axes with fixed ticks taken from the chart
scales.
"""

from __future__ import annotations

import re
from typing import Optional

import numpy as np
import pyqtgraph as pg
from loguru import logger
from pyqtgraph.Qt import QtCore, QtGui, QtWidgets

from ..chart.curves import stroke_points
from ..chart.scales import axis_ticks
from ..chart.surface import DrawingSurface, Element, Orientation, PathStyle, TextStyle

_RGBA = re.compile(r"rgba?\(([^)]*)\)")


def to_qcolor(spec: str) -> QtGui.QColor:
    """QColor from '#rrggbb', a color name or a CSS 'rgba(r, g, b, a)' string."""
    match = _RGBA.fullmatch(spec.strip())
    if match:
        parts = [float(p) for p in match.group(1).split(",")]
        alpha = parts[3] if len(parts) > 3 else 1.0
        return QtGui.QColor(int(parts[0]), int(parts[1]), int(parts[2]), int(round(alpha * 255)))
    return QtGui.QColor(spec)


def _pen(style: PathStyle):
    if style.dash:
        return pg.mkPen(color=to_qcolor(style.color), width=style.width, dash=list(style.dash))
    return pg.mkPen(color=to_qcolor(style.color), width=style.width)


class PyQtGraphSurface(DrawingSurface):
    """DrawingSurface backed by a pyqtgraph PlotWidget."""

    def __init__(self, plot_widget: Optional[pg.PlotWidget] = None, background: str = "#ffffff",
                 axis_color: str = "#333333"):
        super().__init__()
        self.plot_widget = plot_widget or pg.PlotWidget()
        self.plot_widget.setBackground(to_qcolor(background))
        self.plot_item = self.plot_widget.getPlotItem()
        self.plot_item.hideButtons()
        self.plot_item.hideAxis("left")
        self.plot_item.showAxis("bottom")
        self.plot_item.showAxis("right")
        for name in ("bottom", "right"):
            axis = self.plot_item.getAxis(name)
            axis.setPen(to_qcolor(axis_color))
            axis.setTextPen(to_qcolor(axis_color))

        vb = self.plot_item.getViewBox()
        vb.invertY(True)
        vb.setMouseEnabled(x=False, y=False)
        vb.setMenuEnabled(False)
        vb.disableAutoRange()

        self._elements: list = []
        self.plot_item.scene().sigMouseMoved.connect(self._on_mouse_moved)

    # ----- helpers -----

    def _add(self, kind: str, group: str, native, **attrs) -> Element:
        element = Element(kind=kind, group=group, attrs=attrs, native=native)
        self._elements.append(element)
        return element

    @staticmethod
    def _path_data(points, style: PathStyle):
        pts = stroke_points(points, style.curve)
        return pts[:, 0], pts[:, 1]

    # ----- DrawingSurface -----

    def set_plot_area(self, width, height):
        super().set_plot_area(width, height)
        self.plot_item.getViewBox().setRange(xRange=(0, width), yRange=(0, height), padding=0)

    def create_path(self, group, points, style):
        x, y = self._path_data(points, style)
        if style.marker_radius:
            item = pg.PlotDataItem(
                x, y, pen=None, symbol="o", symbolSize=2 * style.marker_radius,
                symbolBrush=pg.mkBrush(to_qcolor(style.color)), symbolPen=pg.mkPen(to_qcolor(style.color)),
            )
        else:
            item = pg.PlotDataItem(x, y, pen=_pen(style))
        self.plot_item.addItem(item)
        return self._add("path", group, item, points=np.asarray(points, dtype=float).reshape(-1, 2), style=style)

    def create_rect(self, group, x, y, width, height, fill):
        item = QtWidgets.QGraphicsRectItem(float(x), float(y), float(width), float(height))
        item.setPen(pg.mkPen(None))
        item.setBrush(pg.mkBrush(to_qcolor(fill)))
        self.plot_item.addItem(item)
        return self._add("rect", group, item, x=float(x), y=float(y), width=float(width),
                         height=float(height), fill=fill)

    def create_axis(self, group, scale, orientation, tick_count=10):
        orientation = Orientation(orientation)
        ticks = axis_ticks(scale, tick_count)
        axis = self.plot_item.getAxis(orientation.value)
        axis.setTicks([ticks])
        self.plot_item.showAxis(orientation.value)
        return self._add("axis", group, axis, scale=scale, orientation=orientation, ticks=ticks)

    def create_text(self, group, content, position, style: TextStyle):
        item = pg.TextItem(text=content, color=to_qcolor(style.color), anchor=(0, 0))
        font = QtGui.QFont(style.font_family.split(",")[0].strip())
        font.setPixelSize(int(style.font_size))
        font.setBold(style.font_weight >= 600)
        item.setFont(font)
        item.setPos(float(position[0]), float(position[1]))
        self.plot_item.addItem(item)
        return self._add("text", group, item, content=content,
                         position=(float(position[0]), float(position[1])), style=style)

    def update_path(self, element, points):
        element.attrs["points"] = np.asarray(points, dtype=float).reshape(-1, 2)
        x, y = self._path_data(points, element.attrs["style"])
        element.native.setData(x, y)

    def set_visible(self, element, visible):
        element.visible = bool(visible)
        element.native.setVisible(bool(visible))

    def remove(self, element):
        if element not in self._elements:
            return
        self._elements.remove(element)
        if element.kind == "axis":
            element.native.setTicks(None)
        else:
            self.plot_item.removeItem(element.native)

    def remove_all(self, group):
        for element in [e for e in self._elements if e.group == group]:
            self.remove(element)

    # ----- pointer -----

    def _on_mouse_moved(self, pos: QtCore.QPointF) -> None:
        vb = self.plot_item.getViewBox()
        if not vb.sceneBoundingRect().contains(pos):
            self.dispatch_leave()
            return
        point = vb.mapSceneToView(pos)
        try:
            self.dispatch_pointer(point.x(), point.y())
        except Exception as e:
            logger.exception(f"Pointer handling failed: {e}")


__all__ = ["PyQtGraphSurface", "to_qcolor"]
