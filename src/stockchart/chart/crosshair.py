"""
Pointer-driven crosshair and data legend.

CrosshairController is a two-state machine:

    HIDDEN   --enter/move-->  TRACKING
    TRACKING --move-->        TRACKING (position and legend replaced)
    TRACKING --leave-->       HIDDEN

Each move snaps to the nearest record by date, places the marker on that
record's close, extends the guides to the right and bottom plot edges and
rebuilds the legend. Moves are handled synchronously; nothing is queued.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..data.series import LEGEND_FIELDS, OhlcvRecord, PRICE_FIELDS
from ..utils.config import LegendConfig
from .nearest import NearestPointIndex
from .renderer import CrosshairHandles
from .scales import ScaleModel
from .surface import DrawingSurface, Element, TextStyle


class CrosshairMode(str, Enum):
    HIDDEN = "hidden"
    TRACKING = "tracking"


@dataclass(frozen=True)
class CrosshairState:
    visible: bool = False
    current_record: Optional[OhlcvRecord] = None


@dataclass(frozen=True)
class LegendStyle:
    text: TextStyle = TextStyle(color="rgba(0, 0, 0, 0.6)",
                                font_family="Roboto, Helvetica, Arial, sans-serif",
                                font_size=16.0)
    line_spacing: float = 20.0
    offset: Tuple[float, float] = (15.0, 9.0)
    date_format: str = "%m/%d/%Y"
    date_zero_pad: bool = False
    price_decimals: int = 2

    @classmethod
    def from_config(cls, legend: LegendConfig) -> "LegendStyle":
        return cls(
            text=TextStyle(color=legend.color, font_family=legend.font_family,
                           font_size=legend.font_size, font_weight=legend.font_weight),
            line_spacing=legend.line_spacing,
            offset=tuple(legend.offset),
            date_format=legend.date_format,
            date_zero_pad=legend.date_zero_pad,
            price_decimals=legend.price_decimals,
        )


# a 0 that starts a multi-digit number: "01/04/2024" -> "1/4/2024"
_LEADING_ZERO = re.compile(r"(?<!\d)0(?=\d)")


def _as_is(value) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_legend(record: OhlcvRecord, date_format: str = "%m/%d/%Y",
                  price_decimals: int = 2, date_zero_pad: bool = False) -> List[str]:
    """
    One "field: value" line per record field, in LEGEND_FIELDS order.

    Dates are written like a US locale date (1/4/2024) unless date_zero_pad
    keeps the zero-padded strftime output.
    """
    lines = []
    for name in LEGEND_FIELDS:
        value = getattr(record, name)
        if name == "date":
            text = value.strftime(date_format)
            if not date_zero_pad:
                text = _LEADING_ZERO.sub("", text)
        elif name in PRICE_FIELDS:
            text = f"{value:.{price_decimals}f}"
        else:
            text = _as_is(value)
        lines.append(f"{name}: {text}")
    return lines


class CrosshairController:
    """Crosshair state machine bound to one render's scales and handles."""

    def __init__(self, surface: DrawingSurface, group: str, scales: ScaleModel,
                 index: NearestPointIndex, handles: CrosshairHandles,
                 legend: Optional[LegendStyle] = None):
        self.surface = surface
        self.group = group
        self.scales = scales
        self.index = index
        self.handles = handles
        self.legend = legend or LegendStyle()
        self._state = CrosshairState()
        self._legend_elements: List[Element] = []

    @property
    def state(self) -> CrosshairState:
        return self._state

    @property
    def mode(self) -> CrosshairMode:
        return CrosshairMode.TRACKING if self._state.visible else CrosshairMode.HIDDEN

    @property
    def legend_lines(self) -> List[str]:
        return [e.attrs.get("content", "") for e in self._legend_elements]

    # ----- pointer events -----

    def on_enter(self, x: float, y: float) -> None:
        self._track(x)

    def on_move(self, x: float, y: float) -> None:
        self._track(x)

    def on_leave(self) -> None:
        if not self._state.visible:
            return
        for element in self.handles.all():
            self.surface.set_visible(element, False)
        self._state = CrosshairState(visible=False, current_record=self._state.current_record)

    # ----- internals -----

    def _track(self, x: float) -> None:
        if not self._state.visible:
            for element in self.handles.all():
                self.surface.set_visible(element, True)

        record = self.index.locate(self.scales.x.invert(x))
        px = self.scales.x(record.date)
        py = self.scales.y(record.close)

        self.surface.update_path(self.handles.marker, [[px, py]])
        self.surface.update_path(self.handles.horizontal, [[px, py], [self.scales.pixel_width, py]])
        self.surface.update_path(self.handles.vertical, [[px, py], [px, self.scales.pixel_height]])
        self._rebuild_legend(record)

        self._state = CrosshairState(visible=True, current_record=record)

    def _rebuild_legend(self, record: OhlcvRecord) -> None:
        for element in self._legend_elements:
            self.surface.remove(element)
        ox, oy = self.legend.offset
        lines = format_legend(record, self.legend.date_format, self.legend.price_decimals,
                              self.legend.date_zero_pad)
        self._legend_elements = [
            self.surface.create_text(self.group, line, (ox, oy + i * self.legend.line_spacing),
                                     self.legend.text)
            for i, line in enumerate(lines)
        ]

    def detach(self) -> None:
        """Drop the legend and hide the crosshair; used before a re-render."""
        for element in self._legend_elements:
            self.surface.remove(element)
        self._legend_elements = []
        self.on_leave()


__all__ = ["CrosshairController", "CrosshairMode", "CrosshairState", "LegendStyle", "format_legend"]
