"""
Drawing collaborator contract.

The chart engine never touches a toolkit directly: it creates, updates and
removes styled elements through a DrawingSurface. Elements belong to a group
(one per chart instance) so a chart can clear its own output without
touching anything else on the surface.

MemorySurface keeps elements in a list and is used headless (tests, snapshot
tooling); ui.pyqtgraph_surface.PyQtGraphSurface draws them with pyqtgraph.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple

import numpy as np
from loguru import logger

from .curves import LINEAR
from .scales import axis_ticks

_element_ids = itertools.count(1)


class Orientation(str, Enum):
    BOTTOM = "bottom"
    RIGHT = "right"
    LEFT = "left"
    TOP = "top"


@dataclass(frozen=True)
class PathStyle:
    """
    Attributes:
        color: stroke (or marker fill) color
        width: stroke width in pixels
        dash: dash pattern, None for a solid stroke
        curve: 'linear' or 'basis' interpolation between points
        marker_radius: when set, each point is drawn as a circle of this radius
    """
    color: str
    width: float = 1.0
    dash: Optional[Tuple[float, ...]] = None
    curve: str = LINEAR
    marker_radius: Optional[float] = None


@dataclass(frozen=True)
class TextStyle:
    color: str = "#000000"
    font_family: str = "sans-serif"
    font_size: float = 12.0
    font_weight: int = 400


@dataclass(eq=False)
class Element:
    """Handle to one drawn element; 'native' holds the backend object."""
    kind: str
    group: str
    attrs: Dict[str, Any]
    visible: bool = True
    native: Any = None
    id: int = field(default_factory=lambda: next(_element_ids))

    def __repr__(self) -> str:
        return f"Element(id={self.id}, kind={self.kind!r}, group={self.group!r}, visible={self.visible})"


class PointerHandler(Protocol):
    def on_enter(self, x: float, y: float) -> None: ...

    def on_move(self, x: float, y: float) -> None: ...

    def on_leave(self) -> None: ...


@dataclass
class _PointerSubscription:
    area: Tuple[float, float]
    handler: PointerHandler
    inside: bool = False

    def contains(self, x: float, y: float) -> bool:
        width, height = self.area
        return 0.0 <= x <= width and 0.0 <= y <= height


class DrawingSurface(ABC):
    """
    Base class for drawing backends.

    Subclasses implement element creation/update/removal; pointer dispatch
    (enter/move/leave against each subscription's plot area) is shared.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, _PointerSubscription] = {}
        self.plot_area: Tuple[float, float] = (0.0, 0.0)

    # ----- elements -----

    @abstractmethod
    def create_path(self, group: str, points, style: PathStyle) -> Element:
        """Stroke through (n, 2) pixel points."""

    @abstractmethod
    def create_rect(self, group: str, x: float, y: float, width: float, height: float,
                    fill: str) -> Element:
        """Filled rectangle with top-left corner (x, y)."""

    @abstractmethod
    def create_axis(self, group: str, scale, orientation: Orientation, tick_count: int = 10) -> Element:
        """Axis labelled from scale ticks."""

    @abstractmethod
    def create_text(self, group: str, content: str, position: Tuple[float, float],
                    style: TextStyle) -> Element:
        """Text anchored at its top-left corner."""

    @abstractmethod
    def update_path(self, element: Element, points) -> None:
        """Replace the points of an existing path."""

    @abstractmethod
    def set_visible(self, element: Element, visible: bool) -> None:
        """Show or hide an element."""

    @abstractmethod
    def remove(self, element: Element) -> None:
        """Remove one element."""

    @abstractmethod
    def remove_all(self, group: str) -> None:
        """Remove every element of a group."""

    def set_plot_area(self, width: float, height: float) -> None:
        """Pixel size of the plot area; backends map it onto their canvas."""
        self.plot_area = (float(width), float(height))

    # ----- pointer -----

    def subscribe_pointer(self, key: str, area: Tuple[float, float], handler: PointerHandler) -> None:
        """Register handler under key, replacing any previous handler with that key."""
        self._subscriptions[key] = _PointerSubscription((float(area[0]), float(area[1])), handler)

    def unsubscribe_pointer(self, key: str) -> None:
        self._subscriptions.pop(key, None)

    def dispatch_pointer(self, x: float, y: float) -> None:
        """Deliver a pointer position in plot coordinates to every subscription."""
        for sub in list(self._subscriptions.values()):
            if sub.contains(x, y):
                if sub.inside:
                    sub.handler.on_move(x, y)
                else:
                    sub.inside = True
                    sub.handler.on_enter(x, y)
            elif sub.inside:
                sub.inside = False
                sub.handler.on_leave()

    def dispatch_leave(self) -> None:
        """Pointer left the surface entirely."""
        for sub in list(self._subscriptions.values()):
            if sub.inside:
                sub.inside = False
                sub.handler.on_leave()


class MemorySurface(DrawingSurface):
    """In-memory surface: elements are kept in creation order."""

    def __init__(self) -> None:
        super().__init__()
        self._elements: List[Element] = []

    def _add(self, kind: str, group: str, **attrs) -> Element:
        element = Element(kind=kind, group=group, attrs=attrs)
        self._elements.append(element)
        return element

    def create_path(self, group, points, style):
        return self._add("path", group, points=np.asarray(points, dtype=float).reshape(-1, 2), style=style)

    def create_rect(self, group, x, y, width, height, fill):
        return self._add("rect", group, x=float(x), y=float(y), width=float(width),
                         height=float(height), fill=fill)

    def create_axis(self, group, scale, orientation, tick_count=10):
        return self._add("axis", group, scale=scale, orientation=Orientation(orientation),
                         ticks=axis_ticks(scale, tick_count))

    def create_text(self, group, content, position, style):
        return self._add("text", group, content=content,
                         position=(float(position[0]), float(position[1])), style=style)

    def update_path(self, element, points):
        element.attrs["points"] = np.asarray(points, dtype=float).reshape(-1, 2)

    def set_visible(self, element, visible):
        element.visible = bool(visible)

    def remove(self, element):
        try:
            self._elements.remove(element)
        except ValueError:
            logger.debug("Element {} already removed", element.id)

    def remove_all(self, group):
        self._elements = [e for e in self._elements if e.group != group]

    def elements(self, group: Optional[str] = None, kind: Optional[str] = None) -> List[Element]:
        return [
            e for e in self._elements
            if (group is None or e.group == group) and (kind is None or e.kind == kind)
        ]

    def __len__(self) -> int:
        return len(self._elements)


__all__ = [
    "Orientation",
    "PathStyle",
    "TextStyle",
    "Element",
    "PointerHandler",
    "DrawingSurface",
    "MemorySurface",
]
