"""
Aspect-preserving resize handling.

ResponsiveLayout remembers the chart's width/height ratio from its first
render. On every container resize it derives the new viewport from the
container width and that ratio and re-runs the chart's render pipeline.
Listeners live in a ResizeEvents registry under 'resize.<chart_id>', so
re-rendering a chart replaces its listener instead of adding another.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from loguru import logger

from .scales import Viewport

ResizeCallback = Callable[[float], None]


class ResizeEvents:
    """Keyed container-resize listeners; one callback per key."""

    def __init__(self) -> None:
        self._listeners: Dict[str, ResizeCallback] = {}

    def on(self, key: str, callback: Optional[ResizeCallback]) -> None:
        if callback is None:
            self._listeners.pop(key, None)
        else:
            self._listeners[key] = callback

    def off(self, key: str) -> None:
        self._listeners.pop(key, None)

    def emit(self, container_width: float) -> None:
        for callback in list(self._listeners.values()):
            callback(container_width)

    def __contains__(self, key: str) -> bool:
        return key in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)


class ResponsiveLayout:
    """Recomputes the viewport on container resize and triggers a render."""

    def __init__(self, chart_id: str, render: Callable[[Viewport], None],
                 events: Optional[ResizeEvents] = None):
        self.chart_id = chart_id
        self.render = render
        self.events = events if events is not None else ResizeEvents()
        self.aspect: Optional[float] = None
        self.viewport: Optional[Viewport] = None

    @property
    def key(self) -> str:
        return f"resize.{self.chart_id}"

    def attach(self, viewport: Viewport) -> None:
        """Capture the aspect ratio once and (re)register the resize listener."""
        if self.aspect is None and viewport.width > 0 and viewport.height > 0:
            self.aspect = viewport.aspect
            logger.debug("Chart {} aspect captured: {:.3f}", self.chart_id, self.aspect)
        self.viewport = viewport
        self.events.on(self.key, self.on_resize)

    def detach(self) -> None:
        self.events.off(self.key)

    def target_viewport(self, container_width: float) -> Optional[Viewport]:
        """Viewport for a container width, or None when nothing can be drawn."""
        if self.aspect is None or self.viewport is None:
            return None
        width = float(container_width)
        height = float(round(width / self.aspect)) if width > 0 else 0.0
        if width <= 0 or height <= 0:
            return None
        target = self.viewport.resized(width, height)
        return target if target.is_drawable else None

    def on_resize(self, container_width: float) -> None:
        target = self.target_viewport(container_width)
        if target is None:
            logger.warning("Skipping resize of chart {} to width {}", self.chart_id, container_width)
            return
        self.render(target)


__all__ = ["ResizeEvents", "ResponsiveLayout"]
