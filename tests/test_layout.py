from stockchart.chart.layout import ResizeEvents, ResponsiveLayout
from stockchart.chart.scales import Viewport


def _layout(events=None):
    rendered = []
    layout = ResponsiveLayout("abc", rendered.append, events)
    return layout, rendered


def test_resize_preserves_aspect_ratio():
    events = ResizeEvents()
    layout, rendered = _layout(events)
    layout.attach(Viewport(800, 400))

    events.emit(600)
    assert rendered == [Viewport(600, 300)]


def test_aspect_is_captured_once():
    layout, _ = _layout()
    layout.attach(Viewport(800, 400))
    layout.attach(Viewport(500, 500))
    assert layout.aspect == 2.0
    assert layout.target_viewport(300) == Viewport(300, 150)


def test_height_is_rounded():
    layout, _ = _layout()
    layout.attach(Viewport(900, 400))
    assert layout.target_viewport(500).height == 222.0


def test_listener_is_registered_once_per_chart():
    events = ResizeEvents()
    layout, rendered = _layout(events)
    for width in (800, 700, 600):
        layout.attach(Viewport(width, width / 2))
    assert len(events) == 1
    assert layout.key in events

    events.emit(400)
    assert len(rendered) == 1


def test_zero_or_tiny_width_is_skipped():
    events = ResizeEvents()
    layout, rendered = _layout(events)
    layout.attach(Viewport(800, 400))

    events.emit(0)
    # margins swallow the whole plot area
    events.emit(60)
    assert rendered == []


def test_detach_stops_resizes():
    events = ResizeEvents()
    layout, rendered = _layout(events)
    layout.attach(Viewport(800, 400))
    layout.detach()
    events.emit(600)
    assert rendered == []
    assert len(events) == 0


def test_resize_before_attach_is_ignored():
    layout, rendered = _layout()
    layout.on_resize(500)
    assert rendered == []
