from datetime import datetime

import numpy as np
import pytest

from stockchart.chart import moving_average
from stockchart.chart.crosshair import (
    CrosshairController,
    CrosshairMode,
    LegendStyle,
    format_legend,
)
from stockchart.chart.nearest import NearestPointIndex
from stockchart.chart.renderer import ChartRenderer
from stockchart.chart.scales import ScaleModel
from stockchart.chart.volume import classify
from stockchart.data.series import OhlcvRecord

from tests.chart_utils import make_series

GROUP = "chart.crosshair"


@pytest.fixture
def chart(memory_surface, viewport):
    series = make_series([10.0, 12.0, 11.0, 15.0, 14.0], volumes=[100, 200, 150, 400, 300])
    scales = ScaleModel.compute(series, viewport)
    handles = ChartRenderer(memory_surface, GROUP).render(
        series, scales, moving_average.compute(series), classify(series)
    )
    controller = CrosshairController(memory_surface, GROUP, scales, NearestPointIndex(series), handles)
    return series, scales, handles, controller


def test_starts_hidden(chart):
    _, _, _, controller = chart
    assert controller.mode is CrosshairMode.HIDDEN
    assert controller.state.current_record is None
    assert controller.legend_lines == []


def test_enter_snaps_to_nearest_record(chart):
    series, scales, handles, controller = chart
    # a little to the right of the third record
    controller.on_enter(scales.x(series[2].date) + 10, 100)

    assert controller.mode is CrosshairMode.TRACKING
    assert controller.state.current_record == series[2]
    assert all(element.visible for element in handles.all())

    px, py = scales.x(series[2].date), scales.y(11.0)
    np.testing.assert_allclose(handles.marker.attrs["points"], [[px, py]])
    np.testing.assert_allclose(handles.horizontal.attrs["points"], [[px, py], [scales.pixel_width, py]])
    np.testing.assert_allclose(handles.vertical.attrs["points"], [[px, py], [px, scales.pixel_height]])


def test_legend_lines(chart):
    series, scales, _, controller = chart
    controller.on_enter(scales.x(series[3].date), 0)
    assert controller.legend_lines == [
        "date: 1/4/2024",
        "open: 14.50",
        "high: 16.00",
        "low: 14.00",
        "close: 15.00",
        "volume: 400",
    ]


def test_move_replaces_legend(chart, memory_surface):
    series, scales, _, controller = chart
    controller.on_enter(scales.x(series[0].date), 0)
    for record in series:
        controller.on_move(scales.x(record.date), 0)
    assert controller.state.current_record == series[-1]
    texts = memory_surface.elements(GROUP, "text")
    assert len(texts) == 6
    assert texts[0].attrs["position"] == (15.0, 9.0)
    assert texts[1].attrs["position"] == (15.0, 29.0)


def test_leave_hides_primitives(chart):
    series, scales, handles, controller = chart
    controller.on_enter(scales.x(series[1].date), 0)
    controller.on_leave()
    assert controller.mode is CrosshairMode.HIDDEN
    assert not controller.state.visible
    assert all(not element.visible for element in handles.all())

    # re-entering tracks again
    controller.on_enter(scales.x(series[4].date), 0)
    assert controller.state.current_record == series[4]


def test_pointer_dispatch_drives_the_state_machine(chart, memory_surface):
    series, scales, _, controller = chart
    memory_surface.subscribe_pointer(GROUP, (scales.pixel_width, scales.pixel_height), controller)

    memory_surface.dispatch_pointer(10, 10)
    assert controller.mode is CrosshairMode.TRACKING
    memory_surface.dispatch_pointer(scales.pixel_width - 1, 10)
    assert controller.state.current_record == series[-1]
    memory_surface.dispatch_pointer(scales.pixel_width + 20, 10)
    assert controller.mode is CrosshairMode.HIDDEN

    memory_surface.dispatch_pointer(10, 10)
    memory_surface.dispatch_leave()
    assert controller.mode is CrosshairMode.HIDDEN


def test_detach_removes_legend(chart, memory_surface):
    series, scales, _, controller = chart
    controller.on_enter(scales.x(series[0].date), 0)
    controller.detach()
    assert memory_surface.elements(GROUP, "text") == []
    assert controller.mode is CrosshairMode.HIDDEN


def test_format_legend_missing_volume_and_custom_format():
    record = OhlcvRecord(date=datetime(2024, 2, 29), open=1, high=2.555, low=0.5, close=1.26, volume=None)
    lines = format_legend(record, date_format="%Y-%m-%d", price_decimals=1, date_zero_pad=True)
    assert lines[0] == "date: 2024-02-29"
    assert lines[-1] == "volume: n/a"
    assert lines[4] == "close: 1.3"


def test_legend_style_from_config(settings):
    style = LegendStyle.from_config(settings.legend)
    assert style.offset == (15.0, 9.0)
    assert style.line_spacing == 20.0
    assert style.text.font_size == 16.0


@pytest.mark.parametrize("day, expected", [
    (datetime(2024, 1, 4), "date: 1/4/2024"),
    (datetime(2024, 10, 20), "date: 10/20/2024"),
    (datetime(2000, 12, 1), "date: 12/1/2000"),
])
def test_legend_date_matches_us_locale(day, expected):
    record = OhlcvRecord(date=day, open=1, high=2, low=0.5, close=1.5, volume=10)
    assert format_legend(record)[0] == expected
    assert format_legend(record, date_zero_pad=True)[0] == "date: " + day.strftime("%m/%d/%Y")
