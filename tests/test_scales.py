import numpy as np
import pandas as pd
import pytest

from stockchart.chart.scales import (
    LinearScale,
    Margins,
    ScaleModel,
    TimeScale,
    Viewport,
    axis_ticks,
)
from stockchart.data.series import TimeSeries
from stockchart.exceptions import EmptyDomainError

from tests.chart_utils import make_series


class TestViewport:

    def test_plot_area_excludes_margins(self, viewport):
        assert viewport.plot_width == 500
        assert viewport.plot_height == 320
        assert viewport.is_drawable

    def test_from_window_uses_share_of_height(self):
        vp = Viewport.from_window(1000, 800, margins=Margins(10, 10, 10, 10), height_ratio=0.85)
        assert vp.width == 1000
        assert vp.height == pytest.approx(680)
        assert vp.plot_height == pytest.approx(660)

    def test_too_small_is_not_drawable(self):
        assert not Viewport(80, 60).is_drawable


class TestScaleModel:

    def test_domains_and_ranges(self, viewport):
        series = make_series([10.0, 20.0, 15.0], volumes=[100, 0, 300])
        scales = ScaleModel.compute(series, viewport)

        assert scales.x_domain == (pd.Timestamp("2024-01-01"), pd.Timestamp("2024-01-03"))
        assert scales.y_domain == (5.0, 20.0)
        assert scales.pixel_width == 500
        assert scales.baseline == 320

        assert scales.x(series[0].date) == pytest.approx(0.0)
        assert scales.x(series[-1].date) == pytest.approx(500.0)
        assert scales.y(20.0) == pytest.approx(0.0)
        assert scales.y(5.0) == pytest.approx(320.0)

    def test_closes_fall_inside_the_padded_domain(self, viewport, trending_series):
        scales = ScaleModel.compute(trending_series, viewport)
        ys = scales.y(trending_series.closes)
        assert np.all(ys >= -1e-9)
        assert np.all(ys <= 320 + 1e-9)
        assert scales.y_domain[0] == pytest.approx(trending_series.closes.min() - 5.0)

    def test_volume_occupies_bottom_band(self, viewport):
        series = make_series([10.0, 20.0, 15.0], volumes=[100, 0, 300])
        scales = ScaleModel.compute(series, viewport, volume_band=0.25)

        # zero volume is excluded from the domain
        assert scales.volume_domain == (100.0, 300.0)
        assert scales.volume(100) == pytest.approx(320.0)
        assert scales.volume(300) == pytest.approx(240.0)

    def test_no_volume_means_no_volume_scale(self, viewport):
        series = make_series([10.0, 11.0], volumes=[None, 0])
        scales = ScaleModel.compute(series, viewport)
        assert scales.volume is None
        assert scales.volume_domain is None

    def test_empty_series_raises(self, viewport):
        with pytest.raises(EmptyDomainError):
            ScaleModel.compute(TimeSeries(), viewport)
        with pytest.raises(EmptyDomainError):
            ScaleModel.compute(None, viewport)

    def test_single_record_is_centred(self, viewport):
        series = make_series([42.0], volumes=[10])
        scales = ScaleModel.compute(series, viewport)

        t0, t1 = scales.x_domain
        assert t1 - t0 == pd.Timedelta(days=1)
        assert scales.x(series[0].date) == pytest.approx(250.0)
        assert np.isfinite(scales.y(42.0))
        assert np.isfinite(scales.volume(10))

    def test_flat_prices_without_padding(self, viewport):
        series = make_series([7.0, 7.0, 7.0])
        scales = ScaleModel.compute(series, viewport, price_padding=0.0)
        assert scales.y_domain == (6.5, 7.5)
        assert scales.y(7.0) == pytest.approx(160.0)

    def test_invert_recovers_record_dates(self, viewport, trending_series):
        scales = ScaleModel.compute(trending_series, viewport)
        for record in trending_series[::17]:
            recovered = scales.x.invert(scales.x(record.date))
            assert abs(recovered - pd.Timestamp(record.date)) < pd.Timedelta(seconds=1)


class TestLinearScale:

    def test_invert(self):
        scale = LinearScale((0, 100), (300, 0))
        assert scale(25) == pytest.approx(225)
        assert scale.invert(225) == pytest.approx(25)
        np.testing.assert_allclose(scale([0, 100]), [300, 0])

    def test_nice_ticks(self):
        scale = LinearScale((0, 100), (0, 1))
        ticks = scale.ticks(10)
        np.testing.assert_allclose(ticks, np.arange(0, 101, 10))
        assert scale.tick_format(ticks[:2]) == ["0", "10"]

    def test_tick_format_uses_step_precision(self):
        scale = LinearScale((0, 1), (0, 1))
        assert scale.tick_format([0.5, 1.0]) == ["0.5", "1.0"]


class TestTimeScale:

    def test_timezone_is_preserved(self):
        scale = TimeScale(
            (pd.Timestamp("2024-01-01", tz="UTC"), pd.Timestamp("2024-01-03", tz="UTC")), (0, 100)
        )
        assert scale(pd.Timestamp("2024-01-02", tz="UTC")) == pytest.approx(50.0)
        assert scale.invert(50) == pd.Timestamp("2024-01-02", tz="UTC")

    def test_yearly_span_uses_quarter_ticks(self):
        scale = TimeScale((pd.Timestamp("2024-01-01"), pd.Timestamp("2024-12-31")), (0, 800))
        ticks = scale.ticks(10)
        assert ticks == [pd.Timestamp(d) for d in ("2024-01-01", "2024-04-01", "2024-07-01", "2024-10-01")]
        assert scale.tick_format(ticks) == ["2024", "April", "July", "October"]

    def test_axis_ticks_pairs_positions_with_labels(self):
        scale = TimeScale((pd.Timestamp("2024-01-01"), pd.Timestamp("2024-12-31")), (0, 800))
        pairs = axis_ticks(scale, 10)
        assert pairs[0] == (pytest.approx(0.0), "2024")
        assert all(isinstance(pos, float) for pos, _ in pairs)
        assert [pos for pos, _ in pairs] == sorted(pos for pos, _ in pairs)
