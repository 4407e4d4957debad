import pytest
from pydantic import ValidationError

from stockchart.utils import config as config_module
from stockchart.utils.config import Settings, get_config, load_config


def test_config_load():
    cfg = get_config()
    assert hasattr(cfg, "app")
    assert cfg.app.name == "stockchart"
    # 49 records of lookback -> 50-close average
    assert cfg.chart.ma_window >= 0
    assert 0 < cfg.chart.height_ratio <= 1


def test_default_file_matches_builtin_defaults(monkeypatch):
    monkeypatch.delenv("STOCKCHART_LOG_LEVEL", raising=False)
    monkeypatch.delenv("STOCKCHART_MA_WINDOW", raising=False)
    cfg = load_config(str(config_module._default_config_path))
    defaults = Settings()
    assert cfg.chart == defaults.chart
    assert cfg.colors == defaults.colors
    assert cfg.legend == defaults.legend


def test_env_overrides(monkeypatch, tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("chart:\n  ma_window: 10\n")
    monkeypatch.setenv("STOCKCHART_MA_WINDOW", "20")
    monkeypatch.setenv("STOCKCHART_LOG_LEVEL", "debug")

    cfg = load_config(str(path))
    assert cfg.chart.ma_window == 20
    assert cfg.logging.level == "DEBUG"


def test_settings_are_frozen():
    cfg = Settings()
    with pytest.raises(ValidationError):
        cfg.app = None


@pytest.mark.parametrize("body", [
    "chart:\n  height_ratio: 1.5\n",
    "chart:\n  volume_band: 0\n",
    "chart:\n  ma_window: -1\n",
    "chart:\n  margins:\n    top: -10\n",
])
def test_business_rules(monkeypatch, tmp_path, body):
    monkeypatch.delenv("STOCKCHART_MA_WINDOW", raising=False)
    path = tmp_path / "bad.yaml"
    path.write_text(body)
    with pytest.raises(ValueError):
        load_config(str(path))
    # validation can be skipped explicitly
    assert load_config(str(path), validate=False) is not None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_root_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(str(path))
