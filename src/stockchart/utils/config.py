"""
Configuration loader for StockChart.

- Loads YAML config (default: <repo>/configs/default.yaml)
- Merges relevant environment variables (STOCKCHART_LOG_LEVEL, STOCKCHART_MA_WINDOW)
- Validates important invariants (e.g. 0 < chart.height_ratio <= 1)
- Exposes a singleton get_config() for global access
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# populates os.environ from .env at repo root
load_dotenv()


class AppConfig(BaseModel):
    name: str = "stockchart"
    debug: bool = False
    title: str = "Stock Chart"

    model_config = ConfigDict(extra="ignore")


class MarginsConfig(BaseModel):
    top: float = 50.0
    right: float = 50.0
    bottom: float = 30.0
    left: float = 50.0

    model_config = ConfigDict(extra="ignore")


class ChartConfig(BaseModel):
    margins: MarginsConfig = Field(default_factory=MarginsConfig)
    # share of the window height given to the chart
    height_ratio: float = 0.85
    # padding below the lowest close, in price units
    price_padding: float = 5.0
    # fraction of the plot height used by the volume histogram
    volume_band: float = 0.25
    # lookback in records; 49 spans 50 closes
    ma_window: int = 49
    min_time_span_days: float = 1.0
    x_ticks: int = 10
    y_ticks: int = 10
    volume_bar_width: float = 1.0
    price_stroke_width: float = 1.5
    ma_stroke_width: float = 1.0

    model_config = ConfigDict(extra="ignore")


class ColorsConfig(BaseModel):
    price: str = "#4682b4"
    moving_average: str = "#FF8900"
    rising: str = "#03a678"
    falling: str = "#c0392b"
    background: str = "#ffffff"
    axis: str = "#333333"

    model_config = ConfigDict(extra="ignore")


class CrosshairConfig(BaseModel):
    color: str = "#67809f"
    width: float = 1.5
    dash: List[float] = Field(default_factory=lambda: [3.0, 3.0])
    marker_radius: float = 4.5
    marker_color: str = "#000000"

    model_config = ConfigDict(extra="ignore")


class LegendConfig(BaseModel):
    font_family: str = "Roboto, Helvetica, Arial, sans-serif"
    font_size: float = 16.0
    font_weight: int = 400
    color: str = "rgba(0, 0, 0, 0.6)"
    line_spacing: float = 20.0
    offset: Tuple[float, float] = (15.0, 9.0)
    date_format: str = "%m/%d/%Y"
    # False strips leading zeros from day and month, as in 1/4/2024
    date_zero_pad: bool = False
    price_decimals: int = 2

    model_config = ConfigDict(extra="ignore")


class LogFileConfig(BaseModel):
    dir: str = "./logs"
    rotation: str = "10 MB"
    retention: str = "14 days"

    model_config = ConfigDict(extra="ignore")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[LogFileConfig] = None

    model_config = ConfigDict(extra="ignore")


class Settings(BaseModel):
    """
    Top-level settings model. Every section has defaults so the package
    runs without a configuration file.
    """
    app: AppConfig = Field(default_factory=AppConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    colors: ColorsConfig = Field(default_factory=ColorsConfig)
    crosshair: CrosshairConfig = Field(default_factory=CrosshairConfig)
    legend: LegendConfig = Field(default_factory=LegendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="allow", frozen=True)


# <repo>/src/stockchart/utils/config.py -> <repo>/configs/default.yaml
_repo_root = Path(__file__).resolve().parents[3]
_default_config_path = _repo_root / "configs" / "default.yaml"

if not _default_config_path.exists():
    _cwd_candidate = Path("./configs/default.yaml")
    if _cwd_candidate.exists():
        _default_config_path = _cwd_candidate

_config_singleton: Optional[Settings] = None


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.error("Configuration file not found: {}", path)
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        logger.error("Configuration file root must be a mapping (dict).")
        raise ValueError("Configuration file root must be a mapping (dict).")
    return raw


def _merge_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply environment variable overrides for common options.
    """
    log_level = os.getenv("STOCKCHART_LOG_LEVEL")
    if log_level:
        logging_cfg = cfg.get("logging", {}) or {}
        logging_cfg["level"] = log_level.upper()
        cfg["logging"] = logging_cfg
        logger.debug("Overriding log level from environment")

    ma_window = os.getenv("STOCKCHART_MA_WINDOW")
    if ma_window:
        chart_cfg = cfg.get("chart", {}) or {}
        chart_cfg["ma_window"] = int(ma_window)
        cfg["chart"] = chart_cfg
        logger.debug("Overriding moving average window from environment")

    return cfg


def _validate_business_rules(parsed: Settings) -> None:
    chart = parsed.chart
    if not 0.0 < chart.height_ratio <= 1.0:
        logger.error("chart.height_ratio must be in (0, 1] (got {}).", chart.height_ratio)
        raise ValueError("chart.height_ratio must be in (0, 1].")

    if not 0.0 < chart.volume_band <= 1.0:
        logger.error("chart.volume_band must be in (0, 1] (got {}).", chart.volume_band)
        raise ValueError("chart.volume_band must be in (0, 1].")

    if chart.ma_window < 0:
        logger.error("chart.ma_window is negative ({}).", chart.ma_window)
        raise ValueError("chart.ma_window must be >= 0.")

    margins = chart.margins
    if min(margins.top, margins.right, margins.bottom, margins.left) < 0:
        logger.error("chart.margins must not be negative.")
        raise ValueError("chart.margins must not be negative.")


def load_config(path: Optional[str] = None, validate: bool = True) -> Settings:
    """
    Load configuration from YAML and environment, return Settings instance.

    Args:
        path: optional path to YAML config (defaults to <repo>/configs/default.yaml)
        validate: if True, run business rule validations

    Returns:
        Settings: validated, frozen settings object
    """
    if path:
        p = Path(path)
        raw = _load_yaml(p)
    elif _default_config_path.exists():
        p = _default_config_path
        raw = _load_yaml(p)
    else:
        p = None
        raw = {}
    raw = _merge_env_overrides(raw)

    try:
        settings = Settings(**raw)
    except ValidationError as e:
        logger.exception("Configuration validation failed: {}", e)
        raise

    if validate:
        _validate_business_rules(settings)

    logger.info("Configuration loaded from {} (debug={})", p or "built-in defaults", settings.app.debug)
    return settings


def get_config() -> Settings:
    """
    Return a singleton Settings instance (lazy-loaded).
    """
    global _config_singleton
    if _config_singleton is None:
        _config_singleton = load_config()
    return _config_singleton


__all__ = ["Settings", "load_config", "get_config"]
