"""
Central logging configuration for StockChart.

- Uses loguru for all package logging.
- Adds file sink (rotation/retention) and console sink based on config.
- Installs an InterceptHandler to forward stdlib logging (Qt, pyqtgraph) to loguru.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from loguru import logger

from .config import Settings, get_config

# Keep a flag so setup_logging is idempotent in the process
_LOGGING_INITIALIZED = False


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru, preserving caller depth."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Initialize logging according to configuration from get_config().
    Idempotent.
    """
    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED:
        return

    if config is None:
        config = get_config()

    level = "DEBUG" if config.app.debug else config.logging.level
    file_cfg = config.logging.file

    file_path = None
    if file_cfg is not None:
        os.makedirs(file_cfg.dir, exist_ok=True)
        file_path = os.path.join(file_cfg.dir, "stockchart_{time:YYYY-MM-DD}.log")

    logger.remove()
    if file_path:
        logger.add(
            file_path,
            rotation=file_cfg.rotation,
            retention=file_cfg.retention,
            level=level,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )
    logger.add(sys.stderr, level=level, colorize=True)

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    _LOGGING_INITIALIZED = True
    logger.info("Logging initialized (level={}, file={})", level, file_path or "disabled")


__all__ = ["setup_logging", "InterceptHandler"]
