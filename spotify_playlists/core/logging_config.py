"""Logging configuration using loguru."""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> None:
    logger.remove()
    logger.add(sys.stdout, level=level)
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        logger.add(path / "app.log", level=level, rotation="5 MB", retention="7 days", enqueue=True, backtrace=False, diagnose=False)
