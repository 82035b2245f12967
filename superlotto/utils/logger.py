"""
superlotto/utils/logger.py
Component loggers under one "superlotto" root: Rich console output plus a
single rotating log file shared by every component.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

ROOT_LOGGER = "superlotto"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    if root.handlers:
        return root

    console = RichHandler(rich_tracebacks=True, show_path=False)
    console.setLevel(logging.DEBUG)
    root.addHandler(console)

    # LOG_DIR="" disables the file (tests, read-only environments)
    log_dir = os.getenv("LOG_DIR", "logs")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{ROOT_LOGGER}.log"),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """``get_logger("pipeline.weights")`` → logger ``superlotto.pipeline.weights``."""
    if name in _loggers:
        return _loggers[name]

    root = _configure_root()
    logger = root if name == ROOT_LOGGER else root.getChild(name)
    _loggers[name] = logger
    return logger
