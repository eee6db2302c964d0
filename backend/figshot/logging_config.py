"""Unified logging configuration for the screenshot backend."""
from __future__ import annotations

import logging
import os
from pathlib import Path

# Log directory, opt-in via LOG_DIR (serverless filesystems are read-only)
LOG_DIR = os.getenv("LOG_DIR", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(name: str, filename: str) -> logging.Logger:
    """Setup a logger with console and optional file handlers.

    Args:
        name: Logger name (e.g., 'figshot', 'api')
        filename: Log file name (e.g., 'api.log'), used when LOG_DIR is set

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    level = getattr(logging, LOG_LEVEL, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs

    if LOG_DIR:
        log_dir = Path(LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / filename, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
        ))
        logger.addHandler(fh)

    # Console handler
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
    ))
    logger.addHandler(sh)

    _configured_loggers.add(name)
    return logger


# Pre-configured loggers
def get_figshot_logger() -> logging.Logger:
    """Parent logger for every figshot.* module logger."""
    return setup_logger("figshot", "figshot.log")


def get_api_logger() -> logging.Logger:
    """Logger for API requests."""
    return setup_logger("api", "api.log")
