"""Centralized logging configuration for the application."""
from __future__ import annotations

import hashlib
import logging
import logging.handlers
import os
import time

from app.core.config import Settings, settings as default_settings


def setup_logging(current: Settings | None = None) -> None:
    """Configure application and uvicorn loggers with sane defaults."""
    current = current or default_settings
    log_level = getattr(logging, current.LOG_LEVEL.upper(), logging.INFO)

    os.makedirs(current.LOG_DIR, exist_ok=True)
    formatter = logging.Formatter(
        "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.Formatter.converter = time.gmtime

    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(current.LOG_DIR, "app.log"),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [file_handler, stream_handler]

    # Auth events (issued, verified, rejected) go through this logger.
    security_logger = logging.getLogger("app.security")
    security_logger.setLevel(log_level)
    security_logger.propagate = True

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(log_level)


def anonymise(identifier: str) -> str:
    """Return a short stable digest suitable for log lines."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:12]


__all__ = ["anonymise", "setup_logging"]
