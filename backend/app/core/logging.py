"""Logging configuration for the Invoice Studio backend."""

import logging
import logging.config
import sys
from typing import Any, Dict

from backend.app.core.settings import get_settings


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure console logging once at startup and return the app logger."""
    settings = get_settings()
    log_level = (level or settings.log_level).upper()

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "simple",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "backend": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    }
    logging.config.dictConfig(logging_config)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logger = logging.getLogger("backend")
    logger.info("Logging configured with level %s", log_level)
    return logger
