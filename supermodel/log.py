"""
Logging setup for SuperModel.

The library itself only attaches a NullHandler to the package logger.
Applications (and the CLI) opt into output with configure_logging().
"""

from __future__ import annotations

import logging
from logging import config as logging_config
from typing import Any, Optional

from .config import get_settings

LOGGER_NAME = "supermodel"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _log_config(level: str) -> dict[str, Any]:
    """Build the dictConfig payload for the package logger."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "level": level,
                "handlers": ["stderr"],
                "propagate": False,
            },
        },
    }


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger and return it.

    Args:
        level: Log level name. Defaults to the configured SUPERMODEL_LOG_LEVEL.
    """
    if level is None:
        level = get_settings().log_level
    logging_config.dictConfig(_log_config(level.upper()))
    return logging.getLogger(LOGGER_NAME)
