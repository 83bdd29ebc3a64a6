"""Centralized logging configuration for DataViz Generator.

Console output is human-readable by default (JSON with ``--json-logs``); the
rotating log file always receives structured JSON records so the ``extra``
fields attached by the pipeline (chart kind, point counts, tick numbers) stay
queryable.
"""

from __future__ import annotations

import copy
import logging
import logging.config
from pathlib import Path
from typing import Any

PACKAGE_LOGGER = "dataviz_gen"
DEFAULT_LOG_FILE = Path("logs") / "dataviz.log"

# Default logging configuration
LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
        "json_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": str(DEFAULT_LOG_FILE),
            "maxBytes": 5242880,  # 5MB
            "backupCount": 3,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        PACKAGE_LOGGER: {
            "level": "DEBUG",
            "handlers": ["console", "json_file"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
}


def build_logging_config(
    json_output: bool = False,
    log_level: str | None = None,
    log_file: Path | None = DEFAULT_LOG_FILE,
) -> dict[str, Any]:
    """Return a dictConfig mapping for the given options.

    Args:
        json_output: Use the JSON formatter for console output too
        log_level: Console and package log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Rotating JSON log file; None disables file logging
    """
    config = copy.deepcopy(LOGGING_CONFIG)

    if json_output:
        config["handlers"]["console"]["formatter"] = "json"

    if log_level:
        level = log_level.upper()
        config["handlers"]["console"]["level"] = level
        config["loggers"][PACKAGE_LOGGER]["level"] = level

    if log_file is None:
        del config["handlers"]["json_file"]
        config["loggers"][PACKAGE_LOGGER]["handlers"] = ["console"]
    else:
        config["handlers"]["json_file"]["filename"] = str(log_file)

    return config


def setup_logging(
    json_output: bool = False,
    log_level: str = "WARNING",
    log_file: Path | None = DEFAULT_LOG_FILE,
) -> None:
    """Configure logging for the application.

    Creates the log file's directory when file logging is enabled.
    """
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(json_output, log_level, log_file))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Example:
        logger = get_logger(__name__)
        logger.info("Chart rendered", extra={"kind": "bar"})
    """
    return logging.getLogger(name)
