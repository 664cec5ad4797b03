"""
Logging helpers for applications embedding the data layer

The package itself only creates module loggers and never configures
handlers on import. Applications call ``configure_logging`` once at start-up.

Usage:
    from prepaid_gas_data.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    log = get_logger(__name__)
"""

import json
import logging
import logging.config
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "prepaid_gas_data"


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    package_only: bool = True,
) -> None:
    """
    Configure logging for the data layer.

    Args:
        level: Level name ("DEBUG", "INFO", ...). Defaults to settings.LOG_LEVEL
        json_logs: Emit JSON lines instead of the console format.
            Defaults to settings.LOG_JSON
        package_only: Attach the handler to the package logger instead of root
    """
    from ..config import settings

    level = (level or settings.LOG_LEVEL).upper()
    if json_logs is None:
        json_logs = settings.LOG_JSON
    formatter_name = "json" if json_logs else "console"

    handler_config = {
        "handlers": ["default"],
        "level": level,
    }
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "level": level,
            }
        },
    }
    if package_only:
        config["loggers"] = {PACKAGE_LOGGER: dict(handler_config, propagate=False)}
    else:
        config["root"] = handler_config

    logging.config.dictConfig(config)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger, defaulting to the package logger"""
    return logging.getLogger(name or PACKAGE_LOGGER)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
