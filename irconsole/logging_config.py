"""
Logging configuration for the console API, with health check suppression.
"""

import logging
import logging.config
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for GET /health (health checks poll it constantly)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not ("GET" in message and "/health" in message)


def _logger(handler: str, level: str = "INFO") -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig shared by the app and uvicorn.

    Args:
        level: Level of the ``irconsole`` logger tree (LOG_LEVEL)
    """
    loggers = {name: _logger("default") for name in ("uvicorn", "uvicorn.error")}
    loggers["uvicorn.access"] = _logger("access")
    # httpx logs every request at INFO, which would include each AI stream
    loggers["httpx"] = _logger("default", "WARNING")
    loggers["irconsole"] = _logger("default", level.upper())

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": loggers,
        "root": {"level": "INFO", "handlers": ["default"]},
    }
