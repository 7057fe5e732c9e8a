"""
Logging configuration shared by the service and uvicorn.

Probe traffic on /healthz is dropped from the access log.
"""

import logging
import logging.config
import os
from typing import Any, Dict, Optional

PROBE_PATH = "/healthz"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    """Drops uvicorn access lines for readiness/liveness probes."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not (PROBE_PATH in message and "GET" in message)


def get_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """dictConfig for podrunner.* loggers and uvicorn; level defaults to LOG_LEVEL."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"probes": {"()": HealthCheckFilter}},
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["probes"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "podrunner": {"handlers": ["default"], "level": level, "propagate": False},
        },
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the service logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
