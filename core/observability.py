"""Structured JSON logging for the forecast engine."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from config import get_settings

__all__ = ["ForecastJsonFormatter", "setup_logging"]

SERVICE_NAME = "forecast-engine"


class ForecastJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and service metadata."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str | int | None = None, stream: Any = None) -> logging.Logger:
    """Install a single JSON handler on the root logger and return it.

    ``level`` defaults to the configured ``log_level``.
    """

    logger = logging.getLogger()
    logger.setLevel(level or get_settings().log_level.upper())
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ForecastJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
