"""Structured JSON logging."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from .config import LoggingSettings

LOGGER_NAME = "mcpws"


class JsonFormatter(logging.Formatter):
    """Formats records as JSON lines.

    Structured fields are passed as ``extra={"fields": {...}}``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            payload.update(fields)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Attach a JSON handler to the ``mcpws`` logger, once."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler: logging.Handler
        if settings.output == "file":
            handler = RotatingFileHandler(
                settings.file_path,
                maxBytes=settings.rotate_bytes,
                backupCount=3,
            )
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
    return logger
