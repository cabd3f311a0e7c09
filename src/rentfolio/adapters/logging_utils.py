import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import config

_APP = "rentfolio"


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, then any context fields."""

    def format(self, record):
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "app": _APP,
            "env": config.ENV,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def log_context(**fields: Any) -> dict[str, dict[str, Any]]:
    """`extra=` mapping for a log call; None values are dropped."""
    return {"context": {k: v for k, v in fields.items() if v is not None}}


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
