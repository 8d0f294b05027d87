"""Structured logging utilities."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

import orjson

DEFAULT_LOG_PATH = Path("logs/sentiment.log")

# Attributes present on every LogRecord; anything else arrived through ``extra=``.
_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

_configured = False


class JsonFormatter(logging.Formatter):
    """Render log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_"):
                continue
            payload[key] = value
        return orjson.dumps(payload, default=str).decode()


def configure_logging(log_path: Path | str = DEFAULT_LOG_PATH, level: int = logging.INFO) -> None:
    """Configure global logging handlers once per process."""

    global _configured
    if _configured:
        return

    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(level)

    file_handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(JsonFormatter())
    logger.addHandler(stream_handler)

    _configured = True
