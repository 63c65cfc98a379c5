"""Structured JSON Logging with Correlation ID Support

Every record is one JSON object. Workflow context (church, statuses, actor)
is attached per call through ``extra={...}`` and copied into the output when
present.
"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from ..config.settings import settings
from .time import utc_now, format_iso


correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Keys accepted in extra={...} and written to the JSON line
WORKFLOW_FIELDS = (
    "church_id", "from_status", "to_status", "actor_email", "role",
    "diocese", "error_code", "hook", "notification_type",
)

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": format_iso(utc_now()),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        entry.update({
            field: getattr(record, field)
            for field in WORKFLOW_FIELDS
            if hasattr(record, field)
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _rotating_handler(path: str, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: Optional[str] = None, logs_path: Optional[str] = None) -> None:
    """
    Configure the root logger: stdout plus app.log and error.log

    Arguments default to the LOG_LEVEL and LOGS_PATH settings.
    """
    logs_path = logs_path or settings.logs_path
    os.makedirs(logs_path, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper()))
    root.handlers.clear()

    formatter = JsonFormatter()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)
    root.addHandler(_rotating_handler(os.path.join(logs_path, "app.log"), logging.NOTSET, formatter))
    root.addHandler(_rotating_handler(os.path.join(logs_path, "error.log"), logging.ERROR, formatter))

    # Third-party noise
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()
