"""JSON logging for the API process.

Each record becomes one JSON object carrying the service name, environment,
request id and (once authenticated) the caller's user id. Anything passed via
``extra=`` is merged in as top-level keys.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_request_id, get_user_id

# Attributes every LogRecord has; everything else on a record came from ``extra``.
_STANDARD_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}
_CONTEXT_FIELDS = frozenset({"request_id", "user_id"})

_QUIET_LIBRARY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(self, *, defaults: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            **self._defaults,
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        user_id = getattr(record, "user_id", None)
        if user_id is not None:
            payload["user_id"] = user_id

        extras = {
            key: _json_safe(value)
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_FIELDS and key not in _CONTEXT_FIELDS
        }
        for key, value in extras.items():
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """Copy the request id and authenticated user from context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        if getattr(record, "user_id", None) is None:
            record.user_id = get_user_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route the root, uvicorn and SQLAlchemy loggers through one JSON handler."""

    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.captureWarnings(True)

    handler_ref = {"handlers": ["json_stdout"], "level": level, "propagate": False}
    loggers: dict[str, Any] = {name: dict(handler_ref) for name in _QUIET_LIBRARY_LOGGERS}
    loggers["sqlalchemy.engine"] = {**handler_ref, "level": logging.INFO if settings.db_echo else logging.WARNING}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {"service": settings.project_name, "environment": settings.environment},
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "json_stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_context"],
                    "level": level,
                }
            },
            "root": {"handlers": ["json_stdout"], "level": level},
            "loggers": loggers,
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
