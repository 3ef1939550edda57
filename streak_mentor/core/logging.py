"""
Structured logging for the streak_mentor logger.

Production writes one JSON object per line; development writes a short
human line. Every record carries the request_id bound by the request-id
middleware, and ``log_event`` attaches submission fields (date source,
streak count) with long values clipped.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Optional

LOGGER_NAME = "streak_mentor"
MAX_FIELD_LENGTH = 500

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# `extra` keys promoted to top-level JSON fields.
_STRUCTURED_FIELDS = (
    "event_type",
    "error_code",
    "date_source",
    "did_update_streak",
    "streak_count",
    "fallback_date",
    "oracle_ok",
    "status",
    "duration_ms",
)


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    rid = request_id_ctx_var.get()
    return default if rid is None else rid


def _utc_timestamp(record: logging.LogRecord) -> str:
    stamp = datetime.fromtimestamp(record.created, timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RequestIdFilter(logging.Filter):
    """Fill record.request_id from the context when the caller did not."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": _utc_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        line.update(
            (name, getattr(record, name))
            for name in _STRUCTURED_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [_utc_timestamp(record), record.levelname, f"[{LOGGER_NAME}]"]
        rid = getattr(record, "request_id", None)
        if rid:
            parts.append(f"[rid={rid}]")
        parts.append(record.getMessage())
        code = getattr(record, "error_code", None)
        if code:
            parts.append(f"({code})")
        text = " ".join(parts)
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def configure_logging(env: str = "development") -> None:
    """Install a single stdout handler on the streak_mentor logger."""
    formatter = JsonFormatter() if env.lower() == "production" else PrettyFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.handlers = [handler]
    logger.propagate = True

    # uvicorn keeps its own handlers; don't echo its lines twice
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).propagate = False


def _clip(value, limit: int = MAX_FIELD_LENGTH):
    if isinstance(value, (bool, int, float)) or value is None:
        return value
    try:
        text = str(value)
    except Exception:
        return "<unserializable>"
    return text if len(text) <= limit else text[:limit] + "...<truncated>"


def log_event(
    level: str,
    msg: str,
    *,
    request_id: Optional[str] = None,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, object]] = None,
):
    """Log ``msg`` on the streak_mentor logger with structured fields."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        configure_logging(os.getenv("ENV", "development"))

    fields: Dict[str, object] = {k: _clip(v) for k, v in (extra or {}).items()}
    fields["request_id"] = request_id or get_request_id()
    if event_type:
        fields["event_type"] = event_type
    if error_code:
        fields["error_code"] = error_code

    getattr(logger, level, logger.info)(msg, extra=fields)
