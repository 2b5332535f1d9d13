"""
Structured logging for the scoring service.

- JSON lines in production, one-line pretty output in development.
- request_id and the run being scored (user, exercise) live in context vars,
  so every record emitted while a run is processed carries them.
- log_event() for named events with truncated extra fields.
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional

LOGGER_NAME = "skillstreak"

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
run_ctx_var: ContextVar[Dict[str, str]] = ContextVar("run_context", default={})

# Fields promoted to top-level keys of JSON records
CONTEXT_FIELDS = ("request_id", "user_id", "exercise_type", "exercise_id")
EVENT_FIELDS = ("error_code", "status", "method", "path", "latency_bucket", "accuracy", "xp", "multiplier", "reason")


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    """Fetch the current request_id from context (if any)."""
    rid = request_id_ctx_var.get()
    return rid if rid is not None else default


@contextmanager
def run_log_context(user_id: str, exercise_type: str, exercise_id: str) -> Iterator[None]:
    """Bind the run being processed to every log record emitted inside the block."""
    token = run_ctx_var.set(
        {"user_id": user_id, "exercise_type": exercise_type, "exercise_id": exercise_id}
    )
    try:
        yield
    finally:
        run_ctx_var.reset(token)


def latency_bucket_ms(latency_ms: Optional[float]) -> str:
    if latency_ms is None:
        return "unknown"
    for bound, label in ((10, "<10ms"), (100, "10-100ms"), (500, "100-500ms"), (1000, "500-1000ms")):
        if latency_ms < bound:
            return label
    return ">=1000ms"


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z")


class ContextFilter(logging.Filter):
    """Fill request_id and run fields from context unless the call passed them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        for key, value in run_ctx_var.get().items():
            if getattr(record, key, None) is None:
                setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in CONTEXT_FIELDS[1:] + EVENT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        tags = []
        rid = getattr(record, "request_id", None)
        if rid:
            tags.append(f"rid={rid}")
        user_id = getattr(record, "user_id", None)
        if user_id:
            tags.append(f"user={user_id}")
        exercise_id = getattr(record, "exercise_id", None)
        if exercise_id:
            tags.append(f"exercise={exercise_id}")
        tag_part = f" [{' '.join(tags)}]" if tags else ""
        line = f"{_timestamp(record)} {record.levelname} [{LOGGER_NAME}]{tag_part} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(env: str = "development", level: str = "INFO") -> None:
    """Configure the service logger for the given environment."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter: logging.Formatter = JsonFormatter() if env.lower() == "production" else PrettyFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())

    logger.handlers = [handler]
    logger.propagate = True

    # Uvicorn keeps its own handlers; don't double-print its records
    logging.getLogger("uvicorn").propagate = False
    logging.getLogger("uvicorn.error").propagate = False


def _safe_truncate(value, limit: int = 500):
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    try:
        text = str(value)
    except Exception:
        return "<unserializable>"
    if len(text) <= limit:
        return text
    return text[:limit] + "...<truncated>"


def log_event(
    level: str,
    msg: str,
    *,
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
    exercise_type: Optional[str] = None,
    exercise_id: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, object]] = None,
):
    """Emit a named event. Explicit fields win over the bound run context."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        # Tests and scripts may log before the app configures logging
        configure_logging(os.getenv("ENV", "development"))

    bound = run_ctx_var.get()
    payload = {
        "request_id": request_id or get_request_id(),
        "user_id": user_id or bound.get("user_id"),
        "exercise_type": exercise_type or bound.get("exercise_type"),
        "exercise_id": exercise_id or bound.get("exercise_id"),
    }
    if error_code:
        payload["error_code"] = error_code
    if extra:
        for key, value in extra.items():
            payload[key] = _safe_truncate(value)

    log_fn = getattr(logger, level, logger.info)
    log_fn(msg, extra=payload)
