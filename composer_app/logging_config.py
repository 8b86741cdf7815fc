"""Structured logging and operation scoping helpers for the outfit composer."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import IO, Any, Dict, Iterator, Optional

SERVICE_NAME = "outfit-composer"

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime", "taskName"}

# Inventory rows and requests may carry these; they never reach the log stream.
_REDACTED_KEYS = frozenset(
    {"user_id", "userId", "email", "location", "image_url", "imageUrl", "title", "brand", "notes"}
)
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")
_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_MAX_DEPTH = 4

_LOGGER = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record with correlation and service metadata."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None, stream: IO[str] | None = None) -> None:
    """Route the root logger through a single JSON handler."""

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logging.root.handlers.clear()
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler])


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def _scrub_text(value: str) -> str:
    if _URL_PATTERN.match(value):
        return "[redacted-url]"
    return _EMAIL_PATTERN.sub("[redacted-email]", value)


def redact_for_log(payload: Any, _depth: int = 0) -> Any:
    """Recursively mask personal fields, emails and URLs in a log payload."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if _depth >= _MAX_DEPTH:
        return "[truncated]"
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACTED_KEYS else redact_for_log(value, _depth + 1)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item, _depth + 1) for item in payload]
    return _scrub_text(str(payload))


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id``, keep the current one, or mint a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Temporarily bind a correlation id, restoring the previous one on exit."""

    token = CORRELATION_ID.set(correlation_id or ensure_correlation_id())
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit a structured event; fields are redacted before they reach a handler."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id around an engine operation and log its duration."""

    correlation_id = ensure_correlation_id(attributes.pop("correlation_id", None))
    start = time.perf_counter()
    with correlation_context(correlation_id) as scoped_id:
        log_event(_LOGGER, logging.DEBUG, "operation_span_started", operation=name, **attributes)
        try:
            yield scoped_id
        finally:
            log_event(
                _LOGGER,
                logging.DEBUG,
                "operation_span_finished",
                operation=name,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


__all__ = [
    "SERVICE_NAME",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
    "operation_context",
]
