"""Structured JSON logging helpers for LoopCard."""

import json
import logging
import os
from datetime import datetime, timezone
from logging import Logger

_LOGGER_NAME = "loopcard"
_DEFAULT_LEVEL = "WARNING"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "event"):
            payload["event"] = getattr(record, "event")
        if hasattr(record, "payload"):
            payload["payload"] = getattr(record, "payload")
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("LOG_LEVEL") or _DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def get_logger(name: str | None = None) -> Logger:
    """Return a logger under the ``loopcard`` namespace.

    The handler lives on the package root logger so that every module logger
    shares one JSON stream on stderr.
    """
    root = logging.getLogger(_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        root.addHandler(handler)
        root.setLevel(_resolve_level(None))
    return logging.getLogger(f"{_LOGGER_NAME}.{name}") if name else root


def set_level(level: str | None) -> None:
    """Override the package log level (``--log-level``)."""
    get_logger().setLevel(_resolve_level(level))


def log_event(logger: Logger, event: str, payload: dict[str, object] | None = None) -> None:
    """Log a state transition in a consistent JSON shape."""
    payload = payload or {}
    logger.info(f"event={event}", extra={"event": event, "payload": payload})
