"""
editorial_kernel.logging_config -- JSON log lines for article commands.

Every logger under the ``editorial_kernel`` namespace writes one JSON
object per line.  While the command facade runs a command it binds the
acting principal, the article and the command name; the formatter copies
those onto every line logged inside the command, so the repository's
``article_version_conflict`` and the facade's ``article_transition`` for
the same command can be joined without passing ids around.

Usage::

    configure_logging(level="DEBUG")
    with LogContext.bind(actor_id=str(actor.id), article_id=str(article.id)):
        get_logger("services.command_facade").info("article_transition", extra=record)
"""

from __future__ import annotations

__all__ = [
    "CONTEXT_FIELDS",
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from typing import IO, Any, Iterator

LOGGER_NAMESPACE = "editorial_kernel"

CONTEXT_FIELDS = ("actor_id", "article_id", "command")

_context: ContextVar[dict[str, str] | None] = ContextVar(
    "editorial_log_context", default=None
)


class LogContext:
    """The actor, article and command of the command in flight."""

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get() or {})

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Add ``fields`` for the duration of the block, then restore."""
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"unknown log context fields: {sorted(unknown)}")
        merged = LogContext.get_all()
        merged.update({k: v for k, v in fields.items() if v is not None})
        token = _context.set(merged)
        try:
            yield
        finally:
            _context.reset(token)

    @staticmethod
    def clear() -> None:
        _context.set(None)


# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: core fields, bound context, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            payload["error_type"] = type(error).__name__
            code = getattr(error, "code", None)
            if code is not None:
                payload["error_code"] = code
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_HANDLER_MARK = "_editorial_json_handler"


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach the JSON handler to the namespace logger once.

    Later calls leave an existing JSON handler and level untouched, so the
    engine and the bootstrap can both call this safely.
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    if any(getattr(h, _HANDLER_MARK, False) for h in root.handlers):
        return

    handler = handler or logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def reset_logging() -> None:
    """Detach every handler from the namespace logger. Tests only."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True
