"""Structured logging configuration."""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

AUDIT_LOGGER_NAME = "mynotes.audit"

_AUDIT_FIELDS = ("note_id", "title", "command")

# Set per user action; tasks spawned inside an action inherit it
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_AUDIT_TEXT_FORMAT = "%(asctime)s | %(message)s | note=%(note_id)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class CorrelationFilter(logging.Filter):
    """Stamps records with the correlation id of the current user action."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = _correlation_id.get()
        if correlation_id is not None:
            record.correlation_id = correlation_id
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id
        return json.dumps(entry, ensure_ascii=False)


class AuditFormatter(logging.Formatter):
    """Note mutation records: the message is the action."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {"timestamp": _timestamp(), "action": record.getMessage()}
        entry.update(
            (name, getattr(record, name))
            for name in (*_AUDIT_FIELDS, "correlation_id")
            if hasattr(record, name)
        )
        return json.dumps(entry, ensure_ascii=False)


def _handler(
    target: Path | None,
    level: int,
    formatter: logging.Formatter,
) -> logging.Handler:
    """File handler for ``target``, or a stderr handler when it is None."""
    if target is None:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationFilter())
    return handler


def setup_logging(
    log_dir: Path,
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """
    Configure logging for the application.

    Writes three files under ``log_dir``:
    - app.log: everything at ``level`` and above
    - errors.log: errors only
    - audit.log: one line per note create/update/delete/restore

    The console only gets warnings and errors, on stderr, so log lines
    never mix with rendered screens on stdout.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting if True
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
        audit_formatter: logging.Formatter = AuditFormatter()
    else:
        formatter = logging.Formatter(_TEXT_FORMAT, datefmt=_DATE_FORMAT)
        audit_formatter = logging.Formatter(_AUDIT_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    root_logger.handlers.clear()
    root_logger.addHandler(_handler(None, logging.WARNING, formatter))
    root_logger.addHandler(_handler(log_dir / "app.log", logging.DEBUG, formatter))
    root_logger.addHandler(_handler(log_dir / "errors.log", logging.ERROR, formatter))

    audit_logger = get_audit_logger()
    audit_logger.setLevel(logging.INFO)
    audit_logger.propagate = False
    audit_logger.handlers.clear()
    audit_logger.addHandler(_handler(log_dir / "audit.log", logging.INFO, audit_formatter))

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_audit_logger() -> logging.Logger:
    """Get the note mutation audit logger."""
    return logging.getLogger(AUDIT_LOGGER_NAME)


class LogContext:
    """Attach a correlation id to every record logged inside the block."""

    def __init__(self, correlation_id: str) -> None:
        self.correlation_id = correlation_id
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _correlation_id.set(self.correlation_id)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
            self._token = None
