"""Logging setup for the notes application."""

from mynotes.monitor.logger import LogContext, get_audit_logger, setup_logging

__all__ = [
    "LogContext",
    "setup_logging",
    "get_audit_logger",
]
