"""
Interceptors for capturing standard library logging into the engine.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..messages import PlainText
from ..severity import Severity
from .core import LoggerContext, get_context


def severity_for(levelno: int) -> Severity:
    """Map a stdlib numeric level onto the nearest syslog severity."""
    if levelno >= logging.CRITICAL:
        return Severity.CRIT
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFO
    return Severity.DEBUG


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging records into a logger context.

    Third-party libraries that log through ``logging`` end up in the same
    sinks, thresholds and marker filters as facade calls.
    """

    def __init__(self, context: Optional[LoggerContext] = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._context = context

    @property
    def context(self) -> LoggerContext:
        return self._context or get_context()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Skip our own records if someone wired the handler under structlog
            if record.name.startswith("structlog"):
                return

            logger = self.context.get_logger(record.name or "stdlib")
            severity = severity_for(record.levelno)
            if not logger.is_enabled(severity):
                return

            logger.log_message(
                __name__,
                severity,
                None,
                PlainText(record.getMessage()),
                record.exc_info if record.exc_info else None,
                source=f"{record.module}:{record.funcName}:{record.lineno}",
            )
        except Exception:
            self.handleError(record)


def intercept_stdlib(context: Optional[LoggerContext] = None) -> RedirectStdLibHandler:
    """Replace the root logger's handlers with a handler feeding ``context``."""
    handler = RedirectStdLibHandler(context)
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    if root_logger.level in (logging.NOTSET, logging.WARNING):
        root_logger.setLevel(logging.DEBUG)
    return handler
