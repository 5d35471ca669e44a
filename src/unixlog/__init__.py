"""
unixlog: syslog-style severities on top of a structlog engine.

Usage:
    import unixlog

    log = unixlog.create("svc")
    log.crit("critical message")
    log.notice("disk {} at {}%", "/var", 91)
    log.debug(lambda: expensive_dump())  # only evaluated when DEBUG is enabled
"""

from .engine import LoggerContext, MemorySink, configure_logging, get_context
from .exceptions import ConfigurationError, LevelConflictError, LevelError, UnixLogError, UnknownLevelError
from .facade import Logger, create, get_logger
from .markers import Marker, get_marker
from .messages import (
    ExtraParamsMessage,
    FormattedMessage,
    FormattedMessageFactory,
    Lazy,
    MapMessage,
    Message,
    MessageFactory,
    ObjectMessage,
    ParameterizedMessage,
    ParameterizedMessageFactory,
    PrintfMessage,
    PrintfMessageFactory,
    SimpleMessage,
    lazy,
)
from .severity import CustomLevel, Level, Severity

__all__ = [
    "ConfigurationError",
    "CustomLevel",
    "ExtraParamsMessage",
    "FormattedMessage",
    "FormattedMessageFactory",
    "Lazy",
    "Level",
    "LevelConflictError",
    "LevelError",
    "Logger",
    "LoggerContext",
    "MapMessage",
    "Marker",
    "MemorySink",
    "Message",
    "MessageFactory",
    "ObjectMessage",
    "ParameterizedMessage",
    "ParameterizedMessageFactory",
    "PrintfMessage",
    "PrintfMessageFactory",
    "Severity",
    "SimpleMessage",
    "UnixLogError",
    "UnknownLevelError",
    "configure_logging",
    "create",
    "get_context",
    "get_logger",
    "get_marker",
    "lazy",
]
