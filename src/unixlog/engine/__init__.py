"""
Logging engine behind the syslog facade.

- LoggerContext: name-deduplicated logger registry, thresholds, marker filters
- Sinks: stdio (console/json), file (JSON lines), memory
- Stdlib bridge: routes ``logging`` records into the same pipeline

Library: structlog for the processor chain + orjson for JSON serialization.
"""

from .core import STATUS_LOGGER_NAME, EngineLogger, LoggerContext, configure_logging, get_context
from .interceptors import RedirectStdLibHandler, intercept_stdlib
from .interfaces import EngineContext, EngineLoggerProtocol
from .sinks import BaseSink, FileSink, MemorySink, StdioSink

__all__ = [
    "STATUS_LOGGER_NAME",
    "BaseSink",
    "EngineContext",
    "EngineLogger",
    "EngineLoggerProtocol",
    "FileSink",
    "LoggerContext",
    "MemorySink",
    "RedirectStdLibHandler",
    "StdioSink",
    "configure_logging",
    "get_context",
    "intercept_stdlib",
]
