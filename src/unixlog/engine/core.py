"""
Core engine: logger registry, enablement checks and structlog dispatch.
"""

from __future__ import annotations

import inspect
import threading
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from ..config import settings
from ..markers import Marker
from ..messages import DEFAULT_MESSAGE_FACTORY, FormattedText, Message, MessageFactory, Payload
from ..severity import Level, LevelLike, LevelRegistry, Severity, method_name_for
from .formatters import ConsoleFormatter
from .sinks import BaseSink, LogFormat, build_sinks

ENGINE_PACKAGE = __name__.rsplit(".", 1)[0]
LIBRARY_PACKAGE = __name__.split(".", 1)[0]
STATUS_LOGGER_NAME = "unixlog.status"

# Record keys owned by the engine; user fields with these names are stored as ``field_<name>``
RESERVED_FIELDS = frozenset(
    {
        "event",
        "method_name",
        "_name",
        "logger",
        "level",
        "timestamp",
        "message",
        "priority",
        "marker",
        "exc_info",
        "exception",
        "stack_info",
    }
)

# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class SinkRenderer:
    """Final processor: fan the event out to every sink. Returns empty to suppress default output."""

    def __init__(self, sinks: list[BaseSink]) -> None:
        self._sinks = sinks

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        for sink in tuple(self._sinks):
            try:
                sink.emit(event_dict)
            except Exception:
                pass  # A broken sink must not fail the caller or starve the other sinks
        return ""


class SilentLogger:
    """Wrapped logger at the end of the chain; sinks already received the event."""

    def msg(self, *args: Any, **kw: Any) -> None:
        pass

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self.msg


_SILENT = SilentLogger()


def infer_source(fqcn: str) -> str | None:
    """Return ``module:function:line`` of the first frame outside the engine and ``fqcn``."""
    frame = inspect.currentframe()
    if frame is None:
        return None

    skip = (ENGINE_PACKAGE, fqcn, "structlog")
    frame = frame.f_back
    for _ in range(30):
        if frame is None:
            break
        module = frame.f_globals.get("__name__", "")
        if module and not any(module == p or module.startswith(p + ".") for p in skip):
            return f"{module}:{frame.f_code.co_name}:{frame.f_lineno}"
        frame = frame.f_back

    return None


# =============================================================================
# Engine Logger
# =============================================================================


class EngineLogger:
    """Engine-side logger handle, one per name per context."""

    def __init__(self, name: str, message_factory: MessageFactory, context: "LoggerContext") -> None:
        self._name = name
        self._message_factory = message_factory
        self._context = context
        self._bound = structlog.wrap_logger(
            _SILENT,
            processors=context.processors,
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
            _name=name,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def message_factory(self) -> MessageFactory:
        return self._message_factory

    @message_factory.setter
    def message_factory(self, factory: MessageFactory) -> None:
        self._message_factory = factory

    @property
    def context(self) -> "LoggerContext":
        return self._context

    def is_enabled(self, level: Level, marker: Optional[Marker] = None) -> bool:
        return self._context.is_enabled(self._name, level, marker)

    def log_if_enabled(
        self,
        fqcn: str,
        level: Level,
        marker: Optional[Marker],
        payload: Payload,
        exc_info: Any = None,
        /,
        **fields: Any,
    ) -> None:
        if self.is_enabled(level, marker):
            self.log_message(fqcn, level, marker, payload, exc_info, **fields)

    def log_message(
        self,
        fqcn: str,
        level: Level,
        marker: Optional[Marker],
        payload: Payload,
        exc_info: Any = None,
        /,
        **fields: Any,
    ) -> None:
        """Build, attribute and dispatch one record. Enablement is the caller's concern."""
        try:
            message = self._message_factory.build(payload)
            text = message.format()
        except Exception as exc:
            if self._name != STATUS_LOGGER_NAME:
                self._context.status("Unable to build message for logger {}: {}", self._name, repr(exc))
            return

        try:
            event = self._event_fields(fqcn, level, marker, message, exc_info, fields)
            getattr(self._bound, method_name_for(level))(text, **event)
        except Exception as exc:
            if self._name != STATUS_LOGGER_NAME:
                self._context.status("Unable to dispatch record for logger {}: {}", self._name, repr(exc))

    def _event_fields(
        self,
        fqcn: str,
        level: Level,
        marker: Optional[Marker],
        message: Message,
        exc_info: Any,
        fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        event: dict[str, Any] = {}
        for mapping in (message.fields, fields):
            for key, value in mapping.items():
                event[f"field_{key}" if key in RESERVED_FIELDS else key] = value
        event["priority"] = level.priority
        if marker is not None:
            event["marker"] = marker.name

        error = message.throwable if exc_info is None or exc_info is False else exc_info
        if error is not None:
            event["exc_info"] = error

        if self._context.include_source and "source" not in event:
            source = infer_source(fqcn)
            if source:
                event["source"] = source
        return event

    def __repr__(self) -> str:
        return f"EngineLogger({self._name!r}, {type(self._message_factory).__name__})"


# =============================================================================
# Logger Context (Registry)
# =============================================================================


class LoggerContext:
    """Logger registry and configuration root.

    Loggers are deduplicated by name. Thresholds resolve by the longest dotted
    prefix configured in ``logger_levels``, falling back to the root level, and
    are memoized until the next reconfiguration. Only logger creation locks.
    """

    def __init__(
        self,
        *,
        level: LevelLike = Severity.INFO,
        logger_levels: Optional[Mapping[str, LevelLike]] = None,
        deny_markers: Iterable[str] = (),
        sinks: Optional[Iterable[BaseSink]] = None,
        include_source: bool = True,
    ) -> None:
        self._levels = LevelRegistry()
        self._sinks: list[BaseSink] = []
        self._loggers: dict[str, EngineLogger] = {}
        self._thresholds: dict[str, Level] = {}
        self._lock = threading.Lock()
        self.processors = [
            structlog.stdlib.add_log_level,
            add_timestamp,
            add_logger_name,
            rename_event_key,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            SinkRenderer(self._sinks),
        ]
        self.reconfigure(
            level=level,
            logger_levels=logger_levels,
            deny_markers=deny_markers,
            sinks=sinks,
            include_source=include_source,
        )
        self._status = self.get_logger(STATUS_LOGGER_NAME)

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def reconfigure(
        self,
        *,
        level: LevelLike = Severity.INFO,
        logger_levels: Optional[Mapping[str, LevelLike]] = None,
        deny_markers: Iterable[str] = (),
        sinks: Optional[Iterable[BaseSink]] = None,
        include_source: bool = True,
    ) -> None:
        """Replace thresholds, marker filters and sinks. Existing loggers stay valid."""
        self._root = self._levels.resolve(level)
        self._logger_levels: dict[str, Level] = {
            name: self._levels.resolve(lv) for name, lv in (logger_levels or {}).items()
        }
        self._deny_markers = tuple(deny_markers)
        self.include_source = include_source

        old = list(self._sinks)
        self._sinks[:] = list(sinks or [])
        for sink in old:
            if sink not in self._sinks:
                sink.close()
        self._thresholds = {}

    def register_level(self, name: str, priority: int) -> Level:
        return self._levels.register(name, priority)

    def resolve_level(self, level: LevelLike) -> Level:
        return self._levels.resolve(level)

    @property
    def levels(self) -> LevelRegistry:
        return self._levels

    @property
    def root_level(self) -> Level:
        return self._root

    def set_level(self, level: LevelLike, name: Optional[str] = None) -> None:
        """Set the root threshold, or the threshold for ``name`` and its descendants."""
        resolved = self._levels.resolve(level)
        if name is None:
            self._root = resolved
        else:
            self._logger_levels[name] = resolved
        self._thresholds = {}

    def deny_marker(self, name: str) -> None:
        if name not in self._deny_markers:
            self._deny_markers = self._deny_markers + (name,)

    def allow_marker(self, name: str) -> None:
        self._deny_markers = tuple(m for m in self._deny_markers if m != name)

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return tuple(self._sinks)

    def add_sink(self, sink: BaseSink) -> None:
        self._sinks.append(sink)

    def close(self) -> None:
        for sink in self._sinks:
            sink.close()
        self._sinks.clear()

    # -------------------------------------------------------------------------
    # Enablement
    # -------------------------------------------------------------------------

    def threshold_for(self, name: str) -> Level:
        thresholds = self._thresholds
        level = thresholds.get(name)
        if level is None:
            level = self._resolve_threshold(name)
            thresholds[name] = level
        return level

    def _resolve_threshold(self, name: str) -> Level:
        candidate = name
        while candidate:
            if candidate in self._logger_levels:
                return self._logger_levels[candidate]
            if "." not in candidate:
                break
            candidate = candidate.rsplit(".", 1)[0]
        return self._root

    def is_enabled(self, name: str, level: Level, marker: Optional[Marker] = None) -> bool:
        if level.priority > self.threshold_for(name).priority:
            return False
        if marker is not None and self._deny_markers:
            return not any(marker.is_instance_of(denied) for denied in self._deny_markers)
        return True

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def get_logger(self, name: str, message_factory: Optional[MessageFactory] = None) -> EngineLogger:
        """Return the logger for ``name``, creating it on first request.

        A later request with a different message factory logs a warning on the
        status logger and switches the logger to the new factory.
        """
        logger = self._loggers.get(name)
        if logger is None:
            with self._lock:
                logger = self._loggers.get(name)
                if logger is None:
                    logger = EngineLogger(name, message_factory or DEFAULT_MESSAGE_FACTORY, self)
                    self._loggers[name] = logger
                    return logger

        if message_factory is not None and message_factory != logger.message_factory:
            self.status(
                "Logger {} was created with {} and is now requested with {}; using {}",
                name,
                type(logger.message_factory).__name__,
                type(message_factory).__name__,
                type(message_factory).__name__,
            )
            logger.message_factory = message_factory
        return logger

    def has_logger(self, name: str) -> bool:
        return name in self._loggers

    @property
    def loggers(self) -> dict[str, EngineLogger]:
        return dict(self._loggers)

    def status(self, template: str, *args: Any) -> None:
        """Report an engine problem as a WARNING on the status logger."""
        self._status.log_if_enabled(LIBRARY_PACKAGE, Severity.WARNING, None, FormattedText(template, args))


# =============================================================================
# Default Context
# =============================================================================

_default_context: LoggerContext | None = None
_default_lock = threading.RLock()


def get_context() -> LoggerContext:
    """Return the process-wide default context, configuring it from settings on first use."""
    context = _default_context
    if context is None:
        return configure_logging()
    return context


def configure_logging(
    *,
    level: LevelLike | None = None,
    logger_levels: Mapping[str, LevelLike] | None = None,
    deny_markers: Iterable[str] | None = None,
    sinks: str | None = None,
    fmt: LogFormat | None = None,
    file_path: str | None = None,
    include_source: bool | None = None,
    intercept_stdlib: bool | None = None,
    stream: Any = None,
) -> LoggerContext:
    """
    Configure the default logging context. Unset arguments fall back to settings.

    Args:
        level: Root threshold severity (EMERG ... DEBUG)
        logger_levels: Per-logger thresholds keyed by dotted name prefix
        deny_markers: Marker names whose calls are dropped
        sinks: Comma-separated sink names (stdio, file, memory)
        fmt: Output format for stdio sink (console, json)
        file_path: Path for file sink
        include_source: Attach the calling module:function:line to records
        intercept_stdlib: Route stdlib ``logging`` records into the engine
        stream: Stream for the stdio sink (default: stderr)
    """
    global _default_context

    # Import here to avoid a circular import with interceptors -> core
    from .interceptors import intercept_stdlib as install_stdlib_bridge

    cfg = settings.logging
    with _default_lock:
        sink_list = build_sinks(
            sinks if sinks is not None else cfg.sinks,
            fmt=fmt or settings.output_format.value,
            file_path=file_path or cfg.file_path,
            stream=stream,
        )
        options: dict[str, Any] = dict(
            level=level if level is not None else cfg.level,
            logger_levels=logger_levels if logger_levels is not None else cfg.logger_levels,
            deny_markers=deny_markers if deny_markers is not None else cfg.deny_markers,
            sinks=sink_list,
            include_source=include_source if include_source is not None else cfg.include_source,
        )
        if _default_context is None:
            _default_context = LoggerContext(**options)
        else:
            _default_context.reconfigure(**options)

        ConsoleFormatter.configure(
            timestamp_format=cfg.console_timestamp_format,
            level_width=cfg.console_level_width,
            logger_width=cfg.console_logger_width,
            separator=cfg.console_separator,
        )

        if intercept_stdlib if intercept_stdlib is not None else cfg.intercept_stdlib:
            install_stdlib_bridge(_default_context)

        return _default_context
