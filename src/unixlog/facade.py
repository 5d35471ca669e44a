"""
Syslog facade: one method per severity, everything else delegated to the engine.

Each call first asks the engine whether the severity (and marker) is enabled
for this logger. Only then is the payload classified and forwarded, so
disabled calls never build messages, evaluate deferred suppliers or touch sinks.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

from .engine.core import get_context
from .engine.interfaces import EngineContext, EngineLoggerProtocol
from .markers import Marker
from .messages import MessageFactory, to_payload
from .severity import Level, LevelLike, Severity

FQCN = __name__


class Logger:
    """Facade exposing the EMERG, ALERT, CRIT, ERROR, WARNING, NOTICE, INFO and DEBUG levels.

    Every level method accepts::

        log.crit("plain text")
        log.crit("disk {} at {}%", mount, pct)
        log.crit(marker, "tagged text")
        log.crit("failed", exc)                 # trailing exception is attached
        log.crit(MapMessage({"disk": mount}))   # pre-built message
        log.crit(lambda: expensive_summary())   # evaluated only when enabled
        log.crit("text", exc_info=True, request_id=rid)
    """

    __slots__ = ("_logger", "_context")

    def __init__(self, logger: EngineLoggerProtocol, context: EngineContext) -> None:
        self._logger = logger
        self._context = context

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def message_factory(self) -> MessageFactory:
        return self._logger.message_factory

    @property
    def engine_logger(self) -> EngineLoggerProtocol:
        return self._logger

    def is_enabled(self, level: LevelLike, marker: Optional[Marker] = None) -> bool:
        return self._logger.is_enabled(self._context.resolve_level(level), marker)

    def log(
        self,
        level: LevelLike,
        message: Any,
        /,
        *params: Any,
        marker: Optional[Marker] = None,
        exc_info: Any = None,
        **fields: Any,
    ) -> None:
        """Log at any severity or registered level name."""
        self._log_if_enabled(self._context.resolve_level(level), message, params, marker, exc_info, fields)

    def emerg(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.EMERG, message, params, marker, exc_info, fields)

    def alert(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.ALERT, message, params, marker, exc_info, fields)

    def crit(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.CRIT, message, params, marker, exc_info, fields)

    def error(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.ERROR, message, params, marker, exc_info, fields)

    def warning(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.WARNING, message, params, marker, exc_info, fields)

    def notice(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.NOTICE, message, params, marker, exc_info, fields)

    def info(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.INFO, message, params, marker, exc_info, fields)

    def debug(self, message: Any, /, *params: Any, marker: Optional[Marker] = None, exc_info: Any = None, **fields: Any) -> None:
        self._log_if_enabled(Severity.DEBUG, message, params, marker, exc_info, fields)

    def _log_if_enabled(
        self,
        level: Level,
        message: Any,
        params: tuple[Any, ...],
        marker: Optional[Marker],
        exc_info: Any,
        fields: dict[str, Any],
    ) -> None:
        # A leading positional marker shifts the message into params[0].
        if isinstance(message, Marker):
            marker = message
            message, params = (params[0], params[1:]) if params else ("", ())

        if not self._logger.is_enabled(level, marker):
            return
        self._logger.log_message(FQCN, level, marker, to_payload(message, params), exc_info, **fields)

    def __repr__(self) -> str:
        return f"Logger({self.name!r})"


def _resolve_name(target: Any, caller_depth: int) -> str:
    if isinstance(target, str):
        return target
    if isinstance(target, type):
        return f"{target.__module__}.{target.__qualname__}"
    if target is not None:
        cls = type(target)
        return f"{cls.__module__}.{cls.__qualname__}"

    frame = inspect.currentframe()
    for _ in range(caller_depth + 1):
        if frame is None:
            break
        frame = frame.f_back
    if frame is None:
        return "root"
    return frame.f_globals.get("__name__", "root")


def _create(
    target: Any,
    message_factory: Optional[MessageFactory],
    context: Optional[EngineContext],
    caller_depth: int,
) -> Logger:
    name = _resolve_name(target, caller_depth + 1)
    engine_context = context if context is not None else get_context()
    return Logger(engine_context.get_logger(name, message_factory), engine_context)


def create(
    target: Any = None,
    *,
    message_factory: Optional[MessageFactory] = None,
    context: Optional[EngineContext] = None,
) -> Logger:
    """
    Return a facade logger.

    Args:
        target: A name string, a class (its ``module.qualname`` is used), any
            other value (its type's ``module.qualname``), or None for the
            calling module's name.
        message_factory: Message construction strategy. If the name is already
            registered with a different strategy, a warning is logged on the
            status logger and this strategy replaces it.
        context: Engine registry to use instead of the process-wide default.
    """
    return _create(target, message_factory, context, caller_depth=1)


def get_logger(
    target: Any = None,
    *,
    message_factory: Optional[MessageFactory] = None,
    context: Optional[EngineContext] = None,
) -> Logger:
    """Alias of :func:`create`."""
    return _create(target, message_factory, context, caller_depth=1)
