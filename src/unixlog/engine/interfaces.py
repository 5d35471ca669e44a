"""
The engine surface the facade depends on.

`LoggerContext` is the production implementation; tests substitute fakes
that satisfy the same protocols.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ..markers import Marker
from ..messages import MessageFactory, Payload
from ..severity import Level, LevelLike


class EngineLoggerProtocol(Protocol):
    """An engine-bound logger handle."""

    @property
    def name(self) -> str: ...

    @property
    def message_factory(self) -> MessageFactory: ...

    def is_enabled(self, level: Level, marker: Optional[Marker] = None) -> bool: ...

    def log_message(
        self,
        fqcn: str,
        level: Level,
        marker: Optional[Marker],
        payload: Payload,
        exc_info: Any = None,
        /,
        **fields: Any,
    ) -> None: ...

    def log_if_enabled(
        self,
        fqcn: str,
        level: Level,
        marker: Optional[Marker],
        payload: Payload,
        exc_info: Any = None,
        /,
        **fields: Any,
    ) -> None: ...


class EngineContext(Protocol):
    """Logger registry: dedups loggers by name and owns the level table."""

    def get_logger(self, name: str, message_factory: Optional[MessageFactory] = None) -> EngineLoggerProtocol: ...

    def register_level(self, name: str, priority: int) -> Level: ...

    def resolve_level(self, level: LevelLike) -> Level: ...
