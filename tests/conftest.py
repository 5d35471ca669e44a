from __future__ import annotations

import typing as t
from dataclasses import dataclass, field

import pytest

from unixlog.engine import LoggerContext, MemorySink
from unixlog.markers import Marker
from unixlog.messages import DEFAULT_MESSAGE_FACTORY, MessageFactory
from unixlog.severity import Level, LevelLike, LevelRegistry, Severity


@dataclass
class Entry:
    """One log_message call as seen by the fake engine."""

    logger: str
    fqcn: str
    level: Level
    marker: t.Optional[Marker]
    payload: t.Any
    exc_info: t.Any
    fields: dict[str, t.Any] = field(default_factory=dict)


class FakeEngineLogger:
    def __init__(self, name: str, message_factory: MessageFactory, engine: "FakeEngine") -> None:
        self.name = name
        self.message_factory = message_factory
        self._engine = engine

    def is_enabled(self, level: Level, marker: t.Optional[Marker] = None) -> bool:
        self._engine.enabled_checks += 1
        return self._engine.enabled and level.priority <= self._engine.threshold.priority

    def log_message(self, fqcn, level, marker, payload, exc_info=None, /, **fields) -> None:
        self._engine.entries.append(Entry(self.name, fqcn, level, marker, payload, exc_info, dict(fields)))

    def log_if_enabled(self, fqcn, level, marker, payload, exc_info=None, /, **fields) -> None:
        if self.is_enabled(level, marker):
            self.log_message(fqcn, level, marker, payload, exc_info, **fields)


class FakeEngine:
    """Recording engine: dedups loggers by name and stores every forwarded call."""

    def __init__(self, threshold: Severity = Severity.DEBUG) -> None:
        self.threshold: Level = threshold
        self.enabled = True
        self.entries: list[Entry] = []
        self.loggers: dict[str, FakeEngineLogger] = {}
        self.warnings: list[str] = []
        self.enabled_checks = 0
        self.levels = LevelRegistry()

    def get_logger(self, name: str, message_factory: t.Optional[MessageFactory] = None) -> FakeEngineLogger:
        logger = self.loggers.get(name)
        if logger is None:
            logger = FakeEngineLogger(name, message_factory or DEFAULT_MESSAGE_FACTORY, self)
            self.loggers[name] = logger
        elif message_factory is not None and message_factory != logger.message_factory:
            self.warnings.append(name)
            logger.message_factory = message_factory
        return logger

    def register_level(self, name: str, priority: int) -> Level:
        return self.levels.register(name, priority)

    def resolve_level(self, level: LevelLike) -> Level:
        return self.levels.resolve(level)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def context(memory_sink: MemorySink) -> t.Iterator[LoggerContext]:
    """A real engine context at DEBUG, writing to a memory sink."""
    ctx = LoggerContext(level=Severity.DEBUG, sinks=[memory_sink])
    yield ctx
    ctx.close()
