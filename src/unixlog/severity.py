"""
Syslog-style severities and the level registry.

Priorities grow from the most urgent (EMERG) to the most verbose (DEBUG).
A level is enabled for a logger when its priority is less than or equal to
the logger's threshold priority.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, Protocol, Union, runtime_checkable

from .exceptions import LevelConflictError, UnknownLevelError


@runtime_checkable
class Level(Protocol):
    """Anything the engine can log at: a name plus an integer priority."""

    @property
    def name(self) -> str: ...

    @property
    def priority(self) -> int: ...


class Severity(IntEnum):
    """The eight syslog severities, most urgent first."""

    EMERG = 50
    ALERT = 100
    CRIT = 150
    ERROR = 200
    WARNING = 250
    NOTICE = 300
    INFO = 350
    DEBUG = 400

    @property
    def priority(self) -> int:
        return int(self)


@dataclass(frozen=True)
class CustomLevel:
    """A level registered at runtime that is not one of the eight severities."""

    name: str
    priority: int


LevelLike = Union[str, Level]


class LevelRegistry:
    """Name -> level table.

    Registration is idempotent for identical (name, priority) pairs. Lookups
    read the table without locking; only registration takes the lock.
    """

    def __init__(self, *, seed_severities: bool = True) -> None:
        self._levels: Dict[str, Level] = {}
        self._lock = threading.Lock()
        if seed_severities:
            for severity in Severity:
                self._levels[severity.name] = severity

    def register(self, name: str, priority: int) -> Level:
        key = name.upper()
        with self._lock:
            existing = self._levels.get(key)
            if existing is not None:
                if existing.priority != priority:
                    raise LevelConflictError(name=key, existing=existing.priority, requested=priority)
                return existing

            if key in Severity.__members__ and Severity[key].priority == priority:
                level: Level = Severity[key]
            else:
                level = CustomLevel(name=key, priority=priority)
            self._levels[key] = level
            return level

    def resolve(self, level: LevelLike) -> Level:
        """Return the registered level for a name, a Severity or a Level."""
        if isinstance(level, str):
            found = self._levels.get(level.upper())
            if found is None:
                raise UnknownLevelError(name=level)
            return found
        return level

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self._levels

    def __iter__(self) -> Iterator[Level]:
        return iter(sorted(self._levels.values(), key=lambda lv: lv.priority))

    def __len__(self) -> int:
        return len(self._levels)


def method_name_for(level: Level) -> str:
    return level.name.lower()
