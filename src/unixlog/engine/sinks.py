"""
Log sink abstractions and concrete implementations.

All sinks write synchronously on the calling thread.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Literal

import orjson
from structlog.typing import EventDict

from ..exceptions import ConfigurationError
from .formatters import ConsoleFormatter

LogFormat = Literal["console", "json"]


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson; unknown types fall back to str()."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - "console" (colored human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    def __init__(self, fmt: LogFormat = "console", stream: Any = None):
        self._fmt = fmt
        self._stream = stream or sys.stderr

    def emit(self, event_dict: EventDict) -> None:
        if self._fmt == "json":
            output = orjson_dumps(event_dict)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event_dict, use_color=use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass


class FileSink(BaseSink):
    """Append-only JSON-lines file sink."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._file = open(self._path, "a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, event_dict: EventDict) -> None:
        line = orjson_dumps(event_dict) + "\n"
        with self._lock:
            self._file.write(line)
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()


class MemorySink(BaseSink):
    """Keeps emitted events in a list; for embedding hosts and tests."""

    def __init__(self) -> None:
        self._records: list[EventDict] = []

    @property
    def records(self) -> list[EventDict]:
        return list(self._records)

    def messages(self) -> list[str]:
        return [str(r.get("message", "")) for r in self._records]

    def emit(self, event_dict: EventDict) -> None:
        self._records.append(dict(event_dict))

    def clear(self) -> None:
        self._records.clear()

    def close(self) -> None:
        pass


def build_sinks(names: str, *, fmt: LogFormat, file_path: str | Path, stream: Any = None) -> list[BaseSink]:
    """Create sinks from a comma-separated list of names."""
    sinks: list[BaseSink] = []
    for name in (s.strip().lower() for s in names.split(",")):
        if not name:
            continue
        if name == "stdio":
            sinks.append(StdioSink(fmt=fmt, stream=stream))
        elif name == "file":
            sinks.append(FileSink(file_path))
        elif name == "memory":
            sinks.append(MemorySink())
        else:
            raise ConfigurationError(f"Unknown sink '{name}'", details={"sink": name})
    return sinks
