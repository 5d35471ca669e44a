"""
unixlog exception hierarchy.

Logging calls themselves never raise; these exceptions cover misuse of the
configuration surface (level registration, level lookup, sink setup).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class UnixLogError(Exception):
    """Root of all unixlog exceptions."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Level errors
# ================================


class LevelError(UnixLogError):
    """Base class for level registration and lookup failures."""

    pass


class LevelConflictError(LevelError):
    """A level name is already registered with a different priority."""

    def __init__(self, *, name: str, existing: int, requested: int) -> None:
        super().__init__(
            f"Level '{name}' is already registered with priority {existing}, not {requested}",
            code="LEVEL_CONFLICT",
            details={"name": name, "existing": existing, "requested": requested},
        )


class UnknownLevelError(LevelError):
    """A level name was looked up that nobody registered."""

    def __init__(self, *, name: str) -> None:
        super().__init__(
            f"Unknown level '{name}'",
            code="UNKNOWN_LEVEL",
            details={"name": name},
        )


# ================================
# Configuration errors
# ================================


class ConfigurationError(UnixLogError):
    """Invalid engine configuration, such as an unknown sink name."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="INVALID_CONFIG", details=details)
