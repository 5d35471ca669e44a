"""
Markers: named tags attached to a log call for filtering independent of level.

Markers form a hierarchy: a marker "is an instance of" itself and of every
ancestor. Instances are interned per name by the marker manager.
"""

from __future__ import annotations

import threading
from typing import Dict, Tuple, Union


class Marker:
    """A named marker with optional parent markers."""

    __slots__ = ("_name", "_parents")

    def __init__(self, name: str, *parents: "Marker") -> None:
        self._name = name
        self._parents: Tuple[Marker, ...] = tuple(parents)

    @property
    def name(self) -> str:
        return self._name

    @property
    def parents(self) -> Tuple["Marker", ...]:
        return self._parents

    def add_parents(self, *parents: "Marker") -> "Marker":
        """Attach parents; already-known parents are ignored."""
        known = {p.name for p in self._parents}
        new = tuple(p for p in parents if p.name not in known and p is not self)
        if new:
            # Replace the tuple wholesale so concurrent readers see old or new, never partial.
            self._parents = self._parents + new
        return self

    def is_instance_of(self, other: Union["Marker", str]) -> bool:
        target = other if isinstance(other, str) else other.name
        pending = [self]
        seen: set[str] = set()
        while pending:
            marker = pending.pop()
            if marker.name == target:
                return True
            if marker.name in seen:
                continue
            seen.add(marker.name)
            pending.extend(marker.parents)
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Marker) and other.name == self._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        if not self._parents:
            return f"Marker({self._name!r})"
        parents = ", ".join(p.name for p in self._parents)
        return f"Marker({self._name!r}, parents=[{parents}])"

    def __str__(self) -> str:
        return self._name


class MarkerManager:
    """Interns markers by name."""

    def __init__(self) -> None:
        self._markers: Dict[str, Marker] = {}
        self._lock = threading.Lock()

    def get_marker(self, name: str, *parents: Marker) -> Marker:
        marker = self._markers.get(name)
        if marker is None:
            with self._lock:
                marker = self._markers.setdefault(name, Marker(name))
        if parents:
            marker.add_parents(*parents)
        return marker

    def exists(self, name: str) -> bool:
        return name in self._markers

    def clear(self) -> None:
        with self._lock:
            self._markers.clear()


_manager = MarkerManager()


def get_marker(name: str, *parents: Marker) -> Marker:
    """Return the process-wide marker for ``name``, creating it on first use."""
    return _manager.get_marker(name, *parents)
