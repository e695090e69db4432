"""Memoize the last resolved archive per resolver.

The live views re-resolve on every poll, but most polls return the very
same decoded snapshot object (the fetch layer reuses it when the body is
unchanged). The cache is passed in explicitly by the caller; there is no
module-level state.

Eviction rule: one entry per resolver, keyed by the identity (`is`) of the
snapshot. Resolving a different snapshot replaces that resolver's entry.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass
class _Entry:
    snapshot: Any
    result: Any


class ArchiveCache:
    """Single most-recent entry per resolver function."""

    def __init__(self) -> None:
        self._entries: dict[Callable[[Any], Any], _Entry] = {}
        self.hits = 0
        self.misses = 0

    def resolve(self, resolver: Callable[[Any], T], snapshot: Any) -> T:
        """Return `resolver(snapshot)`, reusing the last result for the same object."""
        entry = self._entries.get(resolver)
        if entry is not None and entry.snapshot is snapshot:
            self.hits += 1
            return entry.result
        self.misses += 1
        result = resolver(snapshot)
        # holding the snapshot keeps its id from being reused while cached
        self._entries[resolver] = _Entry(snapshot=snapshot, result=result)
        return result

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
