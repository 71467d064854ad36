"""Bounded cache for search results."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Protocol

DEFAULT_CAPACITY = 50


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key."""


@dataclass
class LruCache(Cache):
    """In-memory least-recently-used cache.

    Reads and writes both mark a key as most recent; once `capacity` is
    exceeded the least recent key is evicted. Not thread-safe.
    """

    capacity: int = DEFAULT_CAPACITY
    _entries: OrderedDict[str, object] = field(default_factory=OrderedDict)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {self.capacity}")

    def get(self, key: str) -> object | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: str, value: object) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
