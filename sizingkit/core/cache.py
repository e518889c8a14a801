"""Bounded least-recently-used cache with time-based expiry.

Entries expire ``ttl_seconds`` after they were stored. Expired entries
are dropped when read, and ``cleanup()`` sweeps the rest. When the cache
is full, storing a new key evicts the least recently used entry.
"""
import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

from .exceptions import ConfigurationError

V = TypeVar('V')


class TTLCache(Generic[V]):
    """Thread-safe LRU map whose entries expire after a fixed TTL."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic
    ):
        if max_size < 1:
            raise ConfigurationError("max_size", f"must be at least 1, got {max_size}")
        if ttl_seconds <= 0:
            raise ConfigurationError("ttl_seconds", f"must be positive, got {ttl_seconds}")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[V, float]] = OrderedDict()
        self._lock = threading.Lock()

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def get(self, key: Hashable, default: V | None = None) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default

            value, stored_at = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return default

            self._entries.move_to_end(key)
            return value

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries.pop(key, None)

            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)

            self._entries[key] = (value, self._clock())

    def __contains__(self, key: Hashable) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def cleanup(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            stale = [k for k, (_, stored_at) in self._entries.items()
                     if self._expired(stored_at, now)]
            for key in stale:
                del self._entries[key]
            return len(stale)
