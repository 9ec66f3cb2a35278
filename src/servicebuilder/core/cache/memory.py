from __future__ import annotations

import threading
import time
from typing import Callable

from servicebuilder.contracts.cache import DEFAULT_TTL, CacheBackend


class MemoryCacheBackend(CacheBackend):
    """In-process cache with per-entry expiry. Mostly useful for tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def fetch(self, key: str) -> str | None:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def save(self, key: str, value: str, ttl: int = DEFAULT_TTL) -> bool:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)
        return True

    def contains(self, key: str) -> bool:
        return self.fetch(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)
