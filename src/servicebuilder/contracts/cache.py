# servicebuilder/contracts/cache.py
"""
Cache backend contract shared by the service builder and the clients it builds.

The builder only relies on fetch/save semantics with an expiry. Backends are
expected to be safe for concurrent use; how they store values is their own
concern.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_TTL = 86400


class CacheBackend(ABC):
    """Key/value store with per-entry expiry."""

    @abstractmethod
    def fetch(self, key: str) -> str | None:
        """Return the stored value, or ``None`` on a miss or expired entry."""

    @abstractmethod
    def save(self, key: str, value: str, ttl: int = DEFAULT_TTL) -> bool:
        """Store ``value`` under ``key`` for ``ttl`` seconds. Return success."""

    @abstractmethod
    def contains(self, key: str) -> bool: ...

    @abstractmethod
    def delete(self, key: str) -> bool: ...


def normalize_ttl(ttl: int | None) -> int:
    """Zero, ``None`` and other falsy TTLs fall back to one day."""
    return int(ttl) if ttl else DEFAULT_TTL


@dataclass(frozen=True)
class CacheBinding:
    """
    A cache backend handed to a builder together with its entry TTL.

    The builder holds the backend by reference and never manages its
    lifecycle.

    Attributes:
        backend: Cache backend shared with constructed clients
        ttl: Time-to-live in seconds for entries written through this binding
    """

    backend: CacheBackend
    ttl: int = DEFAULT_TTL

    def fetch(self, key: str) -> str | None:
        return self.backend.fetch(key)

    def save(self, key: str, value: str) -> bool:
        return self.backend.save(key, value, self.ttl)
