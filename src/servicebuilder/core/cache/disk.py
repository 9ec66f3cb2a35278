# servicebuilder/core/cache/disk.py
"""
Persistent cache backend on top of :mod:`diskcache`.

Survives process restarts, so repeated builds against the same configuration
file skip reading and resolving it until the entry expires.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

import diskcache

from servicebuilder.contracts.cache import DEFAULT_TTL, CacheBackend

logger = logging.getLogger(__name__)


class DiskCacheBackend(CacheBackend):
    """
    Cache backend storing string values in a ``diskcache.Cache`` directory.

    Args:
        directory: Cache directory, created on first use
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self._cache = diskcache.Cache(str(self.directory))
        logger.debug("Opened disk cache at %s", self.directory)

    def fetch(self, key: str) -> str | None:
        value = self._cache.get(key, default=None)
        return value if isinstance(value, str) else None

    def save(self, key: str, value: str, ttl: int = DEFAULT_TTL) -> bool:
        return bool(self._cache.set(key, value, expire=ttl))

    def contains(self, key: str) -> bool:
        return key in self._cache

    def delete(self, key: str) -> bool:
        return bool(self._cache.delete(key))

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> "DiskCacheBackend":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
