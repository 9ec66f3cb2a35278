# servicebuilder/core/cache/resolution.py
"""
Caching of resolved client tables.

A resolved table is stored as JSON under a key derived from the source
identifier. Cache problems are never fatal: a failed or corrupt load is a
miss, a failed store is logged and ignored.
"""
from __future__ import annotations

import hashlib
import logging
import os

from pydantic import TypeAdapter, ValidationError

from servicebuilder.contracts.cache import CacheBackend, normalize_ttl
from servicebuilder.core.resolver import ResolutionTable, ResolvedEntry

logger = logging.getLogger(__name__)

KEY_PREFIX = "svcb_"

_table_adapter: TypeAdapter[dict[str, ResolvedEntry]] = TypeAdapter(
    dict[str, ResolvedEntry]
)


def cache_key(source: str | os.PathLike[str]) -> str:
    """Deterministic cache key for a configuration source identifier."""
    digest = hashlib.sha256(os.fspath(source).encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}{digest}"


def serialize_table(table: ResolutionTable) -> str:
    return _table_adapter.dump_json(table).decode("utf-8")


def deserialize_table(raw: str) -> ResolutionTable:
    return _table_adapter.validate_json(raw)


class ResolutionCache:
    """Loads and stores resolved tables through a cache backend."""

    def __init__(self, backend: CacheBackend) -> None:
        self.backend = backend

    def load(self, key: str) -> ResolutionTable | None:
        try:
            raw = self.backend.fetch(key)
        except Exception as exc:
            logger.warning("Cache fetch failed for %s, treating as miss: %s", key, exc)
            return None

        if raw is None:
            logger.debug("Cache miss for %s", key)
            return None

        try:
            table = deserialize_table(raw)
        except (ValidationError, TypeError) as exc:
            logger.warning("Discarding unreadable cached table %s: %s", key, exc)
            return None

        incomplete = [name for name, entry in table.items() if not entry.class_path]
        if incomplete:
            logger.warning(
                "Discarding cached table %s, clients without class: %s", key, incomplete
            )
            return None

        logger.debug("Cache hit for %s (%d client(s))", key, len(table))
        return table

    def store(self, key: str, table: ResolutionTable, ttl: int | None = None) -> bool:
        ttl = normalize_ttl(ttl)
        try:
            saved = self.backend.save(key, serialize_table(table), ttl)
        except Exception as exc:
            logger.warning("Failed to cache resolved table %s: %s", key, exc)
            return False

        if not saved:
            logger.warning("Cache backend refused resolved table %s", key)
            return False

        logger.debug("Cached resolved table %s for %ds", key, ttl)
        return True
