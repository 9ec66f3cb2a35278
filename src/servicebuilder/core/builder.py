# servicebuilder/core/builder.py
"""
Service builder: hands out client instances built from a resolved table.

Typical use::

    builder = ServiceBuilder.factory("config/clients.yaml", cache=DiskCacheBackend(".cache"))
    s3 = builder.get("s3")                # built once, then reused
    tmp = builder.get_transient("s3")     # fresh instance, never stored
"""
from __future__ import annotations

import logging
import os
import threading
from types import MappingProxyType
from typing import Any, Mapping

from servicebuilder.contracts.cache import (
    DEFAULT_TTL,
    CacheBackend,
    CacheBinding,
    normalize_ttl,
)
from servicebuilder.core.cache.resolution import ResolutionCache, cache_key
from servicebuilder.core.catalog import BuildableCatalog, construct, default_catalog
from servicebuilder.core.errors import UnknownClient
from servicebuilder.core.resolver import ResolutionTable, ResolvedEntry, resolve
from servicebuilder.core.source import read_source

logger = logging.getLogger(__name__)


class ServiceBuilder:
    """
    Registry of configured clients, built lazily by name.

    The resolved table is fixed at construction. Instances obtained through
    ``get`` are memoized per name for the lifetime of the builder; at most
    one instance is constructed per name even under concurrent calls.
    """

    def __init__(
        self,
        config: Mapping[str, ResolvedEntry],
        *,
        catalog: BuildableCatalog | None = None,
    ) -> None:
        self._config: ResolutionTable = dict(config)
        self._clients: dict[str, Any] = {}
        self._cache: CacheBinding | None = None
        self._catalog = catalog if catalog is not None else default_catalog
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ---- construction --------------------------------------------

    @classmethod
    def factory(
        cls,
        source: str | os.PathLike[str],
        cache: CacheBackend | None = None,
        ttl: int | None = DEFAULT_TTL,
        *,
        catalog: BuildableCatalog | None = None,
    ) -> "ServiceBuilder":
        """
        Create a builder from a configuration file.

        When a cache backend is given, the resolved table is looked up under
        a key derived from ``source`` and, on a miss, stored there after
        resolution. The same backend is then shared with constructed clients.

        Raises:
            SourceUnavailable: If the file cannot be opened
            MalformedSource: If the file cannot be parsed
            UnresolvedParent: If a client extends an undefined client
            MissingImplementation: If a client has no class
        """
        ttl = normalize_ttl(ttl)
        key = cache_key(source)
        resolution_cache = ResolutionCache(cache) if cache is not None else None

        config = resolution_cache.load(key) if resolution_cache else None
        if config is not None:
            logger.info("Loaded %d client(s) for %s from cache", len(config), source)
        else:
            config = resolve(read_source(source))
            if resolution_cache:
                resolution_cache.store(key, config, ttl)

        builder = cls(config, catalog=catalog)
        if cache is not None:
            # Always share the cache with built clients
            builder.set_cache(cache, ttl)
        return builder

    def set_cache(self, cache: CacheBackend, ttl: int | None = DEFAULT_TTL) -> "ServiceBuilder":
        """Set the cache backend handed to clients built from now on."""
        self._cache = CacheBinding(backend=cache, ttl=normalize_ttl(ttl))
        return self

    @property
    def cache(self) -> CacheBinding | None:
        return self._cache

    # ---- lookup --------------------------------------------------

    def get(self, name: str, throw_away: bool = False) -> Any:
        """
        Get a client by name, building it on first use.

        Args:
            name: Client name
            throw_away: Build a fresh instance that is neither read from nor
                stored in the instance cache

        Raises:
            UnknownClient: If no client is configured under ``name``
            UnknownBuildable: If the client's class cannot be resolved
        """
        entry = self.entry(name)

        if throw_away:
            return self._build(name, entry)

        if name in self._clients:
            return self._clients[name]

        with self._lock_for(name):
            # Another caller may have finished building while we waited
            if name in self._clients:
                return self._clients[name]
            client = self._build(name, entry)
            self._clients[name] = client
        return client

    def get_transient(self, name: str) -> Any:
        """Build a fresh client that is never memoized."""
        return self.get(name, throw_away=True)

    def entry(self, name: str) -> ResolvedEntry:
        try:
            return self._config[name]
        except KeyError:
            raise UnknownClient(name, self._config) from None

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    def _build(self, name: str, entry: ResolvedEntry) -> Any:
        target = self._catalog.resolve(entry.class_path)
        logger.debug("Building client '%s' (%s)", name, entry.class_path)
        return construct(target, entry.params, self._cache)

    # ---- introspection -------------------------------------------

    @property
    def table(self) -> Mapping[str, ResolvedEntry]:
        return MappingProxyType(self._config)

    def has(self, name: str) -> bool:
        return name in self._config

    def list(self) -> list[str]:
        return list(self._config.keys())

    def is_built(self, name: str) -> bool:
        return name in self._clients

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._config)


def build(
    source: str | os.PathLike[str],
    cache: CacheBackend | None = None,
    ttl: int | None = DEFAULT_TTL,
    *,
    catalog: BuildableCatalog | None = None,
) -> ServiceBuilder:
    """Shortcut for ``ServiceBuilder.factory``."""
    return ServiceBuilder.factory(source, cache, ttl, catalog=catalog)
