"""Cache backends and resolved-table caching."""

from servicebuilder.core.cache.disk import DiskCacheBackend
from servicebuilder.core.cache.memory import MemoryCacheBackend
from servicebuilder.core.cache.resolution import ResolutionCache, cache_key

__all__ = [
    "DiskCacheBackend",
    "MemoryCacheBackend",
    "ResolutionCache",
    "cache_key",
]
