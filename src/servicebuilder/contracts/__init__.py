"""Public contracts for service builder collaborators."""
from servicebuilder.contracts.buildable import Buildable, BuildableTarget
from servicebuilder.contracts.cache import (
    DEFAULT_TTL,
    CacheBackend,
    CacheBinding,
    normalize_ttl,
)

__all__ = [
    "Buildable", "BuildableTarget",
    "CacheBackend", "CacheBinding", "DEFAULT_TTL", "normalize_ttl",
]
