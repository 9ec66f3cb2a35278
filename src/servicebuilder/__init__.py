"""Declarative registry of service clients built from a configuration file."""

from servicebuilder.contracts import CacheBackend, CacheBinding
from servicebuilder.core.builder import ServiceBuilder, build
from servicebuilder.core.cache import DiskCacheBackend, MemoryCacheBackend
from servicebuilder.core.catalog import BuildableCatalog, buildable
from servicebuilder.core.errors import (
    MalformedSource,
    MissingImplementation,
    ResolutionError,
    ServiceBuilderError,
    SourceUnavailable,
    UnknownBuildable,
    UnknownClient,
    UnresolvedParent,
)

__all__ = [
    "ServiceBuilder", "build",
    "BuildableCatalog", "buildable",
    "CacheBackend", "CacheBinding", "DiskCacheBackend", "MemoryCacheBackend",
    "ServiceBuilderError", "SourceUnavailable", "MalformedSource",
    "ResolutionError", "UnresolvedParent", "MissingImplementation",
    "UnknownClient", "UnknownBuildable",
]
