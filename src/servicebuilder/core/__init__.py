"""Configuration loading, resolution and client construction."""

from servicebuilder.core.builder import ServiceBuilder, build
from servicebuilder.core.catalog import BuildableCatalog, buildable, default_catalog
from servicebuilder.core.resolver import ResolvedEntry, normalize_class_path, resolve
from servicebuilder.core.source import RawEntry, read_source

__all__ = [
    "ServiceBuilder",
    "build",
    "BuildableCatalog",
    "buildable",
    "default_catalog",
    "ResolvedEntry",
    "normalize_class_path",
    "resolve",
    "RawEntry",
    "read_source",
]
