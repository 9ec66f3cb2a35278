# servicebuilder/core/catalog.py
"""
Catalog mapping class paths to buildable components.

Components are normally registered up front, at import time, with the
``buildable`` decorator or ``BuildableCatalog.register``. Class paths that are
not registered fall back to a dynamic import of 'module:attr'.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping, TypeVar

from servicebuilder.contracts.buildable import BuildableTarget
from servicebuilder.contracts.cache import CacheBinding
from servicebuilder.core.errors import UnknownBuildable
from servicebuilder.core.loader import import_attr
from servicebuilder.core.resolver import normalize_class_path

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BuildableTarget)


def entry_point(target: BuildableTarget) -> Callable[..., Any]:
    """Return the construction entry point of a component.

    A ``factory`` attribute wins; otherwise the target itself is called.
    """
    factory = getattr(target, "factory", None)
    if callable(factory):
        return factory
    if callable(target):
        return target
    raise TypeError(f"{target!r} is not buildable")


def _accepts_cache(func: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    if "cache" in sig.parameters:
        return True
    return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in sig.parameters.values())


def construct(
    target: BuildableTarget,
    params: Mapping[str, str],
    cache: CacheBinding | None = None,
) -> Any:
    """
    Invoke a component's entry point with a copy of ``params``.

    If the entry point accepts a ``cache`` keyword, ``cache`` is injected.
    Construction errors propagate unchanged.
    """
    func = entry_point(target)
    if _accepts_cache(func):
        return func(dict(params), cache=cache)
    return func(dict(params))


class BuildableCatalog:
    """Named registry of buildable components."""

    def __init__(self, *, allow_imports: bool = True) -> None:
        self._targets: dict[str, BuildableTarget] = {}
        self.allow_imports = allow_imports

    def register(self, class_path: str, target: BuildableTarget) -> None:
        """
        Register a component under a class path.

        Raises:
            ValueError: If the class path is empty or already registered
        """
        key = normalize_class_path(class_path)
        if not key:
            raise ValueError("Buildable class path must not be empty")
        if key in self._targets:
            raise ValueError(f"Buildable '{key}' is already registered")
        self._targets[key] = target
        logger.debug("Registered buildable: %s", key)

    def buildable(self, class_path: str) -> Callable[[T], T]:
        """Decorator form of ``register``."""

        def decorator(target: T) -> T:
            self.register(class_path, target)
            return target

        return decorator

    def resolve(self, class_path: str) -> BuildableTarget:
        """
        Look up the component for a class path.

        Raises:
            UnknownBuildable: If the path is neither registered nor importable
        """
        key = normalize_class_path(class_path)
        target = self._targets.get(key)
        if target is not None:
            return target

        if not self.allow_imports:
            raise UnknownBuildable(key, "not registered")

        try:
            return import_attr(key)
        except (ValueError, ImportError, AttributeError) as exc:
            raise UnknownBuildable(key, str(exc)) from exc

    def has(self, class_path: str) -> bool:
        return normalize_class_path(class_path) in self._targets

    def list(self) -> list[str]:
        return list(self._targets.keys())

    def __contains__(self, class_path: str) -> bool:
        return self.has(class_path)

    def __len__(self) -> int:
        return len(self._targets)


default_catalog = BuildableCatalog()
buildable = default_catalog.buildable
