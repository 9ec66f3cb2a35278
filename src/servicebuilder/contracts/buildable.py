from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Union, runtime_checkable

from servicebuilder.contracts.cache import CacheBinding


@runtime_checkable
class Buildable(Protocol):
    """
    Component that can be constructed from a flat parameter mapping.

    ``cache`` is the builder's current cache binding, or ``None`` when the
    builder has none. Implementations may use it to cache their own derived
    configuration.
    """

    @classmethod
    def factory(
        cls,
        params: Mapping[str, str],
        *,
        cache: CacheBinding | None = None,
    ) -> Any: ...


# Anything the catalog can resolve: a Buildable class, or a plain callable
# taking the params mapping (and optionally ``cache``).
BuildableTarget = Union[type, Callable[..., Any]]
