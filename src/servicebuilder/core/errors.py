# servicebuilder/core/errors.py
"""
Error taxonomy for loading, resolving and building service clients.

Cache failures never surface as exceptions; everything else is fatal to the
call that raised it.
"""
from __future__ import annotations

from typing import Iterable


class ServiceBuilderError(Exception):
    """Base class for all service builder errors."""


class SourceUnavailable(ServiceBuilderError):
    """The configuration source cannot be opened or read."""

    def __init__(self, source: str, reason: str | None = None) -> None:
        self.source = source
        self.reason = reason
        message = f"Unable to open service configuration file {source}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedSource(ServiceBuilderError):
    """The configuration source was read but cannot be parsed into entries."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed service configuration {source}: {reason}")


class ResolutionError(ServiceBuilderError):
    """Base class for errors raised while resolving client entries."""


class UnresolvedParent(ResolutionError):
    """An entry extends a client that is not defined earlier in the document."""

    def __init__(self, name: str, parent: str) -> None:
        self.name = name
        self.parent = parent
        super().__init__(
            f"Client '{name}' is trying to extend a non-existent or not yet "
            f"defined client: '{parent}'"
        )


class MissingImplementation(ResolutionError):
    """An entry has no class path, neither declared nor inherited."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Client '{name}' missing required 'class' field")


class UnknownClient(ServiceBuilderError, KeyError):
    """No client is registered under the requested name."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = list(available)
        super().__init__(
            f"No client is registered as '{name}'. Available: {self.available}"
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class UnknownBuildable(ServiceBuilderError):
    """A class path cannot be resolved to a buildable component."""

    def __init__(self, class_path: str, reason: str | None = None) -> None:
        self.class_path = class_path
        self.reason = reason
        message = f"Cannot resolve buildable '{class_path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
