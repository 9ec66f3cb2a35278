# servicebuilder/core/resolver.py
"""
Inheritance resolution for raw client entries.

Resolution is a single forward pass: an entry may only extend an entry
declared before it, so chains are always finite and cycles cannot occur.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from servicebuilder.core.errors import MissingImplementation, UnresolvedParent
from servicebuilder.core.source import RawEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedEntry:
    """
    A client definition with inheritance flattened.

    Attributes:
        class_path: Import path in format 'module:attr'
        params: Merged parameters, own values overriding inherited ones
    """

    class_path: str
    params: dict[str, str] = field(default_factory=dict)


ResolutionTable = dict[str, ResolvedEntry]


def normalize_class_path(class_path: str) -> str:
    """
    Convert a namespaced class identifier into an import path.

    ``acme.clients.S3Client`` and ``Acme\\Clients\\S3Client`` become
    ``acme.clients:S3Client`` and ``Acme.Clients:S3Client``. Paths already
    in 'module:attr' form are returned unchanged.
    """
    path = class_path.strip().replace("\\", ".").strip(".")
    if not path or ":" in path:
        return path
    module, sep, attr = path.rpartition(".")
    return f"{module}:{attr}" if sep else path


def resolve(entries: Iterable[RawEntry]) -> ResolutionTable:
    """
    Flatten ``extends`` chains into a name -> ResolvedEntry table.

    Later entries with the same name overwrite earlier ones.

    Raises:
        UnresolvedParent: If an entry extends a name not defined before it
        MissingImplementation: If an entry ends up without a class path
    """
    table: ResolutionTable = {}

    for entry in entries:
        if entry.extends:
            parent = table.get(entry.extends)
            if parent is None:
                logger.error(
                    "Client '%s' extends undefined client '%s'", entry.name, entry.extends
                )
                raise UnresolvedParent(entry.name, entry.extends)
            class_path = entry.class_path or parent.class_path
            params = dict(parent.params)
        else:
            class_path = entry.class_path
            params = {}

        params.update(entry.params)

        class_path = normalize_class_path(class_path)
        if not class_path:
            raise MissingImplementation(entry.name)

        if entry.name in table:
            logger.debug("Client '%s' redefined, later definition wins", entry.name)
        table[entry.name] = ResolvedEntry(class_path=class_path, params=params)

    logger.info("Resolved %d client(s): %s", len(table), list(table))
    return table
