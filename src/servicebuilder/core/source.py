# servicebuilder/core/source.py
"""
Readers turning a client configuration document into raw entries.

Entries are returned in document order; inheritance is resolved later by
``servicebuilder.core.resolver``.

YAML layout::

    clients:
      base:
        class: acme.clients.HttpClient
        params:
          base_url: "${API_URL:-http://localhost}"
      child:
        extends: base
        params:
          timeout: "30"

XML layout::

    <builder>
      <clients>
        <client name="base" class="acme.clients.HttpClient">
          <param name="base_url" value="http://localhost"/>
        </client>
        <client name="child" extends="base"/>
      </clients>
    </builder>
"""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from servicebuilder.core.errors import MalformedSource
from servicebuilder.core.loader import (
    Pairs,
    load_yaml_pairs,
    read_bytes,
    substitute_env_vars,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawEntry:
    """
    A client definition exactly as declared in the source document.

    Attributes:
        name: Client name
        class_path: Declared implementation identifier, empty when inherited
        extends: Name of the parent entry, if any
        params: Parameter pairs declared on this entry, in declaration order
    """

    name: str
    class_path: str = ""
    extends: str | None = None
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)


def stringify(value: Any) -> str:
    """Coerce a scalar parameter value to its string form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _substitute_params(
    source: str, name: str, pairs: list[tuple[str, str]]
) -> tuple[tuple[str, str], ...]:
    try:
        return tuple((key, substitute_env_vars(value)) for key, value in pairs)
    except ValueError as exc:
        raise MalformedSource(source, f"client '{name}' config error: {exc}") from exc


# -- YAML ----------------------------------------------------------------------


def _yaml_entry(source: str, name: Any, spec: Any) -> RawEntry:
    if not name or not isinstance(name, str):
        raise MalformedSource(source, f"client name must be a non-empty string, got {name!r}")
    if spec is None:
        spec = Pairs()
    if not isinstance(spec, Pairs):
        raise MalformedSource(source, f"client '{name}' must be a mapping")

    fields = dict(spec)
    params = fields.get("params") or Pairs()
    if not isinstance(params, Pairs):
        raise MalformedSource(source, f"client '{name}' params must be a mapping")

    for key, value in params:
        if isinstance(value, list):
            raise MalformedSource(
                source, f"client '{name}' param '{key}' must be a scalar value"
            )

    extends = fields.get("extends")
    pairs = [(str(key), stringify(value)) for key, value in params]

    return RawEntry(
        name=name,
        class_path=stringify(fields.get("class")),
        extends=str(extends) if extends else None,
        params=_substitute_params(source, name, pairs),
    )


def read_yaml_source(path: Path) -> list[RawEntry]:
    """
    Read a YAML client document. Both mapping and list forms are accepted.

    A client name repeated in the mapping form yields one entry per
    occurrence, in document order.
    """
    source = str(path)
    data = dict(load_yaml_pairs(path))
    clients = data.get("clients") or Pairs()

    if isinstance(clients, Pairs):
        return [_yaml_entry(source, name, spec) for name, spec in clients]

    if isinstance(clients, list):
        entries: list[RawEntry] = []
        for item in clients:
            if not isinstance(item, Pairs):
                raise MalformedSource(source, "each client must be a mapping")
            entries.append(_yaml_entry(source, dict(item).get("name"), item))
        return entries

    raise MalformedSource(source, "'clients' must be a mapping or a list")


# -- XML -----------------------------------------------------------------------


def _xml_entry(source: str, node: ET.Element) -> RawEntry:
    name = node.get("name", "")
    if not name:
        raise MalformedSource(source, "client element missing required 'name' attribute")

    pairs: list[tuple[str, str]] = []
    for param in node.findall("param"):
        key = param.get("name")
        if not key:
            raise MalformedSource(source, f"client '{name}' has a param without a name")
        pairs.append((key, param.get("value", "")))

    return RawEntry(
        name=name,
        class_path=node.get("class", ""),
        extends=node.get("extends") or None,
        params=_substitute_params(source, name, pairs),
    )


def read_xml_source(path: Path) -> list[RawEntry]:
    """Read an XML client document (``<clients><client>...`` under any root)."""
    source = str(path)
    raw = read_bytes(path)
    logger.info("Loading config file: %s", path)

    try:
        # bytes, so the parser honours the declared encoding
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        logger.error("Failed to parse XML file '%s': %s", path, exc)
        raise MalformedSource(source, str(exc)) from exc

    container = root if root.tag == "clients" else root.find("clients")
    if container is None:
        return []
    return [_xml_entry(source, node) for node in container.findall("client")]


# -- Dispatch ------------------------------------------------------------------

READERS: dict[str, Callable[[Path], list[RawEntry]]] = {
    ".yaml": read_yaml_source,
    ".yml": read_yaml_source,
    ".xml": read_xml_source,
}


def read_source(source: str | os.PathLike[str]) -> list[RawEntry]:
    """
    Read raw client entries from a configuration file.

    The reader is chosen from the file suffix; unknown suffixes are read as
    YAML.

    Raises:
        SourceUnavailable: If the file cannot be opened
        MalformedSource: If the document cannot be parsed into entries
    """
    path = Path(source)
    reader = READERS.get(path.suffix.lower(), read_yaml_source)
    entries = reader(path)
    logger.info(
        "Read %d client definition(s) from %s: %s",
        len(entries),
        path,
        [e.name for e in entries],
    )
    return entries
