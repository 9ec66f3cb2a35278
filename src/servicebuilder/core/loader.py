# servicebuilder/core/loader.py
"""
Shared utilities for dynamic imports and configuration file processing.
"""
from __future__ import annotations

import importlib
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from servicebuilder.core.errors import MalformedSource, SourceUnavailable

logger = logging.getLogger(__name__)

# Pattern for environment variable substitution: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def import_attr(path: str) -> Any:
    """
    Dynamically import an attribute from a module.

    Args:
        path: Import path in format 'module.path:attribute'. Nested
            attributes are allowed after the colon ('module:Outer.Inner').

    Returns:
        The imported attribute

    Raises:
        ValueError: If path format is invalid
        ImportError: If module cannot be imported
        AttributeError: If attribute doesn't exist
    """
    if ":" not in path:
        raise ValueError(f"Invalid import path '{path}', expected 'module:attr'")

    mod_name, attr = path.split(":", 1)
    if not mod_name or not attr:
        raise ValueError(f"Invalid import path '{path}', expected 'module:attr'")

    try:
        obj: Any = importlib.import_module(mod_name)
    except ImportError as exc:
        logger.error("Failed to import module '%s'", mod_name)
        raise ImportError(f"Cannot import module '{mod_name}'") from exc

    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            logger.error("Module '%s' has no attribute '%s'", mod_name, attr)
            raise AttributeError(
                f"Module '{mod_name}' has no attribute '{attr}'"
            ) from exc
    return obj


def substitute_env_vars(value: Any) -> Any:
    """
    Substitute environment variables in a configuration value.

    Supports:
        - ${VAR} - substitutes with env var, raises if not set
        - ${VAR:-default} - substitutes with env var or default if not set

    Non-string values are returned unchanged.

    Raises:
        ValueError: If required env var is not set and no default provided
    """
    if not isinstance(value, str):
        return value

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            raise ValueError(
                f"Environment variable '{var_name}' is not set and no default provided"
            )

    return ENV_VAR_PATTERN.sub(replacer, value)


def read_bytes(path: Path) -> bytes:
    """Read a configuration file, mapping I/O failures to SourceUnavailable."""
    if not path.is_file():
        raise SourceUnavailable(str(path))
    try:
        return path.read_bytes()
    except OSError as exc:
        logger.error("Failed to read config file '%s': %s", path, exc)
        raise SourceUnavailable(str(path), str(exc)) from exc


class Pairs(list):
    """A YAML mapping kept as (key, value) pairs in document order."""


class PairsLoader(yaml.SafeLoader):
    """Safe loader that keeps duplicate mapping keys instead of merging them."""


def _construct_pairs(loader: PairsLoader, node: yaml.MappingNode) -> Pairs:
    loader.flatten_mapping(node)
    return Pairs(loader.construct_pairs(node, deep=True))


PairsLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_pairs
)


def _parse_yaml(path: Path) -> Any:
    raw = read_bytes(path)
    logger.info("Loading config file: %s", path)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.error("Config file '%s' is not valid UTF-8: %s", path, exc)
        raise MalformedSource(str(path), str(exc)) from exc

    try:
        return yaml.load(text, Loader=PairsLoader)
    except yaml.YAMLError as exc:
        logger.error("Failed to load YAML file '%s': %s", path, exc)
        raise MalformedSource(str(path), str(exc)) from exc


def load_yaml_pairs(path: Path) -> Pairs:
    """
    Load a single YAML document with every mapping as ordered ``Pairs``.

    Repeated keys are all kept, in document order. An empty file yields
    empty pairs.

    Raises:
        SourceUnavailable: If the file does not exist or cannot be read
        MalformedSource: If the content is not valid UTF-8 YAML or not a mapping
    """
    content = _parse_yaml(path)
    if content is None:
        return Pairs()
    if not isinstance(content, Pairs):
        raise MalformedSource(
            str(path), f"expected a mapping at top level, got {type(content).__name__}"
        )
    return content
