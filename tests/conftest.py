# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from servicebuilder.core.catalog import BuildableCatalog
from tests.helpers.cache import RecordingCacheBackend


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a configuration file into tmp_path and return its path."""

    def _write(content: str, name: str = "clients.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog() -> BuildableCatalog:
    return BuildableCatalog()


@pytest.fixture
def recording_cache() -> RecordingCacheBackend:
    return RecordingCacheBackend()
