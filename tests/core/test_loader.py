from __future__ import annotations

import os
import pytest
from pathlib import Path

from servicebuilder.core.errors import MalformedSource, SourceUnavailable
from servicebuilder.core.loader import (
    import_attr,
    Pairs,
    load_yaml_pairs,
    substitute_env_vars,
)


class TestImportAttr:
    def test_import_valid_path(self):
        result = import_attr("os.path:join")
        assert result is os.path.join

    def test_import_nested_attribute(self):
        result = import_attr("tests.helpers.clients:HttpClient.factory")
        assert callable(result)

    def test_import_invalid_format_no_colon(self):
        with pytest.raises(ValueError, match="expected 'module:attr'"):
            import_attr("os.path.join")

    def test_import_empty_attr(self):
        with pytest.raises(ValueError, match="expected 'module:attr'"):
            import_attr("os.path:")

    def test_import_nonexistent_module(self):
        with pytest.raises(ImportError):
            import_attr("nonexistent.module:attr")

    def test_import_nonexistent_attr(self):
        with pytest.raises(AttributeError):
            import_attr("os.path:nonexistent_function")


class TestSubstituteEnvVars:
    def test_substitute_simple_var(self, monkeypatch):
        monkeypatch.setenv("TEST_VAR", "hello")
        assert substitute_env_vars("${TEST_VAR}") == "hello"

    def test_substitute_embedded_var(self, monkeypatch):
        monkeypatch.setenv("API_HOST", "api.example.com")
        assert substitute_env_vars("https://${API_HOST}/v1") == "https://api.example.com/v1"

    def test_default_used_when_missing(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert substitute_env_vars("${MISSING_VAR:-fallback}") == "fallback"

    def test_env_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("TEST_VAR", "from_env")
        assert substitute_env_vars("${TEST_VAR:-fallback}") == "from_env"

    def test_missing_var_no_default_raises(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with pytest.raises(ValueError, match="not set"):
            substitute_env_vars("${MISSING_VAR}")

    def test_non_string_passthrough(self):
        assert substitute_env_vars(42) == 42
        assert substitute_env_vars(None) is None
        nested = {"inner": "${NOT_TOUCHED}"}
        assert substitute_env_vars(nested) is nested


class TestLoadYamlPairs:
    def test_load_mapping(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("key: value\nother:\n  nested: 1\n", encoding="utf-8")

        result = load_yaml_pairs(config_file)

        assert isinstance(result, Pairs)
        assert result == [("key", "value"), ("other", [("nested", 1)])]

    def test_duplicate_keys_kept_in_order(self, tmp_path: Path):
        config_file = tmp_path / "dup.yaml"
        config_file.write_text("a: 1\nb: 2\na: 3\n", encoding="utf-8")

        assert load_yaml_pairs(config_file) == [("a", 1), ("b", 2), ("a", 3)]

    def test_merge_keys_are_flattened(self, tmp_path: Path):
        config_file = tmp_path / "merge.yaml"
        config_file.write_text(
            "defaults: &d\n  x: 1\nitem:\n  <<: *d\n  y: 2\n", encoding="utf-8"
        )

        item = dict(load_yaml_pairs(config_file))["item"]

        assert dict(item) == {"x": 1, "y": 2}

    def test_load_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_yaml_pairs(config_file) == []

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(SourceUnavailable, match="Unable to open"):
            load_yaml_pairs(tmp_path / "nope.yaml")

    def test_directory_is_unavailable(self, tmp_path: Path):
        with pytest.raises(SourceUnavailable):
            load_yaml_pairs(tmp_path)

    def test_non_utf8_is_malformed(self, tmp_path: Path):
        config_file = tmp_path / "latin1.yaml"
        config_file.write_bytes("city: Zürich\n".encode("latin-1"))

        with pytest.raises(MalformedSource):
            load_yaml_pairs(config_file)

    def test_invalid_yaml_raises(self, tmp_path: Path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("clients: [unclosed\n", encoding="utf-8")

        with pytest.raises(MalformedSource):
            load_yaml_pairs(config_file)

    def test_non_mapping_top_level_raises(self, tmp_path: Path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(MalformedSource, match="expected a mapping"):
            load_yaml_pairs(config_file)
