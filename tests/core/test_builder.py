from __future__ import annotations

import threading

import pytest

from servicebuilder.contracts.cache import CacheBinding
from servicebuilder.core.builder import ServiceBuilder
from servicebuilder.core.cache.memory import MemoryCacheBackend
from servicebuilder.core.catalog import BuildableCatalog
from servicebuilder.core.errors import UnknownBuildable, UnknownClient
from servicebuilder.core.resolver import ResolvedEntry
from tests.helpers.clients import (
    CachingClient,
    ConstructionFailed,
    HttpClient,
    PlainClient,
    SlowClient,
)


def _table() -> dict[str, ResolvedEntry]:
    return {
        "http": ResolvedEntry(
            class_path="tests.helpers.clients:HttpClient",
            params={"base_url": "http://example.com"},
        ),
        "plain": ResolvedEntry(class_path="tests.helpers.clients:PlainClient", params={"a": "1"}),
        "failing": ResolvedEntry(class_path="tests.helpers.clients:FailingClient"),
        "ghost": ResolvedEntry(class_path="nonexistent.module:Client"),
    }


class TestServiceBuilderGet:
    def test_builds_client_from_params(self):
        builder = ServiceBuilder(_table())

        client = builder.get("http")

        assert isinstance(client, HttpClient)
        assert client.base_url == "http://example.com"
        assert client.cache is None

    def test_memoized_instance_is_identical(self):
        builder = ServiceBuilder(_table())

        assert builder.get("plain") is builder.get("plain")
        assert builder.is_built("plain")

    def test_throw_away_builds_fresh_instances(self):
        builder = ServiceBuilder(_table())

        first = builder.get("plain", throw_away=True)
        second = builder.get("plain", throw_away=True)

        assert isinstance(first, PlainClient)
        assert first is not second
        assert not builder.is_built("plain")

    def test_throw_away_does_not_return_memoized(self):
        builder = ServiceBuilder(_table())
        shared = builder.get("plain")

        assert builder.get_transient("plain") is not shared
        assert builder.get("plain") is shared

    def test_memoized_after_throw_away_builds_new(self):
        builder = ServiceBuilder(_table())
        transient = builder.get_transient("plain")

        shared = builder.get("plain")

        assert shared is not transient
        assert builder.get("plain") is shared

    def test_unknown_client(self):
        builder = ServiceBuilder(_table())
        builder.get("plain")

        with pytest.raises(UnknownClient, match="No client is registered as 'missing'") as exc_info:
            builder.get("missing")

        assert isinstance(exc_info.value, KeyError)
        assert exc_info.value.name == "missing"
        assert set(exc_info.value.available) == set(_table())
        assert builder.is_built("plain")
        assert not builder.is_built("missing")

    def test_construction_error_propagates_unmodified(self):
        builder = ServiceBuilder(_table())

        with pytest.raises(ConstructionFailed):
            builder.get("failing")

        assert not builder.is_built("failing")

    def test_unresolvable_class(self):
        builder = ServiceBuilder(_table())

        with pytest.raises(UnknownBuildable):
            builder.get("ghost")

        assert not builder.is_built("ghost")

    def test_uses_given_catalog(self, catalog: BuildableCatalog):
        catalog.register("acme.Plain", PlainClient)
        builder = ServiceBuilder(
            {"p": ResolvedEntry(class_path="acme:Plain", params={"x": "y"})},
            catalog=catalog,
        )

        assert builder.get("p").params == {"x": "y"}

    def test_concurrent_get_builds_once(self):
        SlowClient.instances = 0
        builder = ServiceBuilder(
            {"slow": ResolvedEntry(class_path="tests.helpers.clients:SlowClient", params={"delay": "0.05"})}
        )
        results: list[object] = []

        def worker():
            results.append(builder.get("slow"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert SlowClient.instances == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)


class TestServiceBuilderCache:
    def test_set_cache_binding(self):
        backend = MemoryCacheBackend()
        builder = ServiceBuilder(_table())

        assert builder.set_cache(backend, 120) is builder
        assert builder.cache == CacheBinding(backend=backend, ttl=120)

    @pytest.mark.parametrize("ttl", [0, None])
    def test_falsy_ttl_defaults_to_one_day(self, ttl):
        builder = ServiceBuilder(_table()).set_cache(MemoryCacheBackend(), ttl)

        assert builder.cache.ttl == 86400

    def test_cache_handed_to_clients(self):
        backend = MemoryCacheBackend()
        builder = ServiceBuilder(_table()).set_cache(backend, 300)

        client = builder.get("http")

        assert client.cache.backend is backend
        assert client.cache.ttl == 300

    def test_client_may_write_shared_cache(self):
        backend = MemoryCacheBackend()
        builder = ServiceBuilder(
            {
                "caching": ResolvedEntry(
                    class_path="tests.helpers.clients:CachingClient",
                    params={"b": "2", "a": "1"},
                )
            }
        ).set_cache(backend)

        assert isinstance(builder.get("caching"), CachingClient)
        assert backend.fetch("caching_client_derived") == "a,b"


class TestServiceBuilderIntrospection:
    def test_has_list_len(self):
        builder = ServiceBuilder(_table())

        assert builder.has("http")
        assert "plain" in builder
        assert "missing" not in builder
        assert builder.list() == ["http", "plain", "failing", "ghost"]
        assert len(builder) == 4

    def test_table_is_read_only(self):
        builder = ServiceBuilder(_table())

        with pytest.raises(TypeError):
            builder.table["new"] = ResolvedEntry(class_path="m:X")  # type: ignore[index]

    def test_table_copied_from_input(self):
        table = _table()
        builder = ServiceBuilder(table)
        table.pop("http")

        assert builder.has("http")

    def test_entry(self):
        builder = ServiceBuilder(_table())

        assert builder.entry("plain").params == {"a": "1"}
        with pytest.raises(UnknownClient):
            builder.entry("nope")
