"""Tests for engine registration and resolution."""

from __future__ import annotations

from typing import ClassVar

import pytest
from conftest import Product, StubEngine

from solrscout.config.settings import Settings
from solrscout.engines.base.exceptions import ConfigurationError, EngineUnavailable
from solrscout.engines.base.registry import EngineRegistry
from solrscout.engines.collection.engine import CollectionEngine
from solrscout.engines.null.engine import NullEngine
from solrscout.engines.solr.engine import SolrEngine
from solrscout.models.query import QuerySpec
from solrscout.models.record import SearchableModel


class Review(SearchableModel):
    search_index: ClassVar[str | None] = "reviews"

    id: int


class TestRegistration:
    def test_register_and_create(self) -> None:
        registry = EngineRegistry()
        registry.register("collection", CollectionEngine)
        engine = registry.create("collection", strict_hydration=True)
        assert isinstance(engine, CollectionEngine)
        assert engine.strict_hydration is True
        assert registry.registered_engines == ["collection"]
        assert registry.active_engines == ["collection"]

    def test_create_unknown_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="No engine registered"):
            EngineRegistry().create("elastic")

    def test_get_uninitialized_raises(self) -> None:
        with pytest.raises(EngineUnavailable, match="not initialized"):
            EngineRegistry().get("solr")


class TestResolution:
    def test_first_added_engine_becomes_default(self) -> None:
        registry = EngineRegistry()
        first, second = StubEngine(), StubEngine()
        registry.add("first", first)
        registry.add("second", second)
        assert registry.resolve(Product) is first

    def test_binding_overrides_default(self) -> None:
        registry = EngineRegistry()
        default, reviews = StubEngine(), StubEngine()
        registry.add("default", default)
        registry.add("reviews", reviews)
        registry.bind("reviews", "reviews")
        assert registry.resolve(Review) is reviews
        assert registry.resolve(Product) is default

    def test_binding_to_missing_engine_raises(self) -> None:
        registry = EngineRegistry()
        registry.add("default", StubEngine())
        registry.bind("reviews", "solr")
        with pytest.raises(EngineUnavailable):
            registry.resolve(Review)

    def test_empty_registry_raises(self) -> None:
        with pytest.raises(EngineUnavailable, match="Product"):
            EngineRegistry().resolve(Product)

    def test_configured_default_not_created_raises(self) -> None:
        registry = EngineRegistry(default="solr")
        registry.add("collection", CollectionEngine())
        with pytest.raises(EngineUnavailable):
            registry.resolve(Product)

    def test_close_all(self) -> None:
        registry = EngineRegistry()
        engine = SolrEngine()
        registry.add("solr", engine)
        registry.close_all()
        assert registry.active_engines == []
        assert engine._client.is_closed


class TestFromSettings:
    def test_default_driver(self, settings: Settings) -> None:
        registry = EngineRegistry.from_settings(settings)
        engine = registry.resolve(Product)
        assert isinstance(engine, SolrEngine)
        assert set(registry.registered_engines) == {"solr", "collection", "null"}
        registry.close_all()

    def test_strict_hydration_flag_propagates(self) -> None:
        settings = Settings(_env_file=None, scout={"driver": "collection", "strict_hydration": True})  # type: ignore[call-arg]
        engine = EngineRegistry.from_settings(settings).resolve(Product)
        assert isinstance(engine, CollectionEngine)
        assert engine.strict_hydration is True

    def test_bindings(self) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None,
            scout={"driver": "null", "bindings": {"products": "collection"}},
        )
        registry = EngineRegistry.from_settings(settings)
        assert isinstance(registry.resolve(Product), CollectionEngine)
        assert isinstance(registry.resolve(Review), NullEngine)

    def test_unknown_driver(self) -> None:
        settings = Settings(_env_file=None, scout={"driver": "typesense"})  # type: ignore[call-arg]
        with pytest.raises(ConfigurationError, match="typesense"):
            EngineRegistry.from_settings(settings)


class TestNullEngine:
    def test_everything_is_empty(self) -> None:
        engine = NullEngine()
        spec = QuerySpec(query="anything", record_type=Product)
        assert engine.name == "null"
        assert engine.keys(spec) == []
        assert engine.get(spec, Product) == []
        assert engine.get_total_count(engine.paginate(spec, 10, 3)) == 0
