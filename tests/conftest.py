"""Shared test fixtures and configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any, ClassVar

import pytest

from solrscout.config.settings import Settings
from solrscout.core.builder import Builder
from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.engines.base.registry import EngineRegistry
from solrscout.engines.collection.engine import CollectionEngine
from solrscout.models.query import QuerySpec
from solrscout.models.record import RecordQuery, SearchableModel
from solrscout.observability.logging import PACKAGE_LOGGER


class Product(SearchableModel):
    """In-memory record type used across the suite."""

    search_index: ClassVar[str | None] = "products"
    per_page: ClassVar[int] = 5
    soft_deletes: ClassVar[bool] = True
    store: ClassVar[list[Product]] = []

    id: int
    name: str
    color: str
    brand: str
    price: float
    deleted_at: datetime | None = None

    @classmethod
    def load_records(cls, query: RecordQuery) -> list[Product]:
        return query.apply(cls.store)


class StubEngine(SearchEngine):
    """Engine returning canned results and recording every call."""

    def __init__(self, results: RawResults | None = None, strict_hydration: bool = False) -> None:
        super().__init__(strict_hydration=strict_hydration)
        self.results = results or RawResults()
        self.calls: list[tuple[Any, ...]] = []

    @property
    def name(self) -> str:
        return "stub"

    def search(self, spec: QuerySpec) -> RawResults:
        self.calls.append(("search", spec))
        return self.results

    def paginate(self, spec: QuerySpec, per_page: int, page: int) -> RawResults:
        self.calls.append(("paginate", per_page, page))
        return self.results

    def map_ids(self, results: RawResults) -> list[Any]:
        return [doc["id"] for doc in results.documents]

    def map(self, spec: QuerySpec, results: RawResults, record_type: type[SearchableModel]) -> list[Any]:
        return self.hydrate(spec, self.map_ids(results), record_type)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
    )


@pytest.fixture
def products() -> Iterator[list[Product]]:
    """Populate the Product store; cleared after each test."""
    Product.store[:] = [
        Product(id=1, name="Trail Running Shoes", color="red", brand="acme", price=89.0),
        Product(id=2, name="Road Running Shoes", color="blue", brand="acme", price=120.0),
        Product(id=3, name="Leather Dress Shoes", color="black", brand="oxford", price=150.0),
        Product(id=4, name="Canvas Sneakers", color="red", brand="kicks", price=45.0),
        Product(id=5, name="Wool Socks", color="blue", brand="acme", price=12.0),
        Product(
            id=6,
            name="Retired Hiking Shoes",
            color="red",
            brand="oxford",
            price=99.0,
            deleted_at=datetime(2024, 1, 1, tzinfo=UTC),
        ),
    ]
    yield Product.store
    Product.store.clear()


@pytest.fixture
def stub_engine() -> StubEngine:
    return StubEngine(
        RawResults(
            total_hits=42,
            documents=[{"id": "3"}, {"id": "1"}, {"id": "2"}],
            payload={"facet_counts": {"facet_fields": {"color": ["red", 3, "blue", 5]}}},
        )
    )


@pytest.fixture
def stub_registry(stub_engine: StubEngine) -> EngineRegistry:
    registry = EngineRegistry()
    registry.add("stub", stub_engine)
    return registry


@pytest.fixture
def collection_registry() -> EngineRegistry:
    registry = EngineRegistry()
    registry.add("collection", CollectionEngine())
    return registry


@pytest.fixture
def builder(stub_registry: EngineRegistry) -> Builder:
    return Builder(Product, "shoes", engines=stub_registry)


@pytest.fixture(autouse=True)
def _reset_macros() -> Iterator[None]:
    yield
    Builder.flush_macros()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handlers installed by ``setup_logging`` so caplog keeps working."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
