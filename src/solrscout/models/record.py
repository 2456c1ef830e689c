"""Searchable record types — the bridge between search hits and domain records.

A record type is a ``SearchableModel`` subclass.  It tells the search layer:
  - which index its documents live in (``search_index``)
  - its default page size (``per_page``)
  - how to build the collection of hydrated records (``new_collection``)
  - how to load records from its system of record (``load_records``)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from solrscout.core.builder import Builder
    from solrscout.engines.base.registry import EngineRegistry


class RecordQuery:
    """Query against the fallback data store used during hydration.

    ``query_callback`` hooks receive this object and may narrow it further
    with ``where`` / ``where_in`` / ``filter``.
    """

    def __init__(self, key_name: str = "id", keys: Sequence[Any] | None = None) -> None:
        self.key_name = key_name
        self.keys = list(keys) if keys is not None else None
        self.wheres: dict[str, Any] = {}
        self.predicates: list[Callable[[Any], bool]] = []

    def where(self, field: str, value: Any) -> RecordQuery:
        self.wheres[field] = value
        return self

    def where_in(self, field: str, values: Iterable[Any]) -> RecordQuery:
        allowed = list(values)
        self.predicates.append(lambda record: getattr(record, field, None) in allowed)
        return self

    def filter(self, predicate: Callable[[Any], bool]) -> RecordQuery:
        self.predicates.append(predicate)
        return self

    def matches(self, record: Any) -> bool:
        """Check a single record against every constraint of this query."""
        if self.keys is not None:
            wanted = {str(k) for k in self.keys}
            if str(getattr(record, self.key_name, None)) not in wanted:
                return False
        for field, value in self.wheres.items():
            if getattr(record, field, None) != value:
                return False
        return all(predicate(record) for predicate in self.predicates)

    def apply(self, records: Iterable[Any]) -> list[Any]:
        """Evaluate the query against an in-memory iterable of records."""
        return [record for record in records if self.matches(record)]


class SearchableModel(BaseModel):
    """Base class for domain records that can be searched.

    Subclasses implement ``load_records`` against their system of record.
    """

    search_index: ClassVar[str | None] = None
    per_page: ClassVar[int] = 15
    key_name: ClassVar[str] = "id"
    soft_deletes: ClassVar[bool] = False

    @classmethod
    def searchable_as(cls) -> str | None:
        """Index name for this record type; ``None`` means the engine default."""
        return cls.search_index

    @classmethod
    def search(
        cls,
        query: str = "",
        *,
        engines: EngineRegistry,
        callback: Callable[..., Any] | None = None,
    ) -> Builder:
        """Start a new search against this record type."""
        from solrscout.core.builder import Builder

        return Builder(cls, query, engines=engines, callback=callback)

    @classmethod
    def new_collection(cls, items: Iterable[Any]) -> list[Any]:
        """Build the ordered collection returned by ``get`` and ``paginate``."""
        return list(items)

    @classmethod
    def fetch_by_keys(
        cls,
        keys: Sequence[Any] | None,
        query_callback: Callable[[RecordQuery], Any] | None = None,
    ) -> list[Any]:
        """Load records for the given keys (``None`` loads everything)."""
        query = RecordQuery(cls.key_name, keys)
        if query_callback is not None:
            query_callback(query)
        return list(cls.load_records(query))

    @classmethod
    def load_records(cls, query: RecordQuery) -> Iterable[Any]:
        raise NotImplementedError(f"{cls.__name__} has no system of record to hydrate from.")

    def scout_key(self) -> Any:
        return getattr(self, self.key_name)

    def trashed(self) -> bool:
        return getattr(self, "deleted_at", None) is not None

    def to_searchable_array(self) -> dict[str, Any]:
        return self.model_dump()


class RawDocument(SearchableModel):
    """Schemaless record type for raw index access; it cannot be hydrated."""

    model_config = ConfigDict(extra="allow")
