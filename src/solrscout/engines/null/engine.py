"""Null engine — Search disabled; every query matches nothing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.models.query import QuerySpec

if TYPE_CHECKING:
    from solrscout.models.record import SearchableModel


class NullEngine(SearchEngine):
    """Engine that returns empty results without contacting any backend."""

    @property
    def name(self) -> str:
        return "null"

    def search(self, spec: QuerySpec) -> RawResults:
        return RawResults()

    def paginate(self, spec: QuerySpec, per_page: int, page: int) -> RawResults:
        return RawResults()

    def map_ids(self, results: RawResults) -> list[Any]:
        return []

    def map(self, spec: QuerySpec, results: RawResults, record_type: type[SearchableModel]) -> list[Any]:
        return []
