"""In-memory collection engine — Searches a record type's own records.

Useful for tests and small datasets, and as the fallback when no search
backend is deployed.  Unlike the Solr engine it honours the generic
``orders`` of a query, and it reports facet counts in the same wire shape
Solr uses so that facet extraction works unchanged.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import TYPE_CHECKING, Any

from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.engines.base.exceptions import EngineUnavailable
from solrscout.models.query import QuerySpec, SoftDeleteScope, SortDirection

if TYPE_CHECKING:
    from solrscout.models.record import SearchableModel

logger = logging.getLogger(__name__)


class CollectionEngine(SearchEngine):
    """Search engine that filters, sorts and counts records in memory."""

    @property
    def name(self) -> str:
        return "collection"

    def search(self, spec: QuerySpec) -> RawResults:
        start = time.monotonic()
        records = self._matching_records(spec)
        page = records[: spec.limit] if spec.limit is not None and spec.limit > 0 else records
        return self._results(spec, page, records, start)

    def paginate(self, spec: QuerySpec, per_page: int, page: int) -> RawResults:
        start = time.monotonic()
        records = self._matching_records(spec)
        offset = (page - 1) * per_page
        return self._results(spec, records[offset : offset + per_page], records, start)

    def map_ids(self, results: RawResults) -> list[Any]:
        return [doc["__key"] for doc in results.documents]

    def map(self, spec: QuerySpec, results: RawResults, record_type: type[SearchableModel]) -> list[Any]:
        return self.hydrate(spec, self.map_ids(results), record_type)

    # ── Internals ────────────────────────────────────────────────────────

    def _matching_records(self, spec: QuerySpec) -> list[Any]:
        record_type = spec.record_type
        if record_type is None:
            raise EngineUnavailable("The collection engine needs a record type to search.")

        records = [r for r in record_type.fetch_by_keys(None) if self._matches(spec, r)]

        # Stable sorts applied last-to-first give multi-key ordering
        for order in reversed(spec.orders):
            records.sort(
                key=lambda r, column=order.column: _sort_key(getattr(r, column, None)),
                reverse=order.direction is SortDirection.DESC,
            )

        if spec.before_execute is not None:
            replaced = spec.before_execute(records)
            if replaced is not None:
                records = list(replaced)

        logger.debug("Collection search on %s matched %d record(s)", record_type.__name__, len(records))
        return records

    @staticmethod
    def _matches(spec: QuerySpec, record: Any) -> bool:
        if spec.query:
            needle = spec.query.lower()
            values = record.to_searchable_array().values()
            if not any(needle in str(value).lower() for value in values if value is not None):
                return False

        for field, value in spec.wheres.items():
            if not _field_matches(getattr(record, field, None), [value]):
                return False

        if spec.soft_delete is SoftDeleteScope.EXCLUDE_DELETED and record.trashed():
            return False
        if spec.soft_delete is SoftDeleteScope.ONLY_DELETED and not record.trashed():
            return False

        for group in spec.fqs:
            for field, value in group.items():
                wanted = list(value) if isinstance(value, (list, tuple, set)) else [value]
                if not _field_matches(getattr(record, field, None), wanted):
                    return False
        return True

    def _results(self, spec: QuerySpec, page: list[Any], matched: list[Any], start: float) -> RawResults:
        total = len(matched)
        documents = [{**record.to_searchable_array(), "__key": record.scout_key()} for record in page]
        payload: dict[str, Any] = {"response": {"numFound": total, "docs": documents}}
        if spec.facets:
            payload["facet_counts"] = {"facet_fields": self._facet_fields(spec, matched)}
        return RawResults(
            total_hits=total,
            documents=documents,
            payload=payload,
            took_ms=int((time.monotonic() - start) * 1000),
        )

    @staticmethod
    def _facet_fields(spec: QuerySpec, records: list[Any]) -> dict[str, list[Any]]:
        """Count facet values over the whole filtered set, ignoring limit and paging."""
        fields: dict[str, list[Any]] = {}
        for field in spec.facets:
            counts = Counter(
                value
                for record in records
                for value in _field_values(getattr(record, field, None))
                if value is not None
            )
            flat: list[Any] = []
            for value, count in counts.most_common():
                flat.extend([value, count])
            fields[field] = flat
        return fields


def _field_values(actual: Any) -> list[Any]:
    """Multi-valued fields contribute each member, like a multiValued Solr field."""
    return list(actual) if isinstance(actual, (list, tuple, set, frozenset)) else [actual]


def _field_matches(actual: Any, wanted: list[Any]) -> bool:
    return actual in wanted or any(value in wanted for value in _field_values(actual))


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts before everything else
    return (0, "") if value is None else (1, value)
