"""Base search engine — Abstract interface for all search backends.

Every search backend must implement this interface to be usable from a
``Builder``.  The engine is responsible for:
  1. Executing the accumulated ``QuerySpec`` against the backend
  2. Fetching single pages of results
  3. Extracting record identifiers from raw hits
  4. Hydrating identifiers into domain records (shared ``hydrate`` helper)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from solrscout.engines.base.exceptions import HydrationFailure
from solrscout.models.query import QuerySpec

if TYPE_CHECKING:
    from solrscout.models.record import SearchableModel

logger = logging.getLogger(__name__)


class RawResults(BaseModel):
    """Raw search results from a backend before hydration."""

    total_hits: int = Field(default=0, description="Total number of matching documents (unpaged)")
    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw document dicts")
    payload: dict[str, Any] = Field(default_factory=dict, description="Decoded backend response body")
    took_ms: int = Field(default=0, description="Backend query execution time in ms")


class SearchEngine(ABC):
    """Abstract base class for search engines.

    All engines must implement:
      - search(): Execute a query and return raw results
      - paginate(): Execute a query for a single page
      - map_ids(): Pull record identifiers out of raw results
      - map(): Hydrate raw results into domain records
      - get_total_count(): Report the unpaged hit count

    Engines are synchronous; any network I/O happens inside ``search`` and
    ``paginate``.

    Args:
        strict_hydration: Raise ``HydrationFailure`` when a hit has no
            matching record instead of silently dropping it.
    """

    def __init__(self, strict_hydration: bool = False) -> None:
        self.strict_hydration = strict_hydration

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique engine name (e.g., 'solr', 'collection')."""

    @abstractmethod
    def search(self, spec: QuerySpec) -> RawResults:
        """Execute the query described by ``spec``.

        Args:
            spec: The accumulated query specification.

        Returns:
            Raw search results from the backend.
        """

    @abstractmethod
    def paginate(self, spec: QuerySpec, per_page: int, page: int) -> RawResults:
        """Execute the query for one page of results.

        Args:
            spec: The accumulated query specification.
            per_page: Page size.
            page: 1-based page number.

        Returns:
            Raw results for the page; ``total_hits`` covers the full query.
        """

    @abstractmethod
    def map_ids(self, results: RawResults) -> list[Any]:
        """Return record identifiers in engine ranking order."""

    @abstractmethod
    def map(self, spec: QuerySpec, results: RawResults, record_type: type[SearchableModel]) -> list[Any]:
        """Hydrate raw results into domain records, preserving ranking order."""

    def get_total_count(self, results: RawResults) -> int:
        return results.total_hits

    def close(self) -> None:
        """Release backend resources.  No-op by default."""

    def keys(self, spec: QuerySpec) -> list[Any]:
        return self.map_ids(self.search(spec))

    def get(self, spec: QuerySpec, record_type: type[SearchableModel]) -> list[Any]:
        """Search and hydrate in one step."""
        return record_type.new_collection(self.map(spec, self.search(spec), record_type))

    def hydrate(self, spec: QuerySpec, keys: list[Any], record_type: type[SearchableModel]) -> list[Any]:
        """Resolve ``keys`` to records via the record type's system of record.

        Records come back in the order of ``keys``.  Keys are compared as
        strings so that string document ids match integer primary keys.

        Raises:
            HydrationFailure: In strict mode, when any key has no record.
        """
        if not keys:
            return []

        records = record_type.fetch_by_keys(keys, spec.query_callback)
        by_key = {str(record.scout_key()): record for record in records}

        hydrated: list[Any] = []
        missing: list[Any] = []
        for key in keys:
            record = by_key.get(str(key))
            if record is None:
                missing.append(key)
            else:
                hydrated.append(record)

        if missing:
            if self.strict_hydration:
                raise HydrationFailure(
                    f"{len(missing)} search hit(s) could not be hydrated for {record_type.__name__}: {missing}",
                    missing_keys=missing,
                )
            logger.debug(
                "Dropped %d stale hit(s) for %s: %s",
                len(missing),
                record_type.__name__,
                missing,
            )
        return hydrated
