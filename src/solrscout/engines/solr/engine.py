"""Apache Solr engine — Executes query specs via Solr's JSON Request API.

Connects to Apache Solr (v8+) using ``httpx`` over the standard JSON
Request API.  Each ``QuerySpec`` is translated into a single ``/select``
request: the free-text query runs through ``edismax``; ``where`` constraints,
filter groups and the soft-delete scope become ``fq`` clauses; facets
become ``facet.field`` parameters.

Usage::

    engine = SolrEngine(
        base_url="http://localhost:8983/solr",
        collection="products",
    )
    results = engine.search(spec)
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.engines.base.exceptions import ConnectionError, MalformedResponse, QueryError
from solrscout.models.query import QuerySpec

if TYPE_CHECKING:
    from solrscout.models.record import SearchableModel

logger = logging.getLogger(__name__)

MATCH_ALL = "*:*"
MATCH_NONE = "-*:*"


class SolrEngine(SearchEngine):
    """Search engine for Apache Solr (v8+).

    Communicates with Solr via its `JSON Request API`_ over HTTP.

    .. _JSON Request API: https://solr.apache.org/guide/solr/latest/query-guide/json-request-api.html

    Args:
        base_url: Solr base URL, e.g. ``"http://localhost:8983/solr"``.
        collection: Collection used when the query names no index.
        timeout: HTTP request timeout in seconds.
        key_field: Document field holding the record key.
        soft_delete_field: Document field holding the 0/1 soft-delete flag.
        facet_mincount: Minimum count for a facet value to be reported.
        default_rows: Row limit used when the query sets none.
        strict_hydration: Raise on hits that cannot be hydrated.
        client: Pre-built ``httpx.Client`` (mainly for tests).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8983/solr",
        collection: str = "documents",
        timeout: float = 30.0,
        key_field: str = "id",
        soft_delete_field: str = "__soft_deleted",
        facet_mincount: int = 1,
        default_rows: int | None = None,
        strict_hydration: bool = False,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(strict_hydration=strict_hydration)
        self._base_url = base_url.rstrip("/")
        self._collection = collection
        self._timeout = timeout
        self._key_field = key_field
        self._soft_delete_field = soft_delete_field
        self._facet_mincount = facet_mincount
        self._default_rows = default_rows
        self._client = client or httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
        )

    @property
    def name(self) -> str:
        return "solr"

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> SolrEngine:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, spec: QuerySpec) -> RawResults:
        """Execute the full query; ``spec.limit`` bounds the rows returned."""
        limit = spec.limit if spec.limit is not None else self._default_rows
        return self._execute(spec, self.build_request(spec, limit=limit))

    def paginate(self, spec: QuerySpec, per_page: int, page: int) -> RawResults:
        """Execute the query for one page of ``per_page`` rows."""
        body = self.build_request(spec, limit=per_page, offset=(page - 1) * per_page)
        return self._execute(spec, body)

    def map_ids(self, results: RawResults) -> list[Any]:
        return [doc[self._key_field] for doc in results.documents if self._key_field in doc]

    def map(self, spec: QuerySpec, results: RawResults, record_type: type[SearchableModel]) -> list[Any]:
        return self.hydrate(spec, self.map_ids(results), record_type)

    # ── Request building ─────────────────────────────────────────────────

    def build_request(self, spec: QuerySpec, limit: int | None = None, offset: int = 0) -> dict[str, Any]:
        """Translate a ``QuerySpec`` into a JSON Request API body."""
        body: dict[str, Any] = {
            "query": spec.query or MATCH_ALL,
            "offset": offset,
            "params": {
                "defType": "edismax",
                "fl": "*,score",
            },
        }
        if limit is not None:
            body["limit"] = limit

        filters = self.build_filters(spec)
        if filters:
            body["filter"] = filters

        sort = self.build_sort(spec)
        if sort:
            body["sort"] = sort

        if spec.facets:
            body["params"].update(
                {
                    "facet": "true",
                    "facet.field": list(spec.facets),
                    "facet.mincount": self._facet_mincount,
                }
            )
        return body

    def build_filters(self, spec: QuerySpec) -> list[str]:
        """Build ``fq`` clauses: one per where, the soft-delete scope, then one per filter group."""
        filters = [f"{field}:{self._quote(value)}" for field, value in spec.wheres.items()]

        soft_delete = spec.soft_delete.filter_value
        if soft_delete is not None:
            filters.append(f"{self._soft_delete_field}:{soft_delete}")

        for group in spec.fqs:
            for field, value in group.items():
                filters.append(self._filter_clause(field, value))
        return filters

    @staticmethod
    def build_sort(spec: QuerySpec) -> str | None:
        """The native sort expression wins; otherwise generic orders are joined."""
        if spec.sort_expression:
            return spec.sort_expression
        if spec.orders:
            return ", ".join(str(order) for order in spec.orders)
        return None

    # ── Execution ────────────────────────────────────────────────────────

    def _execute(self, spec: QuerySpec, body: dict[str, Any]) -> RawResults:
        if spec.before_execute is not None:
            replaced = spec.before_execute(body)
            if replaced is not None:
                body = replaced

        collection = spec.resolved_index or self._collection
        logger.debug("Solr request to '%s': %s", collection, body)

        try:
            start = time.monotonic()
            resp = self._client.post(f"/{collection}/select", json=body)
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
        except httpx.TransportError as e:
            raise ConnectionError(f"Failed to reach Solr at {self._base_url}: {e}") from e
        except httpx.HTTPError as e:
            raise QueryError(f"Solr query failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"Solr returned a non-JSON body: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
            raise MalformedResponse("Solr response has no 'response' section.")

        response_section = data["response"]
        try:
            return RawResults(
                total_hits=response_section.get("numFound", 0),
                documents=response_section.get("docs", []),
                payload=data,
                took_ms=took_ms,
            )
        except ValidationError as e:
            raise MalformedResponse(f"Solr response section is malformed: {e}") from e

    # ── Helpers ──────────────────────────────────────────────────────────

    @classmethod
    def _filter_clause(cls, field: str, value: Any) -> str:
        """A list value ORs its members; an empty list matches nothing."""
        if isinstance(value, (list, tuple, set)):
            if not value:
                return MATCH_NONE
            return f"{field}:(" + " OR ".join(cls._quote(v) for v in value) + ")"
        return f"{field}:{cls._quote(value)}"

    @staticmethod
    def _quote(value: Any) -> str:
        """Render a value as a Solr term: bare booleans/numbers, quoted phrases otherwise."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
