"""Search Builder — Fluent accumulation of a query and its terminal operations.

A ``Builder`` is created per logical search request.  Chainable methods
mutate its ``QuerySpec``; terminal methods resolve the engine responsible
for the record type and shape the engine's response:

    products = (
        Product.search("shoes", engines=registry)
        .filter("color", ["red", "blue"])
        .facet("brand")
        .sort_by("price", "asc")
        .paginate(per_page=20)
    )

``filter`` adds an AND-combined filter group (a list value ORs within the
field) and is distinct from ``where``, which sets a unique exact-match
constraint per field.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from types import MethodType
from typing import TYPE_CHECKING, Any, ClassVar

from solrscout.core.facets import FacetExtractor
from solrscout.core.pagination import LengthAwarePaginator, RequestContext
from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.models.query import QuerySpec, SoftDeleteScope, SortDirection, SortOrder

if TYPE_CHECKING:
    from solrscout.engines.base.registry import EngineRegistry
    from solrscout.models.record import SearchableModel

logger = logging.getLogger(__name__)


class Builder:
    """Chainable search request builder.

    Attributes:
        model: The record type being searched.
        spec: The accumulated query specification.
        engines: Registry used to resolve the engine for ``model``.
        context: Request context consulted for the current page and path.
    """

    _macros: ClassVar[dict[str, Callable[..., Any]]] = {}

    def __init__(
        self,
        model: type[SearchableModel],
        query: str = "",
        *,
        engines: EngineRegistry,
        callback: Callable[..., Any] | None = None,
        soft_delete: bool | None = None,
        context: RequestContext | None = None,
    ) -> None:
        self.model = model
        self.engines = engines
        self.context = context or RequestContext()
        self.spec = QuerySpec(query=query, record_type=model, before_execute=callback)

        if soft_delete is None:
            soft_delete = model.soft_deletes
        if soft_delete:
            self.spec.soft_delete = SoftDeleteScope.EXCLUDE_DELETED

    # ── Macros ───────────────────────────────────────────────────────────

    @classmethod
    def macro(cls, name: str, fn: Callable[..., Any]) -> None:
        """Register ``fn(builder, *args, **kwargs)`` as a method on every builder."""
        cls._macros[name] = fn

    @classmethod
    def has_macro(cls, name: str) -> bool:
        return name in cls._macros

    @classmethod
    def flush_macros(cls) -> None:
        cls._macros.clear()

    def __getattr__(self, name: str) -> Any:
        macros = type(self)._macros
        if name in macros:
            return MethodType(macros[name], self)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute or macro {name!r}")

    # ── Accumulation ─────────────────────────────────────────────────────

    def within(self, index: str) -> Builder:
        """Search a custom index instead of the record type's default."""
        self.spec.index = index
        return self

    def filter(self, field: str, value: Any) -> Builder:
        """Add a filter group.

        Within one group a list value is OR; separate groups are AND::

            .filter("categories", [1, 2])               # categories in (1, 2)
            .filter("categories", 1).filter("brands", 1)  # categories = 1 AND brands = 1
        """
        self.spec.fqs.append({field: value})
        return self

    def facet(self, field: str) -> Builder:
        """Request per-value counts for ``field`` across the whole result set."""
        self.spec.facets.append(field)
        return self

    def where(self, field: str, value: Any) -> Builder:
        self.spec.wheres[field] = value
        return self

    def with_trashed(self) -> Builder:
        """Include soft-deleted records in the results."""
        self.spec.soft_delete = SoftDeleteScope.INCLUDE_ALL
        return self

    def only_trashed(self) -> Builder:
        """Restrict the results to soft-deleted records."""
        self.with_trashed()
        self.spec.soft_delete = SoftDeleteScope.ONLY_DELETED
        return self

    def take(self, limit: int) -> Builder:
        """Set the result limit; the engine decides what zero or negative values mean."""
        self.spec.limit = limit
        return self

    def order_by(self, column: str, direction: str = "asc") -> Builder:
        """Append a generic sort clause."""
        self.spec.orders.append(SortOrder(column=column, direction=SortDirection.normalize(direction)))
        return self

    def sort_by(self, column: str, direction: str = "asc") -> Builder:
        """Replace the engine-native sort expression."""
        self.spec.sort_expression = f"{column} {SortDirection.normalize(direction).value}"
        return self

    def when(
        self,
        value: Any,
        callback: Callable[[Builder, Any], Any],
        default: Callable[[Builder, Any], Any] | None = None,
    ) -> Any:
        """Apply ``callback`` if ``value`` is truthy, else ``default`` if given.

        Returns the callback's result when it is truthy, otherwise the builder.
        """
        if value:
            return callback(self, value) or self
        if default is not None:
            return default(self, value) or self
        return self

    def tap(self, callback: Callable[[Builder, Any], Any]) -> Any:
        return self.when(True, callback)

    def query(self, callback: Callable[..., Any]) -> Builder:
        """Set the hook applied to the record query used during hydration."""
        self.spec.query_callback = callback
        return self

    # ── Terminal operations ──────────────────────────────────────────────

    def raw(self) -> RawResults:
        """Get the unprocessed engine results."""
        engine = self._engine()
        start = time.monotonic()
        results = engine.search(self.spec)
        self._log("raw", engine, start, "%d of %d hit(s)", len(results.documents), results.total_hits)
        return results

    def keys(self) -> list[Any]:
        """Get the keys of matching records in ranking order."""
        engine = self._engine()
        start = time.monotonic()
        keys = engine.keys(self.spec)
        self._log("keys", engine, start, "%d key(s)", len(keys))
        return keys

    def get(self) -> list[Any]:
        """Get hydrated records in ranking order."""
        engine = self._engine()
        start = time.monotonic()
        records = engine.get(self.spec, self.model)
        self._log("get", engine, start, "%d record(s)", len(records))
        return records

    def first(self) -> Any | None:
        records = self.get()
        return records[0] if records else None

    def paginate(
        self, per_page: int | None = None, page_name: str = "page", page: int | None = None
    ) -> LengthAwarePaginator:
        """Paginate hydrated records.

        Args:
            per_page: Page size; defaults to the record type's ``per_page``.
            page_name: Query parameter that carries the page number.
            page: Page to fetch; defaults to the request context's page.

        Returns:
            A paginator whose links keep the search text as ``query``.

        Raises:
            ValueError: If ``per_page`` or ``page`` is negative.
        """
        page, per_page = self._resolve_page(per_page, page_name, page)
        engine = self._engine()
        start = time.monotonic()

        raw = engine.paginate(self.spec, per_page, page)
        items = self.model.new_collection(engine.map(self.spec, raw, self.model))
        self._log("paginate", engine, start, "page %d of %d record(s)", page, len(items))
        return self._paginator(items, engine.get_total_count(raw), per_page, page, page_name)

    def paginate_raw(
        self, per_page: int | None = None, page_name: str = "page", page: int | None = None
    ) -> LengthAwarePaginator:
        """Paginate raw engine documents without hydrating them."""
        page, per_page = self._resolve_page(per_page, page_name, page)
        engine = self._engine()
        start = time.monotonic()

        raw = engine.paginate(self.spec, per_page, page)
        self._log("paginate_raw", engine, start, "page %d of %d document(s)", page, len(raw.documents))
        return self._paginator(raw.documents, engine.get_total_count(raw), per_page, page, page_name)

    def get_facets(self) -> dict[str, dict[Any, int]]:
        """Count distinct values of each requested facet field.

        Counts cover every matching document, including those outside the
        current page or limit.

        Raises:
            MalformedResponse: If the engine payload has a malformed facet section.
        """
        engine = self._engine()
        start = time.monotonic()
        facets = FacetExtractor().extract(engine.search(self.spec).payload)
        self._log("get_facets", engine, start, "%d facet field(s)", len(facets))
        return facets

    # ── Helpers ──────────────────────────────────────────────────────────

    def _engine(self) -> SearchEngine:
        return self.engines.resolve(self.model)

    def _log(self, operation: str, engine: SearchEngine, start: float, detail: str, *args: Any) -> None:
        logger.debug(
            "%s on %s (index %s) via %s: " + detail + " in %dms",
            operation,
            self.model.__name__,
            self.spec.resolved_index,
            engine.name,
            *args,
            int((time.monotonic() - start) * 1000),
        )

    def _resolve_page(self, per_page: int | None, page_name: str, page: int | None) -> tuple[int, int]:
        if per_page is not None and per_page < 0:
            raise ValueError(f"per_page must not be negative, got {per_page}")
        if page is not None and page < 0:
            raise ValueError(f"page must not be negative, got {page}")
        page = page or self.context.current_page(page_name)
        per_page = per_page or self.model.per_page
        return page, per_page


    def _paginator(
        self, items: list[Any], total: int, per_page: int, page: int, page_name: str
    ) -> LengthAwarePaginator:
        paginator = LengthAwarePaginator(
            items=items,
            total=total,
            per_page=per_page,
            current_page=page,
            path=self.context.current_path(),
            page_name=page_name,
        )
        return paginator.appends("query", self.spec.query)
