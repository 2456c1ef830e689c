"""Query specification models."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from solrscout.models.record import SearchableModel


class SortDirection(str, Enum):
    """Sort direction for ``order_by`` / ``sort_by``."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def normalize(cls, direction: Any) -> SortDirection:
        """Anything other than a case-insensitive ``asc`` sorts descending."""
        return cls.ASC if str(direction).lower() == cls.ASC.value else cls.DESC


class SoftDeleteScope(str, Enum):
    """Which records a search returns with respect to soft deletion."""

    INCLUDE_ALL = "include_all"
    EXCLUDE_DELETED = "exclude_deleted"
    ONLY_DELETED = "only_deleted"

    @property
    def filter_value(self) -> int | None:
        """Value required on the soft-delete field, or ``None`` for no filter."""
        if self is SoftDeleteScope.EXCLUDE_DELETED:
            return 0
        if self is SoftDeleteScope.ONLY_DELETED:
            return 1
        return None


class SortOrder(BaseModel):
    """A single generic ``order_by`` clause."""

    column: str
    direction: SortDirection = SortDirection.ASC

    def __str__(self) -> str:
        return f"{self.column} {self.direction.value}"


class QuerySpec(BaseModel):
    """Accumulated description of one search request.

    A ``Builder`` mutates this in place through its chainable methods and
    hands it to a ``SearchEngine`` when a terminal operation runs.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    query: str = Field(default="", description="Free-text query; empty matches everything")
    record_type: Any = Field(default=None, description="Target SearchableModel subclass")
    index: str | None = Field(default=None, description="Custom index/collection override")
    wheres: dict[str, Any] = Field(default_factory=dict, description="Exact-match AND constraints")
    soft_delete: SoftDeleteScope = Field(default=SoftDeleteScope.INCLUDE_ALL, description="Soft-delete scope")
    fqs: list[dict[str, Any]] = Field(default_factory=list, description="Filter groups, one per filter() call")
    facets: list[str] = Field(default_factory=list, description="Fields requested for facet counts")
    limit: int | None = Field(default=None, description="Maximum number of results")
    orders: list[SortOrder] = Field(default_factory=list, description="Generic sort clauses")
    sort_expression: str | None = Field(default=None, description="Engine-native sort string")
    before_execute: Callable[..., Any] | None = Field(default=None, description="Hook on the native request")
    query_callback: Callable[..., Any] | None = Field(default=None, description="Hook on the hydration query")

    @property
    def resolved_index(self) -> str | None:
        """Index to search: the override, else the record type's default."""
        if self.index:
            return self.index
        record_type: type[SearchableModel] | None = self.record_type
        if record_type is not None:
            return record_type.searchable_as()
        return None
