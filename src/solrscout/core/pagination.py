"""Pagination — Page resolution and length-aware paginated result sets."""

from __future__ import annotations

import math
from typing import Any

import httpx
from pydantic import BaseModel, Field


class RequestContext:
    """Ambient request information used when a page is not given explicitly.

    Args:
        path: Path that generated page links point at.
        params: Query parameters of the current request.
    """

    def __init__(self, path: str = "/", params: dict[str, Any] | None = None) -> None:
        self.path = path
        self.params = dict(params or {})

    @classmethod
    def from_url(cls, url: str | httpx.URL) -> RequestContext:
        """Build a context from a full or relative request URL."""
        parsed = httpx.URL(url)
        return cls(path=parsed.path or "/", params=dict(parsed.params))

    def current_page(self, page_name: str = "page") -> int:
        """Page number from the request, or 1 when absent or invalid."""
        try:
            page = int(self.params.get(page_name, 1))
        except (TypeError, ValueError):
            return 1
        return page if page >= 1 else 1

    def current_path(self) -> str:
        return self.path


class LengthAwarePaginator(BaseModel):
    """One page of results plus the metadata needed to render page links."""

    items: list[Any] = Field(default_factory=list, description="Items on the current page")
    total: int = Field(default=0, description="Total items across all pages")
    per_page: int = Field(default=15, ge=1, description="Page size")
    current_page: int = Field(default=1, ge=1, description="1-based current page")
    path: str = Field(default="/", description="Base path for page links")
    page_name: str = Field(default="page", description="Query parameter carrying the page number")
    query: dict[str, Any] = Field(default_factory=dict, description="Extra query parameters kept on page links")

    def appends(self, key: str, value: Any) -> LengthAwarePaginator:
        """Keep ``key=value`` on every generated page link."""
        self.query[key] = value
        return self

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def on_first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        if not self.items:
            return None
        return self.first_item + len(self.items) - 1

    def url(self, page: int) -> str:
        """URL for ``page``, carrying every appended query parameter."""
        page = max(page, 1)
        params = {**self.query, self.page_name: page}
        return str(httpx.URL(self.path, params=params))

    @property
    def next_page_url(self) -> str | None:
        return self.url(self.current_page + 1) if self.has_more_pages else None

    @property
    def previous_page_url(self) -> str | None:
        return None if self.on_first_page else self.url(self.current_page - 1)

    def to_dict(self) -> dict[str, Any]:
        """Serializable representation of the page and its links."""
        return {
            "current_page": self.current_page,
            "data": [item.model_dump() if isinstance(item, BaseModel) else item for item in self.items],
            "first_page_url": self.url(1),
            "from": self.first_item,
            "last_page": self.last_page,
            "last_page_url": self.url(self.last_page),
            "next_page_url": self.next_page_url,
            "path": self.path,
            "per_page": self.per_page,
            "prev_page_url": self.previous_page_url,
            "to": self.last_item,
            "total": self.total,
        }
