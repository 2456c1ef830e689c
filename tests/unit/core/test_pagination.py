"""Tests for request context page resolution and the length-aware paginator."""

from __future__ import annotations

import httpx
import pytest

from solrscout.core.pagination import LengthAwarePaginator, RequestContext


class TestRequestContext:
    def test_defaults(self) -> None:
        ctx = RequestContext()
        assert ctx.current_page() == 1
        assert ctx.current_path() == "/"

    def test_from_url(self) -> None:
        ctx = RequestContext.from_url("https://shop.example.com/search?query=shoes&page=3")
        assert ctx.current_path() == "/search"
        assert ctx.current_page() == 3

    def test_custom_page_name(self) -> None:
        ctx = RequestContext(params={"p": "2", "page": "9"})
        assert ctx.current_page("p") == 2

    @pytest.mark.parametrize("value", ["abc", "0", "-4", ""])
    def test_invalid_page_falls_back_to_first(self, value: str) -> None:
        assert RequestContext(params={"page": value}).current_page() == 1


class TestLengthAwarePaginator:
    def _paginator(self, **kwargs) -> LengthAwarePaginator:
        defaults = {"items": list(range(10)), "total": 95, "per_page": 10, "current_page": 2, "path": "/search"}
        defaults.update(kwargs)
        return LengthAwarePaginator(**defaults)

    def test_page_metadata(self) -> None:
        p = self._paginator()
        assert p.last_page == 10
        assert p.has_more_pages
        assert not p.on_first_page
        assert p.first_item == 11
        assert p.last_item == 20

    def test_last_page_never_below_one(self) -> None:
        p = self._paginator(items=[], total=0, current_page=1)
        assert p.last_page == 1
        assert not p.has_more_pages
        assert p.first_item is None
        assert p.last_item is None
        assert p.next_page_url is None
        assert p.previous_page_url is None

    def test_appends_round_trips_query(self) -> None:
        p = self._paginator().appends("query", "shoes")
        url = httpx.URL(p.url(5))
        assert url.path == "/search"
        assert url.params["query"] == "shoes"
        assert url.params["page"] == "5"

    def test_query_with_special_characters(self) -> None:
        p = self._paginator().appends("query", "red & blue shoes")
        assert httpx.URL(p.next_page_url).params["query"] == "red & blue shoes"

    def test_neighbour_urls(self) -> None:
        p = self._paginator(page_name="p")
        assert httpx.URL(p.next_page_url).params["p"] == "3"
        assert httpx.URL(p.previous_page_url).params["p"] == "1"

    def test_url_clamps_to_first_page(self) -> None:
        assert httpx.URL(self._paginator().url(0)).params["page"] == "1"

    def test_to_dict(self) -> None:
        p = self._paginator(items=["a", "b"], total=12, per_page=2, current_page=1).appends("query", "x")
        data = p.to_dict()
        assert data["data"] == ["a", "b"]
        assert data["total"] == 12
        assert data["last_page"] == 6
        assert data["from"] == 1
        assert data["to"] == 2
        assert data["prev_page_url"] is None
        assert "query=x" in data["next_page_url"]
