"""Tests for searchable record types and the hydration record query."""

from __future__ import annotations

import pytest
from conftest import Product

from solrscout.models.query import QuerySpec, SoftDeleteScope, SortDirection
from solrscout.models.record import RawDocument, RecordQuery


class TestRecordQuery:
    def test_keys_compare_as_strings(self, products: list[Product]) -> None:
        records = RecordQuery("id", ["2", 4]).apply(products)
        assert [p.id for p in records] == [2, 4]

    def test_no_keys_means_everything(self, products: list[Product]) -> None:
        assert len(RecordQuery("id").apply(products)) == 6

    def test_constraints_combine(self, products: list[Product]) -> None:
        query = RecordQuery("id").where("brand", "acme").filter(lambda p: p.price > 50)
        assert [p.id for p in query.apply(products)] == [1, 2]

    def test_where_in(self, products: list[Product]) -> None:
        assert [p.id for p in RecordQuery("id").where_in("color", ["black"]).apply(products)] == [3]


class TestSearchableModel:
    def test_record_type_metadata(self) -> None:
        assert Product.searchable_as() == "products"
        assert Product.per_page == 5
        assert RawDocument.searchable_as() is None
        assert RawDocument.per_page == 15

    def test_fetch_by_keys_applies_callback(self, products: list[Product]) -> None:
        records = Product.fetch_by_keys([1, 3, 5], lambda q: q.where("brand", "acme"))
        assert [p.id for p in records] == [1, 5]

    def test_trashed(self, products: list[Product]) -> None:
        assert not products[0].trashed()
        assert products[5].trashed()
        assert products[0].scout_key() == 1

    def test_raw_document_cannot_hydrate(self) -> None:
        with pytest.raises(NotImplementedError):
            RawDocument.fetch_by_keys(["a"])


class TestQuerySpecHelpers:
    def test_soft_delete_filter_values(self) -> None:
        assert SoftDeleteScope.INCLUDE_ALL.filter_value is None
        assert SoftDeleteScope.EXCLUDE_DELETED.filter_value == 0
        assert SoftDeleteScope.ONLY_DELETED.filter_value == 1

    def test_direction_normalization(self) -> None:
        assert SortDirection.normalize("ASC") is SortDirection.ASC
        assert SortDirection.normalize("DESC") is SortDirection.DESC
        assert SortDirection.normalize("random") is SortDirection.DESC

    def test_resolved_index_without_record_type(self) -> None:
        assert QuerySpec().resolved_index is None
