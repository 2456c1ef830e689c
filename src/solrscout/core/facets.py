"""Facet extraction — Normalizes Solr ``facet_counts`` payloads.

Solr reports field facets as a flat alternating list per field::

    {"facet_counts": {"facet_fields": {"color": ["red", 3, "blue", 5]}}}

``FacetExtractor`` validates that shape and turns it into
``{"color": {"red": 3, "blue": 5}}``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from solrscout.engines.base.exceptions import MalformedResponse


class FacetCounts(BaseModel):
    """The ``facet_counts`` section of a Solr response."""

    facet_fields: dict[str, list[Any]] = Field(default_factory=dict, description="Field to [value, count, ...]")

    @field_validator("facet_fields")
    @classmethod
    def _check_pairs(cls, v: dict[str, list[Any]]) -> dict[str, list[Any]]:
        for field, flat in v.items():
            if len(flat) % 2:
                raise ValueError(f"facet field '{field}' has an unpaired value")
            for count in flat[1::2]:
                if isinstance(count, bool) or not isinstance(count, int):
                    raise ValueError(f"facet field '{field}' has a non-integer count: {count!r}")
        return v


class FacetPayload(BaseModel):
    """The part of a Solr response body that carries facets."""

    facet_counts: FacetCounts | None = None


class FacetExtractor:
    """Parses engine facet payloads into ``{field: {value: count}}``."""

    def extract(self, body: dict[str, Any] | str | bytes) -> dict[str, dict[Any, int]]:
        """Extract facet counts from a decoded or raw JSON response body.

        A body without a facet section is valid (no facets were requested)
        and yields an empty mapping.

        Raises:
            MalformedResponse: If the body is not a JSON object or the facet
                section has the wrong shape.
        """
        try:
            if isinstance(body, (str, bytes)):
                payload = FacetPayload.model_validate_json(body)
            else:
                payload = FacetPayload.model_validate(body)
        except ValidationError as e:
            raise MalformedResponse(f"Unexpected facet payload: {e}") from e

        if payload.facet_counts is None:
            return {}

        facets: dict[str, dict[Any, int]] = {}
        for field, flat in payload.facet_counts.facet_fields.items():
            facets[field] = dict(zip(flat[0::2], flat[1::2]))
        return facets
