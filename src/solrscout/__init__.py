"""solr-scout — Fluent search query builder and result shaping for Solr."""

from solrscout.core.builder import Builder
from solrscout.core.facets import FacetExtractor
from solrscout.core.pagination import LengthAwarePaginator, RequestContext
from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.engines.base.registry import EngineRegistry
from solrscout.models.query import QuerySpec, SoftDeleteScope, SortDirection, SortOrder
from solrscout.models.record import RecordQuery, SearchableModel

__version__ = "0.1.0"

__all__ = [
    "Builder",
    "EngineRegistry",
    "FacetExtractor",
    "LengthAwarePaginator",
    "QuerySpec",
    "RawResults",
    "RecordQuery",
    "RequestContext",
    "SearchEngine",
    "SearchableModel",
    "SoftDeleteScope",
    "SortDirection",
    "SortOrder",
    "__version__",
]
