"""Base engine interface — Abstract classes for search backends."""

from solrscout.engines.base.engine import RawResults, SearchEngine
from solrscout.engines.base.registry import EngineRegistry

__all__ = ["EngineRegistry", "RawResults", "SearchEngine"]
