"""Engine-specific exceptions."""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base exception for search engine errors."""


class EngineUnavailable(EngineError):
    """Raised when no search engine can be resolved for a record type."""


class ConnectionError(EngineError):
    """Raised when the engine cannot connect to the search backend."""


class QueryError(EngineError):
    """Raised when a search query fails."""


class MalformedResponse(EngineError):
    """Raised when an engine response does not match the expected structure."""


class ConfigurationError(EngineError):
    """Raised when engine configuration is invalid."""


class HydrationFailure(EngineError):
    """Raised in strict mode when search hits cannot be resolved to records."""

    def __init__(self, message: str, missing_keys: list[Any] | None = None) -> None:
        super().__init__(message)
        self.missing_keys = list(missing_keys or [])
