"""Engine Registry — Resolves which search engine handles a record type.

The registry maps driver names to engine classes, holds the engine
instances created from them, and routes record types (by index name) to
a specific instance.  It is injected into every ``Builder`` so that engine
resolution never depends on global state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from solrscout.engines.base.engine import SearchEngine
from solrscout.engines.base.exceptions import ConfigurationError, EngineUnavailable

if TYPE_CHECKING:
    from solrscout.config.settings import Settings
    from solrscout.models.record import SearchableModel

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Registry for search engine classes and instances.

    Supports:
      - Registering engine classes by driver name
      - Creating engine instances from keyword configuration
      - Binding index names to a specific driver
      - Resolving the engine for a record type

    Example:
        >>> registry = EngineRegistry()
        >>> registry.register("solr", SolrEngine)
        >>> registry.create("solr", base_url="http://localhost:8983/solr")
        >>> engine = registry.resolve(Product)
    """

    def __init__(self, default: str | None = None) -> None:
        self._classes: dict[str, type[SearchEngine]] = {}
        self._instances: dict[str, SearchEngine] = {}
        self._bindings: dict[str, str] = {}
        self._default = default

    @classmethod
    def from_settings(cls, settings: Settings) -> EngineRegistry:
        """Build a registry with the built-in drivers and the configured default engine."""
        from solrscout.engines.collection.engine import CollectionEngine
        from solrscout.engines.null.engine import NullEngine
        from solrscout.engines.solr.engine import SolrEngine

        registry = cls(default=settings.scout.driver)
        registry.register("solr", SolrEngine)
        registry.register("collection", CollectionEngine)
        registry.register("null", NullEngine)

        strict = settings.scout.strict_hydration
        driver_options: dict[str, dict[str, Any]] = {
            "solr": {**settings.solr.model_dump(), "strict_hydration": strict},
            "collection": {"strict_hydration": strict},
            "null": {},
        }
        for driver in {settings.scout.driver, *settings.scout.bindings.values()}:
            if driver not in driver_options:
                raise ConfigurationError(
                    f"Unknown search driver '{driver}'. Available drivers: {registry.registered_engines}"
                )
            registry.create(driver, **driver_options[driver])

        for index, driver in settings.scout.bindings.items():
            registry.bind(index, driver)
        return registry

    def register(self, name: str, engine_class: type[SearchEngine]) -> None:
        """Register an engine class under a driver name."""
        if name in self._classes:
            logger.warning("Overwriting existing engine registration: %s", name)
        self._classes[name] = engine_class
        logger.info("Registered engine: %s", name)

    def create(self, name: str, **kwargs: Any) -> SearchEngine:
        """Instantiate a registered engine and keep it as the active instance for ``name``.

        Raises:
            ConfigurationError: If no engine class is registered under ``name``.
        """
        if name not in self._classes:
            raise ConfigurationError(
                f"No engine registered with name '{name}'. Available engines: {list(self._classes.keys())}"
            )
        engine = self._classes[name](**kwargs)
        self.add(name, engine)
        return engine

    def add(self, name: str, engine: SearchEngine) -> None:
        """Install an already-built engine instance."""
        if name in self._instances:
            logger.warning("Replacing active engine instance: %s", name)
        self._instances[name] = engine
        if self._default is None:
            self._default = name
        logger.info("Initialized engine: %s", name)

    def bind(self, index: str, engine_name: str) -> None:
        """Route searches on ``index`` to the engine named ``engine_name``."""
        self._bindings[index] = engine_name

    def get(self, name: str) -> SearchEngine:
        """Get an active engine instance by name.

        Raises:
            EngineUnavailable: If no instance exists for ``name``.
        """
        if name not in self._instances:
            raise EngineUnavailable(f"Engine '{name}' is not initialized. Call create() first.")
        return self._instances[name]

    def resolve(self, record_type: type[SearchableModel] | None) -> SearchEngine:
        """Return the engine responsible for ``record_type``.

        An explicit binding for the record type's index wins; otherwise the
        default engine is used.

        Raises:
            EngineUnavailable: If no engine can be resolved.
        """
        index = record_type.searchable_as() if record_type is not None else None
        if index is not None and index in self._bindings:
            return self.get(self._bindings[index])
        if self._default is None or self._default not in self._instances:
            target = record_type.__name__ if record_type is not None else "<none>"
            raise EngineUnavailable(f"No search engine available for record type {target}.")
        return self._instances[self._default]

    def close_all(self) -> None:
        """Close every active engine instance."""
        for name, engine in self._instances.items():
            try:
                engine.close()
                logger.info("Closed engine: %s", name)
            except Exception:
                logger.warning("Error closing engine: %s", name, exc_info=True)
        self._instances.clear()

    @property
    def registered_engines(self) -> list[str]:
        """List all registered driver names."""
        return list(self._classes.keys())

    @property
    def active_engines(self) -> list[str]:
        """List all instantiated engine names."""
        return list(self._instances.keys())
