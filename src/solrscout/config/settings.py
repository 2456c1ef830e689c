"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (SOLRSCOUT_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class SolrSettings(BaseModel):
    """Solr engine connection and request defaults."""

    base_url: str = Field(default="http://localhost:8983/solr", description="Solr base URL")
    collection: str = Field(default="documents", description="Default collection when a record type names none")
    timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    key_field: str = Field(default="id", description="Document field holding the record key")
    soft_delete_field: str = Field(default="__soft_deleted", description="Document field holding the soft-delete flag")
    facet_mincount: int = Field(default=1, description="Minimum count for a facet value to be returned")
    default_rows: int | None = Field(default=None, description="Row limit when the query sets none (None = Solr default)")


class ScoutSettings(BaseModel):
    """Engine selection and result-shaping behavior."""

    driver: str = Field(default="solr", description="Default search driver: solr, collection, null")
    strict_hydration: bool = Field(
        default=False,
        description="Raise HydrationFailure for hits with no matching record instead of dropping them",
    )
    bindings: dict[str, str] = Field(default_factory=dict, description="Index name to driver overrides")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SOLRSCOUT_ prefix.
    Nested settings use double underscores: SOLRSCOUT_SOLR__BASE_URL=http://solr:8983/solr

    Example:
        SOLRSCOUT_SOLR__COLLECTION=products
        SOLRSCOUT_SCOUT__DRIVER=collection
        SOLRSCOUT_SCOUT__STRICT_HYDRATION=true
    """

    model_config = {
        "env_prefix": "SOLRSCOUT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="solr-scout", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    solr: SolrSettings = Field(default_factory=SolrSettings)
    scout: ScoutSettings = Field(default_factory=ScoutSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file take precedence over environment variables
        for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
