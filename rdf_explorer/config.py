from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rdf_explorer.models.endpoint import EndpointUrls

RDFS_LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
SKOS_PREF_LABEL = "http://www.w3.org/2004/02/skos/core#prefLabel"
RDFS_SUB_CLASS_OF = "http://www.w3.org/2000/01/rdf-schema#subClassOf"
SKOS_BROADER = "http://www.w3.org/2004/02/skos/core#broader"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Endpoints, in fallback order; the first one is the primary.
    # Env value is JSON: [{"id": "...", "sparql": "...", "elastic": "..."}]
    ENDPOINTS: list[EndpointUrls] = Field(default_factory=list)

    # Search
    DEFAULT_SEARCH_QUERY: str = ""
    RESULTS_PER_PAGE_PER_ENDPOINT: int = 20
    TYPE_FIELD: str = "@type"
    DEDUPE_RESULTS_BY_ID: bool = False

    # Predicates
    LABEL_PREDICATES: list[str] = Field(default_factory=lambda: [RDFS_LABEL, SKOS_PREF_LABEL])
    PARENT_PREDICATES: list[str] = Field(default_factory=lambda: [RDFS_SUB_CLASS_OF, SKOS_BROADER])

    # Query limits
    INCOMING_RELATIONS_LIMIT: int = 500
    ANCESTRY_LIMIT: int = 500
    LABELS_LIMIT: int = 10_000
    OBJECT_IDS_LIMIT: int = 10_000

    # Transport
    QUERY_TIMEOUT_SECONDS: float = 30.0
    SPARQL_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 0.5
    MAX_ENRICH_CONCURRENT: int = 16

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")
    LOG_MAX_FIELD_LENGTH: int = Field(default=500, description="Longer query/error/body log fields are truncated")


def get_settings() -> Settings:
    return Settings()
