"""Shared FastAPI dependency injection."""

from __future__ import annotations

from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.services.enrichment_service import EnrichmentService
from rdf_explorer.services.relation_resolver import RelationResolver
from rdf_explorer.services.search_service import SearchService
from rdf_explorer.sparql.connection import SparqlConnection

_sparql_conn: SparqlConnection | None = None
_registry: EndpointRegistry | None = None
_resolver: RelationResolver | None = None
_enricher: EnrichmentService | None = None
_search: SearchService | None = None


def set_sparql_conn(conn: SparqlConnection, registry: EndpointRegistry) -> None:
    global _sparql_conn, _registry
    _sparql_conn = conn
    _registry = registry


def set_services(resolver: RelationResolver, enricher: EnrichmentService, search: SearchService) -> None:
    global _resolver, _enricher, _search
    _resolver = resolver
    _enricher = enricher
    _search = search


def get_sparql_conn() -> SparqlConnection:
    if _sparql_conn is None:
        raise RuntimeError("SPARQL connection not initialized")
    return _sparql_conn


def get_registry() -> EndpointRegistry:
    if _registry is None:
        raise RuntimeError("Endpoint registry not initialized")
    return _registry


def get_resolver() -> RelationResolver:
    if _resolver is None:
        raise RuntimeError("Relation resolver not initialized")
    return _resolver


def get_enricher() -> EnrichmentService:
    if _enricher is None:
        raise RuntimeError("Enrichment service not initialized")
    return _enricher


def get_search() -> SearchService:
    if _search is None:
        raise RuntimeError("Search service not initialized")
    return _search
