"""Federated RDF search and graph-resolution pipeline."""

from __future__ import annotations

from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.services.enrichment_service import EnrichmentService
from rdf_explorer.services.relation_resolver import RelationResolver
from rdf_explorer.services.search_service import SearchService

__all__ = [
    "EndpointRegistry",
    "EnrichmentService",
    "RelationResolver",
    "SearchService",
]
