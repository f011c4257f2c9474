"""Health and readiness probe endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rdf_explorer.api.dependencies import get_registry, get_sparql_conn
from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.sparql.connection import SparqlConnection

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(
    conn: SparqlConnection = Depends(get_sparql_conn),
    registry: EndpointRegistry = Depends(get_registry),
) -> dict:
    try:
        primary = registry.first()
        ok = await conn.health_check(primary)
        return {"status": "ready" if ok else "degraded", "endpoint_id": primary.id, "sparql": ok}
    except Exception as exc:
        return {"status": "not_ready", "error": str(exc)}
