"""Node API endpoints: resolve, enrich and navigate single nodes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from rdf_explorer.api.dependencies import get_enricher, get_resolver
from rdf_explorer.api.v1.schemas.node import (
    LabelResponse,
    LabelsRequest,
    NodeResponse,
    ParentResponse,
)
from rdf_explorer.models.node import make_node
from rdf_explorer.services.enrichment_service import EnrichmentService
from rdf_explorer.services.relation_resolver import RelationResolver

router = APIRouter(prefix="/nodes", tags=["nodes"])


@router.get("", response_model=NodeResponse)
async def get_node(
    id: str = Query(..., min_length=1),
    resolver: RelationResolver = Depends(get_resolver),
    enricher: EnrichmentService = Depends(get_enricher),
) -> NodeResponse:
    """Resolve a node from the first endpoint that knows it, plus incoming edges."""
    node = await resolver.resolve_node(id)
    await enricher.enrich_node(node)
    return NodeResponse.from_node(node)


@router.get("/parents", response_model=list[ParentResponse])
async def get_parents(
    id: str = Query(..., min_length=1),
    resolver: RelationResolver = Depends(get_resolver),
) -> list[ParentResponse]:
    rows = await resolver.resolve_ancestry(make_node(id))
    return [ParentResponse(**row.model_dump()) for row in rows]


@router.post("/labels", response_model=list[LabelResponse])
async def get_labels(
    request: LabelsRequest,
    resolver: RelationResolver = Depends(get_resolver),
) -> list[LabelResponse]:
    labels = await resolver.resolve_labels(request.ids)
    return [LabelResponse(id=thing.id, label=thing.label) for thing in labels]


@router.get("/objects", response_model=list[str])
async def get_object_ids(
    id: str = Query(..., min_length=1),
    predicate: list[str] = Query(default=[]),
    resolver: RelationResolver = Depends(get_resolver),
) -> list[str]:
    return await resolver.resolve_object_ids(id, predicate)
