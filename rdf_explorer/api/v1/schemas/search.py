"""Request/response models for the search API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from rdf_explorer.api.v1.schemas.node import NodeResponse
from rdf_explorer.services.search_service import SearchService


class SearchRequest(BaseModel):
    query: str | None = None


class ToggleFilterRequest(BaseModel):
    filter_id: str = Field(min_length=1)
    value: str


class SearchStateResponse(BaseModel):
    query: str
    page: int
    is_loading: bool
    filters: dict[str, list[str]] = Field(default_factory=dict)
    type_counts: dict[str, int] = Field(default_factory=dict)
    nodes: list[NodeResponse] = Field(default_factory=list)
    node_count: int = 0

    @classmethod
    def from_service(cls, service: SearchService) -> SearchStateResponse:
        results = service.results.value
        return cls(
            query=service.query_str,
            page=service.page,
            is_loading=service.is_loading.value,
            filters=service.filters.value.as_lists(),
            type_counts=dict(results.type_counts),
            nodes=[NodeResponse.from_node(node) for node in results.nodes],
            node_count=len(results.nodes),
        )
