"""Search API endpoints: query, paging, filters and SSE state streaming."""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Callable

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from rdf_explorer.api.dependencies import get_search
from rdf_explorer.api.v1.schemas.node import NodeResponse
from rdf_explorer.api.v1.schemas.search import (
    SearchRequest,
    SearchStateResponse,
    ToggleFilterRequest,
)
from rdf_explorer.models.search import SearchResultsModel
from rdf_explorer.services.search_service import SearchService
from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/search", tags=["search"])

_PING_INTERVAL = 30


@router.get("", response_model=SearchStateResponse)
async def get_search_state(service: SearchService = Depends(get_search)) -> SearchStateResponse:
    return SearchStateResponse.from_service(service)


@router.post("", response_model=SearchStateResponse)
async def run_search(
    request: SearchRequest,
    service: SearchService = Depends(get_search),
) -> SearchStateResponse:
    """Run a fresh search from page 0, optionally replacing the query string."""
    await service.search(request.query)
    return SearchStateResponse.from_service(service)


@router.post("/next", response_model=SearchStateResponse)
async def next_page(service: SearchService = Depends(get_search)) -> SearchStateResponse:
    await service.execute(clear_first=False)
    return SearchStateResponse.from_service(service)


@router.post("/filters/toggle", response_model=SearchStateResponse)
async def toggle_filter(
    request: ToggleFilterRequest,
    service: SearchService = Depends(get_search),
) -> SearchStateResponse:
    """Toggle one filter value; the re-search runs in the background."""
    service.toggle_filter(request.filter_id, request.value)
    return SearchStateResponse.from_service(service)


@router.delete("/filters", response_model=SearchStateResponse)
async def clear_filters(service: SearchService = Depends(get_search)) -> SearchStateResponse:
    service.clear_filters()
    return SearchStateResponse.from_service(service)


def _results_event(results: SearchResultsModel) -> dict[str, Any]:
    return {
        "type_counts": results.type_counts,
        "nodes": [NodeResponse.from_node(node).model_dump(mode="json") for node in results.nodes],
    }


async def search_events(service: SearchService) -> AsyncIterator[dict[str, str]]:
    """Yield one SSE event per publish on the results, filters or loading channels.

    Subscriptions are registered before the initial ``state`` event is
    yielded, so nothing published after that point is missed.
    """
    queue: asyncio.Queue[tuple[str, dict[str, Any]]] = asyncio.Queue()
    unsubscribers: list[Callable[[], None]] = [
        service.results.subscribe(lambda r: queue.put_nowait(("results", _results_event(r)))),
        service.filters.subscribe(
            lambda f: queue.put_nowait(("filters", {"terms": f.as_lists()}))
        ),
        service.is_loading.subscribe(lambda v: queue.put_nowait(("loading", {"is_loading": v}))),
    ]
    try:
        yield {"event": "state", "data": SearchStateResponse.from_service(service).model_dump_json()}
        while True:
            try:
                event_type, data = await asyncio.wait_for(queue.get(), timeout=_PING_INTERVAL)
            except asyncio.TimeoutError:
                yield {"event": "ping", "data": ""}
                continue
            yield {"event": event_type, "data": json.dumps(data)}
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()
        logger.debug("search_stream_closed")


@router.get("/stream")
async def stream_search(service: SearchService = Depends(get_search)) -> EventSourceResponse:
    """SSE endpoint streaming the published search state."""
    return EventSourceResponse(search_events(service))
