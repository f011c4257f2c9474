"""Integration tests for the FastAPI application."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from rdf_explorer.models.node import Direction, NodeObj, make_node
from rdf_explorer.models.sparql import SparqlNodeParent, ThingWithLabel
from rdf_explorer.utils.exceptions import InvalidNodeError, NodeNotFoundError, NoEndpointsError

ALICE = "http://example.org/alice"
KNOWS = "http://xmlns.com/foaf/0.1/knows"


def _response(*ids: str) -> dict:
    return {
        "_endpoint_id": "A",
        "hits": {"hits": [{"_id": i, "_source": {"@id": i}} for i in ids]},
        "aggregations": {"types": {"buckets": [{"key": "Person", "doc_count": len(ids)}]}},
    }


@pytest.fixture
def mock_resolver():
    resolver = AsyncMock()
    resolver.resolve_node = AsyncMock(return_value=make_node(
        ALICE,
        {KNOWS: [NodeObj(value="http://example.org/bob", direction=Direction.OUTGOING)]},
        endpoint_id="B",
    ))
    return resolver


@pytest.fixture
def mock_enricher():
    enricher = AsyncMock()
    enricher.enrich_node = AsyncMock(side_effect=lambda node: node)
    enricher.enrich_with_incoming_relations = AsyncMock(side_effect=lambda nodes: nodes)
    return enricher


@pytest.fixture
def mock_connector():
    connector = AsyncMock()
    connector.search_entities = AsyncMock(return_value=[_response("h1", "h2")])
    return connector


@pytest.fixture
def client(settings, mock_resolver, mock_enricher, mock_connector):
    """Test client with services injected; the lifespan is not run."""
    from rdf_explorer.api import dependencies
    from rdf_explorer.main import create_app
    from rdf_explorer.services.search_service import SearchService

    search = SearchService(mock_connector, mock_enricher, settings)
    app = create_app()
    app.dependency_overrides[dependencies.get_resolver] = lambda: mock_resolver
    app.dependency_overrides[dependencies.get_enricher] = lambda: mock_enricher
    app.dependency_overrides[dependencies.get_search] = lambda: search
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoint(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_get_node(client, mock_resolver, mock_enricher):
    resp = client.get("/api/v1/nodes", params={"id": ALICE})
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == ALICE
    assert data["endpoint_id"] == "B"
    assert data["edges"][KNOWS] == [{"value": "http://example.org/bob", "direction": "outgoing"}]
    mock_resolver.resolve_node.assert_awaited_once_with(ALICE)
    mock_enricher.enrich_node.assert_awaited_once()


def test_get_node_not_found(client, mock_resolver):
    mock_resolver.resolve_node.side_effect = NodeNotFoundError(ALICE)
    resp = client.get("/api/v1/nodes", params={"id": ALICE})
    assert resp.status_code == 404
    assert resp.json()["node_id"] == ALICE


def test_get_node_invalid_id(client, mock_resolver):
    mock_resolver.resolve_node.side_effect = InvalidNodeError("Node without ID passed")
    resp = client.get("/api/v1/nodes", params={"id": "not an iri"})
    assert resp.status_code == 400


def test_get_node_without_endpoints(client, mock_resolver):
    mock_resolver.resolve_node.side_effect = NoEndpointsError()
    resp = client.get("/api/v1/nodes", params={"id": ALICE})
    assert resp.status_code == 503


def test_parents_labels_and_objects(client, mock_resolver):
    mock_resolver.resolve_ancestry = AsyncMock(return_value=[SparqlNodeParent(id=ALICE, title="Alice")])
    mock_resolver.resolve_labels = AsyncMock(return_value=[ThingWithLabel(id=ALICE, label="Alice")])
    mock_resolver.resolve_object_ids = AsyncMock(return_value=["http://example.org/bob"])

    parents = client.get("/api/v1/nodes/parents", params={"id": ALICE}).json()
    assert parents == [{"id": ALICE, "title": "Alice", "parent": None}]

    labels = client.post("/api/v1/nodes/labels", json={"ids": [ALICE]}).json()
    assert labels == [{"id": ALICE, "label": "Alice"}]

    objects = client.get("/api/v1/nodes/objects", params={"id": ALICE, "predicate": [KNOWS]}).json()
    assert objects == ["http://example.org/bob"]
    mock_resolver.resolve_object_ids.assert_awaited_once_with(ALICE, [KNOWS])


def test_search_and_next_page(client, mock_connector):
    resp = client.post("/api/v1/search", json={"query": "alice"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["query"] == "alice"
    assert data["page"] == 1
    assert data["node_count"] == 2
    assert [n["id"] for n in data["nodes"]] == ["h1", "h2"]
    assert data["type_counts"] == {"Person": 2}

    mock_connector.search_entities.return_value = [_response("h3")]
    data = client.post("/api/v1/search/next").json()
    assert [n["id"] for n in data["nodes"]] == ["h1", "h2", "h3"]
    assert data["page"] == 2


def test_toggle_and_clear_filters(client):
    data = client.post(
        "/api/v1/search/filters/toggle",
        json={"filter_id": "type", "value": "Person"},
    ).json()
    assert data["filters"] == {"type": ["Person"]}

    data = client.get("/api/v1/search").json()
    assert data["filters"] == {"type": ["Person"]}

    data = client.delete("/api/v1/search/filters").json()
    assert data["filters"] == {}


@pytest.mark.asyncio
async def test_search_stream_delivers_enriched_results(settings, mock_connector, mock_enricher):
    from rdf_explorer.api.v1.search import search_events
    from rdf_explorer.services.search_service import SearchService

    async def enrich(nodes):
        for node in nodes:
            node[KNOWS] = [NodeObj(value=ALICE, direction=Direction.INCOMING)]
        return nodes

    mock_enricher.enrich_with_incoming_relations.side_effect = enrich
    search = SearchService(mock_connector, mock_enricher, settings)
    events = search_events(search)

    first = await events.__anext__()
    assert first["event"] == "state"
    assert json.loads(first["data"])["node_count"] == 0

    await search.execute(True)
    await search.wait_for_background()

    received = [await events.__anext__() for _ in range(5)]
    assert [e["event"] for e in received] == ["results", "loading", "results", "loading", "results"]
    page = json.loads(received[2]["data"])
    assert [n["id"] for n in page["nodes"]] == ["h1", "h2"]
    assert all(KNOWS not in n["edges"] for n in page["nodes"])

    enriched = json.loads(received[4]["data"])
    assert enriched["type_counts"] == {"Person": 2}
    assert enriched["nodes"][0]["edges"][KNOWS] == [{"value": ALICE, "direction": "incoming"}]

    await events.aclose()
    assert search.results.subscriber_count == 0
