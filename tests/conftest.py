"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

ENDPOINTS = [
    {"id": "A", "sparql": "http://a.example/sparql", "elastic": "http://es.example/a"},
    {"id": "B", "sparql": "http://b.example/sparql", "elastic": "http://es.example/b"},
    {"id": "C", "sparql": "http://c.example/sparql"},
]


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set required environment variables for tests."""
    monkeypatch.setenv("ENDPOINTS", json.dumps(ENDPOINTS))
    monkeypatch.setenv("RESULTS_PER_PAGE_PER_ENDPOINT", "2")
    monkeypatch.setenv("RETRY_BASE_DELAY_SECONDS", "0")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def settings():
    from rdf_explorer.config import Settings

    return Settings()


@pytest.fixture
def registry(settings):
    from rdf_explorer.services.endpoint_registry import EndpointRegistry

    return EndpointRegistry(settings.ENDPOINTS)


@pytest.fixture
def mock_conn():
    """SPARQL connection whose post_query returns an empty SPARQL-JSON body."""
    conn = AsyncMock()
    conn.post_query = AsyncMock(return_value=bindings([]))
    return conn


@pytest.fixture
def resolver(mock_conn, registry, settings):
    from rdf_explorer.services.relation_resolver import RelationResolver

    return RelationResolver(mock_conn, registry, settings)


def bindings(rows: list[dict[str, str]]) -> dict:
    """Wrap plain rows in the SPARQL-JSON results envelope."""
    return {
        "head": {"vars": sorted({k for row in rows for k in row})},
        "results": {
            "bindings": [
                {k: {"type": "uri", "value": v} for k, v in row.items()} for row in rows
            ]
        },
    }


@pytest.fixture
def sparql_bindings():
    return bindings
