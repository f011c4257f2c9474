"""Elasticsearch connector for the per-endpoint search index mirrors."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from rdf_explorer.config import Settings
from rdf_explorer.models.endpoint import EndpointUrls
from rdf_explorer.models.search import ElasticFiltersModel
from rdf_explorer.search.hits import ENDPOINT_TAG, TYPE_AGGREGATION
from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.utils.exceptions import SearchIndexError, TransportError
from rdf_explorer.utils.logging import get_logger
from rdf_explorer.utils.retry import async_retry

logger = get_logger(__name__)

TYPE_BUCKETS = 100


def build_search_body(
    query_str: str,
    filters: ElasticFiltersModel,
    offset: int,
    limit: int,
    type_field: str = "@type",
) -> dict[str, Any]:
    """Full-text query with one ``terms`` filter per active filter id."""
    if query_str.strip():
        must: list[dict[str, Any]] = [
            {"simple_query_string": {"query": query_str, "default_operator": "and"}}
        ]
    else:
        must = [{"match_all": {}}]

    return {
        "from": offset,
        "size": limit,
        "query": {
            "bool": {
                "must": must,
                "filter": [
                    {"terms": {filter_id: values}}
                    for filter_id, values in filters.as_lists().items()
                ],
            }
        },
        "aggs": {TYPE_AGGREGATION: {"terms": {"field": type_field, "size": TYPE_BUCKETS}}},
    }


class ElasticConnector:
    """Queries every endpoint's index mirror concurrently."""

    def __init__(
        self,
        settings: Settings,
        registry: EndpointRegistry,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._post_with_retry = async_retry(
            max_attempts=settings.SPARQL_MAX_ATTEMPTS,
            base_delay=settings.RETRY_BASE_DELAY_SECONDS,
            retryable_exceptions=(httpx.TransportError, httpx.HTTPStatusError),
        )(self._post)

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.QUERY_TIMEOUT_SECONDS,
                transport=self._transport,
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Search index client not initialized; call connect() first")
        return self._client

    async def _post(self, url: str, body: dict[str, Any]) -> httpx.Response:
        resp = await self.client.post(url, json=body)
        resp.raise_for_status()
        return resp

    async def _search_index(self, endpoint: EndpointUrls, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{endpoint.elastic.rstrip('/')}/_search"
        try:
            resp = await self._post_with_retry(url, body)
            data = resp.json()
        except httpx.HTTPError as exc:
            raise TransportError(endpoint.id, f"search failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(endpoint.id, f"invalid JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise TransportError(endpoint.id, f"unexpected search response: {type(data).__name__}")
        data[ENDPOINT_TAG] = endpoint.id
        return data

    async def search_entities(
        self,
        query_str: str,
        filters: ElasticFiltersModel,
        offset: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        """One search response per index that answered."""
        self._registry.ensure_endpoints_exist()
        endpoints = self._registry.searchable()
        if not endpoints:
            logger.warning("no_search_indexes_configured")
            return []

        body = build_search_body(query_str, filters, offset, limit, self._settings.TYPE_FIELD)
        results = await asyncio.gather(
            *(self._search_index(endpoint, body) for endpoint in endpoints),
            return_exceptions=True,
        )

        responses: list[dict[str, Any]] = []
        for endpoint, result in zip(endpoints, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("search_index_failed", endpoint_id=endpoint.id, error=str(result))
                continue
            responses.append(result)

        if not responses:
            raise SearchIndexError(f"All {len(endpoints)} search indexes failed")
        return responses
