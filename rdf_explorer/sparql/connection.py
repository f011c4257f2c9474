"""Async SPARQL protocol client shared by every configured endpoint."""

from __future__ import annotations

import json
from typing import Any

import httpx

from rdf_explorer.config import Settings
from rdf_explorer.models.endpoint import EndpointUrls
from rdf_explorer.sparql.queries import HEALTH_CHECK_QUERY
from rdf_explorer.utils.exceptions import TransportError
from rdf_explorer.utils.logging import get_logger
from rdf_explorer.utils.retry import async_retry

logger = get_logger(__name__)

SPARQL_RESULTS_JSON = "application/sparql-results+json, application/json;q=0.9"


class SparqlConnection:
    """Manages the pooled httpx client used for SPARQL queries.

    One client serves all endpoints; each request names its endpoint.
    Designed for use with FastAPI lifespan events.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._post_with_retry = async_retry(
            max_attempts=settings.SPARQL_MAX_ATTEMPTS,
            base_delay=settings.RETRY_BASE_DELAY_SECONDS,
            retryable_exceptions=(httpx.TransportError, httpx.HTTPStatusError),
        )(self._post)

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=self._settings.QUERY_TIMEOUT_SECONDS,
            headers={"Accept": SPARQL_RESULTS_JSON},
            follow_redirects=True,
            transport=self._transport,
        )
        logger.info("sparql_client_opened", endpoints=len(self._settings.ENDPOINTS))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("sparql_client_closed")

    async def __aenter__(self) -> SparqlConnection:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("SPARQL client not initialized; call connect() first")
        return self._client

    async def _post(self, url: str, query: str) -> httpx.Response:
        resp = await self.client.post(url, data={"query": query})
        resp.raise_for_status()
        return resp

    async def post_query(self, endpoint: EndpointUrls, query: str) -> Any:
        """Run ``query`` against ``endpoint`` and return the decoded JSON body."""
        try:
            resp = await self._post_with_retry(endpoint.sparql, query)
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                endpoint.id, f"HTTP {exc.response.status_code} from {endpoint.sparql}"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(endpoint.id, f"{type(exc).__name__}: {exc}") from exc

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportError(endpoint.id, f"invalid JSON body: {exc}") from exc

    async def health_check(self, endpoint: EndpointUrls) -> bool:
        body = await self.post_query(endpoint, HEALTH_CHECK_QUERY)
        return isinstance(body, dict) and body.get("boolean") is True
