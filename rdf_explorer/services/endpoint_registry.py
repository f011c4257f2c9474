"""Ordered lookup over the configured data endpoints."""

from __future__ import annotations

from typing import Iterable

from rdf_explorer.models.endpoint import EndpointUrls
from rdf_explorer.utils.exceptions import NoEndpointsError


class EndpointRegistry:
    """Endpoints in fallback order. The first entry is the primary."""

    def __init__(self, endpoints: Iterable[EndpointUrls]) -> None:
        self._endpoints: tuple[EndpointUrls, ...] = tuple(endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def ensure_endpoints_exist(self) -> None:
        if not self._endpoints:
            raise NoEndpointsError()

    def first(self) -> EndpointUrls:
        self.ensure_endpoints_exist()
        return self._endpoints[0]

    def all(self) -> tuple[EndpointUrls, ...]:
        self.ensure_endpoints_exist()
        return self._endpoints

    def get(self, endpoint_id: str) -> EndpointUrls | None:
        for endpoint in self._endpoints:
            if endpoint.id == endpoint_id:
                return endpoint
        return None

    def searchable(self) -> tuple[EndpointUrls, ...]:
        """Endpoints that have a search index mirror."""
        return tuple(e for e in self._endpoints if e.elastic)
