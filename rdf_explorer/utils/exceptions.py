"""Exception hierarchy for the graph-resolution pipeline."""

from __future__ import annotations


class ExplorerError(Exception):
    """Base exception for all rdf-explorer errors."""


class InvalidNodeError(ExplorerError):
    """An id-based operation was called without a usable ``@id``."""


class NoEndpointsError(ExplorerError):
    """No data endpoints are configured."""

    def __init__(self, message: str = "No endpoints defined") -> None:
        super().__init__(message)


class NodeNotFoundError(ExplorerError):
    """No configured endpoint returned data for a node."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Could not find data for node {node_id} in any endpoint")


class TransportError(ExplorerError):
    """Network, HTTP or decoding failure while talking to one endpoint."""

    def __init__(self, endpoint_id: str, message: str) -> None:
        self.endpoint_id = endpoint_id
        super().__init__(f"[{endpoint_id}] {message}")


class MalformedResponseWarning(ExplorerError):
    """Response body matched none of the accepted result shapes.

    Non-fatal: callers log it and treat the response as an empty row set.
    """

    def __init__(self, endpoint_id: str, shape: str) -> None:
        self.endpoint_id = endpoint_id
        self.shape = shape
        super().__init__(f"[{endpoint_id}] unexpected SPARQL response format: {shape}")


class SearchIndexError(ExplorerError):
    """Every configured search index failed to answer a query."""
