"""Relation resolution against the federated SPARQL endpoints.

``resolve_node`` walks the whole endpoint chain until one endpoint knows the
node. Every other operation asks only the primary endpoint and degrades to an
empty result when that endpoint misbehaves: those results enrich a node that
is already displayable, so they are best-effort.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rdf_explorer.config import Settings
from rdf_explorer.models.endpoint import EndpointUrls
from rdf_explorer.models.node import Direction, NodeModel, NodeObj, id_of, make_node
from rdf_explorer.models.sparql import (
    SparqlIncomingRelation,
    SparqlNodeParent,
    SparqlPredObj,
    ThingWithLabel,
)
from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.sparql import queries
from rdf_explorer.sparql.connection import SparqlConnection
from rdf_explorer.sparql.responses import Row, parse_rows
from rdf_explorer.utils.exceptions import (
    InvalidNodeError,
    MalformedResponseWarning,
    NodeNotFoundError,
    TransportError,
)
from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)


class RelationResolver:
    """Turns resolution requests into endpoint queries and normalized rows."""

    def __init__(
        self,
        connection: SparqlConnection,
        registry: EndpointRegistry,
        settings: Settings,
    ) -> None:
        self._conn = connection
        self._registry = registry
        self._settings = settings

    # ── Preconditions ────────────────────────────────────────────────

    @staticmethod
    def _ensure_valid_id(node_id: str | None) -> str:
        if not node_id:
            raise InvalidNodeError("Node without ID passed")
        if not queries.is_safe_iri(node_id):
            raise InvalidNodeError(f"Node ID is not a valid IRI: {node_id[:100]!r}")
        return node_id

    def _ensure_node_has_id(self, node: NodeModel | None) -> str:
        return self._ensure_valid_id(id_of(node))

    # ── Query helpers ────────────────────────────────────────────────

    async def _select(
        self,
        endpoint: EndpointUrls,
        query: str,
        columns: Sequence[str],
        required: Iterable[str] | None = None,
        **context: object,
    ) -> list[Row]:
        """Run a SELECT on one endpoint; failures become an empty row set."""
        try:
            body = await self._conn.post_query(endpoint, query)
            return parse_rows(body, columns, endpoint.id, required=required)
        except MalformedResponseWarning as exc:
            logger.warning(
                "sparql_malformed_response",
                endpoint_id=endpoint.id,
                shape=exc.shape,
                **context,
            )
        except TransportError as exc:
            logger.warning(
                "sparql_endpoint_failed",
                endpoint_id=endpoint.id,
                error=str(exc),
                **context,
            )
        return []

    # ── Operations ───────────────────────────────────────────────────

    async def resolve_node(self, node_id: str) -> NodeModel:
        """Describe ``node_id`` using the first endpoint that has data for it.

        Endpoints are tried strictly in registry order, one at a time.
        Raises :class:`NodeNotFoundError` when none of them returns a row.
        """
        node_id = self._ensure_valid_id(node_id)
        endpoints = self._registry.all()
        logger.debug("resolve_node_started", node_id=node_id, endpoints=len(endpoints))

        query = queries.node_query(node_id)
        for endpoint in endpoints:
            try:
                body = await self._conn.post_query(endpoint, query)
                rows = parse_rows(body, ("pred", "obj"), endpoint.id)
            except MalformedResponseWarning as exc:
                logger.warning(
                    "resolve_node_malformed_response",
                    node_id=node_id,
                    endpoint_id=endpoint.id,
                    shape=exc.shape,
                )
                continue
            except TransportError as exc:
                logger.warning(
                    "resolve_node_endpoint_failed",
                    node_id=node_id,
                    endpoint_id=endpoint.id,
                    error=str(exc),
                )
                continue

            if not rows:
                logger.debug("resolve_node_no_rows", node_id=node_id, endpoint_id=endpoint.id)
                continue

            edges: dict[str, list[NodeObj]] = {}
            for row in rows:
                pred_obj = SparqlPredObj.model_validate(row)
                edges.setdefault(pred_obj.pred, []).append(
                    NodeObj(value=pred_obj.obj, direction=Direction.OUTGOING)
                )
            logger.info(
                "node_resolved",
                node_id=node_id,
                endpoint_id=endpoint.id,
                predicates=len(edges),
                edges=len(rows),
            )
            return make_node(node_id, edges, endpoint_id=endpoint.id)

        logger.warning("node_not_found", node_id=node_id, endpoints=[e.id for e in endpoints])
        raise NodeNotFoundError(node_id)

    async def resolve_incoming_relations(self, node: NodeModel) -> list[SparqlIncomingRelation]:
        node_id = self._ensure_node_has_id(node)
        endpoint = self._registry.first()
        rows = await self._select(
            endpoint,
            queries.incoming_relations_query(node_id, self._settings.INCOMING_RELATIONS_LIMIT),
            ("sub", "pred"),
            node_id=node_id,
        )
        return [SparqlIncomingRelation.model_validate(row) for row in rows]

    async def resolve_ancestry(self, node: NodeModel) -> list[SparqlNodeParent]:
        """Transitive parents of ``node`` with optional labels and grandparents."""
        node_id = self._ensure_node_has_id(node)
        endpoint = self._registry.first()
        if not self._settings.PARENT_PREDICATES:
            return []

        limit = self._settings.ANCESTRY_LIMIT
        rows = await self._select(
            endpoint,
            queries.ancestry_query(
                node_id,
                self._settings.PARENT_PREDICATES,
                self._settings.LABEL_PREDICATES,
                limit,
            ),
            ("id", "title", "parent"),
            required=("id",),
            node_id=node_id,
        )
        if len(rows) >= limit:
            logger.warning("ancestry_truncated", node_id=node_id, limit=limit)
        return [SparqlNodeParent.model_validate(row) for row in rows[:limit]]

    async def resolve_labels(self, ids: Iterable[str]) -> list[ThingWithLabel]:
        endpoint = self._registry.first()
        safe_ids: list[str] = []
        for iri in dict.fromkeys(ids):
            if queries.is_safe_iri(iri):
                safe_ids.append(iri)
            else:
                logger.warning("label_id_skipped", node_id=iri[:100])
        if not safe_ids or not self._settings.LABEL_PREDICATES:
            return []

        rows = await self._select(
            endpoint,
            queries.labels_query(
                safe_ids,
                self._settings.LABEL_PREDICATES,
                self._settings.LABELS_LIMIT,
            ),
            ("s", "label"),
            ids=len(safe_ids),
        )
        return [ThingWithLabel(id=row["s"], label=row["label"]) for row in rows]

    async def resolve_object_ids(self, node_id: str, predicates: Sequence[str]) -> list[str]:
        node_id = self._ensure_valid_id(node_id)
        endpoint = self._registry.first()
        preds = [p for p in predicates if queries.is_safe_iri(p)]
        if not preds:
            return []

        rows = await self._select(
            endpoint,
            queries.object_ids_query(node_id, preds, self._settings.OBJECT_IDS_LIMIT),
            ("o",),
            node_id=node_id,
        )
        return [row["o"] for row in rows]
