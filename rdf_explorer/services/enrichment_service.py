"""Adds incoming-relation edges to batches of partially known nodes."""

from __future__ import annotations

import asyncio

from rdf_explorer.models.node import Direction, NodeModel, NodeObj, id_of, object_values_for
from rdf_explorer.services.relation_resolver import RelationResolver
from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)


class EnrichmentService:
    """Fans relation lookups out across a node batch and merges the edges in place."""

    def __init__(self, resolver: RelationResolver, max_concurrent: int = 16) -> None:
        self._resolver = resolver
        self._semaphore = asyncio.Semaphore(max(max_concurrent, 1))

    async def enrich_with_incoming_relations(self, nodes: list[NodeModel]) -> list[NodeModel]:
        """Attach incoming edges to every node in ``nodes``.

        Nodes are mutated in place and the same list is returned. A failure
        for one node is logged and leaves that node unchanged.
        """
        if not nodes:
            return nodes

        logger.debug("enrichment_started", nodes=len(nodes))
        added = await asyncio.gather(*(self._enrich_one(node) for node in nodes))
        logger.info("enrichment_finished", nodes=len(nodes), edges_added=sum(added))
        return nodes

    async def enrich_node(self, node: NodeModel) -> NodeModel:
        await self._enrich_one(node)
        return node

    async def _enrich_one(self, node: NodeModel) -> int:
        try:
            async with self._semaphore:
                relations = await self._resolver.resolve_incoming_relations(node)
        except Exception as exc:
            logger.error(
                "enrichment_failed",
                node_id=id_of(node),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return 0

        added = 0
        for relation in relations:
            edges = node.setdefault(relation.pred, [])
            if relation.sub in object_values_for(node, [relation.pred]):
                continue
            edges.append(NodeObj(value=relation.sub, direction=Direction.INCOMING))
            added += 1
        return added
