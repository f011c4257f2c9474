"""Conversion of raw search-index responses into graph nodes and facet counts."""

from __future__ import annotations

from typing import Any, Iterable

from rdf_explorer.models.node import ID_KEY, RESERVED_KEYS, Direction, NodeModel, NodeObj, make_node
from rdf_explorer.models.search import TypeCountsModel
from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)

ENDPOINT_TAG = "_endpoint_id"
TYPE_AGGREGATION = "types"


def hits_from_responses(responses: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten hits across per-endpoint responses, tagging each with its endpoint."""
    hits: list[dict[str, Any]] = []
    for response in responses:
        endpoint_id = response.get(ENDPOINT_TAG)
        for hit in (response.get("hits") or {}).get("hits") or []:
            hits.append({**hit, ENDPOINT_TAG: endpoint_id})
    return hits


def type_counts_from_responses(responses: Iterable[dict[str, Any]]) -> TypeCountsModel:
    counts: TypeCountsModel = {}
    for response in responses:
        buckets = ((response.get("aggregations") or {}).get(TYPE_AGGREGATION) or {}).get("buckets") or []
        for bucket in buckets:
            key = bucket.get("key")
            if key is None:
                continue
            counts[str(key)] = counts.get(str(key), 0) + int(bucket.get("doc_count", 0))
    return counts


def _literal(raw: Any) -> str | None:
    # JSON-LD style objects carry the value under @id or @value
    if isinstance(raw, dict):
        raw = raw.get("@id", raw.get("@value", raw.get("value")))
    if raw is None or isinstance(raw, (dict, list)):
        return None
    return raw if isinstance(raw, str) else str(raw)


def hit_to_node(hit: dict[str, Any]) -> NodeModel | None:
    source: dict[str, Any] = hit.get("_source") or {}
    node_id = _literal(source.get(ID_KEY)) or hit.get("_id")
    if not node_id:
        return None

    edges: dict[str, list[NodeObj]] = {}
    for pred, raw_values in source.items():
        if pred in RESERVED_KEYS:
            continue
        values = raw_values if isinstance(raw_values, list) else [raw_values]
        objs = [
            NodeObj(value=value, direction=Direction.OUTGOING)
            for value in map(_literal, values)
            if value
        ]
        if objs:
            edges[pred] = objs

    return make_node(node_id, edges, endpoint_id=hit.get(ENDPOINT_TAG))


def parse_to_nodes(hits: Iterable[dict[str, Any]]) -> list[NodeModel]:
    nodes: list[NodeModel] = []
    for hit in hits:
        node = hit_to_node(hit)
        if node is None:
            logger.warning("search_hit_without_id", index=hit.get("_index"))
            continue
        nodes.append(node)
    return nodes
