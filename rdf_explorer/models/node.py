"""Graph node model: an RDF subject as a predicate -> edge-list mapping.

A node is a plain ``dict`` so enrichment can add edges in place after the
node has been handed to readers. The accessor functions below are the only
supported way to read it.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict


class Direction(str, Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class NodeObj(BaseModel):
    """One edge endpoint, oriented relative to the node that owns it."""

    model_config = ConfigDict(frozen=True)

    value: str
    # None for reserved keys (``@id``, ``endpointId``), which are not edges.
    direction: Direction | None = None


NodeModel = dict[str, list[NodeObj]]

ID_KEY = "@id"
ENDPOINT_ID_KEY = "endpointId"
RESERVED_KEYS = frozenset({ID_KEY, ENDPOINT_ID_KEY})


def make_node(
    node_id: str,
    edges: dict[str, list[NodeObj]] | None = None,
    endpoint_id: str | None = None,
) -> NodeModel:
    node: NodeModel = {pred: list(objs) for pred, objs in (edges or {}).items()}
    node[ID_KEY] = [NodeObj(value=node_id)]
    if endpoint_id:
        node[ENDPOINT_ID_KEY] = [NodeObj(value=endpoint_id)]
    return node


def objects_for(node: NodeModel | None, predicates: Iterable[str]) -> list[NodeObj]:
    """Edges for any of ``predicates``, in predicate-then-insertion order.

    Predicates missing from the node are skipped, as are edges without a value.
    """
    if not node:
        return []

    objs: list[NodeObj] = []
    for pred in predicates:
        for obj in node.get(pred, ()):
            if obj is None or not obj.value:
                continue
            objs.append(obj)
    return objs


def object_values_for(
    node: NodeModel | None,
    predicates: Iterable[str],
    direction: Direction | None = None,
    unique: bool = False,
) -> list[str]:
    objs = objects_for(node, predicates)
    if direction is not None:
        objs = [obj for obj in objs if obj.direction == direction]
    values = [obj.value for obj in objs]
    # dict.fromkeys keeps the first occurrence of each value
    return list(dict.fromkeys(values)) if unique else values


def id_of(node: NodeModel | None) -> str | None:
    values = object_values_for(node, [ID_KEY])
    return values[0] if values else None


def endpoint_id_of(node: NodeModel | None) -> str | None:
    values = object_values_for(node, [ENDPOINT_ID_KEY])
    return values[0] if values else None


def predicates_of(node: NodeModel) -> list[str]:
    return list(node.keys())


def is_resolved(node: NodeModel) -> bool:
    return any(key not in RESERVED_KEYS for key in node)
