"""Request/response models for the node API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from rdf_explorer.models.node import RESERVED_KEYS, NodeModel, NodeObj, endpoint_id_of, id_of


class NodeResponse(BaseModel):
    id: str | None
    endpoint_id: str | None = None
    edges: dict[str, list[NodeObj]] = Field(default_factory=dict)

    @classmethod
    def from_node(cls, node: NodeModel) -> NodeResponse:
        return cls(
            id=id_of(node),
            endpoint_id=endpoint_id_of(node),
            edges={pred: list(objs) for pred, objs in node.items() if pred not in RESERVED_KEYS},
        )


class LabelsRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)


class LabelResponse(BaseModel):
    id: str
    label: str


class ParentResponse(BaseModel):
    id: str
    title: str | None = None
    parent: str | None = None
