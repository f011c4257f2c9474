"""Normalized rows returned by the relation resolver."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SparqlIncomingRelation(BaseModel):
    sub: str
    pred: str


class SparqlPredObj(BaseModel):
    pred: str
    obj: str


class SparqlNodeParent(BaseModel):
    id: str
    title: str | None = None
    parent: str | None = None


class ThingWithLabel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="@id")
    label: str
