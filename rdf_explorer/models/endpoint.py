"""Configured data endpoint URL sets."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EndpointUrls(BaseModel):
    """One federated data source: its SPARQL service and its index mirror."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    sparql: str
    elastic: str | None = None
    label: str | None = None
