"""Top-level API router aggregating all v1 sub-routers."""

from __future__ import annotations

from fastapi import APIRouter

from rdf_explorer.api.v1.health import router as health_router
from rdf_explorer.api.v1.nodes import router as nodes_router
from rdf_explorer.api.v1.search import router as search_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health_router)
api_router.include_router(search_router)
api_router.include_router(nodes_router)
