"""FastAPI application factory with lifespan events."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rdf_explorer.api.dependencies import set_services, set_sparql_conn
from rdf_explorer.api.router import api_router
from rdf_explorer.config import get_settings
from rdf_explorer.search.elastic import ElasticConnector
from rdf_explorer.services.endpoint_registry import EndpointRegistry
from rdf_explorer.services.enrichment_service import EnrichmentService
from rdf_explorer.services.relation_resolver import RelationResolver
from rdf_explorer.services.search_service import SearchService
from rdf_explorer.sparql.connection import SparqlConnection
from rdf_explorer.utils.exceptions import InvalidNodeError, NodeNotFoundError, NoEndpointsError
from rdf_explorer.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the SPARQL and index clients and wire the services."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_MAX_FIELD_LENGTH)

    registry = EndpointRegistry(settings.ENDPOINTS)
    if not len(registry):
        logger.warning("no_endpoints_configured")

    sparql_conn = SparqlConnection(settings)
    await sparql_conn.connect()
    set_sparql_conn(sparql_conn, registry)

    elastic = ElasticConnector(settings, registry)
    await elastic.connect()

    resolver = RelationResolver(sparql_conn, registry, settings)
    enricher = EnrichmentService(resolver, settings.MAX_ENRICH_CONCURRENT)
    search = SearchService(elastic, enricher, settings)
    set_services(resolver, enricher, search)

    logger.info("app_started", endpoints=[e.id for e in settings.ENDPOINTS])
    yield

    # Shutdown
    await search.aclose()
    await elastic.close()
    await sparql_conn.close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_MAX_FIELD_LENGTH)

    application = FastAPI(
        title="rdf-explorer",
        description="Federated RDF search and graph browsing",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.exception_handler(InvalidNodeError)
    async def invalid_node_handler(request: Request, exc: InvalidNodeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @application.exception_handler(NodeNotFoundError)
    async def node_not_found_handler(request: Request, exc: NodeNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc), "node_id": exc.node_id})

    @application.exception_handler(NoEndpointsError)
    async def no_endpoints_handler(request: Request, exc: NoEndpointsError) -> JSONResponse:
        logger.error("no_endpoints_configured", path=request.url.path)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    return application


app = create_app()
