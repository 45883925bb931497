"""
Where: services/edge/lifecycle.py
What: Edge startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from services.common.core.http_client import HttpClientFactory

from .config import EdgeConfig
from .services.api_frontend import ApiFrontend, HttpApiFrontend, LocalFunctionFrontend
from .services.route_matcher import RouteMatcher
from .services.router import EdgeRouter
from .services.static_origin import FileSystemOrigin, S3Origin, StaticOrigin

logger = logging.getLogger("edge.main")


def create_static_origin(edge_config: EdgeConfig) -> StaticOrigin:
    if edge_config.STATIC_BUCKET:
        logger.info("Static origin: s3://%s", edge_config.STATIC_BUCKET)
        return S3Origin(edge_config.STATIC_BUCKET, endpoint_url=edge_config.S3_ENDPOINT or None)
    logger.info("Static origin: %s", edge_config.STATIC_ROOT)
    return FileSystemOrigin(edge_config.STATIC_ROOT)


def create_api_frontend(
    edge_config: EdgeConfig, client: Optional[httpx.AsyncClient]
) -> ApiFrontend:
    if edge_config.API_BACKEND_URL and client is not None:
        logger.info("API frontend: %s", edge_config.API_BACKEND_URL)
        return HttpApiFrontend(
            client, edge_config.API_BACKEND_URL, timeout=edge_config.FUNCTION_TIMEOUT
        )
    logger.info("API frontend: in-process function %s", edge_config.FUNCTION_NAME)
    return LocalFunctionFrontend(edge_config)


@asynccontextmanager
async def manage_lifespan(app: FastAPI, edge_config: EdgeConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    client: Optional[httpx.AsyncClient] = None
    if edge_config.API_BACKEND_URL:
        factory = HttpClientFactory(edge_config)
        client = factory.create_async_client(timeout=edge_config.FUNCTION_TIMEOUT)

    try:
        route_matcher = RouteMatcher(edge_config.ROUTING_CONFIG_PATH)
        route_matcher.load_routing_config()

        app.state.http_client = client
        app.state.route_matcher = route_matcher
        app.state.edge_router = EdgeRouter(
            route_matcher=route_matcher,
            static_origin=create_static_origin(edge_config),
            api_frontend=create_api_frontend(edge_config, client),
            edge_config=edge_config,
        )

        logger.info("Edge router initialized with %d routes.", len(route_matcher.rules))
        yield
    finally:
        if client is not None:
            logger.info("Edge router shutting down, closing http client.")
            await client.aclose()
