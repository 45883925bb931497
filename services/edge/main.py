"""
Edge Router - CDN-style ingress

Serves the single-page application bundle by default and forwards requests
under the API prefix to the API function, applying per-route caching,
header and method policy.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from fastapi.responses import Response

from .api.deps import EdgeRequestDep, EdgeRouterDep
from .config import config
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import request_context_middleware

# Logger setup
setup_logging()
logger = logging.getLogger("edge.main")

ALL_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with manage_lifespan(app, config):
        yield


app = FastAPI(
    title="Edge Router",
    version="1.0.0",
    lifespan=lifespan,
    root_path=config.root_path,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.middleware("http")(request_context_middleware)
register_exception_handlers(app)


# ===========================================
# Edge management endpoints.
# ===========================================


@app.get("/_edge/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/_edge/outputs")
async def deployment_outputs():
    """Deployment identifiers, informational only."""
    return {
        "BucketName": config.STATIC_BUCKET or config.STATIC_STORE_ID or None,
        "DistributionId": config.DISTRIBUTION_ID or None,
        "DistributionDomain": config.DISTRIBUTION_DOMAIN or None,
        "ApiBaseUrl": config.API_BACKEND_URL or None,
    }


# ===========================================
# Catch-all: every other path goes through the edge router.
# ===========================================


@app.api_route("/{path:path}", methods=ALL_METHODS)
async def edge_handler(edge_request: EdgeRequestDep, router: EdgeRouterDep):
    """
    Route the request by path: API prefix to the function, the rest to the
    static bundle. Policy errors are mapped by the registered exception handlers.
    """
    result = await router.route(edge_request)
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)


if __name__ == "__main__":
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port or 8000))
