import os

import pytest

# Config is initialized at import time, so set the environment first.
os.environ.setdefault("LOG_CONFIG_PATH", "/tmp/edge-router-missing-log.yaml")
os.environ.setdefault("AWS_REGION", "test-region-1")
os.environ.setdefault("FUNCTION_NAME", "test-fn")
os.environ.setdefault("FUNCTION_MEMORY_SIZE", "256")

from services.edge.config import EdgeConfig  # noqa: E402
from services.edge.services.route_matcher import RouteMatcher  # noqa: E402
from services.edge.services.router import EdgeRouter  # noqa: E402
from services.edge.tests.fakes import INDEX_HTML, FakeOrigin, SpyFrontend  # noqa: E402


@pytest.fixture
def edge_config(tmp_path):
    return EdgeConfig(
        STATIC_ROOT=str(tmp_path),
        ROUTING_CONFIG_PATH=str(tmp_path / "missing-routing.yml"),
        AWS_REGION="test-region-1",
        FUNCTION_NAME="test-fn",
        FUNCTION_MEMORY_SIZE=256,
        FUNCTION_TIMEOUT=2.0,
    )


@pytest.fixture
def fake_origin():
    return FakeOrigin(
        {
            "index.html": INDEX_HTML,
            "assets/app.js": b"console.log('app')",
        }
    )


@pytest.fixture
def spy_frontend():
    return SpyFrontend()


@pytest.fixture
def route_matcher(edge_config):
    return RouteMatcher(edge_config.ROUTING_CONFIG_PATH)


@pytest.fixture
def edge_router(route_matcher, fake_origin, spy_frontend, edge_config):
    return EdgeRouter(
        route_matcher=route_matcher,
        static_origin=fake_origin,
        api_frontend=spy_frontend,
        edge_config=edge_config,
    )
