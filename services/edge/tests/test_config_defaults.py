import pytest
from pydantic import ValidationError

from services.edge.config import EdgeConfig


def test_defaults():
    cfg = EdgeConfig()

    assert cfg.API_PREFIX == "/api"
    assert cfg.DEFAULT_DOCUMENT == "index.html"
    assert cfg.DEFAULT_TTL == 86400
    assert cfg.FUNCTION_TIMEOUT > 0


def test_api_prefix_normalized():
    assert EdgeConfig(API_PREFIX="backend/").API_PREFIX == "/backend"


def test_api_prefix_cannot_be_root():
    with pytest.raises(ValidationError):
        EdgeConfig(API_PREFIX="/")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STATIC_BUCKET", "my-site")
    monkeypatch.setenv("FUNCTION_TIMEOUT", "3.5")

    cfg = EdgeConfig()

    assert cfg.STATIC_BUCKET == "my-site"
    assert cfg.FUNCTION_TIMEOUT == 3.5
