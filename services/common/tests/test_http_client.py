import httpx
import pytest

from services.common.core.config import BaseAppConfig
from services.common.core.http_client import HttpClientFactory


@pytest.mark.asyncio
async def test_client_uses_verify_ssl_setting(caplog):
    factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=False))

    with caplog.at_level("WARNING"):
        client = factory.create_async_client()

    assert isinstance(client, httpx.AsyncClient)
    assert "TLS verification disabled" in caplog.text
    await client.aclose()


@pytest.mark.asyncio
async def test_client_ignores_proxy_environment(monkeypatch):
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.invalid:3128")

    client = HttpClientFactory(BaseAppConfig()).create_async_client(base_url="https://api.example.com")

    assert client._trust_env is False
    assert client.base_url.host == "api.example.com"
    await client.aclose()


@pytest.mark.asyncio
async def test_explicit_arguments_override_defaults():
    client = HttpClientFactory(BaseAppConfig()).create_async_client(trust_env=True, timeout=1.0)

    assert client._trust_env is True
    assert client.timeout.connect == 1.0
    await client.aclose()
