"""
Small async client for the API behind the edge router.

Used by callers of the HTTP surface (the site, smoke checks) to ping the
function and echo payloads, reporting round-trip latency.
"""

import logging
import time
from typing import Any, Dict

import httpx

logger = logging.getLogger("edge.client")

NO_STORE = {"cache-control": "no-store"}


class ApiClient:
    def __init__(self, client: httpx.AsyncClient, api_prefix: str = "/api"):
        """
        Args:
            client: httpx.AsyncClient whose base_url points at the edge router
            api_prefix: path prefix routed to the function
        """
        self.client = client
        self.api_prefix = "/" + api_prefix.strip("/")

    async def _call(self, method: str, name: str, **kwargs: Any) -> Dict[str, Any]:
        start = time.perf_counter()
        response = await self.client.request(
            method, f"{self.api_prefix}/{name}", headers=NO_STORE, **kwargs
        )
        latency_ms = round((time.perf_counter() - start) * 1000)
        response.raise_for_status()

        data = response.json()
        data["latency_ms"] = latency_ms
        logger.debug(f"{method} {name} took {latency_ms}ms", extra={"status": response.status_code})
        return data

    async def ping(self) -> Dict[str, Any]:
        """GET <prefix>/ping."""
        return await self._call("GET", "ping")

    async def echo(self, body: Any) -> Dict[str, Any]:
        """POST <prefix>/echo with a JSON body."""
        return await self._call("POST", "echo", json=body)
