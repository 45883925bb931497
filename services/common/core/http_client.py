import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = httpx.Limits(max_keepalive_connections=20, max_connections=100)


class HttpClientFactory:
    """
    Builds the outbound httpx client used to reach a remote API backend.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Args:
            **kwargs: passed to httpx.AsyncClient; ``verify``, ``limits`` and
                ``trust_env`` fall back to the edge defaults when omitted
        """
        verify = kwargs.pop("verify", None)
        if verify is None:
            verify = self.config.VERIFY_SSL
        if not verify:
            logger.warning("TLS verification disabled for the API backend (VERIFY_SSL=False)")

        kwargs.setdefault("limits", DEFAULT_LIMITS)
        # Forwarded requests must not pick up host HTTP(S)_PROXY settings.
        kwargs.setdefault("trust_env", False)

        return httpx.AsyncClient(verify=verify, **kwargs)
