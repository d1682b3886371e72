"""
HTTP transport interfaces for push delivery.

This module provides the abstract base class the delivery code posts
through, plus an implementation on top of ``httpx``. Implementations can use
any HTTP client; their responses and exceptions reach the caller unchanged.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class PushTransport(ABC):
    """Abstract interface for sending a push request."""

    @abstractmethod
    async def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> Any:
        """
        POST an encrypted record to a push endpoint.

        Exactly one attempt is made; retries are the caller's concern.

        Args:
            url: Subscription endpoint
            body: Encrypted record
            headers: Request headers

        Returns:
            The client's response object
        """
        pass


class HttpxTransport(PushTransport):
    """
    PushTransport backed by ``httpx.AsyncClient``.

    Example usage:
        ```python
        async with HttpxTransport() as transport:
            config = PushConfig(client=transport, ...)
            response = await send(b"hello", subscription, config)
        ```
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the transport.

        Args:
            client: Existing client to use. When omitted a client is created
                and closed by ``aclose``.
            timeout: Timeout in seconds for a created client.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> httpx.Response:
        response = await self._client.post(url, content=body, headers=dict(headers))
        logger.debug("Push service responded %s for %s", response.status_code, response.request.url.host)
        return response

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
