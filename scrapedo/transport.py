"""Transport layer: the single outbound HTTP primitive used by the client.

The core only depends on the ``Transport`` protocol::

    await transport.execute(method, url, headers, params, body) -> RawResponse

``HttpxTransport`` is the default implementation, built on
``httpx.AsyncClient``.

Resource lifecycle:
    - On ``__aenter__``: creates the ``httpx.AsyncClient`` (connection pool).
    - During calls: reuses the same client for every request.
    - On ``__aexit__``: closes the client.

Network failures are not wrapped: ``httpx.HTTPError`` subclasses propagate
to the caller unchanged. Non-2xx statuses are NOT errors at this layer;
classification happens in ``scrapedo.status``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

__all__ = ["RawResponse", "Transport", "HttpxTransport"]

logger = logging.getLogger(__name__)


class RawResponse(BaseModel):
    """Status, headers and body of a provider response, untouched."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Union[bytes, str] = b""


class Transport(Protocol):
    """Anything able to perform one HTTP request and return a RawResponse."""

    async def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Sequence[Tuple[str, str]],
        body: Union[bytes, str, None] = None,
    ) -> RawResponse: ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Usage::

        async with HttpxTransport(timeout=60) as transport:
            response = await transport.execute("GET", url, {}, [("token", t)])

    Attributes:
        timeout: Total request timeout in seconds.
        _client: The httpx.AsyncClient instance (created on enter, or injected).
    """

    def __init__(
        self,
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds for the owned client.
            client: Optional pre-built client. An injected client is not
                    closed on exit; its owner is responsible for it.
        """
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpxTransport:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        logger.debug("HttpxTransport opened (timeout=%.1fs)", self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        logger.debug("HttpxTransport closed")

    async def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Sequence[Tuple[str, str]],
        body: Union[bytes, str, None] = None,
    ) -> RawResponse:
        """Perform one HTTP request.

        Redirects are not followed; the provider handles redirection of the
        target itself.

        Raises:
            RuntimeError: If the transport is used outside its context manager.
            httpx.HTTPError: On network-level failures.
        """
        if self._client is None:
            raise RuntimeError(
                "HttpxTransport must be used as an async context manager: "
                "'async with HttpxTransport() as t: ...'"
            )

        query: List[Tuple[str, str]] = list(params)
        response = await self._client.request(
            method,
            url,
            headers=headers,
            params=query,
            content=body,
        )
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )
