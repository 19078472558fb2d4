"""Public API for the scrape.do client.

This module provides the primary interface that users interact with:

- **ScrapeDo**: The main client class, used as an async context manager.
- **scrape_sync()**: Synchronous wrapper for simple single-request scripts.

Usage::

    from scrapedo import ScrapeDo, ScrapeRequest

    async with ScrapeDo("API_TOKEN") as client:
        result = await client.send_request(
            "GET",
            ScrapeRequest(url="https://httpbin.co/anything", render=True),
        )
        if result.kind == "error":
            print(result.message)
        else:
            print(result.status_code, result.metadata.remaining_credits)

        stats = await client.statistics()
        print(stats.remaining_monthly_request)

Each call compiles the request, performs exactly one HTTP call, classifies
the status and normalizes the response. Nothing is cached or retried
locally; retries are a provider-side behavior controlled by
``disable_retry`` / ``retry_timeout``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from scrapedo.compiler import compile_request
from scrapedo.config import load_config, require_token
from scrapedo.exceptions import RejectedStatusError
from scrapedo.models import ClientConfig, ScrapeRequest, ScrapeResult, StatisticsResponse
from scrapedo.normalizer import decode_json_body, normalize, normalize_rejected
from scrapedo.status import accept
from scrapedo.transport import HttpxTransport, Transport

__all__ = [
    "ScrapeDo",
    "scrape_sync",
]

logger = logging.getLogger(__name__)


class ScrapeDo:
    """Client for the scrape.do API.

    Must be used as an async context manager so the underlying HTTP
    connection pool is opened and closed properly.

    Args:
        token: API token. Falls back to ``SCRAPEDO_TOKEN`` when omitted.
        transport: Optional Transport to use instead of the default
                   ``HttpxTransport``. An injected transport is not opened
                   or closed by the client.
        **config_kwargs: Additional configuration passed to ``ClientConfig``
                         (``base_url``, ``request_timeout``, ``verbose``).

    Examples:
        >>> async with ScrapeDo("API_TOKEN") as client:
        ...     result = await client.scrape("https://example.com", super_proxy=True)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        **config_kwargs: Any,
    ) -> None:
        if token is not None:
            config_kwargs["token"] = token
        self._config = load_config(**config_kwargs)
        if self._config.verbose:
            logging.getLogger("scrapedo").setLevel(logging.DEBUG)
        self._injected_transport = transport
        self._transport: Optional[Transport] = None
        self._owned_transport: Optional[HttpxTransport] = None
        self._entered = False

    @property
    def config(self) -> ClientConfig:
        """Return the current client configuration (read-only)."""
        return self._config

    async def __aenter__(self) -> ScrapeDo:
        if self._injected_transport is not None:
            self._transport = self._injected_transport
        else:
            self._owned_transport = HttpxTransport(timeout=self._config.request_timeout)
            await self._owned_transport.__aenter__()
            self._transport = self._owned_transport

        self._entered = True
        logger.info("ScrapeDo client started (base_url=%s)", self._config.base_url)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_transport = None
        self._transport = None
        self._entered = False
        logger.info("ScrapeDo client shut down")

    def _ensure_entered(self) -> Transport:
        """Ensure the context manager has been entered.

        Returns:
            The active transport.

        Raises:
            RuntimeError: If the client is used outside a context manager.
        """
        if not self._entered or self._transport is None:
            raise RuntimeError(
                "ScrapeDo must be used as an async context manager: "
                "'async with ScrapeDo(token) as client: ...'"
            )
        return self._transport

    # -------------------------------------------------------------------
    # Scraping
    # -------------------------------------------------------------------

    async def send_request(
        self,
        method: str,
        request: Union[ScrapeRequest, Mapping[str, Any]],
        body: Optional[Any] = None,
    ) -> ScrapeResult:
        """Send one scrape request to the provider.

        Args:
            method: HTTP method to use against the provider (GET, POST, PUT, ...).
            request: A ScrapeRequest, or a mapping validated into one
                     (provider or snake_case keys).
            body: Optional body for non-GET methods.

        Returns:
            A RawScrapeResult, JsonScrapeResult or ErrorScrapeResult.

        Raises:
            ConflictingHeaderDirectiveError: ``set_cookies`` combined with headers.
            UnsupportedBodyForMethodError: Body supplied to a GET request.
            ConfigError: No API token configured.
            RejectedStatusError: Rejected status without an error envelope.
            httpx.HTTPError: Network-level failure of the default transport.
            RuntimeError: If the client is not in a context manager.
        """
        if not isinstance(request, ScrapeRequest):
            request = ScrapeRequest.model_validate(request)

        call = compile_request(request, method, body)
        token = require_token(self._config)
        transport = self._ensure_entered()

        response = await transport.execute(
            call.method,
            f"{self._config.base_url}/",
            call.headers,
            [("token", token), *call.params],
            call.body,
        )

        if not accept(response.status_code, bool(request.transparent_response)):
            return normalize_rejected(response, request)

        logger.debug("Accepted status %d for %s", response.status_code, request.url)
        return normalize(response, request)

    async def scrape(self, url: str, **options: Any) -> ScrapeResult:
        """Shortcut for a GET scrape of ``url`` with ScrapeRequest options.

        Examples:
            >>> result = await client.scrape("https://example.com", render=True, geo_code="us")
        """
        return await self.send_request("GET", ScrapeRequest(url=url, **options))

    # -------------------------------------------------------------------
    # Subscription statistics
    # -------------------------------------------------------------------

    async def statistics(self) -> StatisticsResponse:
        """Return the usage statistics of the subscription.

        Raises:
            ConfigError: No API token configured.
            RejectedStatusError: The provider did not answer with a 2xx status.
        """
        token = require_token(self._config)
        transport = self._ensure_entered()
        url = f"{self._config.base_url}/info"

        response = await transport.execute("GET", url, {}, [("token", token)], None)
        if not 200 <= response.status_code < 300:
            raise RejectedStatusError(
                f"Statistics request failed with status code {response.status_code}",
                status_code=response.status_code,
                url=url,
                body=response.body,
                headers=response.headers,
            )

        return StatisticsResponse.model_validate(decode_json_body(response.body))


# ---------------------------------------------------------------------------
# Module-level sync helper
# ---------------------------------------------------------------------------


def scrape_sync(
    request: Union[ScrapeRequest, Mapping[str, Any]],
    method: str = "GET",
    body: Optional[Any] = None,
    **config_kwargs: Any,
) -> ScrapeResult:
    """Synchronous convenience function for a single scrape.

    Creates a client, sends one request and returns the result. For many
    requests, use the async ``ScrapeDo`` class so the connection pool is
    reused.

    Args:
        request: A ScrapeRequest or a mapping validated into one.
        method: HTTP method against the provider.
        body: Optional body for non-GET methods.
        **config_kwargs: Passed to ClientConfig (``token``, ``base_url``, ...).

    Examples:
        >>> from scrapedo import scrape_sync
        >>> result = scrape_sync({"url": "https://example.com"}, token="API_TOKEN")
        >>> print(result.status_code)
    """

    async def _run() -> ScrapeResult:
        async with ScrapeDo(**config_kwargs) as client:
            return await client.send_request(method, request, body)

    return asyncio.run(_run())
