"""Exception hierarchy for the scrape.do client.

All exceptions inherit from ScrapeDoError, which inherits from Exception.
Callers can catch every client-raised error with a single
``except ScrapeDoError`` clause, or catch specific categories.

Hierarchy::

    ScrapeDoError
    +-- RequestContractError              -- caller misuse, raised before any network call
    |   +-- ConflictingHeaderDirectiveError -- setCookies combined with header directives
    |   +-- UnsupportedBodyForMethodError   -- body supplied to a GET request
    +-- RejectedStatusError               -- provider answered with a rejected status
    +-- ConfigError                       -- invalid client configuration

Network failures (DNS, connection resets, timeouts) are NOT wrapped: they
propagate as the transport's own exceptions (``httpx.HTTPError`` for the
default transport).
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

__all__ = [
    "ScrapeDoError",
    "RequestContractError",
    "ConflictingHeaderDirectiveError",
    "UnsupportedBodyForMethodError",
    "RejectedStatusError",
    "ConfigError",
]


class ScrapeDoError(Exception):
    """Base exception for all scrape.do client errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (URL, status code, etc.).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class RequestContractError(ScrapeDoError):
    """Raised when a request description violates the client contract.

    These are programming errors on the caller's side. They are raised
    synchronously while compiling the request, so no network call is made
    and nothing is retried.
    """

    pass


class ConflictingHeaderDirectiveError(RequestContractError):
    """Raised when ``setCookies`` is combined with any header directive.

    The provider treats cookies and custom/extra/forwarded headers as
    mutually exclusive ways to shape the outbound request.
    """

    def __init__(
        self,
        message: str = "setCookies cannot be used with customHeaders, extraHeaders or forwardHeaders",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)


class UnsupportedBodyForMethodError(RequestContractError):
    """Raised when a request body is supplied for a GET request."""

    def __init__(
        self,
        message: str = "GET method does not support body",
        method: str | None = None,
        details: dict | None = None,
    ) -> None:
        combined = dict(details or {})
        if method is not None:
            combined["method"] = method
        super().__init__(message, combined)
        self.method = method


class RejectedStatusError(ScrapeDoError):
    """Raised when the provider answers with a status the client does not accept.

    Only raised when the response body does NOT carry the provider's error
    envelope (a ``Message`` field); envelopes are turned into
    ``ErrorScrapeResult`` values instead.

    Examples:
        - 502 / 503 / 504 gateway failures
        - 429 when the concurrency limit of the subscription is exceeded
        - 403 with an empty or non-JSON body
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        url: str | None = None,
        body: Union[bytes, str, None] = None,
        headers: Optional[Mapping[str, str]] = None,
        details: dict | None = None,
    ) -> None:
        combined = dict(details or {})
        combined["status_code"] = status_code
        if url is not None:
            combined["url"] = url
        super().__init__(message, combined)
        self.status_code = status_code
        self.url = url
        self.body = body
        self.headers = dict(headers or {})


class ConfigError(ScrapeDoError):
    """Raised when the client configuration is invalid.

    Examples:
        - No API token passed and ``SCRAPEDO_TOKEN`` is not set
        - Unknown keyword passed to ``load_config()``
    """

    pass
