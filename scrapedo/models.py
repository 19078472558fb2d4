"""Pydantic data models for the scrape.do client.

This module defines the core data structures used throughout the library:

- **ScrapeRequest**: Immutable description of one scrape call.
- **HeaderDirective**: Tagged variant resolving the mutually exclusive
  header/cookie fields of a request.
- **BrowserAction**: Discriminated union of the scripted browser steps the
  provider's renderer can execute (``playWithBrowser``).
- **CompiledCall**: The outbound method, headers, query parameters and body.
- **ScrapeResult**: Discriminated union of the three normalized response shapes.
- **ProviderMetadata**: Side-channel values read from ``Scrape.do-*`` headers.
- **StatisticsResponse**: Subscription usage returned by ``/info``.
- **ClientConfig**: Client configuration (token, base URL, timeouts).

Python attribute names are snake_case; every model that talks to the
provider carries the provider's parameter name as the field alias and
accepts either spelling on input.
"""

from __future__ import annotations

import os
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_pascal

from scrapedo.exceptions import ConflictingHeaderDirectiveError
from scrapedo.geocodes import RegionalGeoCode, is_geo_code

__all__ = [
    "DEFAULT_BASE_URL",
    "TOKEN_ENV_VAR",
    "ScrapeRequest",
    "NoHeaderOverride",
    "HeaderOverride",
    "CookieOverride",
    "HeaderDirective",
    "WaitSelectorAction",
    "WaitAction",
    "ClickAction",
    "ScrollXAction",
    "ScrollYAction",
    "ScrollToAction",
    "FillAction",
    "ExecuteAction",
    "ScreenShotAction",
    "BrowserAction",
    "BrowserScript",
    "CompiledCall",
    "ProviderMetadata",
    "RawScrapeResult",
    "JsonScrapeResult",
    "ErrorScrapeResult",
    "ScrapeResult",
    "StatisticsResponse",
    "ClientConfig",
]

DEFAULT_BASE_URL: str = "https://api.scrape.do"
"""Root of the scrape.do API."""

TOKEN_ENV_VAR: str = "SCRAPEDO_TOKEN"
"""Environment variable consulted when no token is passed explicitly."""


# ---------------------------------------------------------------------------
# Browser actions (playWithBrowser)
# ---------------------------------------------------------------------------


class _BrowserActionBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class WaitSelectorAction(_BrowserActionBase):
    """Wait until ``wait_selector`` matches an element, up to ``timeout`` ms."""

    action: Literal["WaitSelector"] = Field(default="WaitSelector", alias="Action")
    wait_selector: str = Field(..., min_length=1, alias="WaitSelector")
    timeout: Optional[int] = Field(default=None, ge=0, alias="Timeout")


class WaitAction(_BrowserActionBase):
    """Pause the browser for ``timeout`` milliseconds."""

    action: Literal["Wait"] = Field(default="Wait", alias="Action")
    timeout: int = Field(..., ge=0, alias="Timeout")


class ClickAction(_BrowserActionBase):
    action: Literal["Click"] = Field(default="Click", alias="Action")
    selector: str = Field(..., min_length=1, alias="Selector")


class _ScrollAction(_BrowserActionBase):
    action: str = Field(..., alias="Action")
    selector: Optional[str] = Field(default=None, alias="Selector")
    value: Union[int, float] = Field(..., alias="Value")


class ScrollXAction(_ScrollAction):
    """Scroll horizontally by ``value`` pixels."""

    action: Literal["ScrollX"] = Field(default="ScrollX", alias="Action")


class ScrollYAction(_ScrollAction):
    """Scroll vertically by ``value`` pixels."""

    action: Literal["ScrollY"] = Field(default="ScrollY", alias="Action")


class ScrollToAction(_ScrollAction):
    """Scroll to ``selector``, or to the absolute offset ``value``."""

    action: Literal["ScrollTo"] = Field(default="ScrollTo", alias="Action")


class FillAction(_BrowserActionBase):
    action: Literal["Fill"] = Field(default="Fill", alias="Action")
    selector: str = Field(..., min_length=1, alias="Selector")
    value: str = Field(..., alias="Value")


class ExecuteAction(_BrowserActionBase):
    """Evaluate a JavaScript snippet in the page."""

    action: Literal["Execute"] = Field(default="Execute", alias="Action")
    execute: str = Field(..., min_length=1, alias="Execute")


class ScreenShotAction(_BrowserActionBase):
    action: Literal["ScreenShot"] = Field(default="ScreenShot", alias="Action")
    full_screen_shot: Optional[Union[bool, str]] = Field(default=None, alias="fullScreenShot")
    particular_screen_shot: Optional[str] = Field(default=None, alias="particularScreenShot")


BrowserAction = Annotated[
    Union[
        WaitSelectorAction,
        WaitAction,
        ClickAction,
        ScrollXAction,
        ScrollYAction,
        ScrollToAction,
        FillAction,
        ExecuteAction,
        ScreenShotAction,
    ],
    Field(discriminator="action"),
]
"""One scripted browser step, tagged by its ``Action`` key."""

BrowserScript = List[BrowserAction]
"""An ordered sequence of browser actions, executed remotely in order."""


# ---------------------------------------------------------------------------
# Header directives
# ---------------------------------------------------------------------------


class NoHeaderOverride(BaseModel):
    """The request does not touch outbound headers or cookies."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class HeaderOverride(BaseModel):
    """Custom, extra and/or forwarded headers (any subset may be set).

    Attributes:
        custom: Headers replacing the provider's defaults.
        extra: Headers added on top of the provider's defaults. Keys are
               sent with the ``sd-`` prefix.
        forward: Headers forwarded to the target exactly as given.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["headers"] = "headers"
    custom: Optional[Dict[str, str]] = None
    extra: Optional[Dict[str, str]] = None
    forward: Optional[Dict[str, str]] = None


class CookieOverride(BaseModel):
    """Cookies to set on the target request; excludes every header directive."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["cookies"] = "cookies"
    cookies: Dict[str, str]


HeaderDirective = Annotated[
    Union[NoHeaderOverride, HeaderOverride, CookieOverride],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# ScrapeRequest
# ---------------------------------------------------------------------------


class ScrapeRequest(BaseModel):
    """Description of a single scrape call.

    Only ``url`` is required. Every other field maps one-to-one onto a
    provider parameter of the same (camelCase) name and is omitted from the
    outbound call when left as ``None``.

    The header family (``custom_headers``, ``extra_headers``,
    ``forward_headers``) and ``set_cookies`` are mutually exclusive; use
    ``header_directive()`` to resolve them into a single variant.

    Examples:
        >>> ScrapeRequest(url="https://httpbin.co/anything", render=True)
        >>> ScrapeRequest.model_validate({"url": "https://example.com", "geoCode": "us"})
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    url: str = Field(..., min_length=1, description="Target URL to scrape")

    # Header directives
    custom_headers: Optional[Dict[str, str]] = None
    extra_headers: Optional[Dict[str, str]] = None
    forward_headers: Optional[Dict[str, str]] = None
    set_cookies: Optional[Dict[str, str]] = None

    # Proxy directives
    super_proxy: Optional[bool] = Field(default=None, alias="super")
    geo_code: Optional[str] = None
    regional_geo_code: Optional[RegionalGeoCode] = None
    session_id: Optional[str] = None

    # Render directives
    render: Optional[bool] = None
    wait_until: Optional[
        Literal["load", "domcontentloaded", "networkidle0", "networkidle2"]
    ] = None
    custom_wait: Optional[int] = Field(default=None, ge=0)
    wait_selector: Optional[str] = None
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    block_resources: Optional[bool] = None
    screen_shot: Optional[bool] = None
    full_screen_shot: Optional[bool] = None
    particular_screen_shot: Optional[str] = None
    play_with_browser: Optional[BrowserScript] = None
    return_json: Optional[bool] = Field(default=None, alias="returnJSON")

    # Transport directives
    disable_redirection: Optional[bool] = None
    callback: Optional[str] = None
    timeout: Optional[int] = Field(default=None, gt=0, description="Provider timeout in ms")
    retry_timeout: Optional[int] = Field(default=None, gt=0)
    disable_retry: Optional[bool] = None
    device: Optional[Literal["Desktop", "Mobile"]] = None
    output: Optional[Literal["raw", "markdown"]] = None
    transparent_response: Optional[bool] = None

    @field_validator("geo_code")
    @classmethod
    def validate_geo_code(cls, v: Optional[str]) -> Optional[str]:
        """Validate the country code against the provider's supported list."""
        if v is None:
            return v
        code = v.lower()
        if not is_geo_code(code):
            raise ValueError(f"Unsupported geoCode '{v}'")
        return code

    def header_directive(self) -> HeaderDirective:
        """Resolve the header and cookie fields into one HeaderDirective.

        A mapping counts as set whenever it is not None, even when empty.

        Raises:
            ConflictingHeaderDirectiveError: If ``set_cookies`` is combined
                with any of the header mappings.
        """
        has_headers = any(
            h is not None
            for h in (self.custom_headers, self.extra_headers, self.forward_headers)
        )
        if self.set_cookies is not None:
            if has_headers:
                raise ConflictingHeaderDirectiveError(details={"url": self.url})
            return CookieOverride(cookies=self.set_cookies)
        if has_headers:
            return HeaderOverride(
                custom=self.custom_headers,
                extra=self.extra_headers,
                forward=self.forward_headers,
            )
        return NoHeaderOverride()


# ---------------------------------------------------------------------------
# CompiledCall
# ---------------------------------------------------------------------------


class CompiledCall(BaseModel):
    """Outbound HTTP call derived from a ScrapeRequest.

    Attributes:
        method: Upper-case HTTP method.
        headers: Merged outbound headers.
        params: Ordered query parameter pairs. List values appear as
                repeated keys.
        body: Serialized request body, or None.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    headers: Dict[str, str] = Field(default_factory=dict)
    params: List[Tuple[str, str]] = Field(default_factory=list)
    body: Union[bytes, str, None] = None


# ---------------------------------------------------------------------------
# Normalized results
# ---------------------------------------------------------------------------


class ProviderMetadata(BaseModel):
    """Billing, redirect and cookie information from ``Scrape.do-*`` headers.

    Every attribute is the raw header string, or None when the provider did
    not send the header.
    """

    model_config = ConfigDict(frozen=True)

    cookies: Optional[str] = None
    remaining_credits: Optional[str] = None
    request_cost: Optional[str] = None
    resolved_url: Optional[str] = None
    target_url: Optional[str] = None
    initial_status_code: Optional[str] = None
    target_redirected_location: Optional[str] = None


class _ResultBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    url: str = Field(..., description="URL of the scraped target")
    status_code: int = Field(..., description="HTTP status returned by the provider")


class RawScrapeResult(_ResultBase):
    """Successful scrape; ``content`` is the response body exactly as received."""

    kind: Literal["raw"] = "raw"
    content: Union[bytes, str] = Field(..., description="Opaque response body")
    metadata: ProviderMetadata = Field(default_factory=ProviderMetadata)

    @property
    def success(self) -> bool:
        return True

    @property
    def text(self) -> str:
        """Return the content decoded as UTF-8 (undecodable bytes replaced)."""
        if isinstance(self.content, bytes):
            return self.content.decode("utf-8", errors="replace")
        return self.content


class JsonScrapeResult(_ResultBase):
    """Successful ``returnJSON`` scrape.

    Known provider fields are exposed as attributes holding the decoded
    JSON value as-is. Any other top-level field of the decoded body is kept
    verbatim as a model extra (see ``model_extra``).
    """

    model_config = ConfigDict(extra="allow")

    kind: Literal["json"] = "json"
    metadata: ProviderMetadata = Field(default_factory=ProviderMetadata)
    content: Any = None
    network_requests: Any = None
    websocket_responses: Any = None
    action_results: Any = None
    screen_shots: Any = None

    @property
    def success(self) -> bool:
        return True


class ErrorScrapeResult(_ResultBase):
    """Error envelope declared by the provider in the response body.

    Returned, not raised: a provider-declared error is an expected outcome.
    """

    kind: Literal["error"] = "error"
    message: List[str] = Field(default_factory=list)
    possible_causes: List[str] = Field(default_factory=list)
    contact: Optional[str] = None

    @property
    def success(self) -> bool:
        return False


ScrapeResult = Annotated[
    Union[RawScrapeResult, JsonScrapeResult, ErrorScrapeResult],
    Field(discriminator="kind"),
]
"""Exactly one of the three normalized response shapes."""


# ---------------------------------------------------------------------------
# StatisticsResponse
# ---------------------------------------------------------------------------


class StatisticsResponse(BaseModel):
    """Subscription usage as reported by ``GET /info``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_pascal)

    is_active: bool
    concurrent_request: int
    max_monthly_request: int
    remaining_concurrent_request: int
    remaining_monthly_request: int


# ---------------------------------------------------------------------------
# ClientConfig
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Configuration for the scrape.do client.

    The token is loaded from ``SCRAPEDO_TOKEN`` when not provided
    explicitly. A missing token is only reported (as ``ConfigError``) when
    the client is actually used.

    Attributes:
        token: API token, sent as the ``token`` query parameter on every call.
        base_url: Root URL of the API.
        request_timeout: Transport-level timeout in seconds. Independent of
                         the provider's own ``timeout`` request parameter.
        verbose: Set the ``scrapedo`` loggers to DEBUG when the client is created.
    """

    model_config = ConfigDict(validate_default=True)

    token: Optional[str] = Field(
        default=None,
        description="scrape.do API token; falls back to SCRAPEDO_TOKEN",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=1,
        description="Root URL of the scrape.do API",
    )
    request_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Transport timeout in seconds",
    )
    verbose: bool = Field(
        default=False,
        description="Enable DEBUG logging",
    )

    @field_validator("token", mode="before")
    @classmethod
    def load_token_from_env(cls, v: Optional[str]) -> Optional[str]:
        """If no token was provided, read it from ``SCRAPEDO_TOKEN``."""
        if v:
            return v
        return os.environ.get(TOKEN_ENV_VAR) or None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
