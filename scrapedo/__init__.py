"""scrapedo -- An async client for the scrape.do web scraping API.

Quick start::

    from scrapedo import ScrapeDo, ScrapeRequest, WaitSelectorAction

    async with ScrapeDo("API_TOKEN") as client:
        result = await client.send_request(
            "GET",
            ScrapeRequest(
                url="https://httpbin.co/anything",
                render=True,
                play_with_browser=[WaitSelectorAction(wait_selector="body")],
            ),
        )

    # Sync usage (simple scripts)
    from scrapedo import scrape_sync
    result = scrape_sync({"url": "https://example.com"}, token="API_TOKEN")

Every call returns exactly one of three result shapes, discriminated by
``result.kind``:

- ``"raw"``: ``RawScrapeResult`` with the body as received.
- ``"json"``: ``JsonScrapeResult`` for ``returnJSON`` requests.
- ``"error"``: ``ErrorScrapeResult`` when the provider returns an error envelope.
"""

from scrapedo.api import ScrapeDo, scrape_sync
from scrapedo.compiler import compile_request
from scrapedo.config import load_config
from scrapedo.exceptions import (
    ConfigError,
    ConflictingHeaderDirectiveError,
    RejectedStatusError,
    RequestContractError,
    ScrapeDoError,
    UnsupportedBodyForMethodError,
)
from scrapedo.models import (
    BrowserAction,
    BrowserScript,
    ClickAction,
    ClientConfig,
    CompiledCall,
    CookieOverride,
    ErrorScrapeResult,
    ExecuteAction,
    FillAction,
    HeaderOverride,
    JsonScrapeResult,
    NoHeaderOverride,
    ProviderMetadata,
    RawScrapeResult,
    ScrapeRequest,
    ScrapeResult,
    ScreenShotAction,
    ScrollToAction,
    ScrollXAction,
    ScrollYAction,
    StatisticsResponse,
    WaitAction,
    WaitSelectorAction,
)
from scrapedo.normalizer import normalize
from scrapedo.status import accept
from scrapedo.transport import HttpxTransport, RawResponse, Transport

__all__ = [
    # Primary API
    "ScrapeDo",
    "scrape_sync",
    # Pipeline stages
    "compile_request",
    "accept",
    "normalize",
    # Request models
    "ScrapeRequest",
    "NoHeaderOverride",
    "HeaderOverride",
    "CookieOverride",
    "BrowserAction",
    "BrowserScript",
    "WaitSelectorAction",
    "WaitAction",
    "ClickAction",
    "ScrollXAction",
    "ScrollYAction",
    "ScrollToAction",
    "FillAction",
    "ExecuteAction",
    "ScreenShotAction",
    "CompiledCall",
    # Result models
    "ScrapeResult",
    "RawScrapeResult",
    "JsonScrapeResult",
    "ErrorScrapeResult",
    "ProviderMetadata",
    "StatisticsResponse",
    # Transport
    "Transport",
    "HttpxTransport",
    "RawResponse",
    # Config
    "ClientConfig",
    "load_config",
    # Exceptions
    "ScrapeDoError",
    "RequestContractError",
    "ConflictingHeaderDirectiveError",
    "UnsupportedBodyForMethodError",
    "RejectedStatusError",
    "ConfigError",
]

__version__ = "0.1.0"
