"""Response normalizer: reshapes provider responses into one ScrapeResult.

Decision order for accepted responses (first match wins):

1. ``returnJSON`` requested and the body is a JSON object
   -> ``JsonScrapeResult`` with every decoded field spread in.
2. The body is a JSON object carrying ``Message``
   -> ``ErrorScrapeResult``, whatever the HTTP status.
3. Anything else -> ``RawScrapeResult`` with the body untouched.

Rejected responses go through ``normalize_rejected``: an error envelope
still becomes an ``ErrorScrapeResult``; anything else is raised as
``RejectedStatusError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Union

import httpx

from scrapedo.exceptions import RejectedStatusError
from scrapedo.models import (
    ErrorScrapeResult,
    JsonScrapeResult,
    ProviderMetadata,
    RawScrapeResult,
    ScrapeRequest,
    ScrapeResult,
)
from scrapedo.transport import RawResponse

__all__ = [
    "METADATA_HEADERS",
    "extract_metadata",
    "decode_json_body",
    "normalize",
    "normalize_rejected",
]

logger = logging.getLogger(__name__)

METADATA_HEADERS: Dict[str, str] = {
    "cookies": "Scrape.do-Cookies",
    "remaining_credits": "Scrape.do-Remaining-Credits",
    "request_cost": "Scrape.do-Request-Cost",
    "resolved_url": "Scrape.do-Resolved-Url",
    "target_url": "Scrape.do-Target-Url",
    "initial_status_code": "Scrape.do-Initial-Status-Code",
    "target_redirected_location": "Scrape.do-Target-Redirected-Location",
}
"""ProviderMetadata attribute -> response header name."""


def extract_metadata(headers: Mapping[str, str]) -> ProviderMetadata:
    """Read the ``Scrape.do-*`` headers into a ProviderMetadata.

    Header values may carry non-ASCII text forwarded from the target site.
    """
    lookup = httpx.Headers(dict(headers), encoding="utf-8")
    return ProviderMetadata(
        **{attr: lookup.get(name) for attr, name in METADATA_HEADERS.items()}
    )


def decode_json_body(body: Union[bytes, str, None]) -> Any:
    """Decode a response body as JSON, returning None when it is not JSON."""
    if not body:
        return None
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _error_result(
    envelope: Dict[str, Any],
    request: ScrapeRequest,
    status_code: int,
) -> ErrorScrapeResult:
    contact = envelope.get("Contact")
    declared_status = envelope.get("StatusCode")
    if isinstance(declared_status, int) and not isinstance(declared_status, bool):
        status_code = declared_status
    return ErrorScrapeResult(
        url=envelope.get("URL") or request.url,
        status_code=status_code,
        message=_as_list(envelope.get("Message")),
        possible_causes=_as_list(envelope.get("PossibleCauses")),
        contact=str(contact) if contact is not None else None,
    )


def _is_error_envelope(decoded: Any) -> bool:
    return isinstance(decoded, dict) and "Message" in decoded


def normalize(response: RawResponse, request: ScrapeRequest) -> ScrapeResult:
    """Normalize an accepted provider response.

    Never raises for well-formed RawResponse input.

    Args:
        response: The transport response (status already accepted).
        request: The request that produced it.

    Returns:
        A JsonScrapeResult, ErrorScrapeResult or RawScrapeResult.
    """
    metadata = extract_metadata(response.headers)
    decoded = decode_json_body(response.body)

    if request.return_json:
        if isinstance(decoded, dict):
            payload: Dict[str, Any] = dict(decoded)
            payload.update(
                kind="json",
                url=request.url,
                statusCode=response.status_code,
                metadata=metadata,
            )
            return JsonScrapeResult.model_validate(payload)
        logger.warning(
            "returnJSON requested for %s but the body is not a JSON object; "
            "returning raw content",
            request.url,
        )

    if _is_error_envelope(decoded):
        logger.warning(
            "Provider error envelope for %s (status %d): %s",
            request.url,
            response.status_code,
            decoded.get("Message"),
        )
        return _error_result(decoded, request, response.status_code)

    return RawScrapeResult(
        url=request.url,
        status_code=response.status_code,
        content=response.body,
        metadata=metadata,
    )


def normalize_rejected(
    response: RawResponse,
    request: ScrapeRequest,
) -> ErrorScrapeResult:
    """Handle a response whose status was rejected by the classifier.

    Returns:
        An ErrorScrapeResult if the body carries the provider's error envelope.

    Raises:
        RejectedStatusError: If the body is not an error envelope.
    """
    decoded = decode_json_body(response.body)
    if _is_error_envelope(decoded):
        logger.warning(
            "Rejected status %d for %s with error envelope: %s",
            response.status_code,
            request.url,
            decoded.get("Message"),
        )
        return _error_result(decoded, request, response.status_code)

    logger.warning("Rejected status %d for %s", response.status_code, request.url)
    raise RejectedStatusError(
        f"Request failed with status code {response.status_code}",
        status_code=response.status_code,
        url=request.url,
        body=response.body,
        headers=response.headers,
    )
