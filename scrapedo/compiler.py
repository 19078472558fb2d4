"""Request compiler: turns a ScrapeRequest into an outbound CompiledCall.

The compiler is a set of pure functions. It owns the parameter rules the
provider's parser depends on:

- **Header merge**: custom headers form the base layer, extra headers are
  added with the ``sd-`` prefix, forwarded headers override both.
- **Cookies**: ``setCookies`` is serialized as ``key=value;`` segments.
- **Browser script**: ``playWithBrowser`` is serialized to a compact JSON
  array string.
- **Presence markers**: the three header mappings are replaced by ``true``
  in the parameter set; their values only travel as headers.
- **Parameter encoding**: booleans render as ``true``/``false`` and lists
  as repeated keys (no bracketed indices).

Contract violations (cookies combined with headers, a body on GET) raise
before anything is sent.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter

from scrapedo.exceptions import UnsupportedBodyForMethodError
from scrapedo.models import (
    BrowserScript,
    CompiledCall,
    CookieOverride,
    HeaderOverride,
    ScrapeRequest,
)

__all__ = [
    "EXTRA_HEADER_PREFIX",
    "compile_request",
    "merge_headers",
    "serialize_cookies",
    "serialize_browser_script",
    "encode_params",
]

logger = logging.getLogger(__name__)

EXTRA_HEADER_PREFIX: str = "sd-"
"""Prefix the provider uses to recognize extra headers."""

_HEADER_FIELDS: Tuple[str, ...] = ("custom_headers", "extra_headers", "forward_headers")
_SERIALIZED_FIELDS: Tuple[str, ...] = ("set_cookies", "play_with_browser")

_browser_script_adapter: TypeAdapter[BrowserScript] = TypeAdapter(BrowserScript)


def merge_headers(directive: HeaderOverride) -> Dict[str, str]:
    """Merge the three header layers of a HeaderOverride.

    Later layers win on key collisions: custom, then extra, then forward.
    Extra header keys get the ``sd-`` prefix unless they already have it.

    Examples:
        >>> merge_headers(HeaderOverride(extra={"foo": "bar"}))
        {'sd-foo': 'bar'}
        >>> merge_headers(HeaderOverride(custom={"X": "1"}, forward={"X": "3"}))
        {'X': '3'}
    """
    headers: Dict[str, str] = {}

    if directive.custom is not None:
        headers.update(directive.custom)

    if directive.extra is not None:
        for key, value in directive.extra.items():
            if key.startswith(EXTRA_HEADER_PREFIX):
                headers[key] = value
            else:
                headers[f"{EXTRA_HEADER_PREFIX}{key}"] = value

    if directive.forward is not None:
        headers.update(directive.forward)

    return headers


def serialize_cookies(cookies: Mapping[str, str]) -> str:
    """Serialize cookies in the mapping's iteration order.

    Every segment, including the last, ends with a semicolon.

    Examples:
        >>> serialize_cookies({"A": "1", "B": "2"})
        'A=1;B=2;'
    """
    return "".join(f"{key}={value};" for key, value in cookies.items())


def serialize_browser_script(script: BrowserScript) -> str:
    """Serialize a browser script to the provider's JSON array form.

    Keys use the provider's names, each object starts with ``Action`` and
    unset optional fields are left out.
    """
    return _browser_script_adapter.dump_json(
        script, by_alias=True, exclude_none=True
    ).decode("utf-8")


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def encode_params(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Flatten a parameter mapping into ordered query pairs.

    List values become repeated keys (``k=a&k=b``) rather than ``k[0]=a``.
    None values are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _param_value(item)) for item in value)
        else:
            pairs.append((key, _param_value(value)))
    return pairs


def _serialize_body(
    body: Any,
    headers: Dict[str, str],
) -> Union[bytes, str, None]:
    if body is None or isinstance(body, (bytes, str)):
        return body
    if not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = "application/json"
    return json.dumps(body)


def compile_request(
    request: ScrapeRequest,
    method: str = "GET",
    body: Optional[Any] = None,
) -> CompiledCall:
    """Compile a ScrapeRequest into the outbound call.

    Args:
        request: The scrape description.
        method: HTTP method used against the provider (case-insensitive).
        body: Optional request body for non-GET methods. ``bytes`` and
              ``str`` are sent as-is; anything else is JSON-encoded.

    Returns:
        A CompiledCall with merged headers, encoded query parameters and the
        serialized body. The ``token`` parameter is NOT included; the client
        adds it.

    Raises:
        ConflictingHeaderDirectiveError: If ``set_cookies`` is combined with
            header directives.
        UnsupportedBodyForMethodError: If ``method`` is GET and ``body`` is
            non-empty.
    """
    directive = request.header_directive()

    method = method.upper()
    if method == "GET" and body:
        raise UnsupportedBodyForMethodError(method=method, details={"url": request.url})

    headers: Dict[str, str] = {}
    if isinstance(directive, HeaderOverride):
        headers = merge_headers(directive)

    params: Dict[str, Any] = request.model_dump(
        mode="json",
        by_alias=True,
        exclude_none=True,
        exclude=set(_HEADER_FIELDS + _SERIALIZED_FIELDS),
    )

    # Header values travel in the header channel only.
    if request.custom_headers is not None:
        params["customHeaders"] = True
    if request.extra_headers is not None:
        params["extraHeaders"] = True
    if request.forward_headers is not None:
        params["forwardHeaders"] = True

    if isinstance(directive, CookieOverride):
        params["setCookies"] = serialize_cookies(directive.cookies)

    if request.play_with_browser is not None:
        params["playWithBrowser"] = serialize_browser_script(request.play_with_browser)

    serialized_body = _serialize_body(body, headers)

    logger.debug(
        "Compiled %s call for %s (%d header(s), directive=%s)",
        method,
        request.url,
        len(headers),
        directive.kind,
    )

    return CompiledCall(
        method=method,
        headers=headers,
        params=encode_params(params),
        body=serialized_body,
    )
