"""Shared fixtures: an in-memory transport recording every call."""

from typing import Any, Dict, List

import pytest

from scrapedo.transport import RawResponse


class FakeTransport:
    """Transport that returns a canned RawResponse and records calls."""

    def __init__(self, response: RawResponse):
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    async def execute(self, method, url, headers, params, body=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers),
                "params": list(params),
                "body": body,
            }
        )
        return self.response


@pytest.fixture
def html_response() -> RawResponse:
    return RawResponse(
        status_code=200,
        headers={
            "Content-Type": "text/html",
            "Scrape.do-Remaining-Credits": "9990",
            "Scrape.do-Request-Cost": "1",
        },
        body=b"<html><body>hello</body></html>",
    )


@pytest.fixture
def fake_transport(html_response) -> FakeTransport:
    return FakeTransport(html_response)


@pytest.fixture(autouse=True)
def _no_env_token(monkeypatch):
    monkeypatch.delenv("SCRAPEDO_TOKEN", raising=False)
