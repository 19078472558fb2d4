"""Unit tests for scrapedo.normalizer -- response shape normalization."""

import json

import pytest

from scrapedo.compiler import compile_request
from scrapedo.exceptions import RejectedStatusError
from scrapedo.models import (
    ErrorScrapeResult,
    JsonScrapeResult,
    RawScrapeResult,
    ScrapeRequest,
)
from scrapedo.normalizer import (
    decode_json_body,
    extract_metadata,
    normalize,
    normalize_rejected,
)
from scrapedo.status import accept
from scrapedo.transport import RawResponse

URL = "https://example.com/page"

ALL_METADATA_HEADERS = {
    "Scrape.do-Cookies": "a=1",
    "Scrape.do-Remaining-Credits": "9000",
    "Scrape.do-Request-Cost": "25",
    "Scrape.do-Resolved-Url": "https://example.com/page/",
    "Scrape.do-Target-Url": URL,
    "Scrape.do-Initial-Status-Code": "301",
    "Scrape.do-Target-Redirected-Location": "https://example.com/page/",
}


class TestMetadata:
    def test_all_headers_are_read(self):
        meta = extract_metadata(ALL_METADATA_HEADERS)
        assert meta.cookies == "a=1"
        assert meta.remaining_credits == "9000"
        assert meta.request_cost == "25"
        assert meta.resolved_url == "https://example.com/page/"
        assert meta.target_url == URL
        assert meta.initial_status_code == "301"
        assert meta.target_redirected_location == "https://example.com/page/"

    def test_missing_headers_are_none(self):
        meta = extract_metadata({"Content-Type": "text/html"})
        assert meta.model_dump() == {
            "cookies": None,
            "remaining_credits": None,
            "request_cost": None,
            "resolved_url": None,
            "target_url": None,
            "initial_status_code": None,
            "target_redirected_location": None,
        }

    def test_lowercased_header_names_match(self):
        meta = extract_metadata({"scrape.do-request-cost": "10"})
        assert meta.request_cost == "10"

    def test_non_ascii_header_values(self):
        meta = extract_metadata(
            {
                "Scrape.do-Cookies": "name=café",
                "Content-Disposition": 'attachment; filename="café.html"',
            }
        )
        assert meta.cookies == "name=café"

    def test_non_ascii_header_value_on_accepted_response(self):
        response = RawResponse(
            status_code=200,
            headers={"Scrape.do-Cookies": "name=café"},
            body=b"<html></html>",
        )
        result = normalize(response, ScrapeRequest(url=URL))
        assert isinstance(result, RawScrapeResult)
        assert result.metadata.cookies == "name=café"


class TestDecode:
    @pytest.mark.parametrize("body", [b"", "", None, b"<html></html>", b"\xff\xfe\x00garbage"])
    def test_non_json_bodies_decode_to_none(self, body):
        assert decode_json_body(body) is None

    def test_bytes_and_str_bodies(self):
        assert decode_json_body(b'{"a": 1}') == {"a": 1}
        assert decode_json_body('[1, 2]') == [1, 2]


class TestNormalize:
    def test_error_envelope_on_http_200(self):
        body = json.dumps({"Message": ["bad url"], "PossibleCauses": ["typo"]})
        result = normalize(RawResponse(status_code=200, body=body), ScrapeRequest(url=URL))

        assert isinstance(result, ErrorScrapeResult)
        assert result.kind == "error"
        assert result.success is False
        assert result.message == ["bad url"]
        assert result.possible_causes == ["typo"]
        assert result.contact is None
        assert result.status_code == 200
        assert result.url == URL

    def test_error_envelope_string_message_and_contact(self):
        body = json.dumps(
            {
                "URL": "https://other.example",
                "Message": "Invalid token",
                "Contact": "support@scrape.do",
            }
        )
        result = normalize(RawResponse(status_code=401, body=body), ScrapeRequest(url=URL))

        assert isinstance(result, ErrorScrapeResult)
        assert result.message == ["Invalid token"]
        assert result.possible_causes == []
        assert result.contact == "support@scrape.do"
        assert result.url == "https://other.example"
        assert result.status_code == 401

    def test_error_envelope_status_code_wins_over_http_status(self):
        body = json.dumps(
            {"URL": "https://other.example", "StatusCode": 404, "Message": ["x"]}
        )
        result = normalize(RawResponse(status_code=200, body=body), ScrapeRequest(url=URL))

        assert isinstance(result, ErrorScrapeResult)
        assert result.status_code == 404
        assert result.url == "https://other.example"

    @pytest.mark.parametrize("declared", ["404", None, True])
    def test_non_integer_envelope_status_code_is_ignored(self, declared):
        body = json.dumps({"StatusCode": declared, "Message": ["x"]})
        result = normalize(RawResponse(status_code=200, body=body), ScrapeRequest(url=URL))
        assert result.status_code == 200

    def test_return_json_spreads_decoded_fields(self):
        action_results = [{"action": "Wait", "success": True}]
        response = RawResponse(
            status_code=200,
            headers={"Scrape.do-Request-Cost": "5", "Scrape.do-Remaining-Credits": "100"},
            body=json.dumps({"actionResults": action_results}).encode(),
        )
        result = normalize(response, ScrapeRequest(url=URL, return_json=True))

        assert isinstance(result, JsonScrapeResult)
        assert result.kind == "json"
        assert result.action_results == action_results
        assert result.metadata.request_cost == "5"
        assert result.metadata.remaining_credits == "100"
        assert result.status_code == 200
        assert result.url == URL

    def test_return_json_keeps_unknown_fields(self):
        body = {
            "content": "<html></html>",
            "networkRequests": [{"url": "https://cdn.example/app.js"}],
            "screenShots": [{"type": "FullScreenShot", "image": "aGVsbG8=", "error": ""}],
            "frames": [{"name": "main"}],
        }
        result = normalize(
            RawResponse(status_code=200, body=json.dumps(body)),
            ScrapeRequest(url=URL, return_json=True),
        )

        assert result.content == "<html></html>"
        assert result.network_requests == body["networkRequests"]
        assert result.screen_shots == body["screenShots"]
        assert result.model_extra["frames"] == [{"name": "main"}]

    def test_return_json_keeps_known_fields_of_any_json_type(self):
        body = {
            "screenShots": {"type": "x"},
            "networkRequests": "none",
            "actionResults": 3,
            "websocketResponses": None,
        }
        result = normalize(
            RawResponse(status_code=200, body=json.dumps(body)),
            ScrapeRequest(url=URL, return_json=True),
        )

        assert isinstance(result, JsonScrapeResult)
        assert result.screen_shots == {"type": "x"}
        assert result.network_requests == "none"
        assert result.action_results == 3
        assert result.websocket_responses is None

    def test_return_json_with_non_json_body_falls_back_to_raw(self):
        result = normalize(
            RawResponse(status_code=200, body=b"<html></html>"),
            ScrapeRequest(url=URL, return_json=True),
        )
        assert isinstance(result, RawScrapeResult)
        assert result.content == b"<html></html>"

    def test_plain_body_is_raw(self):
        response = RawResponse(status_code=404, headers=ALL_METADATA_HEADERS, body="Not Found")
        result = normalize(response, ScrapeRequest(url=URL))

        assert isinstance(result, RawScrapeResult)
        assert result.success is True
        assert result.content == "Not Found"
        assert result.status_code == 404
        assert result.metadata.initial_status_code == "301"

    def test_json_body_without_message_is_raw(self):
        body = b'{"origin": "1.2.3.4"}'
        result = normalize(RawResponse(status_code=200, body=body), ScrapeRequest(url=URL))
        assert isinstance(result, RawScrapeResult)
        assert result.content == body

    def test_round_trip_plain_html(self, html_response):
        request = ScrapeRequest(url=URL)
        compile_request(request)
        assert accept(html_response.status_code, bool(request.transparent_response))

        result = normalize(html_response, request)

        assert isinstance(result, RawScrapeResult)
        assert result.content == html_response.body
        assert result.text == "<html><body>hello</body></html>"
        assert result.metadata.remaining_credits == "9990"


class TestNormalizeRejected:
    def test_rejected_without_envelope_raises(self):
        response = RawResponse(status_code=502, headers={"X-Trace": "t1"}, body=b"Bad Gateway")
        with pytest.raises(RejectedStatusError) as exc_info:
            normalize_rejected(response, ScrapeRequest(url=URL))

        err = exc_info.value
        assert err.status_code == 502
        assert err.body == b"Bad Gateway"
        assert err.headers == {"X-Trace": "t1"}
        assert err.url == URL
        assert "502" in str(err)

    def test_rejected_with_envelope_returns_error_result(self):
        body = json.dumps(
            {
                "Message": ["You have reached your concurrency limit"],
                "PossibleCauses": ["Too many parallel requests"],
                "Contact": "support@scrape.do",
            }
        )
        result = normalize_rejected(
            RawResponse(status_code=429, body=body), ScrapeRequest(url=URL)
        )

        assert isinstance(result, ErrorScrapeResult)
        assert result.status_code == 429
        assert result.message == ["You have reached your concurrency limit"]
        assert result.possible_causes == ["Too many parallel requests"]
