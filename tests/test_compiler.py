"""Unit tests for scrapedo.compiler -- request parameter compilation."""

import json

import pytest

from scrapedo.compiler import (
    compile_request,
    encode_params,
    merge_headers,
    serialize_browser_script,
    serialize_cookies,
)
from scrapedo.exceptions import (
    ConflictingHeaderDirectiveError,
    UnsupportedBodyForMethodError,
)
from scrapedo.models import (
    ClickAction,
    HeaderOverride,
    ScrapeRequest,
    ScrollYAction,
    WaitSelectorAction,
)

URL = "https://httpbin.co/anything"


class TestHeaderConflicts:
    @pytest.mark.parametrize("field", ["custom_headers", "extra_headers", "forward_headers"])
    def test_cookies_with_any_header_directive_fails(self, field):
        request = ScrapeRequest(url=URL, set_cookies={"A": "1"}, **{field: {"X": "1"}})
        with pytest.raises(ConflictingHeaderDirectiveError):
            compile_request(request)

    def test_empty_mappings_still_conflict(self):
        request = ScrapeRequest(url=URL, set_cookies={}, custom_headers={})
        with pytest.raises(ConflictingHeaderDirectiveError):
            compile_request(request)

    def test_conflict_message_names_fields(self):
        request = ScrapeRequest(url=URL, set_cookies={"A": "1"}, forward_headers={"X": "1"})
        with pytest.raises(ConflictingHeaderDirectiveError, match="setCookies cannot be used"):
            compile_request(request)


class TestMethodBody:
    @pytest.mark.parametrize("method", ["GET", "get"])
    def test_get_with_body_fails(self, method):
        with pytest.raises(UnsupportedBodyForMethodError):
            compile_request(ScrapeRequest(url=URL), method, body="payload")

    def test_get_with_empty_body_is_allowed(self):
        call = compile_request(ScrapeRequest(url=URL), "GET", body="")
        assert call.method == "GET"

    def test_post_string_body_is_sent_as_is(self):
        call = compile_request(ScrapeRequest(url=URL), "post", body="a=1&b=2")
        assert call.method == "POST"
        assert call.body == "a=1&b=2"
        assert call.headers == {}

    def test_post_dict_body_is_json_encoded(self):
        call = compile_request(ScrapeRequest(url=URL), "POST", body={"q": "shoes"})
        assert json.loads(call.body) == {"q": "shoes"}
        assert call.headers["Content-Type"] == "application/json"

    def test_existing_content_type_is_kept(self):
        request = ScrapeRequest(url=URL, forward_headers={"content-type": "application/vnd+json"})
        call = compile_request(request, "PUT", body=[1, 2])
        assert call.headers == {"content-type": "application/vnd+json"}


class TestHeaderMerge:
    def test_forward_wins_over_extra_and_custom(self):
        directive = HeaderOverride(custom={"X": "1"}, extra={"X": "2"}, forward={"X": "3"})
        merged = merge_headers(directive)
        assert merged["X"] == "3"

    def test_extra_headers_get_provider_prefix(self):
        assert merge_headers(HeaderOverride(extra={"foo": "bar"})) == {"sd-foo": "bar"}

    def test_prefixed_extra_headers_are_unchanged(self):
        assert merge_headers(HeaderOverride(extra={"sd-foo": "bar"})) == {"sd-foo": "bar"}

    def test_extra_overrides_custom_on_prefixed_key(self):
        directive = HeaderOverride(custom={"sd-foo": "custom"}, extra={"foo": "extra"})
        assert merge_headers(directive) == {"sd-foo": "extra"}

    def test_compiled_headers_for_all_three_layers(self):
        request = ScrapeRequest(
            url=URL,
            custom_headers={"X": "1", "User-Agent": "ua"},
            extra_headers={"X": "2"},
            forward_headers={"X": "3"},
        )
        call = compile_request(request)
        assert call.headers == {"X": "3", "User-Agent": "ua", "sd-X": "2"}

    def test_no_directive_means_no_headers(self):
        assert compile_request(ScrapeRequest(url=URL)).headers == {}


class TestCookies:
    def test_serialize_cookies(self):
        assert serialize_cookies({"A": "1", "B": "2"}) == "A=1;B=2;"

    def test_serialize_cookies_follows_insertion_order(self):
        assert serialize_cookies({"B": "2", "A": "1"}) == "B=2;A=1;"

    def test_empty_cookies(self):
        assert serialize_cookies({}) == ""

    def test_cookie_param_and_no_headers(self):
        call = compile_request(ScrapeRequest(url=URL, set_cookies={"session": "abc"}))
        assert dict(call.params)["setCookies"] == "session=abc;"
        assert call.headers == {}


class TestParams:
    def test_header_values_never_leak_into_params(self):
        request = ScrapeRequest(
            url=URL,
            custom_headers={"Authorization": "secret-1"},
            extra_headers={"Token": "secret-2"},
            forward_headers={"X-Key": "secret-3"},
        )
        call = compile_request(request)
        params = dict(call.params)
        assert params["customHeaders"] == "true"
        assert params["extraHeaders"] == "true"
        assert params["forwardHeaders"] == "true"
        assert not any(v.startswith("secret") for _, v in call.params)

    def test_markers_absent_without_headers(self):
        params = dict(compile_request(ScrapeRequest(url=URL)).params)
        assert "customHeaders" not in params
        assert "setCookies" not in params
        assert "playWithBrowser" not in params

    def test_provider_parameter_names(self):
        request = ScrapeRequest(
            url=URL,
            super_proxy=True,
            geo_code="US",
            return_json=True,
            render=False,
            wait_until="networkidle0",
            custom_wait=500,
            disable_retry=True,
            device="Mobile",
        )
        params = dict(compile_request(request).params)
        assert params == {
            "url": URL,
            "super": "true",
            "geoCode": "us",
            "render": "false",
            "waitUntil": "networkidle0",
            "customWait": "500",
            "returnJSON": "true",
            "disableRetry": "true",
            "device": "Mobile",
        }

    def test_url_is_first_param(self):
        call = compile_request(ScrapeRequest(url=URL, render=True))
        assert call.params[0] == ("url", URL)

    def test_lists_are_encoded_without_indices(self):
        pairs = encode_params({"a": ["x", "y"], "b": True, "c": None, "d": 3})
        assert pairs == [("a", "x"), ("a", "y"), ("b", "true"), ("d", "3")]


class TestBrowserScript:
    def test_wait_selector_serialization(self):
        request = ScrapeRequest.model_validate(
            {
                "url": URL,
                "render": True,
                "playWithBrowser": [{"Action": "WaitSelector", "WaitSelector": "body"}],
            }
        )
        params = dict(compile_request(request).params)
        assert params["playWithBrowser"] == '[{"Action":"WaitSelector","WaitSelector":"body"}]'

    def test_script_order_and_optional_fields(self):
        script = [
            WaitSelectorAction(wait_selector="#login", timeout=3000),
            ClickAction(selector="#login"),
            ScrollYAction(value=500),
        ]
        decoded = json.loads(serialize_browser_script(script))
        assert decoded == [
            {"Action": "WaitSelector", "WaitSelector": "#login", "Timeout": 3000},
            {"Action": "Click", "Selector": "#login"},
            {"Action": "ScrollY", "Value": 500},
        ]
