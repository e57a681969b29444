from __future__ import annotations

import json

import pytest
import requests

from helpers import FakeClock, ResponseStub, SessionStub
from storefront.adapters.api_errors import (
    ApiAuthError,
    ApiClientError,
    ApiServerError,
    ApiTimeoutError,
    ApiTransportError,
    NormalizationError,
)
from storefront.adapters.http_client import RequestExecutor, build_query_string, build_url, normalize_response
from storefront.domain.entities import Data, Failure, RequestContext, Success

CTX = RequestContext(request_id="req_1_abcdefghi", timestamp="2024-01-01T00:00:00.000Z")


def _executor(outcomes, **kwargs) -> tuple[RequestExecutor, SessionStub]:
    session = SessionStub(outcomes)
    return RequestExecutor(session, clock=FakeClock(), **kwargs), session


def test_query_string_omits_none_and_encodes_spaces() -> None:
    assert build_query_string({"a": 1, "b": None, "c": "x y"}) == "a=1&c=x+y"


def test_query_string_renders_booleans_lowercase() -> None:
    assert build_query_string({"active": True, "parentOnly": False}) == "active=true&parentOnly=false"
    assert build_query_string({}) == ""


def test_build_url_joins_with_single_slash() -> None:
    assert build_url("http://shop.test/api/", "/products", {"page": 2}) == "http://shop.test/api/products?page=2"
    assert build_url("http://shop.test/api", "cart") == "http://shop.test/api/cart"


def test_normalize_response_raises_for_failure_envelope() -> None:
    with pytest.raises(NormalizationError) as excinfo:
        normalize_response({"success": False, "message": "X"}, request_id="req_9")

    assert str(excinfo.value) == "X"
    assert excinfo.value.request_id == "req_9"
    assert normalize_response({"categories": []}) == Data([])


def test_get_never_sends_body() -> None:
    executor, session = _executor([(200, {"ok": 1})])

    outcome = executor.execute("get", "http://shop.test/api/cart", body={"x": 1}, timeout_ms=2500, context=CTX)

    assert isinstance(outcome, Success)
    method, _url, kwargs = session.calls[0]
    assert method == "GET"
    assert kwargs["data"] is None
    assert kwargs["timeout"] == 2.5
    assert "Content-Type" not in kwargs["headers"]


def test_post_serializes_json_body_and_merges_headers() -> None:
    executor, session = _executor([(201, {"success": True, "data": {}})], default_headers={"X-API-Version": "v1"})

    executor.execute(
        "POST",
        "http://shop.test/api/cart",
        body={"productId": "p1", "quantity": 2},
        timeout_ms=1000,
        headers={"X-Trace": "1"},
        context=CTX,
    )

    _method, _url, kwargs = session.calls[0]
    assert json.loads(kwargs["data"]) == {"productId": "p1", "quantity": 2}
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["X-API-Version"] == "v1"
    assert kwargs["headers"]["X-Trace"] == "1"
    assert kwargs["headers"]["Accept"] == "application/json"


def test_timeout_is_distinguishable_from_network_failure() -> None:
    executor, _ = _executor([requests.exceptions.Timeout("slow")])
    timeout = executor.execute("GET", "http://shop.test/api/x", timeout_ms=10, context=CTX)

    executor, _ = _executor([requests.exceptions.ConnectionError("refused")])
    network = executor.execute("GET", "http://shop.test/api/x", timeout_ms=10, context=CTX)

    assert isinstance(timeout, Failure) and isinstance(timeout.error, ApiTimeoutError)
    assert isinstance(network, Failure) and type(network.error) is ApiTransportError
    assert timeout.error.request_id == CTX.request_id


def test_error_message_prefers_body_message() -> None:
    executor, _ = _executor([(404, {"message": "Product not found"})])

    outcome = executor.execute("GET", "http://shop.test/api/products/1", timeout_ms=10, context=CTX)

    assert isinstance(outcome.error, ApiClientError)
    assert str(outcome.error) == "Product not found"
    assert outcome.error.status == 404


def test_error_message_falls_back_to_status_when_body_is_not_json() -> None:
    executor, _ = _executor([ResponseStub(502, text="<html>bad gateway</html>")])

    outcome = executor.execute("GET", "http://shop.test/api/x", timeout_ms=10, context=CTX)

    assert isinstance(outcome.error, ApiServerError)
    assert str(outcome.error) == "HTTP 502"


@pytest.mark.parametrize(
    "status, payload, expected",
    [
        (401, {"message": "expired"}, ApiAuthError),
        (403, {"code": "AUTH_TOKEN_EXPIRED"}, ApiAuthError),
        (429, None, ApiServerError),
        (422, {"errors": ["bad"]}, ApiClientError),
    ],
)
def test_status_maps_to_taxonomy(status, payload, expected) -> None:
    executor, _ = _executor([(status, payload)])

    outcome = executor.execute("GET", "http://shop.test/api/x", timeout_ms=10, context=CTX)

    assert type(outcome.error) is expected


def test_invalid_json_on_success_is_normalization_error() -> None:
    executor, _ = _executor([ResponseStub(200, text="not json")])

    outcome = executor.execute("GET", "http://shop.test/api/x", timeout_ms=10, context=CTX)

    assert isinstance(outcome.error, NormalizationError)


def test_empty_body_decodes_to_none() -> None:
    executor, _ = _executor([ResponseStub(204)])

    outcome = executor.execute("DELETE", "http://shop.test/api/cart", timeout_ms=10, context=CTX)

    assert isinstance(outcome, Success)
    assert outcome.value.payload is None
    assert outcome.value.status_code == 204


def test_unknown_method_is_rejected() -> None:
    executor, session = _executor([(200, {})])

    with pytest.raises(ValueError):
        executor.execute("TRACE", "http://shop.test/api/x", timeout_ms=10, context=CTX)
    assert session.calls == []
