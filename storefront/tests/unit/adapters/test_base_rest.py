from __future__ import annotations

import threading

import pytest

from helpers import FakeClock, SessionStub
from storefront.adapters.api_errors import ApiValidationError, NormalizationError
from storefront.adapters.base_rest import BaseRestAdapter, sanitize_data, validate_required
from storefront.adapters.service_config import ServiceConfig
from storefront.domain.entities import Data, DataWithPagination


class _WidgetAdapter(BaseRestAdapter):
    service_name = "widget"


def _adapter(outcomes, config: ServiceConfig, **kwargs):
    session = SessionStub(outcomes)
    return _WidgetAdapter(config, session=session, clock=FakeClock(), **kwargs), session


def test_validate_required_lists_every_missing_key() -> None:
    with pytest.raises(ApiValidationError) as excinfo:
        validate_required({"a": 1, "b": None, "c": ""}, ["a", "b", "c", "d"])

    assert str(excinfo.value) == "Missing required parameters: b, c, d"
    assert excinfo.value.missing_fields == ["b", "c", "d"]
    assert excinfo.value.code == "VALIDATION_REQUIRED_FIELD"


def test_validate_required_accepts_falsy_non_empty_values() -> None:
    validate_required({"quantity": 0, "active": False}, ["quantity", "active"])


def test_sanitize_data_drops_only_none() -> None:
    original = {"a": 0, "b": False, "c": "", "d": None, "e": []}

    assert sanitize_data(original) == {"a": 0, "b": False, "c": "", "e": []}
    assert "d" in original


def test_get_instance_is_memoized_per_class() -> None:
    class _OtherAdapter(BaseRestAdapter):
        service_name = "other"

    seen = []

    def grab():
        seen.append(_WidgetAdapter.get_instance())

    threads = [threading.Thread(target=grab) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(instance) for instance in seen}) == 1
    assert _OtherAdapter.get_instance() is not seen[0]


def test_default_headers_include_version_key_and_token(config) -> None:
    cfg = ServiceConfig(base_url="http://shop.test", api_key="k-1", api_version="v2")
    adapter, session = _adapter([(200, {})], cfg, auth_token="tok")

    adapter.get("/ping")

    headers = session.calls[0][2]["headers"]
    assert headers["X-API-Version"] == "v2"
    assert headers["X-API-Key"] == "k-1"
    assert headers["Authorization"] == "Bearer tok"


def test_get_builds_api_url_with_query(config) -> None:
    adapter, session = _adapter([(200, {"categories": [{"_id": "c1"}]})], config)

    result = adapter.get("/categories", {"active": True, "search": None})

    assert session.urls == ["http://shop.test/api/categories?active=true"]
    assert result == Data([{"_id": "c1"}])


def test_paginated_result(config) -> None:
    payload = {"success": True, "data": {"products": [{"_id": "p1"}], "pagination": {"page": 1, "total": 1}}}
    adapter, _ = _adapter([(200, payload)], config)

    result = adapter.get_paginated("/products", {"page": 1})

    assert isinstance(result, DataWithPagination)
    assert result.pagination.total == 1


def test_per_call_overrides_apply(config) -> None:
    adapter, session = _adapter([(500, None)], config)

    with pytest.raises(Exception):
        adapter.post("/things", {"x": 1}, retries=0, timeout_ms=15000)

    assert len(session.calls) == 1
    assert session.calls[0][2]["timeout"] == 15.0


def test_failure_envelope_raises_terminal_normalization_error(config) -> None:
    adapter, session = _adapter([(200, {"success": False, "message": "Out of stock"})], config)

    with pytest.raises(NormalizationError) as excinfo:
        adapter.get("/products/1", context="ProductService.getProduct")

    assert str(excinfo.value) == "Out of stock"
    assert excinfo.value.context == "ProductService.getProduct"
    assert excinfo.value.request_id.startswith("req_")
    assert len(session.calls) == 1


def test_measure_performance_returns_value_and_reraises(config) -> None:
    adapter, _ = _adapter([(200, {})], config)

    assert adapter.measure_performance("op", lambda: 42) == 42
    with pytest.raises(ZeroDivisionError):
        adapter.measure_performance("op", lambda: 1 / 0)
