from __future__ import annotations

import logging

from storefront.adapters.service_config import (
    ServiceConfig,
    build_api_url,
    default_service_config,
    get_service_config,
)
from storefront.domain.entities import RetryPolicy


def test_defaults_without_environment() -> None:
    cfg = default_service_config({})

    assert cfg == ServiceConfig()
    assert cfg.api_base_url == "http://localhost:3000/api"


def test_environment_overrides() -> None:
    env = {
        "STOREFRONT_API_URL": "https://shop.example/",
        "STOREFRONT_API_TIMEOUT_MS": "2000",
        "STOREFRONT_API_RETRIES": "0",
        "STOREFRONT_API_RETRY_DELAY_MS": "50",
        "STOREFRONT_API_KEY": "secret",
    }

    cfg = default_service_config(env)

    assert cfg.api_base_url == "https://shop.example/api"
    assert cfg.retry_policy() == RetryPolicy(max_retries=0, base_delay_ms=50, timeout_ms=2000)
    assert cfg.api_key == "secret"


def test_invalid_values_fall_back_with_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        cfg = default_service_config({"STOREFRONT_API_RETRIES": "many", "STOREFRONT_API_TIMEOUT_MS": "-1"})

    assert cfg.retries == 3
    assert cfg.timeout_ms == 15000
    assert len(caplog.records) == 2


def test_service_overrides() -> None:
    assert get_service_config("auth", {}).timeout_ms == 10000
    assert get_service_config("auth", {}).retries == 2
    assert get_service_config("order", {}).timeout_ms == 30000
    assert get_service_config("user", {}).timeout_ms == 15000
    assert get_service_config("settings", {}).timeout_ms == 10000
    assert get_service_config("unknown", {}) == default_service_config({})


def test_build_api_url() -> None:
    assert build_api_url("/products", "http://shop.test/") == "http://shop.test/api/products"
    assert build_api_url("cart", "") == "/api/cart"


def test_zero_retry_delay_is_rejected(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        cfg = default_service_config({"STOREFRONT_API_RETRY_DELAY_MS": "0", "STOREFRONT_API_TIMEOUT_MS": "0"})

    assert cfg.retry_delay_ms == 1000
    assert cfg.timeout_ms == 15000
    assert cfg.retry_policy().base_delay_ms == 1000
    assert len(caplog.records) == 2
