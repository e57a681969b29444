from __future__ import annotations

import pytest

from helpers import FakeClock
from storefront.adapters.base_rest import BaseRestAdapter
from storefront.adapters.service_config import ServiceConfig


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(base_url="http://shop.test", timeout_ms=5000, retries=2, retry_delay_ms=100)


@pytest.fixture(autouse=True)
def _reset_adapter_instances():
    BaseRestAdapter.reset_instances()
    yield
    BaseRestAdapter.reset_instances()
