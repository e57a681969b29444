"""Per-service endpoint, timeout, and retry configuration.

Defaults are read from the environment once per call to
``default_service_config``; per-service overrides tune timeouts and retry
counts for operations with different latency profiles (auth is short,
orders are long).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from storefront.domain.entities import RetryPolicy

_log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_MS = 15000
DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_API_VERSION = "v1"


@dataclass(frozen=True)
class ServiceConfig:
    """Read-only configuration shared by every call through one service instance.

    Attributes:
        base_url: Origin of the storefront, without the ``/api`` suffix.
        timeout_ms: Per-attempt timeout in milliseconds.
        retries: Retry attempts after the initial request.
        retry_delay_ms: Base backoff delay; doubled after every failed attempt.
        api_version: Version label sent as ``X-API-Version``.
        headers: Extra default headers for every request.
        api_key: Optional key placed in ``X-API-Key``.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    api_version: str = DEFAULT_API_VERSION
    headers: Mapping[str, str] = field(default_factory=dict)
    api_key: Optional[str] = None

    @property
    def api_base_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api"

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.retries,
            base_delay_ms=self.retry_delay_ms,
            timeout_ms=self.timeout_ms,
        )


SERVICE_OVERRIDES: Dict[str, Dict[str, int]] = {
    "auth": {"timeout_ms": 10000, "retries": 2},
    "order": {"timeout_ms": 30000, "retries": 3},
    "product": {"timeout_ms": 15000, "retries": 3},
    "category": {"timeout_ms": 10000, "retries": 3},
    "cart": {"timeout_ms": 15000, "retries": 3},
    "user": {"timeout_ms": 15000, "retries": 3},
    "settings": {"timeout_ms": 10000, "retries": 3},
}


def _env_int(env: Mapping[str, str], key: str, fallback: int, *, minimum: int = 0) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return fallback
    try:
        value = int(raw.strip())
    except ValueError:
        _log.warning("Ignoring non-integer %s=%r, using %d", key, raw, fallback)
        return fallback
    if value < minimum:
        _log.warning("Ignoring %s=%r below %d, using %d", key, raw, minimum, fallback)
        return fallback
    return value


def default_service_config(env: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """Build the baseline configuration from ``STOREFRONT_*`` variables."""
    source = os.environ if env is None else env
    base_url = (source.get("STOREFRONT_API_URL") or DEFAULT_BASE_URL).strip()
    api_key = (source.get("STOREFRONT_API_KEY") or "").strip() or None
    return ServiceConfig(
        base_url=base_url,
        timeout_ms=_env_int(source, "STOREFRONT_API_TIMEOUT_MS", DEFAULT_TIMEOUT_MS, minimum=1),
        retries=_env_int(source, "STOREFRONT_API_RETRIES", DEFAULT_RETRIES),
        retry_delay_ms=_env_int(
            source, "STOREFRONT_API_RETRY_DELAY_MS", DEFAULT_RETRY_DELAY_MS, minimum=1
        ),
        api_version=(source.get("STOREFRONT_API_VERSION") or DEFAULT_API_VERSION).strip(),
        api_key=api_key,
    )


def get_service_config(
    service_name: str, env: Optional[Mapping[str, str]] = None
) -> ServiceConfig:
    """Return the configuration for ``service_name``; unknown names get the default."""
    base = default_service_config(env)
    overrides = SERVICE_OVERRIDES.get(service_name)
    if not overrides:
        return base
    return replace(base, **overrides)


def build_api_url(endpoint: str, base_url: Optional[str] = None) -> str:
    """Join ``endpoint`` onto ``<base>/api`` with exactly one slash."""
    origin = (base_url if base_url is not None else default_service_config().base_url).rstrip("/")
    clean = endpoint[1:] if endpoint.startswith("/") else endpoint
    return f"{origin}/api/{clean}" if origin else f"/api/{clean}"


__all__ = [
    "SERVICE_OVERRIDES",
    "ServiceConfig",
    "build_api_url",
    "default_service_config",
    "get_service_config",
]
