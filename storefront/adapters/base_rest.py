"""Shared facade behaviour for the per-domain REST adapters.

Each domain adapter (cart, category, product, order, auth) subclasses
``BaseRestAdapter`` and gets request validation, payload sanitisation,
per-operation timeout/retry overrides, envelope normalisation, and
performance timers on top of the retry coordinator.

Call context:
    - Constructed lazily once per adapter class through ``get_instance()``;
      configuration is read-only after construction so instances are shared
      across threads without locking.
    - Use cases depend on the ports in ``storefront.domain.ports``, which
      these adapters implement.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, ClassVar, Dict, Iterable, Mapping, Optional, TypeVar

from storefront.domain.entities import CanonicalResult, DataWithPagination, RetryPolicy
from storefront.domain.ports import Clock, HttpSession
from storefront.utils.instrumentation import Timers
from storefront.utils.logging import configure_api_logging

from .api_errors import ApiValidationError, NormalizationError
from .clock import SystemClock
from .http_client import RequestExecutor, build_url, normalize_response
from .retry import RetryCoordinator
from .service_config import ServiceConfig, get_service_config

T = TypeVar("T")
AdapterT = TypeVar("AdapterT", bound="BaseRestAdapter")


def validate_required(params: Mapping[str, Any], required: Iterable[str]) -> None:
    """Raise ``ApiValidationError`` when a required key is absent, ``None`` or ``""``."""
    missing = [key for key in required if params.get(key) is None or params.get(key) == ""]
    if missing:
        raise ApiValidationError(
            f"Missing required parameters: {', '.join(missing)}",
            missing_fields=missing,
        )


def sanitize_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy without keys whose value is ``None``; falsy values are kept."""
    return {key: value for key, value in data.items() if value is not None}


class BaseRestAdapter:
    """Facade over the retry coordinator for one storefront API domain."""

    service_name: ClassVar[str] = "default"

    _instances: ClassVar[Dict[type, "BaseRestAdapter"]] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        session: Optional[HttpSession] = None,
        clock: Optional[Clock] = None,
        auth_token: Optional[str] = None,
    ) -> None:
        self._log = logging.getLogger(type(self).__module__)
        self.config = config or get_service_config(self.service_name)
        self.clock = clock or SystemClock()
        self.policy: RetryPolicy = self.config.retry_policy()

        headers: Dict[str, str] = {"X-API-Version": self.config.api_version}
        headers.update(self.config.headers)
        if self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        self.executor = RequestExecutor(session, default_headers=headers, clock=self.clock)
        self.retry = RetryCoordinator(self.executor, policy=self.policy, clock=self.clock)
        self.timers = Timers(self._log, monotonic=self.clock.monotonic)

    # ---------- Memoized instance ----------

    @classmethod
    def get_instance(cls: type[AdapterT]) -> AdapterT:
        """Return the process-wide instance of this adapter class, creating it once.

        Creating an instance also applies ``STOREFRONT_API_LOG_LEVEL`` (or
        ``STOREFRONT_DEBUG``) to the request-event logger.
        """
        instance = cls._instances.get(cls)
        if instance is None:
            with cls._instances_lock:
                instance = cls._instances.get(cls)
                if instance is None:
                    configure_api_logging()
                    instance = cls()
                    cls._instances[cls] = instance
        return instance  # type: ignore[return-value]

    @classmethod
    def reset_instances(cls) -> None:
        with cls._instances_lock:
            cls._instances.clear()

    # ---------- Validation helpers ----------

    validate_required = staticmethod(validate_required)
    sanitize_data = staticmethod(sanitize_data)

    # ---------- HTTP verbs ----------

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        **options: Any,
    ) -> CanonicalResult:
        return self._request("GET", path, params=params, **options)

    def post(self, path: str, body: Any = None, **options: Any) -> CanonicalResult:
        return self._request("POST", path, body=body, **options)

    def put(self, path: str, body: Any = None, **options: Any) -> CanonicalResult:
        return self._request("PUT", path, body=body, **options)

    def patch(self, path: str, body: Any = None, **options: Any) -> CanonicalResult:
        return self._request("PATCH", path, body=body, **options)

    def delete(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        **options: Any,
    ) -> CanonicalResult:
        return self._request("DELETE", path, params=params, **options)

    def get_paginated(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        **options: Any,
    ) -> CanonicalResult:
        result = self.get(path, params, **options)
        if not isinstance(result, DataWithPagination):
            self._log.debug("Paginated endpoint %s returned no pagination metadata", path)
        return result

    def measure_performance(
        self,
        operation: str,
        fn: Callable[[], T],
        context: Optional[str] = None,
    ) -> T:
        """Run ``fn`` under a ``<Adapter>.<operation>`` timer."""
        label = f"{type(self).__name__}.{operation}"
        with self.timers.measure(label, context=context or type(self).__name__):
            return fn()

    # ---------- Internals ----------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        timeout_ms: Optional[int] = None,
        retries: Optional[int] = None,
        context: Optional[str] = None,
        skip_error_logging: bool = False,
    ) -> CanonicalResult:
        url = build_url(self.config.api_base_url, path, params)
        policy = self.policy.with_overrides(max_retries=retries, timeout_ms=timeout_ms)
        request_ctx = self.retry.new_context()
        payload = self.retry.run(
            method,
            url,
            body=body,
            policy=policy,
            context=request_ctx,
            log_context=context or type(self).__name__,
            skip_error_logging=skip_error_logging,
        )
        try:
            return normalize_response(payload, request_id=request_ctx.request_id)
        except NormalizationError as exc:
            exc.context = context or exc.context
            if not skip_error_logging:
                self._log.warning(
                    "[%s] API reported failure: %s request_id=%s",
                    context or type(self).__name__,
                    exc,
                    request_ctx.request_id,
                )
            raise


__all__ = ["BaseRestAdapter", "sanitize_data", "validate_required"]
