"""Shared HTTP transport utilities for the storefront REST adapters.

This module provides the request executor (one physical attempt over a
``requests.Session``), query-string and URL helpers, and the bridge from the
domain envelope normalizer to the adapter error taxonomy.

Dependencies:
    - ``requests`` for network I/O.
    - ``storefront.adapters.api_errors`` for typed transport failures.

Call context:
    - Driven by ``storefront.adapters.retry.RetryCoordinator``, which decides
      how many attempts a logical call gets.
    - Used only inside the adapter layer; use cases interact through ports.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests
from requests import exceptions as req_exc

from storefront.domain.entities import (
    CanonicalResult,
    EnvelopeError,
    Failure,
    RawResponse,
    RequestContext,
    Result,
    Success,
)
from storefront.domain.envelope_normalizer import normalize_envelope
from storefront.domain.ports import Clock, HttpSession
from storefront.utils.instrumentation import (
    API_LOGGER_NAME,
    log_request_end,
    log_request_start,
)

from .api_errors import (
    ApiError,
    ApiTimeoutError,
    ApiTransportError,
    NormalizationError,
    error_for_status,
    parse_error_payload,
)
from .clock import SystemClock

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH"})
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

AttemptResult = Result[RawResponse, ApiError]


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """Encode ``params``; keys whose value is ``None`` are omitted entirely."""
    if not params:
        return ""
    pairs = [(key, _query_value(value)) for key, value in params.items() if value is not None]
    return urlencode(pairs)


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Join ``base_url`` and ``path`` with one slash and append the query string."""
    if path.startswith(("http://", "https://")):
        url = path
    else:
        base = base_url[:-1] if base_url.endswith("/") else base_url
        url = f"{base}/{path.lstrip('/')}" if base else path
    query = build_query_string(params)
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def normalize_response(payload: Any, *, request_id: Optional[str] = None) -> CanonicalResult:
    """Return the canonical result for ``payload``; raise for ``success=false`` envelopes."""
    normalized = normalize_envelope(payload)
    if isinstance(normalized, EnvelopeError):
        raise NormalizationError(
            normalized.message,
            payload=payload,
            context="normalize",
            request_id=request_id,
        )
    return normalized


class RequestExecutor:
    """Perform one physical request attempt and report it as ``Success``/``Failure``.

    The executor never retries and never raises for transport or HTTP
    failures; the retry coordinator inspects the returned ``Failure``.
    """

    def __init__(
        self,
        session: Optional[HttpSession] = None,
        *,
        default_headers: Optional[Mapping[str, str]] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.default_headers: Dict[str, str] = {"Accept": "application/json"}
        self.default_headers.update(default_headers or {})
        self.clock = clock or SystemClock()
        self._log = logger or logging.getLogger(API_LOGGER_NAME)

    def _headers(self, extra: Optional[Mapping[str, str]], json_body: bool) -> Dict[str, str]:
        headers = dict(self.default_headers)
        if extra:
            headers.update(extra)
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def execute(
        self,
        method: str,
        url: str,
        *,
        body: Any = None,
        timeout_ms: int,
        headers: Optional[Mapping[str, str]] = None,
        context: RequestContext,
        attempt: int = 0,
        log_context: Optional[str] = None,
    ) -> AttemptResult:
        """Send one request.

        ``timeout_ms`` is handed to ``requests`` as its connect and read
        timeout. It bounds the connection setup and each wait for the next
        bytes, not the attempt as a whole: a server that keeps trickling
        data can hold an attempt open past ``timeout_ms``.

        Args:
            method: One of GET, POST, PUT, DELETE, PATCH.
            url: Absolute endpoint URL including any query string.
            body: JSON-serialisable payload, sent only for mutating methods.
            timeout_ms: Connect and per-read socket timeout in milliseconds.
            headers: Per-call headers merged over the defaults.
            context: Logical call identity shared by all attempts.
            attempt: Zero-based attempt index, for logging.

        Returns:
            ``Success(RawResponse)`` for 2xx responses with a decodable body,
            ``Failure(ApiError)`` otherwise.
        """
        verb = method.upper()
        if verb not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method '{method}'")

        data = None
        if body is not None and verb in MUTATING_METHODS:
            data = json.dumps(body)
        ctx = f"{verb} {url}"

        log_request_start(
            self._log,
            method=verb,
            url=url,
            request_id=context.request_id,
            attempt=attempt,
            context=log_context,
        )
        started = self.clock.monotonic()
        try:
            resp = self.session.request(
                verb,
                url,
                data=data,
                headers=self._headers(headers, json_body=data is not None),
                timeout=timeout_ms / 1000.0,
            )
        except req_exc.Timeout:
            error: ApiError = ApiTimeoutError(
                f"Timeout contacting {url} after {timeout_ms}ms", context=ctx
            )
            return self._failed(verb, url, context, attempt, started, None, error, log_context)
        except req_exc.RequestException as exc:
            error = ApiTransportError(f"Network error contacting {url}: {exc}", context=ctx)
            error.__cause__ = exc
            return self._failed(verb, url, context, attempt, started, None, error, log_context)

        status = resp.status_code
        if not 200 <= status < 300:
            payload = parse_error_payload(resp)
            error = error_for_status(status, payload, context=ctx)
            return self._failed(verb, url, context, attempt, started, status, error, log_context)

        try:
            payload = self._decode(resp)
        except ValueError:
            snippet = (getattr(resp, "text", "") or "")[:400]
            error = NormalizationError(f"Invalid JSON response: {snippet}", status=status, context=ctx)
            return self._failed(verb, url, context, attempt, started, status, error, log_context)

        duration_ms = self._elapsed_ms(started)
        log_request_end(
            self._log,
            method=verb,
            url=url,
            request_id=context.request_id,
            attempt=attempt,
            status=status,
            duration_ms=duration_ms,
            outcome="success",
            context=log_context,
        )
        return Success(RawResponse(status_code=status, payload=payload, duration_ms=duration_ms))

    @staticmethod
    def _decode(resp: Any) -> Any:
        content = getattr(resp, "content", None)
        if content is not None and not content.strip():
            return None
        return resp.json()

    def _elapsed_ms(self, started: float) -> float:
        return (self.clock.monotonic() - started) * 1000.0

    def _failed(
        self,
        method: str,
        url: str,
        context: RequestContext,
        attempt: int,
        started: float,
        status: Optional[int],
        error: ApiError,
        log_context: Optional[str],
    ) -> AttemptResult:
        error.request_id = context.request_id
        log_request_end(
            self._log,
            method=method,
            url=url,
            request_id=context.request_id,
            attempt=attempt,
            status=status,
            duration_ms=self._elapsed_ms(started),
            outcome=error.kind.value if error.kind else "error",
            context=log_context,
        )
        return Failure(error)


__all__ = [
    "ALLOWED_METHODS",
    "MUTATING_METHODS",
    "RequestExecutor",
    "build_query_string",
    "build_url",
    "normalize_response",
]
