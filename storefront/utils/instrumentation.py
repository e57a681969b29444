from __future__ import annotations

"""Structured request events and named timers.

Every attempt emits a start and an end ``RequestEvent`` through stdlib
logging. The event travels as ``extra={"event": {...}}`` so handlers can
forward it as structured data, while the formatted message stays readable.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterator, Optional

API_LOGGER_NAME = "storefront.api"


@dataclass(frozen=True)
class RequestEvent:
    """One structured request-start or request-end record."""

    phase: str
    request_id: str
    method: str
    url: str
    attempt: int
    status: Optional[int] = None
    duration_ms: Optional[float] = None
    outcome: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def _level_for(status: Optional[int], outcome: Optional[str]) -> int:
    if status is None:
        return logging.ERROR if outcome != "success" else logging.INFO
    if status >= 400:
        return logging.ERROR
    if status >= 300 or outcome != "success":
        return logging.WARNING
    return logging.INFO


def log_request_start(
    logger: logging.Logger,
    *,
    method: str,
    url: str,
    request_id: str,
    attempt: int,
    context: Optional[str] = None,
) -> RequestEvent:
    event = RequestEvent(
        phase="start", request_id=request_id, method=method, url=url, attempt=attempt
    )
    logger.debug(
        "API %s %s attempt=%d request_id=%s",
        method,
        url,
        attempt,
        request_id,
        extra={"event": event.to_dict(), "context": context or "API"},
    )
    return event


def log_request_end(
    logger: logging.Logger,
    *,
    method: str,
    url: str,
    request_id: str,
    attempt: int,
    status: Optional[int],
    duration_ms: float,
    outcome: str,
    context: Optional[str] = None,
) -> RequestEvent:
    event = RequestEvent(
        phase="end",
        request_id=request_id,
        method=method,
        url=url,
        attempt=attempt,
        status=status,
        duration_ms=round(duration_ms, 3),
        outcome=outcome,
    )
    logger.log(
        _level_for(status, outcome),
        "API %s %s - %s (%.0fms) attempt=%d request_id=%s outcome=%s",
        method,
        url,
        status if status is not None else "no response",
        duration_ms,
        attempt,
        request_id,
        outcome,
        extra={"event": event.to_dict(), "context": context or "API"},
    )
    return event


def log_api_error(
    logger: logging.Logger,
    error: BaseException,
    context: Optional[str] = None,
) -> None:
    """Log a final (post-retry) failure at a level chosen by its HTTP status."""
    status = getattr(error, "status", None)
    meta = {
        "code": getattr(error, "code", None),
        "status": status,
        "request_id": getattr(error, "request_id", None),
        "attempts": getattr(error, "attempts", None),
        "kind": getattr(getattr(error, "kind", None), "value", None),
    }
    extra = {"event": {k: v for k, v in meta.items() if v is not None}, "context": context}
    if isinstance(status, int) and 400 <= status < 500:
        logger.warning("[%s] %s", context or "API", error, extra=extra)
    else:
        logger.error("[%s] %s", context or "API", error, extra=extra)


class Timers:
    """Named start/stop timers for wrapping higher-level operations."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._monotonic = monotonic
        self._started: Dict[str, float] = {}
        self._lock = threading.Lock()

    def start(self, label: str) -> None:
        with self._lock:
            self._started[label] = self._monotonic()

    def stop(self, label: str) -> float:
        """Stop ``label`` and return the elapsed time in milliseconds."""
        with self._lock:
            started = self._started.pop(label, None)
        if started is None:
            raise KeyError(f"Timer '{label}' was not started")
        elapsed_ms = (self._monotonic() - started) * 1000.0
        self._log.debug("%s: %.3fms", label, elapsed_ms)
        return elapsed_ms

    def running(self, label: str) -> bool:
        with self._lock:
            return label in self._started

    @contextmanager
    def measure(self, label: str, *, context: Optional[str] = None) -> Iterator[None]:
        """Time the wrapped block; failures are logged and re-raised."""
        started = self._monotonic()
        try:
            yield
        except Exception as exc:
            elapsed_ms = (self._monotonic() - started) * 1000.0
            self._log.error(
                "%s failed after %.0fms: %s",
                label,
                elapsed_ms,
                exc,
                extra={"event": {"operation": label, "duration_ms": elapsed_ms}, "context": context},
            )
            raise
        elapsed_ms = (self._monotonic() - started) * 1000.0
        self._log.debug(
            "%s completed in %.0fms",
            label,
            elapsed_ms,
            extra={"event": {"operation": label, "duration_ms": elapsed_ms}, "context": context},
        )


__all__ = [
    "API_LOGGER_NAME",
    "RequestEvent",
    "Timers",
    "log_api_error",
    "log_request_end",
    "log_request_start",
]
