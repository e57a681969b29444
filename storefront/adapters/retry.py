"""Drive the attempts of one logical call.

The coordinator runs the executor up to ``max_retries + 1`` times, consults
the classifier after every failure, and sleeps ``base_delay_ms * 2**attempt``
between attempts. Attempts are strictly sequential and share one request id.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from storefront.domain.entities import ErrorRecord, RequestContext, RetryPolicy, Success
from storefront.domain.naming import make_request_context
from storefront.domain.ports import Clock
from storefront.utils.instrumentation import log_api_error

from .api_errors import ApiError
from .clock import SystemClock
from .error_classifier import classify_error, kind_of
from .http_client import RequestExecutor

_log = logging.getLogger(__name__)


def finalize_error(
    error: BaseException,
    record: Optional[ErrorRecord],
    request_id: str,
    attempts: int,
) -> ApiError:
    """Return the single error raised for a failed logical call.

    API errors are annotated in place; anything else is wrapped so callers
    only ever catch ``ApiError``.
    """
    if isinstance(error, ApiError):
        final = error
    else:
        final = ApiError(str(error) or type(error).__name__, context="retry")
        final.__cause__ = error
    final.request_id = request_id
    final.attempts = attempts
    if final.kind is None:
        final.kind = record.kind if record is not None else kind_of(error)
    return final


class RetryCoordinator:
    """Bounded retry loop around ``RequestExecutor.execute``."""

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        policy: Optional[RetryPolicy] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.executor = executor
        self.policy = policy or RetryPolicy()
        self.clock = clock or SystemClock()

    def new_context(self) -> RequestContext:
        return make_request_context(self.clock.time_ms())

    def run(
        self,
        method: str,
        url: str,
        *,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        policy: Optional[RetryPolicy] = None,
        context: Optional[RequestContext] = None,
        log_context: Optional[str] = None,
        skip_error_logging: bool = False,
    ) -> Any:
        """Return the decoded payload of the first successful attempt.

        Raises:
            ApiError: The last failure, annotated with ``request_id``,
                ``attempts`` and ``kind``, once the error is terminal or the
                retry budget is spent.
        """
        effective = policy or self.policy
        ctx = context or self.new_context()
        label = log_context or "RetryCoordinator"
        last_error: Optional[ApiError] = None
        last_record: Optional[ErrorRecord] = None
        attempts = 0

        for attempt in range(effective.max_retries + 1):
            attempts = attempt + 1
            outcome = self.executor.execute(
                method,
                url,
                body=body,
                timeout_ms=effective.timeout_ms,
                headers=headers,
                context=ctx,
                attempt=attempt,
                log_context=log_context,
            )
            if isinstance(outcome, Success):
                return outcome.value.payload

            last_error = outcome.error
            last_record = classify_error(last_error, attempt)
            if last_record.terminal or attempt == effective.max_retries:
                break

            delay_ms = effective.delay_before_attempt(attempt + 1)
            _log.debug(
                "[%s] retrying %s %s in %dms (attempt %d/%d, kind=%s) request_id=%s",
                label,
                method,
                url,
                delay_ms,
                attempt + 1,
                effective.max_attempts,
                last_record.kind.value,
                ctx.request_id,
            )
            self.clock.sleep(delay_ms / 1000.0)

        if last_error is None:
            raise ApiError("Request finished without an outcome", context=label, request_id=ctx.request_id)
        final = finalize_error(last_error, last_record, ctx.request_id, attempts)
        if not skip_error_logging:
            log_api_error(_log, final, label)
        raise final


__all__ = ["RetryCoordinator", "finalize_error"]
