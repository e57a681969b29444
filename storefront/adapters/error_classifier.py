"""Decide whether a failed attempt is worth repeating.

Retries are only spent where a repeat attempt could plausibly succeed:
server errors, rate limiting, network failures, and timeouts. Malformed or
unauthorized requests fail the same way every time and are terminal.
"""

from __future__ import annotations

from typing import Optional

from storefront.domain.entities import ErrorKind, ErrorRecord

from .api_errors import (
    ApiAuthError,
    ApiError,
    ApiValidationError,
    NormalizationError,
)


def should_not_retry(error: BaseException) -> bool:
    """Return ``True`` when ``error`` is terminal for the current logical call."""
    status = _status_of(error)
    if status is not None and 400 <= status < 500 and status != 429:
        return True
    if isinstance(error, ApiAuthError):
        return True
    if isinstance(error, ApiValidationError):
        return True
    if isinstance(error, NormalizationError):
        return True
    return False


def kind_of(error: BaseException) -> ErrorKind:
    if isinstance(error, ApiError) and error.kind is not None:
        return error.kind
    status = _status_of(error)
    if status is not None and 400 <= status < 500 and status != 429:
        return ErrorKind.CLIENT
    if status is not None:
        return ErrorKind.SERVER
    return ErrorKind.TRANSPORT


def classify_error(error: BaseException, attempt: int) -> ErrorRecord:
    """Fold one failed attempt into an ``ErrorRecord``."""
    return ErrorRecord(
        kind=kind_of(error),
        message=str(error) or type(error).__name__,
        attempt=attempt,
        status_code=_status_of(error),
        terminal=should_not_retry(error),
    )


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


__all__ = ["classify_error", "kind_of", "should_not_retry"]
