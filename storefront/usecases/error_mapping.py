"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations


from typing import Optional

from storefront.adapters.api_errors import (
    ApiAuthError,
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    ApiTransportError,
    ApiValidationError,
    extract_error_hint,
)
from storefront.domain.ports import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by an adapter call.
        default_code: Code used when ``exc`` is not part of the API taxonomy.
        default_message: Message used with ``default_code``; falls back to ``str(exc)``.

    Returns:
        UseCaseError: ``exc`` itself when it already is one, otherwise a new error
        carrying the request id (when known) in ``meta``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    meta = _meta_for(exc)
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.", meta=meta)
    if isinstance(exc, ApiTransportError):
        return UseCaseError("NETWORK_ERROR", "Network error. Check connection.", meta=meta)
    if isinstance(exc, ApiValidationError):
        return UseCaseError("INVALID_PARAMS", _compose_error_message(str(exc), None), meta=meta)
    if isinstance(exc, ApiAuthError):
        return UseCaseError("AUTH_FAILED", "Authentication failed. Please log in again.", meta=meta)
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        hint = exc.hint or extract_error_hint(exc.payload)
        if status == 422:
            return UseCaseError(
                "INVALID_PARAMS",
                _compose_error_message("Invalid parameters", hint),
                meta=meta,
            )
        if status == 403:
            return UseCaseError("AUTH_FAILED", "Access denied.", meta=meta)
        if status == 404:
            return UseCaseError("NOT_FOUND", _compose_error_message("Not found", hint), meta=meta)
        if status == 409:
            return UseCaseError("CONFLICT", _compose_error_message("Conflict", hint), meta=meta)
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return UseCaseError("REQUEST_FAILED", _compose_error_message(label, hint), meta=meta)
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Server error, try again.", meta=meta)
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc), meta=meta)

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _meta_for(exc: Exception) -> Optional[dict]:
    request_id = getattr(exc, "request_id", None)
    if not request_id:
        return None
    return {"request_id": request_id, "attempts": getattr(exc, "attempts", None)}


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    """Compose a user-facing error message with optional hint text."""
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]
