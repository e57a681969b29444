from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from storefront.domain.entities import ErrorKind

AUTH_ERROR_CODES = frozenset(
    {"AUTH_TOKEN_EXPIRED", "AUTH_TOKEN_INVALID", "AUTH_INVALID_CREDENTIALS"}
)


class ApiError(RuntimeError):
    """Base class for storefront API failures."""

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context
        self.request_id = request_id
        self.attempts: Optional[int] = None


class ApiTransportError(ApiError):
    """Connectivity failure before any HTTP status was received."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context, request_id=request_id)


class ApiTimeoutError(ApiTransportError):
    """Attempt aborted because its timeout elapsed."""

    kind = ErrorKind.TIMEOUT


class ApiServerError(ApiError):
    """HTTP 5xx or 429 from the storefront API."""

    kind = ErrorKind.SERVER

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            payload=payload,
            context=context,
            request_id=request_id,
        )


class ApiClientError(ApiError):
    """HTTP 4xx (other than 429) from the storefront API."""

    kind = ErrorKind.CLIENT

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
            request_id=request_id,
        )


class ApiAuthError(ApiClientError):
    """Credential missing, invalid, or expired."""

    kind = ErrorKind.AUTH


class ApiValidationError(ApiError):
    """Caller input rejected before any network call."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        missing_fields: Sequence[str] = (),
        code: str = "VALIDATION_REQUIRED_FIELD",
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=400, code=code, context=context)
        self.missing_fields = list(missing_fields)


class NormalizationError(ApiError):
    """Envelope marked ``success=false`` or a body that cannot be decoded."""

    kind = ErrorKind.NORMALIZATION


_HINT_LIMIT = 200
_SNIPPET_LIMIT = 400


def parse_error_payload(resp: Any) -> Any:
    """Decode an error body; fall back to a text snippet, or ``None`` for empty bodies."""
    try:
        return resp.json()
    except ValueError:
        text = (getattr(resp, "text", "") or "").strip()
        return text[:_SNIPPET_LIMIT] or None


def build_error_message(status: int, payload: Any) -> str:
    """Prefer the decoded body's ``message`` field, else ``HTTP <status>``."""
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return f"HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    """Return ``code`` (or ``error.code``) from an error body."""
    if not isinstance(payload, Mapping):
        return None
    code = payload.get("code")
    error = payload.get("error")
    if code is None and isinstance(error, Mapping):
        code = error.get("code")
    if code is None and isinstance(error, str) and error.isupper():
        code = error
    return None if code is None else str(code)


def extract_error_hint(payload: Any) -> Optional[str]:
    """Summarize field-level details (``errors``, ``details``, ``hint``) of an error body."""
    if isinstance(payload, str):
        return payload.strip()[:_HINT_LIMIT] or None
    if not isinstance(payload, Mapping):
        return None
    for key in ("errors", "details", "hint"):
        summary = _summarize(payload.get(key))
        if summary:
            return summary[:_HINT_LIMIT]
    return None


def _summarize(value: Any) -> str:
    # Validation bodies look like {"errors": [{"field": "email", "message": "is required"}]}
    if value is None:
        return ""
    if isinstance(value, Mapping):
        field_name = value.get("field") or value.get("path")
        message = value.get("message") or value.get("msg")
        if message:
            return f"{field_name}: {message}" if field_name else str(message)
        return ", ".join(f"{key}={val}" for key, val in list(value.items())[:4])
    if isinstance(value, (list, tuple)):
        return "; ".join(filter(None, (_summarize(item) for item in value[:3])))
    return str(value).strip()


def error_for_status(status: int, payload: Any, *, context: Optional[str] = None) -> ApiError:
    """Map a non-2xx response onto the error taxonomy."""
    message = build_error_message(status, payload)
    code = extract_error_code(payload)
    hint = extract_error_hint(payload)
    if status == 429 or 500 <= status < 600:
        return ApiServerError(message, status=status, payload=payload, context=context)
    if status == 401 or code in AUTH_ERROR_CODES:
        return ApiAuthError(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
        )
    if 400 <= status < 500:
        return ApiClientError(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
        )
    return ApiError(message, status=status, payload=payload, context=context)


__all__ = [
    "AUTH_ERROR_CODES",
    "ApiAuthError",
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "ApiTransportError",
    "ApiValidationError",
    "NormalizationError",
    "build_error_message",
    "error_for_status",
    "extract_error_code",
    "extract_error_hint",
    "parse_error_payload",
]
