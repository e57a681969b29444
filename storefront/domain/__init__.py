"""Domain package exports for value objects and pure rules."""

from .entities import (
    CanonicalResult,
    Data,
    DataWithPagination,
    EnvelopeError,
    ErrorKind,
    ErrorRecord,
    Failure,
    PaginationMeta,
    RawResponse,
    RequestContext,
    RetryPolicy,
    Success,
)
from .envelope_normalizer import normalize_envelope
from .naming import make_request_context, make_request_id

__all__ = [
    "CanonicalResult",
    "Data",
    "DataWithPagination",
    "EnvelopeError",
    "ErrorKind",
    "ErrorRecord",
    "Failure",
    "PaginationMeta",
    "RawResponse",
    "RequestContext",
    "RetryPolicy",
    "Success",
    "make_request_context",
    "make_request_id",
    "normalize_envelope",
]
