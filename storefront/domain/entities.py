from __future__ import annotations

"""Domain value objects shared by the transport, retry, and facade layers."""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class RequestContext:
    """Identity of one logical call, attached to every attempt it makes."""

    request_id: str
    """Identifier in ``req_<epoch-millis>_<base36>`` form, stable across retries."""

    timestamp: str
    """ISO-8601 UTC timestamp captured when the logical call started."""

    def __post_init__(self) -> None:
        if not isinstance(self.request_id, str) or not self.request_id.strip():
            raise ValueError("RequestContext.request_id must be a non-empty string.")

    def __str__(self) -> str:
        return self.request_id


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded-retry configuration fixed at service construction.

    ``max_retries`` counts retries after the first attempt, so ``max_retries=2``
    allows three attempts in total.
    """

    max_retries: int = 3
    base_delay_ms: int = 1000
    timeout_ms: int = 10000

    def __post_init__(self) -> None:
        if not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ValueError("RetryPolicy.max_retries must be an integer >= 0.")
        if self.base_delay_ms <= 0:
            raise ValueError("RetryPolicy.base_delay_ms must be > 0.")
        if self.timeout_ms <= 0:
            raise ValueError("RetryPolicy.timeout_ms must be > 0.")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_before_attempt(self, attempt: int) -> int:
        """Return the backoff in milliseconds slept before ``attempt`` (1-based retry index)."""
        if attempt < 1:
            return 0
        return self.base_delay_ms * (2 ** (attempt - 1))

    def with_overrides(
        self,
        *,
        max_retries: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> "RetryPolicy":
        changes: Dict[str, int] = {}
        if max_retries is not None:
            changes["max_retries"] = max_retries
        if timeout_ms is not None:
            changes["timeout_ms"] = timeout_ms
        return replace(self, **changes) if changes else self


class ErrorKind(str, Enum):
    """Failure taxonomy used for retry decisions and logging."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    SERVER = "server"
    CLIENT = "client"
    AUTH = "auth"
    VALIDATION = "validation"
    NORMALIZATION = "normalization"


@dataclass(frozen=True)
class ErrorRecord:
    """One failed attempt, folded into logs or the final raised error."""

    kind: ErrorKind
    message: str
    attempt: int
    status_code: Optional[int] = None
    terminal: bool = False


# Typed accessor -> wire keys, first present wins. Endpoints disagree on
# naming (``page`` vs ``currentPage``, ``total`` vs ``totalOrders``).
_PAGINATION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "page": ("page", "currentPage"),
    "limit": ("limit", "pageSize"),
    "total": ("total", "totalOrders", "totalProducts", "totalItems"),
    "total_pages": ("totalPages",),
    "has_next_page": ("hasNextPage", "hasNext"),
    "has_prev_page": ("hasPrevPage", "hasPrev"),
}


@dataclass(frozen=True)
class PaginationMeta:
    """Page metadata copied verbatim from the envelope that supplied it.

    ``raw`` is the wire mapping exactly as received; the typed properties
    read from it without dropping or renaming anything.
    """

    raw: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    @classmethod
    def from_payload(cls, raw: Any) -> Optional["PaginationMeta"]:
        if not isinstance(raw, Mapping):
            return None
        return cls(raw)

    def _lookup(self, attr: str) -> Any:
        for key in _PAGINATION_ALIASES[attr]:
            if key in self.raw:
                return self.raw[key]
        return None

    @property
    def page(self) -> Optional[int]:
        return self._lookup("page")

    @property
    def limit(self) -> Optional[int]:
        return self._lookup("limit")

    @property
    def total(self) -> Optional[int]:
        return self._lookup("total")

    @property
    def total_pages(self) -> Optional[int]:
        return self._lookup("total_pages")

    @property
    def has_next_page(self) -> Optional[bool]:
        return self._lookup("has_next_page")

    @property
    def has_prev_page(self) -> Optional[bool]:
        return self._lookup("has_prev_page")

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire form unchanged (a fresh copy)."""
        return dict(self.raw)


@dataclass(frozen=True)
class Data(Generic[T]):
    """Canonical result without pagination."""

    data: T

    @property
    def pagination(self) -> Optional[PaginationMeta]:
        return None


@dataclass(frozen=True)
class DataWithPagination(Generic[T]):
    """Canonical result for list endpoints that report page metadata."""

    data: T
    pagination: PaginationMeta


@dataclass(frozen=True)
class EnvelopeError:
    """Envelope explicitly marked as failed by the remote API."""

    message: str


CanonicalResult = Union[Data[T], DataWithPagination[T]]
NormalizedEnvelope = Union[Data[Any], DataWithPagination[Any], EnvelopeError]


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome of an attempt or a batch item."""

    value: T


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed outcome carrying the error instead of raising it."""

    error: E


Result = Union[Success[T], Failure[E]]


@dataclass(frozen=True)
class RawResponse:
    """Decoded transport response of one successful attempt."""

    status_code: int
    payload: Any
    duration_ms: float = 0.0


__all__ = [
    "CanonicalResult",
    "Data",
    "DataWithPagination",
    "EnvelopeError",
    "ErrorKind",
    "ErrorRecord",
    "Failure",
    "NormalizedEnvelope",
    "PaginationMeta",
    "RawResponse",
    "RequestContext",
    "Result",
    "RetryPolicy",
    "Success",
]
