from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Protocol

from .entities import CanonicalResult

ProductId = str
OrderId = str


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta


# ---- Ambient ports ----
class Clock(Protocol):
    """Time source for timeouts, backoff sleeps, and request identifiers.

    Production code uses ``SystemClock``; tests inject a fake that records
    sleeps and advances time without blocking.
    """

    def monotonic(self) -> float: ...  # seconds, never goes backwards
    def time_ms(self) -> int: ...  # epoch milliseconds
    def sleep(self, seconds: float) -> None: ...


class HttpSession(Protocol):
    """Subset of ``requests.Session`` used by the request executor."""

    def request(self, method: str, url: str, **kwargs: Any) -> Any: ...


# ---- Ports (Hexagonal boundaries) ----
class CartPort(Protocol):
    """Cart operations against the storefront REST API."""

    def get_cart(self) -> Dict[str, Any]: ...
    def add_to_cart(
        self,
        product_id: ProductId,
        quantity: int,
        *,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Dict[str, Any]: ...
    def get_cart_count(self) -> int: ...  # 0 when the API is unavailable


class ProductPort(Protocol):
    """Catalog reads and stock writes."""

    def get_product(self, product_id: ProductId) -> Dict[str, Any]: ...
    def get_products(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult: ...
    def update_stock(self, product_id: ProductId, quantity_purchased: int) -> Dict[str, Any]: ...


class CategoryPort(Protocol):
    """Category tree used by navigation menus."""

    def get_categories(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]: ...
    def get_navigation_categories(self, max_depth: int = 2) -> List[Dict[str, Any]]: ...  # [] on failure


class OrderPort(Protocol):
    """Order placement and lifecycle updates."""

    def create_order(self, order: Mapping[str, Any]) -> Dict[str, Any]: ...
    def get_order(self, order_id: OrderId) -> Dict[str, Any]: ...
    def cancel_order(self, order_id: OrderId) -> Dict[str, Any]: ...
