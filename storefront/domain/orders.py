from __future__ import annotations

"""Order validation and totals computed before anything is sent to the API."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping

DEFAULT_TAX_RATE = 0.08
_CENT = Decimal("0.01")


@dataclass
class OrderValidation:
    """Result of the pre-flight order checks."""

    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderTotals:
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float


def _round_cents(value: float) -> float:
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def validate_order(order: Mapping[str, Any]) -> OrderValidation:
    """Check items, shipping address, payment method, and total."""

    errors: List[str] = []
    items = order.get("items") or []
    if not items:
        errors.append("Order must contain at least one item")

    shipping = order.get("shipping") or {}
    if not isinstance(shipping, Mapping) or not shipping.get("address"):
        errors.append("Shipping address is required")

    payment = order.get("payment") or {}
    if not isinstance(payment, Mapping) or not payment.get("method"):
        errors.append("Payment method is required")

    total = order.get("totalPrice")
    if not isinstance(total, (int, float)) or total <= 0:
        errors.append("Order total must be greater than 0")

    for item in items:
        quantity = item.get("quantity") if isinstance(item, Mapping) else None
        if not isinstance(quantity, (int, float)) or quantity <= 0:
            product = item.get("product") if isinstance(item, Mapping) else item
            errors.append(f"Invalid quantity for product {product}")

    return OrderValidation(valid=not errors, errors=errors)


def calculate_order_totals(
    items: Iterable[Mapping[str, Any]],
    shipping_cost: float = 0.0,
    tax_rate: float = DEFAULT_TAX_RATE,
) -> OrderTotals:
    items_price = sum(float(item["price"]) * int(item["quantity"]) for item in items)
    tax_price = _round_cents(items_price * tax_rate)
    total_price = _round_cents(items_price + shipping_cost + tax_price)
    return OrderTotals(
        items_price=items_price,
        shipping_price=shipping_cost,
        tax_price=tax_price,
        total_price=total_price,
    )


__all__ = [
    "DEFAULT_TAX_RATE",
    "OrderTotals",
    "OrderValidation",
    "calculate_order_totals",
    "validate_order",
]
