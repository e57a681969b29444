from __future__ import annotations

"""Pure cart rules shared by adapters and use cases."""

from typing import Any, Iterable, Mapping, Optional, Tuple


def _item_price(product: Mapping[str, Any]) -> float:
    discount = product.get("discountPrice")
    if discount:
        return float(discount)
    return float(product.get("price") or 0)


def calculate_cart_totals(items: Iterable[Mapping[str, Any]]) -> Tuple[int, float]:
    """Return ``(total_items, total_price)``; discount prices win over list prices."""

    total_items = 0
    total_price = 0.0
    for item in items:
        quantity = int(item.get("quantity") or 0)
        product = item.get("product") or {}
        total_items += quantity
        total_price += _item_price(product) * quantity
    return total_items, total_price


def generate_cart_item_key(
    product_id: str,
    *,
    color: Optional[str] = None,
    size: Optional[str] = None,
) -> str:
    """Compose the `{product}_{color}_{size}` key used to track cart lines."""

    return f"{product_id}_{color or ''}_{size or ''}"


def validate_cart_item(item: Mapping[str, Any]) -> bool:
    product = item.get("product")
    if not isinstance(product, Mapping) or not product.get("_id"):
        return False
    quantity = item.get("quantity")
    if not isinstance(quantity, (int, float)) or quantity <= 0:
        return False
    return bool(product.get("name")) and bool(product.get("price"))


__all__ = ["calculate_cart_totals", "generate_cart_item_key", "validate_cart_item"]
