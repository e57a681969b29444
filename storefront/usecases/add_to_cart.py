from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain.ports import CartPort, ProductId, ProductPort, UseCaseError
from .error_mapping import map_api_error


@dataclass
class AddToCart:
    """Add a product to the cart after checking it is still purchasable."""

    cart_port: CartPort
    product_port: ProductPort

    def __call__(
        self,
        product_id: ProductId,
        quantity: int = 1,
        *,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Dict[str, Any]:
        if quantity <= 0:
            raise UseCaseError("INVALID_PARAMS", "Quantity must be greater than 0.")
        try:
            product = self.product_port.get_product(product_id)
        except Exception as exc:
            raise map_api_error(exc, default_code="ADD_TO_CART_FAILED")

        stock = int(product.get("quantity") or 0)
        if not product.get("active", True) or stock <= 0:
            raise UseCaseError(
                "OUT_OF_STOCK",
                f"{product.get('name') or product_id} is out of stock.",
                meta={"product_id": product_id},
            )
        if quantity > stock:
            raise UseCaseError(
                "INSUFFICIENT_STOCK",
                f"Only {stock} left in stock.",
                meta={"product_id": product_id, "available": stock},
            )

        try:
            return self.cart_port.add_to_cart(product_id, quantity, color=color, size=size)
        except Exception as exc:
            raise map_api_error(exc, default_code="ADD_TO_CART_FAILED")
