from __future__ import annotations

from typing import Any, Dict, Optional

from storefront.domain.ports import CartPort, ProductId

from .api_errors import ApiValidationError
from .base_rest import BaseRestAdapter


class CartRestAdapter(BaseRestAdapter, CartPort):
    """REST adapter for the shopper's cart.

    Endpoints:
      - GET    {api}/cart                     -> {"items": [...], "totalItems": n, "totalPrice": x}
      - POST   {api}/cart                     body: {"productId", "quantity", "color"?, "size"?}
      - PUT    {api}/cart/{product_id}        body: {"quantity", "color", "size"}
      - DELETE {api}/cart/{product_id}?color=&size=
      - DELETE {api}/cart
    """

    service_name = "cart"

    def get_cart(self) -> Dict[str, Any]:
        self._log.info("Fetching cart data")
        result = self.measure_performance(
            "getCart", lambda: self.get("/cart", context="CartService.getCart")
        )
        return result.data

    def add_to_cart(
        self,
        product_id: ProductId,
        quantity: int,
        *,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Dict[str, Any]:
        request = {"productId": product_id, "quantity": quantity, "color": color, "size": size}
        self.validate_required(request, ["productId", "quantity"])
        if quantity <= 0:
            raise ApiValidationError(
                "Quantity must be greater than 0",
                code="VALIDATION_INVALID_QUANTITY",
                context="CartService.addToCart",
            )

        self._log.info(
            "Adding product to cart: %s (quantity=%s color=%s size=%s)",
            product_id,
            quantity,
            color,
            size,
        )
        payload = self.sanitize_data(request)
        result = self.measure_performance(
            "addToCart",
            lambda: self.post("/cart", payload, context="CartService.addToCart"),
        )
        return result.data

    def update_cart_item(
        self,
        product_id: ProductId,
        quantity: int,
        *,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Dict[str, Any]:
        self.validate_required({"productId": product_id, "quantity": quantity}, ["productId", "quantity"])
        if quantity <= 0:
            raise ApiValidationError(
                "Quantity must be greater than 0",
                code="VALIDATION_INVALID_QUANTITY",
                context="CartService.updateCartItem",
            )

        self._log.info("Updating cart item: %s (quantity=%s)", product_id, quantity)
        payload = {"quantity": quantity, "color": color or "", "size": size or ""}
        result = self.measure_performance(
            "updateCartItem",
            lambda: self.put(f"/cart/{product_id}", payload, context="CartService.updateCartItem"),
        )
        return result.data

    def remove_from_cart(
        self,
        product_id: ProductId,
        *,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> None:
        self.validate_required({"productId": product_id}, ["productId"])
        self._log.info("Removing product from cart: %s", product_id)
        params = {"color": color or None, "size": size or None}
        self.measure_performance(
            "removeFromCart",
            lambda: self.delete(
                f"/cart/{product_id}", params, context="CartService.removeFromCart"
            ),
        )

    def clear_cart(self) -> None:
        self._log.info("Clearing entire cart")
        self.measure_performance(
            "clearCart", lambda: self.delete("/cart", context="CartService.clearCart")
        )

    def get_cart_count(self) -> int:
        """Return the number of items in the cart, or ``0`` when it cannot be fetched.

        The count only feeds the header badge, so a failure degrades to an
        empty badge instead of an error.
        """
        try:
            result = self.measure_performance(
                "getCartCount",
                lambda: self.get("/cart", context="CartService.getCartCount"),
            )
        except Exception as exc:
            self._log.error("Failed to get cart count: %s", exc)
            return 0
        cart = result.data
        if not isinstance(cart, dict):
            return 0
        try:
            return int(cart.get("totalItems") or 0)
        except (TypeError, ValueError):
            return 0


__all__ = ["CartRestAdapter"]
