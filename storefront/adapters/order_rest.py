from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from storefront.domain.entities import CanonicalResult
from storefront.domain.ports import OrderId, OrderPort

from .api_errors import ApiValidationError
from .base_rest import BaseRestAdapter

OrderDict = Dict[str, Any]

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


class OrderRestAdapter(BaseRestAdapter, OrderPort):
    """REST adapter for orders.

    Endpoints:
      - GET  {api}/orders?page=&limit=&status=  -> {"orders": [...], "pagination": {...}}
      - GET  {api}/orders/{id}
      - POST {api}/orders
      - PUT  {api}/orders/{id}
    """

    service_name = "order"

    def get_orders(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        params = self.sanitize_data({**(pagination or {}), **(filters or {})})
        return self.measure_performance(
            "getOrders",
            lambda: self.get_paginated("/orders", params, context="OrderService.getOrders"),
        )

    def get_order(self, order_id: OrderId) -> OrderDict:
        self.validate_required({"id": order_id}, ["id"])
        result = self.measure_performance(
            "getOrder",
            lambda: self.get(f"/orders/{order_id}", context="OrderService.getOrder"),
        )
        return result.data

    def create_order(self, order: Mapping[str, Any]) -> OrderDict:
        self.validate_required(order, ["items", "shipping", "payment", "totalPrice"])
        payload = self.sanitize_data(order)
        self._log.info("Creating order with %d items", len(order.get("items") or []))
        result = self.measure_performance(
            "createOrder",
            lambda: self.post("/orders", payload, context="OrderService.createOrder"),
        )
        return result.data

    def update_order_status(
        self,
        order_id: OrderId,
        status: str,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> OrderDict:
        self.validate_required({"id": order_id, "status": status}, ["id", "status"])
        if status not in ORDER_STATUSES:
            raise ApiValidationError(
                f"Unknown order status '{status}'",
                code="VALIDATION_INVALID_STATUS",
                context="OrderService.updateOrderStatus",
            )
        payload = self.sanitize_data({**(extra or {}), "status": status})
        self._log.info("Updating order %s status -> %s", order_id, status)
        result = self.measure_performance(
            "updateOrderStatus",
            lambda: self.put(f"/orders/{order_id}", payload, context="OrderService.updateOrderStatus"),
        )
        return result.data

    def cancel_order(self, order_id: OrderId) -> OrderDict:
        return self.update_order_status(order_id, "cancelled")

    def mark_order_as_paid(self, order_id: OrderId, paid_at: Optional[datetime] = None) -> OrderDict:
        stamp = (paid_at or datetime.now(timezone.utc)).isoformat()
        return self.update_order_status(order_id, "processing", {"isPaid": True, "paidAt": stamp})


__all__ = ["ORDER_STATUSES", "OrderRestAdapter"]
