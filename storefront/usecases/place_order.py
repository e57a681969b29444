from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..domain.orders import calculate_order_totals, validate_order
from ..domain.ports import OrderPort, UseCaseError
from .error_mapping import map_api_error


@dataclass
class PlaceOrder:
    """Validate an order locally, fill in totals, then submit it.

    ``totalPrice`` is computed from the items when the caller omits it; a
    caller-supplied total is sent unchanged.
    """

    order_port: OrderPort
    shipping_cost: float = 0.0
    tax_rate: float = 0.08
    _log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__), repr=False)

    def __call__(self, order: Mapping[str, Any]) -> Dict[str, Any]:
        draft: Dict[str, Any] = dict(order)
        items: List[Mapping[str, Any]] = list(draft.get("items") or [])
        if items and draft.get("totalPrice") is None:
            try:
                totals = calculate_order_totals(items, self.shipping_cost, self.tax_rate)
            except (KeyError, TypeError, ValueError) as exc:
                raise UseCaseError("INVALID_ORDER", f"Invalid order item: {exc}")
            draft.update(
                itemsPrice=totals.items_price,
                shippingPrice=totals.shipping_price,
                taxPrice=totals.tax_price,
                totalPrice=totals.total_price,
            )

        validation = validate_order(draft)
        if not validation.valid:
            raise UseCaseError(
                "INVALID_ORDER",
                "; ".join(validation.errors),
                meta={"errors": validation.errors},
            )

        try:
            created = self.order_port.create_order(draft)
        except Exception as exc:
            raise map_api_error(exc, default_code="ORDER_FAILED")
        self._log.info("Order placed: %s", created.get("_id") if isinstance(created, dict) else created)
        return created
