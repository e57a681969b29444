from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..domain.entities import Failure
from ..domain.ports import ProductPort, UseCaseError
from .error_mapping import map_api_error
from .process_batch import ProcessBatch


@dataclass
class StockUpdateReport:
    """Per-product outcome of a bulk stock update."""

    updated: List[str] = field(default_factory=list)
    failed: Dict[str, UseCaseError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class UpdateStockLevels:
    """Decrement stock for every purchased line of an order.

    Lines are processed through ``ProcessBatch`` so large orders do not hit
    the product API with one request per line all at once.
    """

    product_port: ProductPort
    batch: ProcessBatch = field(default_factory=ProcessBatch)
    _log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__), repr=False)

    def __call__(self, items: Sequence[Mapping[str, Any]]) -> StockUpdateReport:
        lines = self._merge_lines(items)
        if not lines:
            return StockUpdateReport()

        def work(line):
            product_id, quantity = line
            return self.product_port.update_stock(product_id, quantity)

        report = StockUpdateReport()
        outcomes = self.batch.collect(lines, work)
        for (product_id, _qty), outcome in zip(lines, outcomes):
            if isinstance(outcome, Failure):
                report.failed[product_id] = map_api_error(
                    outcome.error, default_code="STOCK_UPDATE_FAILED"
                )
            else:
                report.updated.append(product_id)
        if report.failed:
            self._log.warning(
                "Stock update failed for %d of %d products: %s",
                len(report.failed),
                len(lines),
                ", ".join(sorted(report.failed)),
            )
        return report

    @staticmethod
    def _merge_lines(items: Sequence[Mapping[str, Any]]) -> List[Tuple[str, int]]:
        """Validate order lines and sum quantities per product.

        Each product appears once in the result, in first-seen order.
        """
        totals: Dict[str, int] = {}
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise UseCaseError("INVALID_PARAMS", f"Order line {index} is not an object.")
            product_id = item.get("product")
            if product_id is None or not str(product_id).strip():
                raise UseCaseError("INVALID_PARAMS", f"Order line {index} has no product.")
            quantity = item.get("quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, (int, str)):
                raise UseCaseError(
                    "INVALID_PARAMS", f"Order line {index} has invalid quantity {quantity!r}."
                )
            try:
                amount = int(quantity)
            except ValueError:
                raise UseCaseError(
                    "INVALID_PARAMS", f"Order line {index} has invalid quantity {quantity!r}."
                ) from None
            if amount <= 0:
                raise UseCaseError(
                    "INVALID_PARAMS", f"Order line {index} quantity must be greater than 0."
                )
            key = str(product_id)
            totals[key] = totals.get(key, 0) + amount
        return list(totals.items())
