from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from storefront.domain.entities import CanonicalResult
from storefront.domain.ports import ProductId, ProductPort

from .base_rest import BaseRestAdapter

ProductDict = Dict[str, Any]


class ProductRestAdapter(BaseRestAdapter, ProductPort):
    """REST adapter for catalog products.

    Endpoints:
      - GET    {api}/products?page=&limit=&...  -> {"success": true, "data": {"products": [...], "pagination": {...}}}
      - GET    {api}/products/{id}
      - POST   {api}/products
      - PUT    {api}/products/{id}
      - DELETE {api}/products/{id}
    """

    service_name = "product"

    def get_products(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        self._log.info("Fetching products filters=%s pagination=%s", dict(filters or {}), dict(pagination or {}))
        params = self.sanitize_data({**(pagination or {}), **(filters or {})})
        return self.measure_performance(
            "getProducts",
            lambda: self.get_paginated("/products", params, context="ProductService.getProducts"),
        )

    def get_product(self, product_id: ProductId) -> ProductDict:
        self.validate_required({"id": product_id}, ["id"])
        result = self.measure_performance(
            "getProduct",
            lambda: self.get(f"/products/{product_id}", context="ProductService.getProduct"),
        )
        return result.data

    def create_product(self, data: Mapping[str, Any]) -> ProductDict:
        self.validate_required(data, ["name", "price"])
        payload = self.sanitize_data(data)
        self._log.info("Creating product: %s", data.get("name"))
        result = self.measure_performance(
            "createProduct",
            lambda: self.post("/products", payload, context="ProductService.createProduct"),
        )
        return result.data

    def update_product(self, product_id: ProductId, data: Mapping[str, Any]) -> ProductDict:
        self.validate_required({"id": product_id}, ["id"])
        payload = self.sanitize_data({**data, "id": product_id})
        result = self.measure_performance(
            "updateProduct",
            lambda: self.put(
                f"/products/{product_id}", payload, context="ProductService.updateProduct"
            ),
        )
        return result.data

    def delete_product(self, product_id: ProductId) -> None:
        self.validate_required({"id": product_id}, ["id"])
        self._log.info("Deleting product: %s", product_id)
        self.measure_performance(
            "deleteProduct",
            lambda: self.delete(f"/products/{product_id}", context="ProductService.deleteProduct"),
        )

    def search_products(
        self,
        query: str,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        self.validate_required({"query": query}, ["query"])
        return self.get_products({**(filters or {}), "search": query}, pagination)

    def get_products_by_ids(self, product_ids: Sequence[ProductId]) -> List[ProductDict]:
        if not product_ids:
            return []
        result = self.get_products(
            {"productIds": ",".join(product_ids)}, {"limit": len(product_ids)}
        )
        data = result.data
        return list(data) if isinstance(data, list) else []

    def check_availability(self, product_id: ProductId) -> bool:
        """Return ``True`` for an active product in stock; ``False`` on any failure."""
        try:
            product = self.get_product(product_id)
        except Exception as exc:
            self._log.warning("Availability check failed for %s: %s", product_id, exc)
            return False
        quantity = product.get("quantity") or 0
        return bool(product.get("active")) and quantity > 0 and product.get("status") == "active"

    def update_stock(self, product_id: ProductId, quantity_purchased: int) -> ProductDict:
        """Decrement stock after a purchase, never below zero."""
        product = self.get_product(product_id)
        old_quantity = int(product.get("quantity") or 0)
        new_quantity = max(0, old_quantity - int(quantity_purchased))
        updated = self.update_product(product_id, {"quantity": new_quantity})
        self._log.info(
            "Stock updated for product %s: %d -> %d (purchased %d)",
            product_id,
            old_quantity,
            new_quantity,
            quantity_purchased,
        )
        return updated


__all__ = ["ProductRestAdapter"]
