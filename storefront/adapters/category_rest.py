from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from storefront.domain.ports import CategoryPort

from .base_rest import BaseRestAdapter

CategoryDict = Dict[str, Any]


class CategoryRestAdapter(BaseRestAdapter, CategoryPort):
    """REST adapter for the category tree.

    Endpoints:
      - GET    {api}/categories?active=&parentOnly=&parent=&search=  -> {"categories": [...]}
      - GET    {api}/categories/{id}
      - POST   {api}/categories
      - PUT    {api}/categories/{id}
      - DELETE {api}/categories/{id}
    """

    service_name = "category"
    write_timeout_ms = 15000

    def get_categories(self, filters: Optional[Mapping[str, Any]] = None) -> List[CategoryDict]:
        self._log.info("Fetching categories filters=%s", dict(filters or {}))
        params = self.sanitize_data(dict(filters or {}))
        result = self.measure_performance(
            "getCategories",
            lambda: self.get("/categories", params, context="CategoryService.getCategories"),
        )
        return _as_list(result.data)

    def get_category(self, category_id: str) -> CategoryDict:
        self.validate_required({"id": category_id}, ["id"])
        self._log.info("Fetching category: %s", category_id)
        result = self.measure_performance(
            "getCategory",
            lambda: self.get(f"/categories/{category_id}", context="CategoryService.getCategory"),
        )
        return result.data

    def create_category(self, data: Mapping[str, Any]) -> CategoryDict:
        self.validate_required(data, ["name"])
        payload = self.sanitize_data(data)
        self._log.info("Creating category: %s", data.get("name"))
        result = self.measure_performance(
            "createCategory",
            lambda: self.post(
                "/categories",
                payload,
                context="CategoryService.createCategory",
                timeout_ms=self.write_timeout_ms,
            ),
        )
        return result.data

    def update_category(self, category_id: str, data: Mapping[str, Any]) -> CategoryDict:
        self.validate_required({"id": category_id}, ["id"])
        payload = self.sanitize_data({**data, "id": category_id})
        self._log.info("Updating category: %s", category_id)
        result = self.measure_performance(
            "updateCategory",
            lambda: self.put(
                f"/categories/{category_id}",
                payload,
                context="CategoryService.updateCategory",
                timeout_ms=self.write_timeout_ms,
            ),
        )
        return result.data

    def delete_category(self, category_id: str) -> None:
        self.validate_required({"id": category_id}, ["id"])
        self._log.info("Deleting category: %s", category_id)
        self.measure_performance(
            "deleteCategory",
            lambda: self.delete(
                f"/categories/{category_id}", context="CategoryService.deleteCategory"
            ),
        )

    def get_active_categories(self) -> List[CategoryDict]:
        return self.get_categories({"active": True})

    def get_parent_categories(self, limit: Optional[int] = None) -> List[CategoryDict]:
        categories = self.get_categories({"parentOnly": True, "active": True})
        if limit:
            return categories[:limit]
        return categories

    def get_child_categories(self, parent_id: str) -> List[CategoryDict]:
        self.validate_required({"parentId": parent_id}, ["parentId"])
        return self.get_categories({"parent": parent_id, "active": True})

    def get_category_hierarchy(self) -> List[CategoryDict]:
        """Return active top-level categories, each with a ``children`` list."""

        def build() -> List[CategoryDict]:
            all_categories = self.get_active_categories()
            parents = [cat for cat in all_categories if not cat.get("parent")]
            hierarchy: List[CategoryDict] = []
            for parent in parents:
                children = [
                    cat
                    for cat in all_categories
                    if _parent_id(cat) is not None and _parent_id(cat) == parent.get("_id")
                ]
                hierarchy.append({**parent, "children": children})
            return hierarchy

        return self.measure_performance("getCategoryHierarchy", build)

    def get_navigation_categories(self, max_depth: int = 2) -> List[CategoryDict]:
        """Categories for the navigation menu; ``[]`` when they cannot be fetched."""
        try:
            if max_depth == 1:
                return self.get_parent_categories()
            return self.get_category_hierarchy()
        except Exception as exc:
            self._log.error("Failed to fetch navigation categories (max_depth=%s): %s", max_depth, exc)
            return []

    def get_category_by_slug(self, slug: str) -> CategoryDict:
        self.validate_required({"slug": slug}, ["slug"])
        for category in self.get_active_categories():
            if category.get("slug") == slug:
                return category
        raise LookupError(f"Category with slug '{slug}' not found")


def _as_list(data: Any) -> List[CategoryDict]:
    if isinstance(data, list):
        return [entry for entry in data if isinstance(entry, dict)]
    return []


def _parent_id(category: Mapping[str, Any]) -> Optional[str]:
    parent = category.get("parent")
    if isinstance(parent, Mapping):
        return parent.get("_id")
    return parent


__all__ = ["CategoryRestAdapter"]
