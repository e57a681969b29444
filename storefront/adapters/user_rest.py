from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from storefront.domain.entities import CanonicalResult

from .base_rest import BaseRestAdapter

UserDict = Dict[str, Any]

ADDRESS_FIELDS = ("fullName", "address", "city", "state", "postalCode", "country")


class UserRestAdapter(BaseRestAdapter):
    """REST adapter for the signed-in profile, saved addresses and customer admin.

    Endpoints:
      - GET/PUT {api}/auth/me
      - PUT     {api}/auth/change-password
      - GET     {api}/customers?page=&limit=&role=&active=&search=  -> paginated
      - GET/PUT/DELETE {api}/customers/{id}, POST {api}/customers
      - GET/POST {api}/addresses, PUT/DELETE {api}/addresses/{id}
    """

    service_name = "user"

    # ---------- Profile ----------

    def get_profile(self) -> UserDict:
        self._log.info("Fetching user profile")
        result = self.measure_performance(
            "getProfile",
            lambda: self.get("/auth/me", context="UserService.getProfile"),
        )
        return result.data

    def update_profile(self, data: Mapping[str, Any]) -> UserDict:
        payload = self.sanitize_data(data)
        self._log.info("Updating user profile fields=%s", sorted(payload))
        result = self.measure_performance(
            "updateProfile",
            lambda: self.put("/auth/me", payload, context="UserService.updateProfile"),
        )
        return result.data

    def change_password(self, current_password: str, new_password: str) -> None:
        request = {"currentPassword": current_password, "newPassword": new_password}
        self.validate_required(request, ["currentPassword", "newPassword"])
        self._log.info("Changing user password")
        self.measure_performance(
            "changePassword",
            lambda: self.put(
                "/auth/change-password", request, context="UserService.changePassword"
            ),
        )

    # ---------- Addresses ----------

    def get_addresses(self) -> List[Dict[str, Any]]:
        result = self.measure_performance(
            "getAddresses",
            lambda: self.get("/addresses", context="UserService.getAddresses"),
        )
        data = result.data
        return data if isinstance(data, list) else []

    def add_address(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.validate_required(data, ADDRESS_FIELDS)
        payload = self.sanitize_data(data)
        self._log.info("Adding address in %s, %s", data.get("city"), data.get("country"))
        result = self.measure_performance(
            "addAddress",
            lambda: self.post("/addresses", payload, context="UserService.addAddress"),
        )
        return result.data

    def update_address(self, address_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.validate_required({"id": address_id}, ["id"])
        payload = self.sanitize_data({**data, "id": address_id})
        result = self.measure_performance(
            "updateAddress",
            lambda: self.put(
                f"/addresses/{address_id}", payload, context="UserService.updateAddress"
            ),
        )
        return result.data

    def delete_address(self, address_id: str) -> None:
        self.validate_required({"id": address_id}, ["id"])
        self._log.info("Deleting address: %s", address_id)
        self.measure_performance(
            "deleteAddress",
            lambda: self.delete(f"/addresses/{address_id}", context="UserService.deleteAddress"),
        )

    # ---------- Customer administration ----------

    def get_users(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        params = self.sanitize_data({**(pagination or {}), **(filters or {})})
        return self.measure_performance(
            "getUsers",
            lambda: self.get_paginated("/customers", params, context="UserService.getUsers"),
        )

    def search_users(
        self,
        query: str,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        self.validate_required({"query": query}, ["query"])
        return self.get_users({**(filters or {}), "search": query}, pagination)

    def get_user(self, user_id: str) -> UserDict:
        self.validate_required({"id": user_id}, ["id"])
        result = self.measure_performance(
            "getUser",
            lambda: self.get(f"/customers/{user_id}", context="UserService.getUser"),
        )
        return result.data

    def create_user(self, data: Mapping[str, Any]) -> UserDict:
        self.validate_required(data, ["name", "email", "password"])
        payload = self.sanitize_data(data)
        self._log.info("Creating user %s role=%s", data.get("email"), data.get("role") or "customer")
        result = self.measure_performance(
            "createUser",
            lambda: self.post("/customers", payload, context="UserService.createUser"),
        )
        return result.data

    def update_user(self, user_id: str, data: Mapping[str, Any]) -> UserDict:
        self.validate_required({"id": user_id}, ["id"])
        payload = self.sanitize_data({**data, "id": user_id})
        self._log.info("Updating user %s fields=%s", user_id, sorted(data))
        result = self.measure_performance(
            "updateUser",
            lambda: self.put(f"/customers/{user_id}", payload, context="UserService.updateUser"),
        )
        return result.data

    def delete_user(self, user_id: str) -> None:
        self.validate_required({"id": user_id}, ["id"])
        self._log.info("Deleting user: %s", user_id)
        self.measure_performance(
            "deleteUser",
            lambda: self.delete(f"/customers/{user_id}", context="UserService.deleteUser"),
        )

    def activate_user(self, user_id: str) -> UserDict:
        return self.update_user(user_id, {"active": True})

    def deactivate_user(self, user_id: str) -> UserDict:
        return self.update_user(user_id, {"active": False})


__all__ = ["ADDRESS_FIELDS", "UserRestAdapter"]
