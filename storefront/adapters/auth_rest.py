from __future__ import annotations

from typing import Any, Dict, Mapping

from .base_rest import BaseRestAdapter


class AuthRestAdapter(BaseRestAdapter):
    """REST adapter for session authentication.

    Endpoints:
      - POST {api}/auth/login     -> {"success": true, "data": {"user": {...}, "token": "..."}}
      - POST {api}/auth/register
      - POST {api}/auth/logout
      - GET  {api}/auth/me
    """

    service_name = "auth"

    def login(self, email: str, password: str) -> Dict[str, Any]:
        credentials = {"email": email, "password": password}
        self.validate_required(credentials, ["email", "password"])
        self._log.info("User login attempt: %s", email)
        result = self.measure_performance(
            "login",
            lambda: self.post("/auth/login", credentials, context="AuthService.login"),
        )
        return result.data

    def register(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.validate_required(data, ["name", "email", "password"])
        payload = self.sanitize_data(data)
        self._log.info("Registering user: %s", data.get("email"))
        result = self.measure_performance(
            "register",
            lambda: self.post("/auth/register", payload, context="AuthService.register"),
        )
        return result.data

    def logout(self) -> None:
        self.measure_performance(
            "logout",
            lambda: self.post("/auth/logout", context="AuthService.logout"),
        )

    def get_current_user(self) -> Dict[str, Any]:
        result = self.measure_performance(
            "getCurrentUser",
            lambda: self.get("/auth/me", context="AuthService.getCurrentUser"),
        )
        data = result.data
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            return data["user"]
        return data


__all__ = ["AuthRestAdapter"]
