from __future__ import annotations

from typing import Any, Dict, List, Mapping

from storefront.domain.settings import validate_homepage_settings, validate_website_theme

from .api_errors import ApiValidationError
from .base_rest import BaseRestAdapter

SettingsDict = Dict[str, Any]


class SettingsRestAdapter(BaseRestAdapter):
    """REST adapter for storefront presentation settings.

    Endpoints:
      - GET/PUT/DELETE {api}/settings/homepage
      - GET/PUT/DELETE {api}/settings/website-theme

    DELETE resets a settings document to the server default and returns it.
    """

    service_name = "settings"

    def get_homepage_settings(self) -> SettingsDict:
        self._log.info("Fetching homepage settings")
        result = self.measure_performance(
            "getHomepageSettings",
            lambda: self.get(
                "/settings/homepage", context="SettingsService.getHomepageSettings"
            ),
        )
        return result.data

    def update_homepage_settings(self, data: Mapping[str, Any]) -> SettingsDict:
        _raise_on_errors(validate_homepage_settings(data), "SettingsService.updateHomepageSettings")
        payload = self.sanitize_data(data)
        self._log.info("Updating homepage settings fields=%s", sorted(payload))
        result = self.measure_performance(
            "updateHomepageSettings",
            lambda: self.put(
                "/settings/homepage", payload, context="SettingsService.updateHomepageSettings"
            ),
        )
        return result.data

    def reset_homepage_settings(self) -> SettingsDict:
        self._log.info("Resetting homepage settings to default")
        result = self.measure_performance(
            "resetHomepageSettings",
            lambda: self.delete(
                "/settings/homepage", context="SettingsService.resetHomepageSettings"
            ),
        )
        return result.data

    def get_website_theme(self) -> SettingsDict:
        self._log.info("Fetching website theme settings")
        result = self.measure_performance(
            "getWebsiteTheme",
            lambda: self.get(
                "/settings/website-theme", context="SettingsService.getWebsiteTheme"
            ),
        )
        return result.data

    def update_website_theme(self, data: Mapping[str, Any]) -> SettingsDict:
        _raise_on_errors(validate_website_theme(data), "SettingsService.updateWebsiteTheme")
        payload = self.sanitize_data(data)
        self._log.info("Updating website theme fields=%s", sorted(payload))
        result = self.measure_performance(
            "updateWebsiteTheme",
            lambda: self.put(
                "/settings/website-theme", payload, context="SettingsService.updateWebsiteTheme"
            ),
        )
        return result.data

    def reset_website_theme(self) -> SettingsDict:
        self._log.info("Resetting website theme to default")
        result = self.measure_performance(
            "resetWebsiteTheme",
            lambda: self.delete(
                "/settings/website-theme", context="SettingsService.resetWebsiteTheme"
            ),
        )
        return result.data

    def get_all_settings(self) -> Dict[str, SettingsDict]:
        """Return ``{"homepage": ..., "theme": ...}``; either failure propagates."""
        return {"homepage": self.get_homepage_settings(), "theme": self.get_website_theme()}


def _raise_on_errors(errors: List[str], context: str) -> None:
    if errors:
        raise ApiValidationError("; ".join(errors), code="VALIDATION_INVALID_SETTINGS", context=context)


__all__ = ["SettingsRestAdapter"]
