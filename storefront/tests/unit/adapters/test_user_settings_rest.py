from __future__ import annotations

import pytest

from helpers import FakeClock, SessionStub
from storefront.adapters.api_errors import ApiValidationError
from storefront.adapters.settings_rest import SettingsRestAdapter
from storefront.adapters.user_rest import UserRestAdapter
from storefront.usecases.error_mapping import map_api_error


def _make(cls, outcomes, config):
    session = SessionStub(outcomes)
    return cls(config, session=session, clock=FakeClock()), session


def test_get_profile_reads_current_user(config) -> None:
    payload = {"success": True, "data": {"user": {"email": "a@b.c"}, "token": "jwt"}}
    adapter, session = _make(UserRestAdapter, [(200, payload)], config)

    assert adapter.get_profile() == {"user": {"email": "a@b.c"}, "token": "jwt"}
    assert session.urls == ["http://shop.test/api/auth/me"]


def test_update_profile_drops_none_fields(config) -> None:
    adapter, session = _make(UserRestAdapter, [(200, {"success": True, "data": {"name": "Ada"}})], config)

    adapter.update_profile({"name": "Ada", "phone": None})

    assert session.calls[0][0] == "PUT"
    assert session.body() == {"name": "Ada"}


def test_change_password_requires_both_fields(config) -> None:
    adapter, session = _make(UserRestAdapter, [(200, {"success": True, "data": None})], config)

    with pytest.raises(ApiValidationError) as excinfo:
        adapter.change_password("old", "")
    assert excinfo.value.missing_fields == ["newPassword"]
    assert session.calls == []

    adapter.change_password("old", "new-secret")
    assert session.urls == ["http://shop.test/api/auth/change-password"]
    assert session.body() == {"currentPassword": "old", "newPassword": "new-secret"}


def test_add_address_validates_required_fields(config) -> None:
    adapter, session = _make(UserRestAdapter, [(201, {})], config)

    with pytest.raises(ApiValidationError) as excinfo:
        adapter.add_address({"fullName": "Ada", "city": "London"})

    assert excinfo.value.missing_fields == ["address", "state", "postalCode", "country"]
    assert session.calls == []


def test_address_crud_paths(config) -> None:
    addresses = [{"_id": "a1", "city": "London"}]
    adapter, session = _make(
        UserRestAdapter,
        [(200, {"success": True, "data": addresses}), (200, {"success": True, "data": {"_id": "a1"}}), (204, None)],
        config,
    )

    assert adapter.get_addresses() == addresses
    adapter.update_address("a1", {"city": "Paris"})
    adapter.delete_address("a1")

    assert [call[0] for call in session.calls] == ["GET", "PUT", "DELETE"]
    assert session.urls[1:] == ["http://shop.test/api/addresses/a1", "http://shop.test/api/addresses/a1"]
    assert session.body(1) == {"city": "Paris", "id": "a1"}


def test_search_users_merges_query_into_filters(config) -> None:
    payload = {"success": True, "data": [{"_id": "u1"}]}
    adapter, session = _make(UserRestAdapter, [(200, payload)], config)

    result = adapter.search_users("ada", {"active": True}, {"page": 1})

    assert session.urls == ["http://shop.test/api/customers?page=1&active=true&search=ada"]
    assert result.data == [{"_id": "u1"}]


def test_deactivate_user_puts_active_flag(config) -> None:
    adapter, session = _make(UserRestAdapter, [(200, {"success": True, "data": {"active": False}})], config)

    assert adapter.deactivate_user("u1") == {"active": False}
    assert session.urls == ["http://shop.test/api/customers/u1"]
    assert session.body() == {"active": False, "id": "u1"}


def test_get_all_settings_combines_both_documents(config) -> None:
    adapter, session = _make(
        SettingsRestAdapter,
        [(200, {"success": True, "data": {"showNewArrivals": True}}), (200, {"success": True, "data": {"theme": "dark"}})],
        config,
    )

    assert adapter.get_all_settings() == {"homepage": {"showNewArrivals": True}, "theme": {"theme": "dark"}}
    assert session.urls == [
        "http://shop.test/api/settings/homepage",
        "http://shop.test/api/settings/website-theme",
    ]


def test_invalid_theme_is_rejected_before_request(config) -> None:
    adapter, session = _make(SettingsRestAdapter, [(200, {})], config)

    with pytest.raises(ApiValidationError) as excinfo:
        adapter.update_website_theme({"primaryColor": "red", "theme": "neon"})

    assert excinfo.value.code == "VALIDATION_INVALID_SETTINGS"
    assert session.calls == []
    assert map_api_error(excinfo.value, default_code="SETTINGS_FAILED").code == "INVALID_PARAMS"


def test_reset_homepage_uses_delete(config) -> None:
    adapter, session = _make(SettingsRestAdapter, [(200, {"success": True, "data": {"banners": []}})], config)

    assert adapter.reset_homepage_settings() == {"banners": []}
    assert session.calls[0][0] == "DELETE"
    assert session.urls == ["http://shop.test/api/settings/homepage"]
