from __future__ import annotations

"""Reconcile the remote API's response envelopes into one canonical result.

Endpoints wrap their payloads inconsistently (``{"success": true, "data": ...}``,
bare ``{"categories": [...]}``, ``{"orders": [...], "pagination": ...}``, or no
wrapper at all). ``ENVELOPE_RULES`` lists the known shapes in priority order,
specific shapes before generic fallbacks; the first matching predicate wins.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from .entities import (
    Data,
    DataWithPagination,
    EnvelopeError,
    NormalizedEnvelope,
    PaginationMeta,
)

DEFAULT_FAILURE_MESSAGE = "API request failed"
_ENVELOPE_KEYS = ("success", "error", "message")


@dataclass(frozen=True)
class EnvelopeRule:
    """Named ``(predicate, extractor)`` pair evaluated against a mapping payload."""

    name: str
    matches: Callable[[Mapping[str, Any]], bool]
    extract: Callable[[Mapping[str, Any]], NormalizedEnvelope]


def _is_set(value: Any) -> bool:
    # Empty containers count as present; only None/False/0/"" are absent.
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _succeeded(payload: Mapping[str, Any]) -> bool:
    return payload.get("success") is True


def _data_mapping(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    data = payload.get("data")
    return data if isinstance(data, Mapping) else None


def _with_optional_pagination(items: Any, raw_pagination: Any) -> NormalizedEnvelope:
    pagination = PaginationMeta.from_payload(raw_pagination)
    if pagination is None:
        return Data(items)
    return DataWithPagination(items, pagination)


def _is_product_page(payload: Mapping[str, Any]) -> bool:
    data = _data_mapping(payload)
    return _succeeded(payload) and data is not None and isinstance(data.get("products"), list)


def _extract_product_page(payload: Mapping[str, Any]) -> NormalizedEnvelope:
    data = payload["data"]
    return _with_optional_pagination(data["products"], data.get("pagination"))


def _is_category_list(payload: Mapping[str, Any]) -> bool:
    return "success" not in payload and isinstance(payload.get("categories"), list)


def _is_order_page(payload: Mapping[str, Any]) -> bool:
    return isinstance(payload.get("orders"), list)


def _is_auth_payload(payload: Mapping[str, Any]) -> bool:
    data = _data_mapping(payload)
    if not _succeeded(payload) or data is None:
        return False
    return _is_set(data.get("user")) or _is_set(data.get("token"))


def _is_object_payload(payload: Mapping[str, Any]) -> bool:
    return _succeeded(payload) and _data_mapping(payload) is not None


def _is_any_data_payload(payload: Mapping[str, Any]) -> bool:
    return _succeeded(payload) and _is_set(payload.get("data"))


def _is_unwrapped(payload: Mapping[str, Any]) -> bool:
    return not any(key in payload for key in _ENVELOPE_KEYS)


def _is_failure(payload: Mapping[str, Any]) -> bool:
    return payload.get("success") is False


def _extract_failure(payload: Mapping[str, Any]) -> NormalizedEnvelope:
    message = payload.get("message")
    if isinstance(message, str) and message.strip():
        return EnvelopeError(message)
    return EnvelopeError(DEFAULT_FAILURE_MESSAGE)


ENVELOPE_RULES: Sequence[EnvelopeRule] = (
    EnvelopeRule("product_page", _is_product_page, _extract_product_page),
    EnvelopeRule("category_list", _is_category_list, lambda p: Data(p["categories"])),
    EnvelopeRule(
        "order_page",
        _is_order_page,
        lambda p: _with_optional_pagination(p["orders"], p.get("pagination")),
    ),
    EnvelopeRule("auth_payload", _is_auth_payload, lambda p: Data(p["data"])),
    EnvelopeRule("object_payload", _is_object_payload, lambda p: Data(p["data"])),
    EnvelopeRule("data_payload", _is_any_data_payload, lambda p: Data(p["data"])),
    EnvelopeRule("unwrapped", _is_unwrapped, lambda p: Data(p)),
    EnvelopeRule("failure", _is_failure, _extract_failure),
)


def match_rule(payload: Any) -> Optional[EnvelopeRule]:
    """Return the first rule matching ``payload`` or ``None`` for the default case."""
    if not isinstance(payload, Mapping):
        return None
    for rule in ENVELOPE_RULES:
        if rule.matches(payload):
            return rule
    return None


def normalize_envelope(payload: Any) -> NormalizedEnvelope:
    """Apply the ordered rule table; payloads matching no rule pass through unchanged."""
    rule = match_rule(payload)
    if rule is None:
        return Data(payload)
    return rule.extract(payload)


__all__ = [
    "DEFAULT_FAILURE_MESSAGE",
    "ENVELOPE_RULES",
    "EnvelopeRule",
    "match_rule",
    "normalize_envelope",
]
