from __future__ import annotations

"""Pure validation rules for storefront homepage and theme settings."""

import re
from typing import Any, Iterable, List, Mapping

THEME_MODES = ("light", "dark", "auto")
HOMEPAGE_COLOR_FIELDS = ("backgroundColor", "accentColor")
THEME_COLOR_FIELDS = ("primaryColor", "secondaryColor", "accentColor", "backgroundColor", "textColor")

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _cta_errors(banners: Iterable[Mapping[str, Any]], label: str) -> List[str]:
    errors: List[str] = []
    for index, banner in enumerate(banners, start=1):
        has_link = bool(_text(banner.get("ctaLink")))
        has_text = bool(_text(banner.get("ctaText")))
        if has_link and not has_text:
            errors.append(f"{label} {index}: CTA text is required when CTA link is provided")
        if has_text and not has_link:
            errors.append(f"{label} {index}: CTA link is required when CTA text is provided")
    return errors


def _color_errors(settings: Mapping[str, Any], fields: Iterable[str]) -> List[str]:
    return [
        f"{name}: Must be a valid hex color code"
        for name in fields
        if settings.get(name) and not _HEX_COLOR.match(str(settings[name]))
    ]


def validate_homepage_settings(settings: Mapping[str, Any]) -> List[str]:
    """Return human-readable problems; an empty list means the update is valid.

    Banner titles are optional; a CTA link and its text must come together.
    """
    errors = _cta_errors(settings.get("heroBanners") or (), "Hero banner")
    errors += _cta_errors(settings.get("banners") or (), "Promotional banner")
    errors += _color_errors(settings, HOMEPAGE_COLOR_FIELDS)
    return errors


def validate_website_theme(theme: Mapping[str, Any]) -> List[str]:
    errors = _color_errors(theme, THEME_COLOR_FIELDS)
    mode = theme.get("theme")
    if mode and mode not in THEME_MODES:
        errors.append('theme: Must be one of "light", "dark", or "auto"')
    return errors


__all__ = [
    "THEME_MODES",
    "validate_homepage_settings",
    "validate_website_theme",
]
