"""Plugin settings with defaults, read from ``settings.AWESOME_FIELDS``."""

from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "TEXTAREA_SIZES": {
        "long": {"rows": 20, "cols": 70},
        "short": {"rows": 10, "cols": 30},
    },
    "SELECT_SIZE": 5,
    "DATE_ORDER": ("month", "day", "year"),
    "YEAR_RANGE": 5,
}


def get_setting(name: str) -> Any:
    """Return a plugin setting, falling back to the built-in default."""
    overrides = getattr(settings, "AWESOME_FIELDS", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
