from __future__ import annotations

from typing import Any

from django.conf import settings


DEFAULTS = {
    "VOLUME_DECIMALS": 2,
    "MAX_SEGMENTS": 64,
}


def get_setting(name: str) -> Any:
    """Read a WELLVOLUME setting, falling back to the app default."""
    if not settings.configured:
        return DEFAULTS[name]
    overrides = getattr(settings, "WELLVOLUME", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
