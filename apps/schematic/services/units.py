"""
Unit and geometry helpers.

Every diameter -> cross-sectional area conversion in the app goes through
``area_from_diameter_inches``. Diameters are inches, areas are m², linear
capacities are L/m (1 L/m == 0.001 m²).
"""

from __future__ import annotations

import math
from typing import Any, Optional

from apps.schematic.services.config import get_setting

INCH_TO_M = 0.0254


# -----------------------------
# NUMBER PARSING
# -----------------------------
def parse_number(raw: Any) -> Optional[float]:
    """
    Parse user numeric input tolerant of locale formatting.

    Spaces (including non-breaking spaces used as thousand separators) are
    removed and the first comma becomes the decimal point:
        "3277,5"  -> 3277.5
        " 4 065 " -> 4065.0

    Returns None for missing, non-numeric or non-finite input; never NaN.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = "".join(str(raw).split()).replace(",", ".", 1)
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on", "checked")
    return bool(raw)


# -----------------------------
# GEOMETRY
# -----------------------------
def inches_to_meters(x: Optional[float]) -> float:
    if x is None or not math.isfinite(x):
        return 0.0
    return x * INCH_TO_M


def area_from_diameter_inches(d: Optional[float]) -> float:
    """Cross-sectional area (m²) of a circle of diameter ``d`` inches."""
    if d is None or not math.isfinite(d) or d <= 0:
        return 0.0
    radius_m = inches_to_meters(d) / 2
    return math.pi * radius_m ** 2


def area_from_linear_capacity(l_per_m: Optional[float]) -> float:
    """L/m -> m³/m -> m²."""
    if l_per_m is None or not math.isfinite(l_per_m) or l_per_m <= 0:
        return 0.0
    return l_per_m / 1000.0


def area_to_liters_per_meter(area_m2: float) -> float:
    return area_m2 * 1000.0


def steel_cross_section_area(
    od: Optional[float],
    id: Optional[float] = None,
    l_per_m: Optional[float] = None,
) -> float:
    """
    Pipe wall area (m²): OD area minus bore area, never negative.

    The bore comes from ``id`` when given, otherwise from ``l_per_m``.
    """
    if id is not None and id > 0:
        bore = area_from_diameter_inches(id)
    else:
        bore = area_from_linear_capacity(l_per_m)
    return max(0.0, area_from_diameter_inches(od) - bore)


def annulus_area(outer_id: Optional[float], inner_od: Optional[float]) -> float:
    """Area between an enclosing bore and a pipe OD, clamped at 0."""
    return max(0.0, area_from_diameter_inches(outer_id) - area_from_diameter_inches(inner_od))


def round_volume(value: Optional[float], places: Optional[int] = None) -> float:
    """Standard display rounding for m³ values."""
    if value is None:
        return 0.0
    if places is None:
        places = get_setting("VOLUME_DECIMALS")
    return round(value, places)
