"""
String lift: force from pressure acting on the annulus between casing ID and pipe OD.

    F [N] = P [bar] * 1e5 * A [m²]
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from apps.schematic.services.units import annulus_area, parse_number

BAR_TO_PA = 100000
PSI_TO_BAR = 0.0689476
NEWTONS_PER_METRIC_TON = 9806.65
NEWTONS_PER_KGF = 9.80665


def compute_annular_area(casing_id: Any, pipe_od: Any) -> Optional[Dict[str, float]]:
    """Annular area in m² and in²; None when either diameter is invalid or the pipe does not fit."""
    id_in = parse_number(casing_id)
    od_in = parse_number(pipe_od)
    if id_in is None or od_in is None:
        return None
    if id_in <= 0 or od_in <= 0 or id_in <= od_in:
        return None
    return {
        "area_m2": annulus_area(id_in, od_in),
        "area_in2": math.pi / 4 * (id_in ** 2 - od_in ** 2),
    }


def pressure_to_bar(pressure: Any, unit: str = "bar") -> Optional[float]:
    value = parse_number(pressure)
    if value is None:
        return None
    if unit == "psi":
        return value * PSI_TO_BAR
    return value


def compute_lift_force(area_m2: Any, pressure: Any, unit: str = "bar") -> Optional[Dict[str, float]]:
    """Lift force in newtons, kgf and metric tons; None for invalid area or negative pressure."""
    area = parse_number(area_m2)
    pressure_bar = pressure_to_bar(pressure, unit)
    if area is None or pressure_bar is None:
        return None
    if area <= 0 or pressure_bar < 0:
        return None
    newtons = pressure_bar * BAR_TO_PA * area
    return {
        "newtons": newtons,
        "kgf": newtons / NEWTONS_PER_KGF,
        "tons": newtons / NEWTONS_PER_METRIC_TON,
        "pressure_bar": pressure_bar,
    }
