"""
Pipe and fluid catalogs.

OD / drift / tool-joint tables are keyed by role and nominal ID (inches).
Tubing and drill pipe entries quote bore capacity (``l_per_m``) and open-ended
displacement (``eod``) in L/m; ``ced`` is closed-ended displacement.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from apps.schematic.models.segment import (
    RISER,
    CONDUCTOR,
    SURFACE,
    INTERMEDIATE,
    PRODUCTION,
    TIEBACK,
    RESERVOIR,
    SMALL_LINER,
    UPPER_COMPLETION,
    OPEN_HOLE,
)


OD: Dict[str, Dict[float, float]] = {
    CONDUCTOR: {17.8: 18.625, 28: 30, 27: 30},
    RISER: {17.5: 20, 8.5: 9.5},
    SURFACE: {18.73: 20, 17.8: 18.625},
    INTERMEDIATE: {12.415: 13.375, 12.375: 13.625},
    PRODUCTION: {6.276: 7, 8.921: 9.625, 8.535: 9.625},
    TIEBACK: {8.535: 9.625, 8.921: 9.625, 9.66: 11.5},
    RESERVOIR: {6.184: 7, 6.276: 7, 4.778: 5.5},
    SMALL_LINER: {4.276: 5, 3.958: 4.5},
    UPPER_COMPLETION: {4.892: 5.5},
}

# Fallback OD when the ID is not in the table. Tieback falls back to the
# production OD and open hole to its own ID (see default_od).
DEFAULT_OD: Dict[str, float] = {
    CONDUCTOR: 30,
    RISER: 20,
    SURFACE: 20,
    INTERMEDIATE: 13.375,
    PRODUCTION: 9.625,
    RESERVOIR: 5.5,
    SMALL_LINER: 5,
    UPPER_COMPLETION: 5.5,
}

TJ: Dict[str, Dict[float, float]] = {
    UPPER_COMPLETION: {4.892: 6.098},
}

DRIFT: Dict[str, Dict[float, float]] = {
    CONDUCTOR: {28: 27.813, 27: 26.755},
    SURFACE: {17.8: 17.168, 18.73: 18.5},
    INTERMEDIATE: {12.415: 12.259, 12.375: 12.26},
    PRODUCTION: {8.535: 8.508, 8.681: 8.525},
    RESERVOIR: {6.184: 6.102, 4.778: 4.653},
    SMALL_LINER: {4.276: 4.151, 3.958: 3.833},
}

TUBING_CATALOG: List[Dict[str, Any]] = [
    {"name": '4 1/2" 12.6# L-80', "id": 3.958, "od": 4.5, "l_per_m": 9.728, "eod": 0},
    {"name": '5 1/2" 17#', "id": 4.892, "od": 5.5, "l_per_m": 11.803, "eod": 0},
]

DRILLPIPE_CATALOG: List[Dict[str, Any]] = [
    {"name": '2 7/8"', "id": 2.151, "od": 2.875, "l_per_m": 2.238, "eod": 2.059, "ced": 4.296},
    {"name": '4"', "id": 3.34, "od": 4.0, "l_per_m": 5.396, "eod": 2.985, "ced": 8.381},
    {"name": '5"', "id": 4.276, "od": 5.0, "l_per_m": 9.021, "eod": 4.144, "ced": 13.167},
    {"name": '5 7/8"', "id": 5.153, "od": 5.875, "l_per_m": 13.128, "eod": 4.739, "ced": 17.857},
]

# Fluid bulk-modulus style compressibility factors (bar) for pressure-test volumes
FLUID_COMPRESSIBILITY: Dict[str, float] = {
    "wbm_brine": 21,
    "obm": 18,
    "base_oil": 14,
    "kfls": 35,
}

PRESSURE_DEFAULTS: Dict[str, float] = {
    "low": 20,
    "high": 345,
    "max": 1035,
}


def _table_lookup(table: Dict[str, Dict[float, float]], role: str, id: Optional[float]) -> Optional[float]:
    if id is None:
        return None
    for key, value in (table.get(role) or {}).items():
        if abs(float(key) - float(id)) < 1e-6:
            return float(value)
    return None


def default_od(role: str, id: Optional[float]) -> Optional[float]:
    """OD for a role/ID pair: catalog match, else the role's fallback."""
    if role == OPEN_HOLE:
        return id
    match = _table_lookup(OD, role, id)
    if match is not None:
        return match
    if role == TIEBACK:
        return DEFAULT_OD[PRODUCTION]
    return DEFAULT_OD.get(role, id)


def default_drift(role: str, id: Optional[float]) -> Optional[float]:
    return _table_lookup(DRIFT, role, id)


def default_tool_joint(role: str, id: Optional[float]) -> Optional[float]:
    return _table_lookup(TJ, role, id)


def _lookup_entry(catalog: List[Dict[str, Any]], size: Any) -> Optional[Dict[str, Any]]:
    if size is None or isinstance(size, bool):
        return None
    if isinstance(size, int) or (isinstance(size, str) and size.strip().isdigit()):
        index = int(size)
        if 0 <= index < len(catalog):
            return dict(catalog[index])
        return None
    name = str(size).strip()
    for entry in catalog:
        if entry["name"] == name:
            return dict(entry)
    return None


def lookup_tubing(size: Any) -> Optional[Dict[str, Any]]:
    """Tubing catalog entry by index or name."""
    return _lookup_entry(TUBING_CATALOG, size)


def lookup_drill_pipe(size: Any) -> Optional[Dict[str, Any]]:
    """Drill pipe catalog entry by index or name."""
    return _lookup_entry(DRILLPIPE_CATALOG, size)


def catalogs_payload() -> Dict[str, Any]:
    """All catalogs in a JSON-friendly shape (float keys become strings)."""
    def stringify(table: Dict[str, Dict[float, float]]) -> Dict[str, Dict[str, float]]:
        return {role: {str(k): v for k, v in sizes.items()} for role, sizes in table.items()}

    return {
        "od": stringify(OD),
        "drift": stringify(DRIFT),
        "tool_joint": stringify(TJ),
        "tubing": TUBING_CATALOG,
        "drill_pipe": DRILLPIPE_CATALOG,
        "fluid_compressibility": FLUID_COMPRESSIBILITY,
        "pressure_defaults": PRESSURE_DEFAULTS,
    }
