"""
Flow velocity through the active inner string and its annulus.

Velocities come from the same interval decomposition as the volumes, so the
bore and annulus areas per interval are exactly the ones used for m³.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from apps.schematic.models.segment import Segment
from apps.schematic.services.inner_string import (
    build_drill_pipe_string,
    build_tubing_string,
    decompose_inner_string,
)
from apps.schematic.services.options import parse_options
from apps.schematic.services.ownership import resolve_ownership
from apps.schematic.services.segment_normalizer import normalize_segments
from apps.schematic.services.units import parse_number

logger = logging.getLogger(__name__)

M_TO_FT = 3.28084
GALLON_M3 = 0.003785411784
BARREL_M3 = 0.158987294928

FLOW_UNIT_LABELS = {
    "lpm": "L/min",
    "gpm": "GPM",
    "m3h": "m³/h",
    "bpm": "BPM",
}

_TO_M3S = {
    "lpm": lambda v: v / 1000 / 60,
    "gpm": lambda v: v * GALLON_M3 / 60,
    "m3h": lambda v: v / 3600,
    "bpm": lambda v: v * BARREL_M3 / 60,
}

_FROM_M3S = {
    "lpm": lambda v: v * 1000 * 60,
    "gpm": lambda v: v * 60 / GALLON_M3,
    "m3h": lambda v: v * 3600,
    "bpm": lambda v: v * 60 / BARREL_M3,
}


def convert_flow_to_m3s(value: Any, unit: str = "lpm") -> Optional[float]:
    """Flow rate in ``unit`` -> m³/s. Unknown units are read as L/min."""
    numeric = parse_number(value)
    if numeric is None:
        return None
    return _TO_M3S.get(unit, _TO_M3S["lpm"])(numeric)


def convert_m3s_to_unit(value_m3s: Optional[float], unit: str = "lpm") -> Optional[float]:
    if value_m3s is None:
        return None
    return _FROM_M3S.get(unit, _FROM_M3S["lpm"])(value_m3s)


def convert_mps_to_fps(value_mps: Optional[float]) -> Optional[float]:
    return value_mps * M_TO_FT if value_mps is not None else None


def _summarize(values: List[float]) -> Dict[str, Optional[float]]:
    if not values:
        return {"min": None, "max": None, "avg": None}
    return {"min": min(values), "max": max(values), "avg": sum(values) / len(values)}


def compute_flow_velocity(
    flow_rate: Any,
    segments: Iterable[Union[Segment, Mapping[str, Any]]],
    options: Any = None,
    unit: str = "lpm",
    depth: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Pipe and annular velocities per depth interval of the active string.

    Args:
        flow_rate: Pump rate in ``unit`` (locale strings accepted)
        segments: Well segments, as for compute_volumes
        options: Engine options; drill pipe mode selects the drill string
        unit: lpm, gpm, m3h or bpm
        depth: Optional depth picking the interval reported as ``overlay``

    Returns:
        Dict with valid flag, per-interval velocities and min/max/avg summaries.
        ``reason`` is 'invalid-flow-rate' or 'no-pipe' when not valid.
    """
    flow_m3s = convert_flow_to_m3s(flow_rate, unit)
    base = {"active": True, "flow_rate_m3s": flow_m3s, "flow_rate_unit": unit, "flow_rate_value": flow_rate}
    if flow_m3s is None or flow_m3s <= 0:
        return {**base, "valid": False, "reason": "invalid-flow-rate", "segments": []}

    opts = parse_options(options)
    normalization = normalize_segments(segments, opts.surface_in_use, opts.intermediate_in_use)
    partition = resolve_ownership(normalization.segments)

    string = build_drill_pipe_string(opts.drill_pipe) if opts.dp_requested else build_tubing_string(normalization)
    if not string.active:
        return {**base, "valid": False, "reason": "no-pipe", "segments": [], "pipe_mode": string.kind}

    decomposition = decompose_inner_string(string, partition, subtract_eod=opts.subtract_eod)

    rows: List[Dict[str, Any]] = []
    for interval in decomposition.intervals:
        bore = interval.bore_volume / interval.length
        annulus = interval.annulus_volume / interval.length
        pipe_mps = flow_m3s / bore if bore > 0 else None
        annuli = []
        if annulus > 0:
            annulus_mps = flow_m3s / annulus
            annuli.append({
                "casing": interval.container,
                "velocity_mps": annulus_mps,
                "velocity_fps": convert_mps_to_fps(annulus_mps),
            })
        rows.append({
            "start_depth": interval.start,
            "end_depth": interval.end,
            "length": interval.length,
            "pipe": {
                "label": interval.section_label,
                "velocity_mps": pipe_mps,
                "velocity_fps": convert_mps_to_fps(pipe_mps),
            },
            "annuli": annuli,
        })

    pipe_values = [r["pipe"]["velocity_mps"] for r in rows if r["pipe"]["velocity_mps"] is not None]
    annulus_values = [a["velocity_mps"] for r in rows for a in r["annuli"]]

    overlay = None
    if rows:
        picked = rows[0]
        if depth is not None:
            picked = next((r for r in rows if r["start_depth"] <= depth <= r["end_depth"]), rows[0])
        first_annulus = picked["annuli"][0] if picked["annuli"] else {}
        overlay = {
            "depth_label": f"{picked['start_depth']:.1f}-{picked['end_depth']:.1f} m",
            "pipe_velocity_mps": picked["pipe"]["velocity_mps"],
            "annulus_velocity_mps": first_annulus.get("velocity_mps"),
            "annulus_label": first_annulus.get("casing"),
        }

    logger.debug(f"Flow velocity over {len(rows)} intervals of {string.kind} at {flow_m3s:.5f} m³/s")
    return {
        **base,
        "valid": True,
        "pipe_mode": string.kind,
        "segments": rows,
        "casing_labels": sorted({a["casing"] for r in rows for a in r["annuli"] if a["casing"]}),
        "summary": {"pipe": _summarize(pipe_values), "annulus": _summarize(annulus_values)},
        "overlay": overlay,
    }
