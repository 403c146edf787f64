"""
Inner String Decomposition

Tubing (upper completion) and drill pipe are both an InnerString: ordered
sections with a bore, an OD and an optional open-ended displacement. One
decomposition routine walks the string against the ownership partition and
the POI, so both modes share the same interval arithmetic:

    bore        area(section bore) * length        (wherever the string exists)
    annulus     max(0, area(owner.id) - area(od))  (owner from the partition)
    displacement eod L/m, else OD area - bore area (only where a casing owns)
    open casing area(owner.id) * length            (casing with no string in it)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from apps.schematic.models.result import (
    DrillPipeOptions,
    StringDecomposition,
    StringInterval,
)
from apps.schematic.models.segment import (
    DRILLPIPE,
    TUBING,
    InnerString,
    InnerStringSection,
    Segment,
)
from apps.schematic.services.advisories import MINOR, WCodes, make_warning
from apps.schematic.services.catalogs import lookup_drill_pipe
from apps.schematic.services.options import parse_drill_pipe, parse_options
from apps.schematic.services.ownership import OwnershipPartition, resolve_ownership
from apps.schematic.services.segment_normalizer import Normalization, normalize_segments
from apps.schematic.services.units import (
    annulus_area,
    area_from_diameter_inches,
    area_from_linear_capacity,
    area_to_liters_per_meter,
    parse_number,
)

logger = logging.getLogger(__name__)


# -----------------------------
# STRING CONSTRUCTION
# -----------------------------
def build_tubing_string(normalization: Normalization) -> InnerString:
    """Tubing string from the drawable upper completion segments."""
    sections = [
        InnerStringSection(
            kind=TUBING,
            label=ns.label,
            top=ns.draw_start,
            bottom=ns.depth,
            od=ns.od,
            id=ns.id,
            l_per_m=ns.segment.l_per_m,
            eod=ns.segment.eod,
            tj=ns.segment.tj,
        )
        for ns in normalization.inner_segments
        if ns.should_draw
    ]
    return InnerString(kind=TUBING, sections=sections)


def build_drill_pipe_string(
    drill_pipe: Optional[DrillPipeOptions],
    warnings: Optional[List[Dict[str, Any]]] = None,
) -> InnerString:
    """
    Drill string from the pipe list, stacked from surface (depth 0) downward.

    Each pipe may name a catalog ``size`` (index or name); explicit
    l_per_m / od / id / eod values override the catalog entry.
    """
    string = InnerString(kind=DRILLPIPE)
    if drill_pipe is None:
        return string

    cumulative = 0.0
    for position, pipe in enumerate(drill_pipe.pipes):
        length = parse_number(pipe.get("length"))
        if length is None or length <= 0:
            continue

        entry = lookup_drill_pipe(pipe.get("size")) or {}
        if not entry and pipe.get("size") not in (None, ""):
            logger.warning(f"Drill pipe {position}: size {pipe.get('size')!r} not in catalog")
            if warnings is not None:
                warnings.append(make_warning(
                    WCodes.DRILL_PIPE_SIZE_UNKNOWN, MINOR,
                    f"Drill pipe size {pipe.get('size')!r} not in catalog",
                    {"position": position, "size": pipe.get("size")},
                ))

        def value(*keys: str) -> Optional[float]:
            for key in keys:
                parsed = parse_number(pipe.get(key))
                if parsed is not None:
                    return parsed
            return parse_number(entry.get(keys[0]))

        string.sections.append(InnerStringSection(
            kind=DRILLPIPE,
            label=entry.get("name") or f"pipe[{position}]",
            top=cumulative,
            bottom=cumulative + length,
            od=value("od"),
            id=value("id"),
            l_per_m=value("l_per_m", "lPerM"),
            eod=value("eod"),
        ))
        if string.sections[-1].od is None:
            logger.warning(f"Drill pipe {position}: no OD, annulus not computed")
            if warnings is not None:
                warnings.append(make_warning(
                    WCodes.STRING_OD_MISSING, MINOR,
                    f"Drill pipe {position}: no OD given, annulus not computed",
                    {"position": position},
                ))
        cumulative += length

    return string


# -----------------------------
# SECTION AREAS
# -----------------------------
def bore_area(section: InnerStringSection) -> float:
    """Bore area (m²). Tubing prefers the ID, catalog drill pipe its L/m capacity."""
    by_id = area_from_diameter_inches(section.id)
    by_capacity = area_from_linear_capacity(section.l_per_m)
    if section.kind == DRILLPIPE:
        return by_capacity or by_id
    return by_id or by_capacity


def steel_area(section: InnerStringSection) -> float:
    return max(0.0, area_from_diameter_inches(section.od) - bore_area(section))


def displacement_area(section: InnerStringSection, subtract_eod: bool = True) -> float:
    """
    Fluid displaced per meter of string (m²).

    Drill pipe uses its open-ended displacement when known. Tubing only
    does so when eod subtraction is on; otherwise the steel wall area.
    """
    if section.eod is not None and section.eod > 0:
        if section.kind == DRILLPIPE or subtract_eod:
            return area_from_linear_capacity(section.eod)
    return steel_area(section)


# -----------------------------
# DECOMPOSITION
# -----------------------------
def decompose_inner_string(
    string: InnerString,
    partition: OwnershipPartition,
    plug_depth: Optional[float] = None,
    subtract_eod: bool = True,
) -> StringDecomposition:
    """
    Split an inner string and its surrounding casing volume at the POI.

    Args:
        string: Tubing or drill-pipe string
        partition: Casing ownership partition (gives the enclosing ID per depth)
        plug_depth: POI depth; None puts everything on the "above" side
        subtract_eod: Whether tubing eod replaces the steel-wall displacement

    Returns:
        StringDecomposition with bore/annulus/displacement/open-casing volumes
        per side plus the elementary intervals used for breakdown tables
    """
    result = StringDecomposition(kind=string.kind, shoe=string.shoe)

    points = {0.0}
    for section in string.sections:
        points.add(section.top)
        points.add(section.bottom)
    points.update(partition.boundaries())
    if plug_depth is not None:
        points.add(plug_depth)
    ordered = sorted(points)

    for lo, hi in zip(ordered, ordered[1:]):
        length = hi - lo
        if length <= 0:
            continue
        mid = (lo + hi) / 2
        section = string.section_at(mid)
        owner = partition.owner_at(mid)
        below = plug_depth is not None and lo >= plug_depth

        if section is None:
            if owner is None:
                continue
            volume = area_from_diameter_inches(owner.id) * length
            if below:
                result.open_casing_below += volume
            else:
                result.open_casing_above += volume
            if string.active and lo >= string.shoe:
                result.casing_below_shoe += volume
            continue

        bore = bore_area(section) * length
        # Annulus needs the string OD
        annulus = annulus_area(owner.id, section.od) * length if owner and section.od else 0.0
        displaced = displacement_area(section, subtract_eod) * length if owner else 0.0

        if below:
            result.bore_below += bore
            result.annulus_below += annulus
            result.displacement_below += displaced
        else:
            result.bore_above += bore
            result.annulus_above += annulus
            result.displacement_above += displaced

        result.intervals.append(StringInterval(
            start=lo,
            end=hi,
            section_label=section.label,
            container=owner.label if owner else None,
            bore_volume=bore,
            annulus_volume=annulus,
            displacement=displaced,
            below_poi=below,
        ))

    logger.debug(
        f"{string.kind} decomposition: shoe={result.shoe:.1f} m, "
        f"bore {result.bore_above:.3f}/{result.bore_below:.3f}, "
        f"annulus {result.annulus_above:.3f}/{result.annulus_below:.3f} m³ (above/below)"
    )
    return result


# -----------------------------
# BREAKDOWN TABLES
# -----------------------------
def inner_string_breakdown(decomposition: StringDecomposition) -> Dict[str, Any]:
    """
    Merge consecutive intervals sharing the same containing casing into table rows.

    Rows: depth label "start-end" (one decimal), container, bore and annulus
    volumes (m³), length (m) and the matching L/m capacities.
    """
    rows: List[Dict[str, Any]] = []
    for interval in decomposition.intervals:
        last = rows[-1] if rows else None
        if last and last["container"] == interval.container and abs(last["end"] - interval.start) < 1e-9:
            last["end"] = interval.end
            last["length"] += interval.length
            last["bore_volume"] += interval.bore_volume
            last["annulus_volume"] += interval.annulus_volume
            continue
        rows.append({
            "start": interval.start,
            "end": interval.end,
            "container": interval.container,
            "length": interval.length,
            "bore_volume": interval.bore_volume,
            "annulus_volume": interval.annulus_volume,
        })

    for row in rows:
        row["depth"] = f"{row['start']:.1f}-{row['end']:.1f}"
        length = row["length"]
        row["bore_l_per_m"] = area_to_liters_per_meter(row["bore_volume"] / length) if length else 0.0
        row["annulus_l_per_m"] = area_to_liters_per_meter(row["annulus_volume"] / length) if length else 0.0

    return {
        "kind": decomposition.kind,
        "shoe": decomposition.shoe,
        "sections": rows,
        "total_length": sum(r["length"] for r in rows),
        "total_bore_volume": sum(r["bore_volume"] for r in rows),
        "total_annulus_volume": sum(r["annulus_volume"] for r in rows),
    }


def _prepare(
    segments: Iterable[Union[Segment, Mapping[str, Any]]],
    options: Any,
):
    opts = parse_options(options)
    normalization = normalize_segments(segments, opts.surface_in_use, opts.intermediate_in_use)
    partition = resolve_ownership(normalization.segments)
    return opts, normalization, partition


def compute_upper_completion_breakdown(
    segments: Iterable[Union[Segment, Mapping[str, Any]]],
    options: Any = None,
) -> Dict[str, Any]:
    """Tubing rows grouped by the casing that contains them."""
    opts, normalization, partition = _prepare(segments, options)
    string = build_tubing_string(normalization)
    decomposition = decompose_inner_string(string, partition, subtract_eod=opts.subtract_eod)
    return inner_string_breakdown(decomposition)


def compute_drill_pipe_breakdown(
    drill_pipe: Any,
    segments: Iterable[Union[Segment, Mapping[str, Any]]],
    options: Any = None,
) -> Dict[str, Any]:
    """Drill pipe rows grouped by the casing that contains them."""
    opts, normalization, partition = _prepare(segments, options)
    string = build_drill_pipe_string(parse_drill_pipe(drill_pipe))
    decomposition = decompose_inner_string(string, partition, subtract_eod=opts.subtract_eod)
    return inner_string_breakdown(decomposition)
