"""
Well Volume Engine

Pure function of (segments, options) -> VolumeResult. No I/O, no shared state.

Pipeline:
1. Normalize segments (tops, exclusions, open hole link)
2. Resolve ownership of every depth interval (smallest ID wins)
3. Accumulate per-casing volume over owned spans
4. Decompose the tubing / drill-pipe string against the partition
5. Split at the POI
6. Tag draw order and attach advisory warnings
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from apps.schematic.models.result import CasingVolume, StringDecomposition, VolumeOptions, VolumeResult
from apps.schematic.models.segment import DRILLPIPE, InnerString, Segment
from apps.schematic.services.draw_order import casings_to_draw
from apps.schematic.services.fit_check import check_upper_completion_fit
from apps.schematic.services.inner_string import (
    build_drill_pipe_string,
    build_tubing_string,
    decompose_inner_string,
)
from apps.schematic.services.options import parse_options
from apps.schematic.services.ownership import OwnershipPartition, resolve_ownership
from apps.schematic.services.poi_splitter import apply_string_split, split_partition
from apps.schematic.services.segment_normalizer import Normalization, normalize_segments
from apps.schematic.services.units import area_from_diameter_inches

logger = logging.getLogger(__name__)


def accumulate_volumes(normalization: Normalization, partition: OwnershipPartition) -> List[CasingVolume]:
    """One CasingVolume per normalized segment, integrating area(id) over its owned spans."""
    entries: List[CasingVolume] = []
    for ns in normalization.segments:
        entry = CasingVolume(
            role=ns.role,
            index=ns.segment.index,
            use=ns.use,
            physical_length=ns.physical_length,
            excluded=ns.excluded,
        )
        area = area_from_diameter_inches(ns.id)
        for span in partition.spans_for(ns):
            if span.length <= 0:
                continue
            entry.volume += area * span.length
            entry.included_length += span.length
        entries.append(entry)
    return entries


def subtract_displacement(
    entries: List[CasingVolume],
    normalization: Normalization,
    decomposition: StringDecomposition,
) -> None:
    """Remove a string's displacement from the casing that owns each interval, clamped at 0."""
    by_label: Dict[str, CasingVolume] = {
        ns.label: entry for ns, entry in zip(normalization.segments, entries)
    }
    for interval in decomposition.intervals:
        entry = by_label.get(interval.container)
        if entry is None or interval.displacement <= 0:
            continue
        entry.volume = max(0.0, entry.volume - interval.displacement)


def compute_volumes(
    segments: Iterable[Union[Segment, Mapping[str, Any]]],
    options: Union[VolumeOptions, Mapping[str, Any], None] = None,
) -> VolumeResult:
    """
    Compute casing, string and POI volumes for a well.

    Args:
        segments: Segment instances or mappings (role, id, od, top, depth, use, ...)
        options: VolumeOptions or mapping with plug_enabled, plug_depth_val,
                 surface_in_use, intermediate_in_use, drill_pipe, subtract_eod
                 (camelCase keys accepted)

    Returns:
        VolumeResult; malformed input degrades to zero contributions and
        warnings, never an exception
    """
    opts = parse_options(options)
    normalization = normalize_segments(segments, opts.surface_in_use, opts.intermediate_in_use)
    partition = resolve_ownership(normalization.segments)

    result = VolumeResult(plug_depth_val=opts.plug_depth_val, warnings=list(normalization.warnings))
    entries = accumulate_volumes(normalization, partition)

    plug_depth: Optional[float] = opts.plug_depth_val if opts.plug_active else None

    tubing = build_tubing_string(normalization)
    drill = (
        build_drill_pipe_string(opts.drill_pipe, result.warnings)
        if opts.dp_requested else InnerString(kind=DRILLPIPE)
    )
    result.uc_active = tubing.active
    result.dp_mode = drill.active
    result.dp_total_depth = drill.shoe if drill.active else 0.0

    tubing_split = (
        decompose_inner_string(tubing, partition, plug_depth, opts.subtract_eod)
        if tubing.active else None
    )
    drill_split = (
        decompose_inner_string(drill, partition, plug_depth, opts.subtract_eod)
        if drill.active else None
    )

    if drill_split is not None and opts.subtract_eod:
        subtract_displacement(entries, normalization, drill_split)

    for entry in entries:
        entry.per_meter_m3 = entry.volume / entry.included_length if entry.included_length > 0 else 0.0
    result.per_casing_volumes = entries
    result.total_volume = sum(e.volume for e in entries)

    if tubing_split is not None:
        result.casing_volume_below_tubing_shoe = tubing_split.casing_below_shoe
        # Without a POI the whole string reports on the "above" side
        apply_string_split(result, tubing_split)
    if drill_split is not None:
        apply_string_split(result, drill_split)

    if plug_depth is not None:
        gross_above, gross_below = split_partition(partition, plug_depth)

        active_split = drill_split if drill_split is not None else tubing_split
        displaced_above = displaced_below = 0.0
        if active_split is not None and (active_split is tubing_split or opts.subtract_eod):
            displaced_above = active_split.displacement_above
            displaced_below = active_split.displacement_below

        result.plug_above_volume = max(0.0, gross_above - displaced_above)
        result.plug_below_volume = max(0.0, gross_below - displaced_below)
        tubing_below = tubing_split.displacement_below if tubing_split is not None else 0.0
        result.plug_below_volume_tubing = max(0.0, gross_below - tubing_below)

        active_string = drill if drill.active else tubing
        result.string_crosses_poi = active_string.active and active_string.shoe > plug_depth

    result.casings_to_draw = casings_to_draw(normalization.segments)
    result.warnings.extend(check_upper_completion_fit(normalization))

    logger.info(
        f"✅ Computed volumes: total={result.total_volume:.3f} m³ over {len(partition)} owned spans"
        + (f", POI {plug_depth} m above={result.plug_above_volume:.3f} below={result.plug_below_volume:.3f}"
           if plug_depth is not None else "")
    )
    return result
