"""
POI / plug splitter.

Splits casing volume at the point of interest and copies an inner string's
decomposition onto the result under the tubing or drill-pipe field names.
"""

from __future__ import annotations

from typing import Tuple

from apps.schematic.models.result import StringDecomposition, VolumeResult
from apps.schematic.models.segment import TUBING
from apps.schematic.services.ownership import OwnershipPartition
from apps.schematic.services.units import area_from_diameter_inches


def split_partition(partition: OwnershipPartition, plug_depth: float) -> Tuple[float, float]:
    """Gross casing volume (m³) above and below the POI; straddling spans are cut at the POI."""
    above = sum(
        area_from_diameter_inches(span.segment.id) * (hi - lo)
        for span, lo, hi in partition.spans_between(float("-inf"), plug_depth)
    )
    below = sum(
        area_from_diameter_inches(span.segment.id) * (hi - lo)
        for span, lo, hi in partition.spans_between(plug_depth, float("inf"))
    )
    return above, below


def apply_string_split(result: VolumeResult, decomposition: StringDecomposition) -> None:
    if decomposition.kind == TUBING:
        result.plug_above_tubing = decomposition.bore_above
        result.plug_below_tubing = decomposition.bore_below
        result.plug_above_annulus = decomposition.annulus_above
        result.plug_below_annulus = decomposition.annulus_below
        result.plug_above_tubing_open_casing = decomposition.open_casing_above
        result.plug_below_tubing_open_casing = decomposition.open_casing_below
    else:
        result.plug_above_drillpipe = decomposition.bore_above
        result.plug_below_drillpipe = decomposition.bore_below
        result.plug_above_drillpipe_annulus = decomposition.annulus_above
        result.plug_below_drillpipe_annulus = decomposition.annulus_below
        result.plug_above_drillpipe_open_casing = decomposition.open_casing_above
        result.plug_below_drillpipe_open_casing = decomposition.open_casing_below
