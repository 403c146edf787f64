from __future__ import annotations

from typing import Iterable, List

from apps.schematic.models.result import DrawEntry
from apps.schematic.models.segment import (
    CONDUCTOR,
    SURFACE,
    INTERMEDIATE,
    PRODUCTION,
    TIEBACK,
    RESERVOIR,
    SMALL_LINER,
    UPPER_COMPLETION,
    OPEN_HOLE,
    NormalizedSegment,
)

# Higher z draws later (on top). Riser and anything unlisted sit at 0.
Z_ORDER = {
    OPEN_HOLE: -2,
    CONDUCTOR: -1,
    SURFACE: 1,
    INTERMEDIATE: 2,
    PRODUCTION: 3,
    TIEBACK: 3,
    RESERVOIR: 4,
    SMALL_LINER: 5,
    UPPER_COMPLETION: 6,
}


def z_for_role(role: str) -> int:
    return Z_ORDER.get(role, 0)


def casings_to_draw(segments: Iterable[NormalizedSegment]) -> List[DrawEntry]:
    """
    Draw entries for every drawable segment, excluded ones included.

    Sorted by (z, prev_depth, -od) so shallower, wider strings are painted
    first and narrower/deeper ones overlay them.
    """
    entries = [
        DrawEntry(
            role=ns.role,
            id=ns.id,
            od=ns.od,
            depth=ns.depth,
            prev_depth=ns.draw_start,
            z=z_for_role(ns.role),
            index=ns.segment.index,
        )
        for ns in segments
        if ns.should_draw
    ]
    entries.sort(key=lambda e: (e.z, e.prev_depth, -(e.od or 0.0)))
    return entries
