"""
Segment Normalizer

Turns raw segment descriptors into NormalizedSegments:
1. Parses numbers (locale tolerant), drops unknown roles
2. Orders segments by declared role, stable within a role (tapered tubing)
3. Resolves missing tops by chaining to the deepest depth already owned
4. Applies the superseded-casing exclusions (conductor under surface,
   surface under intermediate), which affect volume but never drawing
5. Links the open hole top to the deepest casing shoe
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from apps.schematic.models.segment import (
    ROLE_ORDER,
    INNER_STRING_ROLES,
    CONDUCTOR,
    SURFACE,
    INTERMEDIATE,
    OPEN_HOLE,
    Segment,
    NormalizedSegment,
)
from apps.schematic.services.advisories import MINOR, WCodes, make_warning
from apps.schematic.services.units import parse_bool, parse_number

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = {
    "depth": ("depth",),
    "id": ("id",),
    "od": ("od",),
    "top": ("top",),
    "drift": ("drift",),
    "l_per_m": ("l_per_m", "lPerM"),
    "eod": ("eod",),
    "tj": ("tj",),
}


@dataclass
class Normalization:
    segments: List[NormalizedSegment] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    surface_in_use: bool = False
    intermediate_in_use: bool = False

    @property
    def casings(self) -> List[NormalizedSegment]:
        return [s for s in self.segments if not s.is_inner_string]

    @property
    def inner_segments(self) -> List[NormalizedSegment]:
        return [s for s in self.segments if s.is_inner_string]

    @property
    def counting(self) -> List[NormalizedSegment]:
        return [s for s in self.segments if s.should_count_volume]


def coerce_segment(raw: Union[Segment, Mapping[str, Any]]) -> Optional[Segment]:
    """Build a Segment from a mapping (snake or camel case keys). None for unknown roles."""
    if isinstance(raw, Segment):
        if raw.role not in ROLE_ORDER:
            return None
        return dataclasses.replace(raw)
    if not isinstance(raw, Mapping):
        return None

    role = str(raw.get("role") or "").strip().lower()
    if role not in ROLE_ORDER:
        return None

    values: Dict[str, Any] = {}
    for attr, keys in NUMERIC_FIELDS.items():
        value = None
        for key in keys:
            if key in raw:
                value = parse_number(raw.get(key))
                break
        values[attr] = value

    index = parse_number(raw.get("index"))
    return Segment(
        role=role,
        use=parse_bool(raw.get("use", True)),
        index=int(index) if index is not None else 0,
        **values,
    )


def _raw_field_present(raw: Any, name: str) -> bool:
    if isinstance(raw, Mapping):
        value = raw.get(name)
        return value is not None and str(value).strip() != ""
    return False


def _missing_fields(seg: Segment) -> List[str]:
    """Fields a segment cannot do without. Inner strings may give their bore as L/m instead of an ID."""
    missing = []
    if seg.depth is None:
        missing.append("depth")
    has_id = seg.id is not None and seg.id > 0
    if seg.role in INNER_STRING_ROLES:
        if not has_id and not (seg.l_per_m is not None and seg.l_per_m > 0):
            missing.append("id")
    elif not has_id:
        missing.append("id")
    return missing


def deepest_shoe(segments: Iterable[Segment]) -> Optional[float]:
    """Deepest depth among enabled casings (inner strings and open hole ignored)."""
    shoes = [
        s.depth
        for s in segments
        if s.use
        and s.depth is not None
        and s.id is not None
        and s.role != OPEN_HOLE
        and s.role not in INNER_STRING_ROLES
    ]
    return max(shoes) if shoes else None


def normalize_segments(
    raw_segments: Iterable[Union[Segment, Mapping[str, Any]]],
    surface_in_use: Optional[bool] = None,
    intermediate_in_use: Optional[bool] = None,
) -> Normalization:
    """
    Normalize raw segments in declared role order.

    Args:
        raw_segments: Segment instances or mappings with role/id/od/top/depth/use
        surface_in_use: Excludes conductor volume; derived from the segments when None
        intermediate_in_use: Excludes surface volume; derived from the segments when None

    Returns:
        Normalization with one NormalizedSegment per known-role input, in role order
    """
    result = Normalization()
    parsed: List[tuple] = []

    for position, raw in enumerate(raw_segments or []):
        seg = coerce_segment(raw)
        if seg is None:
            role = raw.get("role") if isinstance(raw, Mapping) else getattr(raw, "role", None)
            logger.warning(f"Skipping segment {position} with unknown role {role!r}")
            result.warnings.append(make_warning(
                WCodes.UNKNOWN_ROLE, MINOR,
                f"Unknown role {role!r} ignored",
                {"position": position, "role": role},
            ))
            continue
        for name in ("depth", "id", "top", "od"):
            if getattr(seg, name) is None and _raw_field_present(raw, name):
                result.warnings.append(make_warning(
                    WCodes.INVALID_NUMBER, MINOR,
                    f"{seg.label}: {name} {raw.get(name)!r} is not a number",
                    {"role": seg.role, "field": name, "value": raw.get(name)},
                ))
        parsed.append((position, seg))

    # Tapered strings keep their input sequence as index when none was given
    seen_roles: Dict[str, int] = {}
    for _, seg in parsed:
        count = seen_roles.get(seg.role, 0)
        if count and not seg.index:
            seg.index = count
        seen_roles[seg.role] = count + 1

    parsed.sort(key=lambda item: (ROLE_ORDER[item[1].role], item[1].index, item[0]))
    segments = [seg for _, seg in parsed]

    if surface_in_use is None:
        surface_in_use = any(s.role == SURFACE and s.use for s in segments)
    if intermediate_in_use is None:
        intermediate_in_use = any(s.role == INTERMEDIATE and s.use for s in segments)
    result.surface_in_use = bool(surface_in_use)
    result.intermediate_in_use = bool(intermediate_in_use)

    open_hole_top = deepest_shoe(segments)
    previous_owned_depth = 0.0
    previous_string_bottom = 0.0

    for order, seg in enumerate(segments):
        ns = NormalizedSegment(segment=seg, order=order)
        result.segments.append(ns)

        if seg.role == OPEN_HOLE:
            seg.od = seg.id
            seg.top = open_hole_top

        if seg.od is None:
            seg.od = seg.id

        missing = _missing_fields(seg)
        if missing:
            ns.valid = False
            if seg.use:
                logger.warning(f"{seg.label}: missing {', '.join(missing)}, excluded from volume and drawing")
                result.warnings.append(make_warning(
                    WCodes.MISSING_FIELD, MINOR,
                    f"{seg.label}: missing {', '.join(missing)}, segment ignored",
                    {"role": seg.role, "index": seg.index, "fields": missing},
                ))
            continue

        if ns.is_inner_string and seg.od is None and seg.use:
            result.warnings.append(make_warning(
                WCodes.STRING_OD_MISSING, MINOR,
                f"{seg.label}: no OD given, annulus and displacement not computed",
                {"role": seg.role, "index": seg.index},
            ))

        if seg.od is not None and seg.id is not None and seg.od < seg.id:
            result.warnings.append(make_warning(
                WCodes.OD_BELOW_ID, MINOR,
                f"{seg.label}: OD {seg.od} is smaller than ID {seg.id}",
                {"role": seg.role, "id": seg.id, "od": seg.od},
            ))

        if seg.role == OPEN_HOLE and open_hole_top is None:
            # Open hole has no shoe to hang from; nothing to compute
            ns.valid = False
            if seg.use:
                result.warnings.append(make_warning(
                    WCodes.OPEN_HOLE_WITHOUT_SHOE, MINOR,
                    "Open hole needs at least one enabled casing above it",
                    {"depth": seg.depth},
                ))
            continue

        if ns.is_inner_string:
            start = seg.top if seg.top is not None else previous_string_bottom
            ns.draw_start = ns.start_for_calc = start
            ns.should_draw = seg.use and seg.depth > start
            if seg.use:
                previous_string_bottom = max(previous_string_bottom, seg.depth)
            continue

        if seg.top is None:
            ns.draw_start = ns.start_for_calc = previous_owned_depth
        else:
            ns.draw_start = ns.start_for_calc = seg.top

        ns.excluded = (
            (seg.role == CONDUCTOR and result.surface_in_use)
            or (seg.role == SURFACE and result.intermediate_in_use)
        )
        ns.should_draw = seg.use and seg.depth > ns.draw_start
        ns.should_count_volume = seg.use and seg.depth > ns.start_for_calc and not ns.excluded
        if ns.should_count_volume:
            previous_owned_depth = max(previous_owned_depth, seg.depth)

    logger.debug(
        f"Normalized {len(result.segments)} segments "
        f"({len(result.counting)} counting, surface_in_use={result.surface_in_use}, "
        f"intermediate_in_use={result.intermediate_in_use})"
    )
    return result
