"""
Input gathering.

Turns a form-shaped payload (one block per role, as the schematic form sends
it) into engine input: Segment list + VolumeOptions.

    {
        "riser": {"use": true, "type": "17.5", "depth": "450"},
        "surface": {"use": true, "size": "17.8", "depth": "1 200"},
        "production": {"use": true, "size": "8.535", "top": "", "depth": "3277,5"},
        "upper_completion": {"use": true, "size": "4.892", "depth": "2838"},
        "tubing": [{"size": 1, "length": "2838"}],
        "open_hole": {"use": true, "size": "8.5", "depth": "3600"},
        "plug": {"enabled": true, "depth": "362"},
        "drill_pipe": {"mode": "drillpipe", "pipes": [{"size": 3, "length": 362}]},
        "subtract_eod": true
    }

Numbers go through parse_number, so locale-formatted strings are fine and
garbage becomes "absent".
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from apps.schematic.models.result import VolumeOptions
from apps.schematic.models.segment import (
    RISER,
    SURFACE,
    INTERMEDIATE,
    UPPER_COMPLETION,
    OPEN_HOLE,
    ROLES,
    Segment,
)
from apps.schematic.services.catalogs import (
    default_drift,
    default_od,
    default_tool_joint,
    lookup_tubing,
)
from apps.schematic.services.options import parse_drill_pipe
from apps.schematic.services.segment_normalizer import deepest_shoe
from apps.schematic.services.units import parse_bool, parse_number

logger = logging.getLogger(__name__)


@dataclass
class GatheredInputs:
    segments: List[Segment] = field(default_factory=list)
    options: VolumeOptions = field(default_factory=VolumeOptions)
    open_hole_top: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _block(form: Mapping[str, Any], role: str) -> Mapping[str, Any]:
    block = form.get(role)
    return block if isinstance(block, Mapping) else {}


def _size_id(block: Mapping[str, Any]) -> Optional[float]:
    """Explicit ``id`` overrides the selected ``size`` (or riser ``type``)."""
    explicit = parse_number(block.get("id"))
    if explicit is not None:
        return explicit
    return parse_number(block.get("size", block.get("type")))


def _riser_linked_top(
    block: Mapping[str, Any],
    bottom: Optional[float],
    riser_used: bool,
    riser_depth: Optional[float],
) -> Optional[float]:
    top = parse_number(block.get("top"))
    if top is not None:
        return top
    if riser_used and riser_depth is not None and bottom is not None and bottom > riser_depth:
        return riser_depth
    return None


def _tubing_sections(form: Mapping[str, Any], uc_block: Mapping[str, Any]) -> List[Segment]:
    """Tapered tubing: tops accumulate from the first section's top (default 0)."""
    rows = form.get("tubing") or []
    if not isinstance(rows, list):
        return []

    use = parse_bool(uc_block.get("use", True))
    cumulative = parse_number(uc_block.get("top")) or 0.0
    sections: List[Segment] = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        length = parse_number(row.get("length"))
        if length is None or length <= 0:
            continue
        entry = lookup_tubing(row.get("size")) or {}
        id = parse_number(row.get("id")) or entry.get("id")
        od = parse_number(row.get("od")) or entry.get("od") or default_od(UPPER_COMPLETION, id)
        sections.append(Segment(
            role=UPPER_COMPLETION,
            id=id,
            od=od,
            top=cumulative,
            depth=cumulative + length,
            use=use,
            l_per_m=parse_number(row.get("l_per_m")) or entry.get("l_per_m"),
            eod=parse_number(row.get("eod")) if row.get("eod") is not None else entry.get("eod"),
            tj=parse_number(row.get("tj")) or default_tool_joint(UPPER_COMPLETION, id),
            index=len(sections),
        ))
        cumulative += length
    return sections


def gather_segments(form: Mapping[str, Any]) -> GatheredInputs:
    """Build engine inputs from a form payload."""
    form = form or {}

    riser = _block(form, RISER)
    riser_type = str(riser.get("type") or "").strip().lower()
    riser_used = parse_bool(riser.get("use", False)) and riser_type != "none"
    riser_depth = parse_number(riser.get("depth"))

    segments: List[Segment] = []
    for role in ROLES:
        block = _block(form, role)
        if role == UPPER_COMPLETION and form.get("tubing"):
            segments.extend(_tubing_sections(form, block))
            continue
        if not block:
            continue

        use = riser_used if role == RISER else parse_bool(block.get("use", False))
        id = _size_id(block)
        depth = parse_number(block.get("depth"))

        od = parse_number(block.get("od"))
        if od is None:
            od = default_od(role, id)
        if role == RISER and riser_type == "none":
            od = 0.0

        if role in (SURFACE, INTERMEDIATE):
            top = _riser_linked_top(block, depth, riser_used, riser_depth) if use else parse_number(block.get("top"))
        elif role == OPEN_HOLE:
            top = None
        else:
            top = parse_number(block.get("top"))

        drift = parse_number(block.get("drift"))
        if drift is None:
            drift = default_drift(role, id)

        segments.append(Segment(
            role=role,
            id=id,
            od=od,
            top=top,
            depth=depth,
            use=use,
            drift=drift,
            tj=default_tool_joint(role, id) if role == UPPER_COMPLETION else None,
        ))

    plug = _block(form, "plug")
    subtract = form.get("subtract_eod")
    options = VolumeOptions(
        plug_enabled=parse_bool(plug.get("enabled", False)),
        plug_depth_val=parse_number(plug.get("depth")),
        surface_in_use=parse_bool(_block(form, SURFACE).get("use", False)),
        intermediate_in_use=parse_bool(_block(form, INTERMEDIATE).get("use", False)),
        drill_pipe=parse_drill_pipe(form.get("drill_pipe")),
        subtract_eod=True if subtract is None else parse_bool(subtract),
    )

    open_hole_top = deepest_shoe(segments)
    logger.debug(f"Gathered {len(segments)} segments, open hole top linked to {open_hole_top}")
    return GatheredInputs(segments=segments, options=options, open_hole_top=open_hole_top)
