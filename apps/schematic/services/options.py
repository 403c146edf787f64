from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from apps.schematic.models.result import DrillPipeOptions, VolumeOptions
from apps.schematic.services.units import parse_bool, parse_number


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def parse_drill_pipe(raw: Any) -> Optional[DrillPipeOptions]:
    if raw is None:
        return None
    if isinstance(raw, DrillPipeOptions):
        return raw
    if not isinstance(raw, Mapping):
        return None
    mode = str(raw.get("mode") or "tubing").strip().lower()
    pipes = raw.get("pipes") or []
    if not isinstance(pipes, (list, tuple)):
        pipes = []
    return DrillPipeOptions(mode=mode, pipes=[p for p in pipes if isinstance(p, Mapping)])


def parse_options(raw: Union[VolumeOptions, Mapping[str, Any], None]) -> VolumeOptions:
    """Build VolumeOptions from a mapping with snake_case or camelCase keys."""
    if isinstance(raw, VolumeOptions):
        return raw
    raw = raw or {}

    def optional_flag(*keys: str) -> Optional[bool]:
        value = _pick(raw, *keys)
        return None if value is None else parse_bool(value)

    subtract = _pick(raw, "subtract_eod", "subtractEod")
    return VolumeOptions(
        plug_enabled=parse_bool(_pick(raw, "plug_enabled", "plugEnabled")),
        plug_depth_val=parse_number(_pick(raw, "plug_depth_val", "plugDepthVal")),
        surface_in_use=optional_flag("surface_in_use", "surfaceInUse"),
        intermediate_in_use=optional_flag("intermediate_in_use", "intermediateInUse"),
        drill_pipe=parse_drill_pipe(_pick(raw, "drill_pipe", "drillPipe")),
        subtract_eod=True if subtract is None else parse_bool(subtract),
    )
