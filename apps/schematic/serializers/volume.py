from __future__ import annotations

from typing import Any, Dict, List

from rest_framework import serializers

from apps.schematic.serializers.fields import LocaleFloatField
from apps.schematic.services.config import get_setting


CAMEL_KEYS = {
    "lPerM": "l_per_m",
    "plugEnabled": "plug_enabled",
    "plugDepthVal": "plug_depth_val",
    "surfaceInUse": "surface_in_use",
    "intermediateInUse": "intermediate_in_use",
    "drillPipe": "drill_pipe",
    "subtractEod": "subtract_eod",
}


def snake_case_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    out = dict(data)
    for camel, snake in CAMEL_KEYS.items():
        if camel in out and snake not in out:
            out[snake] = out.pop(camel)
    return out


class SegmentSerializer(serializers.Serializer):
    role = serializers.CharField(help_text="riser, conductor, surface, ... open_hole")
    use = serializers.BooleanField(required=False, default=True)
    id = LocaleFloatField(help_text="Inner diameter (in)")
    od = LocaleFloatField(help_text="Outer diameter (in)")
    top = LocaleFloatField(help_text="Top depth (m); empty = auto-connect")
    depth = LocaleFloatField(help_text="Bottom/shoe depth (m)")
    drift = LocaleFloatField()
    l_per_m = LocaleFloatField(help_text="Bore capacity (L/m)")
    eod = LocaleFloatField(help_text="Open-ended displacement (L/m)")
    tj = LocaleFloatField(help_text="Tool-joint OD (in)")
    index = serializers.IntegerField(required=False, default=0, min_value=0)

    def to_internal_value(self, data):
        return super().to_internal_value(snake_case_keys(data))


class DrillPipeSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=("tubing", "drillpipe"), required=False, default="tubing")
    pipes = serializers.ListField(child=serializers.DictField(), required=False, default=list)


class VolumeOptionsSerializer(serializers.Serializer):
    plug_enabled = serializers.BooleanField(required=False, default=False)
    plug_depth_val = LocaleFloatField(help_text="POI depth (m)")
    surface_in_use = serializers.BooleanField(required=False, allow_null=True, default=None)
    intermediate_in_use = serializers.BooleanField(required=False, allow_null=True, default=None)
    drill_pipe = DrillPipeSerializer(required=False, allow_null=True, default=None)
    subtract_eod = serializers.BooleanField(required=False, default=True)

    def to_internal_value(self, data):
        return super().to_internal_value(snake_case_keys(data))


class ComputeVolumesRequestSerializer(serializers.Serializer):
    segments = SegmentSerializer(many=True)
    options = VolumeOptionsSerializer(required=False, default=dict)

    def validate_segments(self, value: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        limit = get_setting("MAX_SEGMENTS")
        if len(value) > limit:
            raise serializers.ValidationError(f"At most {limit} segments are accepted")
        return value


class BreakdownRequestSerializer(ComputeVolumesRequestSerializer):
    drill_pipe = DrillPipeSerializer(required=False, allow_null=True, default=None)
