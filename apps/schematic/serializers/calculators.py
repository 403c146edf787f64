from __future__ import annotations

from rest_framework import serializers

from apps.schematic.serializers.fields import LocaleFloatField
from apps.schematic.serializers.volume import SegmentSerializer, VolumeOptionsSerializer
from apps.schematic.services.catalogs import FLUID_COMPRESSIBILITY
from apps.schematic.services.flow_velocity import FLOW_UNIT_LABELS


class FlowVelocityRequestSerializer(serializers.Serializer):
    flow_rate = LocaleFloatField(help_text="Pump rate in `unit`")
    unit = serializers.ChoiceField(choices=tuple(FLOW_UNIT_LABELS), required=False, default="lpm")
    depth = LocaleFloatField(help_text="Depth (m) for the overlay interval")
    segments = SegmentSerializer(many=True)
    options = VolumeOptionsSerializer(required=False, default=dict)


class PressureTestRequestSerializer(serializers.Serializer):
    low_pressure = LocaleFloatField(help_text="Low test pressure (bar)")
    high_pressure = LocaleFloatField(help_text="High test pressure (bar)")
    k_value = LocaleFloatField(help_text="Fluid compressibility factor")
    fluid = serializers.ChoiceField(choices=tuple(FLUID_COMPRESSIBILITY), required=False, allow_null=True, default=None)
    volume_m3 = LocaleFloatField(help_text="Tested volume; overrides selected sections")
    segments = SegmentSerializer(many=True, required=False, default=list)
    options = VolumeOptionsSerializer(required=False, default=dict)
    selected_ids = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class StringLiftRequestSerializer(serializers.Serializer):
    casing_id = LocaleFloatField(help_text="Casing ID (in)")
    pipe_od = LocaleFloatField(help_text="Pipe OD (in); falls back to the catalog size")
    pipe_size = serializers.CharField(required=False, allow_blank=True, default="")
    pressure = LocaleFloatField()
    pressure_unit = serializers.ChoiceField(choices=("bar", "psi"), required=False, default="bar")
