from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.schematic.serializers import (
    FlowVelocityRequestSerializer,
    PressureTestRequestSerializer,
    StringLiftRequestSerializer,
)
from apps.schematic.services.catalogs import catalogs_payload, lookup_drill_pipe
from apps.schematic.services.flow_velocity import compute_flow_velocity
from apps.schematic.services.pressure_test import build_selectable_sections, compute_pressure_test
from apps.schematic.services.string_lift import compute_annular_area, compute_lift_force
from apps.schematic.services.volume_engine import compute_volumes


class FlowVelocityView(APIView):
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        serializer = FlowVelocityRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        out = compute_flow_velocity(
            data.get("flow_rate"),
            data["segments"],
            data.get("options") or {},
            unit=data["unit"],
            depth=data.get("depth"),
        )
        return Response(out, status=status.HTTP_200_OK)


class PressureTestView(APIView):
    """Pressure test liters; sections come from the well's computed volumes."""
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        serializer = PressureTestRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        sections = []
        if data.get("segments"):
            result = compute_volumes(data["segments"], data.get("options") or {})
            sections = build_selectable_sections(result)

        out = compute_pressure_test(
            data.get("low_pressure"),
            data.get("high_pressure"),
            k_value=data.get("k_value"),
            fluid=data.get("fluid"),
            volume_m3=data.get("volume_m3"),
            sections=sections,
            selected_ids=data.get("selected_ids"),
        )
        return Response(out, status=status.HTTP_200_OK)


class StringLiftView(APIView):
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        serializer = StringLiftRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        pipe_od = data.get("pipe_od")
        if pipe_od is None and data.get("pipe_size"):
            pipe_od = (lookup_drill_pipe(data["pipe_size"]) or {}).get("od")

        area = compute_annular_area(data.get("casing_id"), pipe_od)
        if area is None:
            return Response(
                {"valid": False, "reason": "invalid_geometry", "area": None, "force": None},
                status=status.HTTP_200_OK,
            )
        force = compute_lift_force(area["area_m2"], data.get("pressure"), data["pressure_unit"])
        return Response(
            {"valid": force is not None, "area": area, "force": force},
            status=status.HTTP_200_OK,
        )


class CatalogsView(APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        return Response(catalogs_payload(), status=status.HTTP_200_OK)
