from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.schematic.serializers import BreakdownRequestSerializer, ComputeVolumesRequestSerializer
from apps.schematic.services.input_gathering import gather_segments
from apps.schematic.services.inner_string import (
    compute_drill_pipe_breakdown,
    compute_upper_completion_breakdown,
)
from apps.schematic.services.volume_engine import compute_volumes

logger = logging.getLogger(__name__)


class ComputeVolumesView(APIView):
    """
    POST /api/volumes/compute

    Body: {"segments": [...], "options": {...}} -> full volume result.
    """
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response({"detail": "request body must be a JSON object"}, status=status.HTTP_400_BAD_REQUEST)
        serializer = ComputeVolumesRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = compute_volumes(data["segments"], data.get("options") or {})
        return Response(result.to_dict(), status=status.HTTP_200_OK)


class GatherVolumesView(APIView):
    """
    POST /api/volumes/gather

    Body: the schematic form payload (one block per role). Returns the gathered
    segments/options alongside the computed result.
    """
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response({"detail": "request body must be a JSON object"}, status=status.HTTP_400_BAD_REQUEST)

        gathered = gather_segments(request.data)
        result = compute_volumes(gathered.segments, gathered.options)
        logger.info(f"Gathered form into {len(gathered.segments)} segments")
        return Response(
            {"inputs": gathered.to_dict(), "result": result.to_dict()},
            status=status.HTTP_200_OK,
        )


class VolumeBreakdownView(APIView):
    """
    POST /api/volumes/breakdown

    Tubing and drill-pipe rows grouped by containing casing.
    """
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response({"detail": "request body must be a JSON object"}, status=status.HTTP_400_BAD_REQUEST)
        serializer = BreakdownRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        options = data.get("options") or {}
        drill_pipe = data.get("drill_pipe") or options.get("drill_pipe")
        payload = {
            "upper_completion": compute_upper_completion_breakdown(data["segments"], options),
            "drill_pipe": (
                compute_drill_pipe_breakdown(drill_pipe, data["segments"], options)
                if drill_pipe else None
            ),
        }
        return Response(payload, status=status.HTTP_200_OK)
