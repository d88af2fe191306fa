from django.utils.translation import gettext as _
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response

from apps.devices.api.serializers import (
    AttendanceListResponseSerializer,
    AttendanceRecordSerializer,
    MessageResponseSerializer,
)

from .base import DeviceSessionAPIView


class AttendanceView(DeviceSessionAPIView):
    @extend_schema(
        summary="Get attendance logs",
        description="Reads the whole attendance log from the device.",
        responses={200: AttendanceListResponseSerializer, 409: OpenApiResponse(description="Device not connected")},
        tags=["Attendance"],
    )
    def get(self, request):
        records = self.get_session().get_attendance()
        return Response(
            {"count": len(records), "results": AttendanceRecordSerializer(records, many=True).data},
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Clear attendance logs",
        responses={200: MessageResponseSerializer},
        tags=["Attendance"],
    )
    def delete(self, request):
        self.get_session().clear_attendance()
        return Response({"message": _("Attendance logs cleared successfully")}, status=status.HTTP_200_OK)


class RealtimeStartView(DeviceSessionAPIView):
    @extend_schema(
        summary="Start real-time monitoring",
        description=(
            "Subscribes to attendance pushes from the device. Events are logged and sent as the "
            "`realtime_event_received` signal. Other device commands are refused until real-time mode is stopped."
        ),
        request=None,
        responses={200: MessageResponseSerializer},
        tags=["Attendance"],
    )
    def post(self, request):
        started = self.get_session().enable_realtime()
        message = _("Real-time mode enabled") if started else _("Real-time mode already active")
        return Response({"message": message}, status=status.HTTP_200_OK)


class RealtimeStopView(DeviceSessionAPIView):
    @extend_schema(
        summary="Stop real-time monitoring",
        request=None,
        responses={200: MessageResponseSerializer},
        tags=["Attendance"],
    )
    def post(self, request):
        stopped = self.get_session().disable_realtime()
        message = _("Real-time mode disabled") if stopped else _("Real-time mode already inactive")
        return Response({"message": message}, status=status.HTTP_200_OK)
