from django.utils.translation import gettext as _
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response

from apps.devices.api.serializers import (
    DeviceConnectResponseSerializer,
    DeviceConnectSerializer,
    DeviceInfoSerializer,
    DeviceStatusSerializer,
    MessageResponseSerializer,
)

from .base import DeviceSessionAPIView


class DeviceConnectView(DeviceSessionAPIView):
    """Open the connection to the terminal.

    Parameters missing from the body fall back to ZK_DEVICE_IP, ZK_DEVICE_PORT
    and ZK_DEVICE_TIMEOUT. Connecting while already connected is a no-op.
    """

    serializer_class = DeviceConnectSerializer

    @extend_schema(
        summary="Connect to device",
        request=DeviceConnectSerializer,
        responses={
            200: DeviceConnectResponseSerializer,
            400: OpenApiResponse(description="No device address given or configured"),
            502: OpenApiResponse(description="Device unreachable"),
        },
        examples=[
            OpenApiExample(
                "Connect",
                value={"ip": "10.0.0.5", "port": 4370, "timeout": 5000},
                request_only=True,
            )
        ],
        tags=["Device"],
    )
    def post(self, request):
        serializer = DeviceConnectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = self.get_session()
        opened = session.connect(data.get("ip") or None, data.get("port"), data.get("timeout"))

        message = _("Connected successfully") if opened else _("Already connected")
        return Response(
            {"message": message, "device_info": session.get_status().device_info},
            status=status.HTTP_200_OK,
        )


class DeviceDisconnectView(DeviceSessionAPIView):
    @extend_schema(
        summary="Disconnect from device",
        description="Stops real-time mode first if it is active. Disconnecting while disconnected is a no-op.",
        request=None,
        responses={200: MessageResponseSerializer},
        tags=["Device"],
    )
    def post(self, request):
        closed = self.get_session().disconnect()
        message = _("Disconnected successfully") if closed else _("Already disconnected")
        return Response({"message": message}, status=status.HTTP_200_OK)


class DeviceStatusView(DeviceSessionAPIView):
    @extend_schema(
        summary="Get connection status",
        description="Returns the session snapshot without talking to the device.",
        responses={200: DeviceStatusSerializer},
        tags=["Device"],
    )
    def get(self, request):
        return Response(self.get_session().get_status().to_dict(), status=status.HTTP_200_OK)


class DeviceInfoView(DeviceSessionAPIView):
    @extend_schema(
        summary="Get device information",
        description="Reads serial number, firmware and storage counters from the device.",
        responses={200: DeviceInfoSerializer, 409: OpenApiResponse(description="Device not connected")},
        tags=["Device"],
    )
    def get(self, request):
        return Response(self.get_session().get_device_info(), status=status.HTTP_200_OK)


class DeviceRebootView(DeviceSessionAPIView):
    @extend_schema(
        summary="Reboot device",
        description="Issues the restart command. The session is disconnected afterwards.",
        request=None,
        responses={200: MessageResponseSerializer, 409: OpenApiResponse(description="Device not connected")},
        tags=["Device"],
    )
    def post(self, request):
        self.get_session().reboot()
        return Response({"message": _("Device is rebooting")}, status=status.HTTP_200_OK)
