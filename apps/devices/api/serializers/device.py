from django.utils.translation import gettext as _
from rest_framework import serializers


class DeviceConnectSerializer(serializers.Serializer):
    """Optional connection parameters; missing values fall back to the configured defaults."""

    ip = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        help_text="Device IP address or hostname",
    )
    port = serializers.IntegerField(
        min_value=1,
        max_value=65535,
        required=False,
        allow_null=True,
        help_text="Device port (default 4370)",
        error_messages={"invalid": _("Port must be an integer.")},
    )
    timeout = serializers.IntegerField(
        min_value=1,
        required=False,
        allow_null=True,
        help_text="Connection timeout in milliseconds (default 5000)",
        error_messages={"invalid": _("Timeout must be an integer number of milliseconds.")},
    )


class DeviceInfoSerializer(serializers.Serializer):
    serial_number = serializers.CharField()
    device_name = serializers.CharField()
    firmware_version = serializers.CharField()
    platform = serializers.CharField()
    mac_address = serializers.CharField()
    user_count = serializers.IntegerField()
    user_capacity = serializers.IntegerField()
    record_count = serializers.IntegerField()
    record_capacity = serializers.IntegerField()
    ip_address = serializers.CharField()
    port = serializers.IntegerField()


class DeviceStatusSerializer(serializers.Serializer):
    connected = serializers.BooleanField()
    realtime_mode = serializers.BooleanField()
    device_info = DeviceInfoSerializer(allow_null=True)


class DeviceConnectResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    device_info = DeviceInfoSerializer(allow_null=True)


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
