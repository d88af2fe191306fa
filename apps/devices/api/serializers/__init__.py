from .attendance import AttendanceListResponseSerializer, AttendanceRecordSerializer
from .device import (
    DeviceConnectResponseSerializer,
    DeviceConnectSerializer,
    DeviceInfoSerializer,
    DeviceStatusSerializer,
    MessageResponseSerializer,
)
from .user import UserEnrollSerializer, UserListResponseSerializer, UserSerializer

__all__ = [
    "AttendanceListResponseSerializer",
    "AttendanceRecordSerializer",
    "DeviceConnectResponseSerializer",
    "DeviceConnectSerializer",
    "DeviceInfoSerializer",
    "DeviceStatusSerializer",
    "MessageResponseSerializer",
    "UserEnrollSerializer",
    "UserListResponseSerializer",
    "UserSerializer",
]
