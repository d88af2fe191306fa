from .attendance import AttendanceView, RealtimeStartView, RealtimeStopView
from .device import DeviceConnectView, DeviceDisconnectView, DeviceInfoView, DeviceRebootView, DeviceStatusView
from .user import UserDetailView, UserEnrollView, UserListView

__all__ = [
    "AttendanceView",
    "DeviceConnectView",
    "DeviceDisconnectView",
    "DeviceInfoView",
    "DeviceRebootView",
    "DeviceStatusView",
    "RealtimeStartView",
    "RealtimeStopView",
    "UserDetailView",
    "UserEnrollView",
    "UserListView",
]
