from django.urls import path

from .api.views import (
    AttendanceView,
    DeviceConnectView,
    DeviceDisconnectView,
    DeviceInfoView,
    DeviceRebootView,
    DeviceStatusView,
    RealtimeStartView,
    RealtimeStopView,
    UserDetailView,
    UserEnrollView,
    UserListView,
)

app_name = "devices"

urlpatterns = [
    # Device lifecycle
    path("device/connect/", DeviceConnectView.as_view(), name="device_connect"),
    path("device/disconnect/", DeviceDisconnectView.as_view(), name="device_disconnect"),
    path("device/status/", DeviceStatusView.as_view(), name="device_status"),
    path("device/info/", DeviceInfoView.as_view(), name="device_info"),
    path("device/reboot/", DeviceRebootView.as_view(), name="device_reboot"),
    # User management
    path("users/enroll/", UserEnrollView.as_view(), name="user_enroll"),
    path("users/", UserListView.as_view(), name="user_list"),
    path("users/<int:uid>/", UserDetailView.as_view(), name="user_detail"),
    # Attendance
    path("attendance/", AttendanceView.as_view(), name="attendance"),
    path("attendance/realtime/start/", RealtimeStartView.as_view(), name="realtime_start"),
    path("attendance/realtime/stop/", RealtimeStopView.as_view(), name="realtime_stop"),
]
