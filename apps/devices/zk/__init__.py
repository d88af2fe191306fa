from .client import ZKProtocolClient
from .realtime import ZKRealtimeEventBridge, broadcast_realtime_event
from .records import ZKAttendanceRecord, ZKRealtimeEvent, ZKSessionStatus, ZKUserRecord
from .session import ZKDeviceSession

__all__ = [
    "ZKDeviceSession",
    "ZKProtocolClient",
    "ZKRealtimeEventBridge",
    "broadcast_realtime_event",
    "ZKAttendanceRecord",
    "ZKRealtimeEvent",
    "ZKSessionStatus",
    "ZKUserRecord",
]
