"""Value types exchanged between the device session and its callers."""

from datetime import datetime
from typing import Any, NamedTuple

from django.utils import timezone

from apps.devices.constants import UserRole

DEFAULT_CARD_NUMBER = 0


def _aware(timestamp: datetime) -> datetime:
    # Terminals report local wall-clock time without tzinfo
    if timezone.is_naive(timestamp):
        return timezone.make_aware(timestamp)
    return timestamp


class ZKUserRecord:
    """A user as stored on the terminal."""

    def __init__(
        self,
        uid: int,
        user_id: str,
        name: str,
        password: str = "",
        role: int = UserRole.NORMAL,
        card_number: int = DEFAULT_CARD_NUMBER,
    ):
        self.uid = uid
        self.user_id = user_id
        self.name = name
        self.password = password or ""
        self.role = role
        self.card_number = card_number

    @classmethod
    def from_pyzk(cls, user: Any) -> "ZKUserRecord":
        """Build a record from a PyZK ``User`` object."""
        return cls(
            uid=user.uid,
            user_id=str(user.user_id),
            name=user.name,
            password=user.password,
            role=user.privilege,
            card_number=user.card,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "uid": self.uid,
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role,
            "card_number": self.card_number,
        }

    def __repr__(self) -> str:
        return f"ZKUserRecord(uid={self.uid}, user_id={self.user_id!r}, name={self.name!r})"


class ZKAttendanceRecord:
    """A punch stored in the terminal's attendance log."""

    def __init__(self, uid: int, user_id: str, timestamp: datetime, status: int, punch: int):
        self.uid = uid
        self.user_id = user_id
        self.timestamp = timestamp
        self.status = status
        self.punch = punch

    @classmethod
    def from_pyzk(cls, attendance: Any) -> "ZKAttendanceRecord":
        return cls(
            uid=attendance.uid,
            user_id=str(attendance.user_id),
            timestamp=_aware(attendance.timestamp),
            status=attendance.status,
            punch=attendance.punch,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "user_id": self.user_id,
            "timestamp": self.timestamp,
            "status": self.status,
            "punch": self.punch,
        }


class ZKRealtimeEvent:
    """A single attendance event pushed by the terminal while real-time mode is on."""

    def __init__(
        self,
        uid: int,
        user_id: str,
        timestamp: datetime,
        status: int,
        punch: int,
        received_at: datetime,
    ):
        self.uid = uid
        self.user_id = user_id
        self.timestamp = timestamp
        self.status = status
        self.punch = punch
        self.received_at = received_at

    @classmethod
    def from_pyzk(cls, attendance: Any, received_at: datetime) -> "ZKRealtimeEvent":
        return cls(
            uid=attendance.uid,
            user_id=str(attendance.user_id),
            timestamp=_aware(attendance.timestamp),
            status=attendance.status,
            punch=attendance.punch,
            received_at=received_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "uid": self.uid,
            "user_id": self.user_id,
            "timestamp": self.timestamp,
            "status": self.status,
            "punch": self.punch,
            "received_at": self.received_at,
        }


class ZKSessionStatus(NamedTuple):
    """Immutable snapshot of the session state, replaced as a whole on every transition."""

    connected: bool = False
    realtime_active: bool = False
    device_info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "connected": self.connected,
            "realtime_mode": self.realtime_active,
            "device_info": self.device_info,
        }
