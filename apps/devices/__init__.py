"""Devices app - owns the session with the ZK attendance terminal.

This app provides device communication, the real-time event bridge and the
HTTP endpoints that drive them.
"""

from apps.devices.exceptions import (
    ConfigurationError,
    DeviceBusyError,
    DeviceError,
    DeviceRejected,
    NotConnectedError,
    TransportError,
    UserNotFoundError,
)

__all__ = [
    "ConfigurationError",
    "DeviceBusyError",
    "DeviceError",
    "DeviceRejected",
    "NotConnectedError",
    "TransportError",
    "UserNotFoundError",
]
