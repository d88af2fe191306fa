"""Exception classes for device operations.

Every failure surfaced by the device session is one of the ``DeviceError``
subclasses below, so callers can branch on the kind of failure rather than
on message text.
"""

from django.utils.translation import gettext_lazy as _


class DeviceError(Exception):
    """Base class for all device session failures."""

    code = "device_error"
    default_message = _("Device operation failed")

    def __init__(self, message: str | None = None, operation: str | None = None):
        self.message = str(message or self.default_message)
        self.operation = operation
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message

    def with_operation(self, operation: str) -> "DeviceError":
        """Return a copy of this error of the same kind tagged with the failing operation."""
        return self.__class__(self.message, operation=operation)


class ConfigurationError(DeviceError):
    """Raised when no device address is given and none is configured."""

    code = "configuration_error"
    default_message = _("Device IP is required")


class NotConnectedError(DeviceError):
    """Raised when an operation needs a connected device."""

    code = "not_connected"
    default_message = _("Device not connected. Please connect first.")


class DeviceBusyError(DeviceError):
    """Raised when a command would share the link with an active real-time stream."""

    code = "device_busy"
    default_message = _("Real-time mode is active. Stop real-time mode first.")


class TransportError(DeviceError):
    """Raised when the network link to the device fails or times out."""

    code = "transport_error"
    default_message = _("Failed to communicate with device")


class DeviceRejected(DeviceError):
    """Raised when the device answers but refuses the command."""

    code = "device_rejected"
    default_message = _("Device rejected the command")


class UserNotFoundError(DeviceError):
    """Raised when a user lookup finds no user with the given uid."""

    code = "user_not_found"
    default_message = _("User not found")
