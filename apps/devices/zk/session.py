"""Device session for the single ZK terminal served by this bridge.

The session owns the only protocol client in the process and is the single
point through which every device command flows.

Locking:
    ``_lock`` is held for the full duration of every device round trip, since
    all commands share one socket. ``_state_lock`` only guards publication of
    the ``ZKSessionStatus`` snapshot and is never held across I/O, so
    ``get_status`` never waits on the device.

While real-time mode is active the capture loop owns the socket. Only the
transitions that end real-time mode (disable, disconnect, reboot) may run;
every other command fails with ``DeviceBusyError``.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from django.conf import settings

from apps.devices.constants import DEFAULT_DEVICE_PORT, DEFAULT_DEVICE_TIMEOUT_MS, DEFAULT_REALTIME_POLL_TIMEOUT
from apps.devices.exceptions import (
    ConfigurationError,
    DeviceBusyError,
    DeviceError,
    DeviceRejected,
    NotConnectedError,
    TransportError,
    UserNotFoundError,
)

from .client import ZKProtocolClient
from .realtime import ZKRealtimeEventBridge
from .records import ZKAttendanceRecord, ZKSessionStatus, ZKUserRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ZKDeviceSession:
    """Connection state machine for one terminal.

    States are Disconnected (initial) and Connected, with real-time mode as a
    sub-state of Connected. Each public operation is safe to call from any
    request thread.

    Attributes:
        default_ip: Device address used when ``connect`` gets none
        default_port: Port used when ``connect`` gets none
        default_timeout_ms: Connection timeout in milliseconds used when ``connect`` gets none
        realtime: The event bridge fed while real-time mode is active
    """

    def __init__(
        self,
        default_ip: str | None = None,
        default_port: int = DEFAULT_DEVICE_PORT,
        default_timeout_ms: int = DEFAULT_DEVICE_TIMEOUT_MS,
        password: str | int | None = None,
        force_udp: bool = False,
        ommit_ping: bool = False,
        realtime_poll_timeout: float = DEFAULT_REALTIME_POLL_TIMEOUT,
        client_factory: Callable[..., ZKProtocolClient] = ZKProtocolClient,
        realtime: ZKRealtimeEventBridge | None = None,
    ):
        self.default_ip = default_ip
        self.default_port = default_port
        self.default_timeout_ms = default_timeout_ms
        self.password = password
        self.force_udp = force_udp
        self.ommit_ping = ommit_ping
        self.realtime_poll_timeout = realtime_poll_timeout
        self.realtime = realtime or ZKRealtimeEventBridge()
        self._client_factory = client_factory
        self._client: ZKProtocolClient | None = None
        self._status = ZKSessionStatus()
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()

    @classmethod
    def from_settings(cls, **kwargs) -> "ZKDeviceSession":
        """Build a session from the ``ZK_*`` Django settings."""
        options = {
            "default_ip": settings.ZK_DEVICE_IP or None,
            "default_port": settings.ZK_DEVICE_PORT,
            "default_timeout_ms": settings.ZK_DEVICE_TIMEOUT,
            "password": settings.ZK_DEVICE_PASSWORD,
            "force_udp": settings.ZK_FORCE_UDP,
            "ommit_ping": settings.ZK_OMMIT_PING,
            "realtime_poll_timeout": settings.ZK_REALTIME_POLL_TIMEOUT,
        }
        options.update(kwargs)
        return cls(**options)

    # State

    def get_status(self) -> ZKSessionStatus:
        """Return the current state snapshot. Never fails, never blocks on the device."""
        return self._status

    @property
    def connected(self) -> bool:
        return self._status.connected

    @property
    def realtime_active(self) -> bool:
        return self._status.realtime_active

    def _publish(self, **changes) -> None:
        with self._state_lock:
            self._status = self._status._replace(**changes)

    # Lifecycle

    def connect(self, ip: str | None = None, port: int | None = None, timeout: int | None = None) -> bool:
        """Connect to the device and fetch its info.

        Args:
            ip: Device address, defaults to ``default_ip``
            port: Device port, defaults to ``default_port``
            timeout: Connection timeout in milliseconds, defaults to ``default_timeout_ms``

        Returns:
            bool: True if a new connection was opened, False if already connected

        Raises:
            ConfigurationError: If no address is given or configured
            TransportError: If the device cannot be reached
            DeviceRejected: If the device refuses the handshake
        """
        with self._lock:
            if self._client is not None:
                logger.info("Device already connected")
                return False

            device_ip = ip or self.default_ip
            if not device_ip:
                raise ConfigurationError(operation="connect")
            device_port = int(port or self.default_port)
            timeout_ms = int(timeout or self.default_timeout_ms)

            logger.info(f"Connecting to device at {device_ip}:{device_port}...")
            client = self._client_factory(
                device_ip,
                port=device_port,
                timeout=timeout_ms / 1000,
                password=self.password,
                force_udp=self.force_udp,
                ommit_ping=self.ommit_ping,
                realtime_poll_timeout=self.realtime_poll_timeout,
            )
            try:
                client.connect()
                device_info = client.get_info()
            except DeviceError as e:
                client.close()
                self._publish(connected=False, realtime_active=False, device_info=None)
                logger.error(f"Failed to connect to device at {device_ip}:{device_port}: {str(e)}")
                raise e.with_operation("connect") from e

            self._client = client
            self._publish(connected=True, realtime_active=False, device_info=device_info)
            logger.info(f"Device at {device_ip}:{device_port} connected successfully")
            return True

    def disconnect(self) -> bool:
        """Leave real-time mode if needed, then close the link.

        Returns:
            bool: True if a connection was closed, False if already disconnected

        Raises:
            TransportError: If the link fails while closing; the session is
                Disconnected regardless
        """
        with self._lock:
            client = self._client
            if client is None:
                return False

            if self._status.realtime_active:
                self._stop_realtime(client, "disconnect")

            try:
                client.disconnect()
            except DeviceError as e:
                logger.error(f"Failed to disconnect from device cleanly: {str(e)}")
                raise e.with_operation("disconnect") from e
            finally:
                self._client = None
                self._publish(connected=False, realtime_active=False, device_info=None)

            logger.info("Device disconnected successfully")
            return True

    def close(self) -> None:
        """Tear the session down at process exit."""
        try:
            self.disconnect()
        except DeviceError as e:
            logger.warning(f"Error closing device session: {str(e)}")

    def reboot(self) -> None:
        """Reboot the device. The session is Disconnected once the command is issued.

        Raises:
            NotConnectedError: If not connected
            DeviceRejected: If the device refuses to reboot; the session stays Connected
        """
        with self._lock:
            client = self._require_client("reboot")

            if self._status.realtime_active:
                self._stop_realtime(client, "reboot")

            try:
                client.restart_device()
            except TransportError as e:
                # The device drops the link as soon as it starts rebooting
                logger.info(f"Device closed the connection while rebooting: {str(e)}")
            except DeviceRejected as e:
                logger.error(f"Failed to reboot device: {str(e)}")
                raise e.with_operation("reboot") from e

            client.discard()
            self._client = None
            self._publish(connected=False, realtime_active=False, device_info=None)
            logger.info("Device rebooting...")

    # Device info

    def get_device_info(self) -> dict[str, Any]:
        """Fetch fresh device info and store it as the status snapshot's ``device_info``."""

        def _fetch(client: ZKProtocolClient) -> dict[str, Any]:
            info = client.get_info()
            self._publish(device_info=info)
            return info

        return self._execute("get_device_info", _fetch)

    # Users

    def list_users(self) -> list[ZKUserRecord]:
        users = self._execute("list_users", lambda client: client.get_users())
        logger.info(f"Retrieved {len(users)} users from device")
        return [ZKUserRecord.from_pyzk(user) for user in users]

    def get_user(self, uid: int) -> ZKUserRecord:
        """Find one user by uid in a fresh user list.

        Raises:
            UserNotFoundError: If no user has this uid
        """
        for user in self.list_users():
            if user.uid == uid:
                return user
        raise UserNotFoundError(operation="get_user")

    def enroll_user(self, record: ZKUserRecord) -> ZKUserRecord:
        """Write ``record`` to the device. An existing user with the same uid is overwritten."""
        self._execute(
            "enroll_user",
            lambda client: client.set_user(
                record.uid,
                record.user_id,
                record.name,
                password=record.password,
                role=record.role,
                card_number=record.card_number,
            ),
        )
        logger.info(f"User enrolled: {record.user_id} - {record.name}")
        return record

    def delete_user(self, uid: int) -> None:
        self._execute("delete_user", lambda client: client.delete_user(uid))
        logger.info(f"User deleted: UID {uid}")

    def clear_all_users(self) -> None:
        """Erase the whole user table on the device. This cannot be undone."""
        self._execute("clear_all_users", lambda client: client.clear_admin_privilege())
        logger.info("All users cleared")

    # Attendance

    def get_attendance(self) -> list[ZKAttendanceRecord]:
        records = self._execute("get_attendance", lambda client: client.get_attendances())
        logger.info(f"Retrieved {len(records)} attendance records")
        return [ZKAttendanceRecord.from_pyzk(record) for record in records]

    def clear_attendance(self) -> None:
        self._execute("clear_attendance", lambda client: client.clear_attendance_log())
        logger.info("Attendance logs cleared")

    # Real-time mode

    def enable_realtime(self) -> bool:
        """Start streaming attendance events to the real-time bridge.

        Returns:
            bool: True if real-time mode was switched on, False if it already was
        """
        with self._lock:
            client = self._require_client("enable_realtime")
            if self._status.realtime_active:
                return False

            try:
                self.realtime.start(client, on_failure=self._on_realtime_failure)
            except DeviceError as e:
                logger.error(f"Failed to enable real-time mode: {str(e)}")
                raise e.with_operation("enable_realtime") from e

            # A capture failure right after registration may already have ended the stream
            self._publish(realtime_active=self.realtime.is_active)
            logger.info("Real-time mode enabled")
            return True

    def disable_realtime(self) -> bool:
        """Stop streaming. No event is delivered after this returns.

        Returns:
            bool: True if real-time mode was switched off, False if it was not active
        """
        with self._lock:
            client = self._require_client("disable_realtime")
            if not self._status.realtime_active:
                return False

            self._stop_realtime(client, "disable_realtime")
            logger.info("Real-time mode disabled")
            return True

    def _stop_realtime(self, client: ZKProtocolClient, operation: str) -> None:
        try:
            self.realtime.stop(client)
        except DeviceError as e:
            logger.error(f"Failed to stop real-time mode: {str(e)}")
            raise e.with_operation(operation) from e
        self._publish(realtime_active=False)

    def _on_realtime_failure(self, exc: Exception) -> None:
        # Runs on the capture thread; must not take ``_lock``
        logger.warning(f"Real-time stream ended unexpectedly: {str(exc)}")
        self._publish(realtime_active=False)

    # Helpers

    def _require_client(self, operation: str) -> ZKProtocolClient:
        if self._client is None:
            raise NotConnectedError(operation=operation)
        return self._client

    def _execute(self, operation: str, command: Callable[[ZKProtocolClient], T]) -> T:
        """Run one device command under the session lock."""
        with self._lock:
            client = self._require_client(operation)
            if self._status.realtime_active:
                raise DeviceBusyError(operation=operation)
            try:
                return command(client)
            except DeviceError as e:
                logger.error(f"Failed to {operation.replace('_', ' ')}: {str(e)}")
                raise e.with_operation(operation) from e
