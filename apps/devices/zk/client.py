"""Protocol client for ZK attendance terminals using PyZK.

This module wraps a single PyZK connection and exposes the handful of
commands the bridge needs. PyZK exceptions are translated into the
``apps.devices.exceptions`` taxonomy here, so nothing above this layer has to
know about PyZK.
"""

import logging
import threading
from collections.abc import Callable
from contextlib import contextmanager
from typing import Any

from django.utils.translation import gettext as _
from zk import ZK, const
from zk.exception import ZKError, ZKErrorResponse

from apps.devices.constants import DEFAULT_DEVICE_PORT, DEFAULT_REALTIME_POLL_TIMEOUT
from apps.devices.exceptions import DeviceError, DeviceRejected, TransportError

logger = logging.getLogger(__name__)


@contextmanager
def translate_zk_errors():
    """Re-raise PyZK and socket failures as device session errors."""
    try:
        yield
    except DeviceError:
        raise
    except ZKErrorResponse as e:
        raise DeviceRejected(str(e) or None) from e
    except (ZKError, OSError) as e:
        # socket.timeout is an OSError subclass
        raise TransportError(str(e) or None) from e
    except Exception as e:
        # Malformed packets surface from pyzk as struct.error, ValueError or UnicodeDecodeError
        logger.error(f"Unexpected error talking to device: {type(e).__name__}: {str(e)}")
        raise TransportError(_("Unexpected error: %(error)s") % {"error": str(e)}) from e


class ZKProtocolClient:
    """One PyZK connection to one terminal.

    Attributes:
        ip_address: Device IP address
        port: Device port number
        timeout: Socket timeout in seconds
        realtime_poll_timeout: Seconds the live capture loop waits for a push
            before checking whether it was asked to stop
    """

    def __init__(
        self,
        ip_address: str,
        port: int = DEFAULT_DEVICE_PORT,
        timeout: float = 5,
        password: str | int | None = None,
        force_udp: bool = False,
        ommit_ping: bool = False,
        realtime_poll_timeout: float = DEFAULT_REALTIME_POLL_TIMEOUT,
    ):
        self.ip_address = ip_address
        self.port = port
        self.timeout = timeout
        self.realtime_poll_timeout = realtime_poll_timeout
        self._zk = ZK(
            ip_address,
            port=port,
            timeout=timeout,
            password=password or 0,
            force_udp=force_udp,
            ommit_ping=ommit_ping,
        )
        self._conn: ZK | None = None
        self._capture_thread: threading.Thread | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the socket and perform the protocol handshake.

        Raises:
            TransportError: If the device cannot be reached
            DeviceRejected: If the device refuses the handshake
        """
        logger.info(f"Attempting to connect to device at {self.ip_address}:{self.port}")
        with translate_zk_errors():
            conn = self._zk.connect()
        if not conn:
            raise TransportError("Failed to establish connection to device")
        self._conn = conn
        logger.info(f"Successfully connected to device at {self.ip_address}")

    def disconnect(self) -> None:
        """Send the exit command and close the socket."""
        conn = self._require_connection()
        try:
            with translate_zk_errors():
                conn.disconnect()
        finally:
            self._conn = None
        logger.info(f"Disconnected from device at {self.ip_address}")

    def close(self) -> None:
        """Drop the connection, tolerating a device that has already gone away."""
        if self._conn is None:
            return
        try:
            self.disconnect()
        except DeviceError as e:
            logger.warning(f"Error disconnecting from device at {self.ip_address}: {str(e)}")

    def discard(self) -> None:
        """Drop the connection without talking to the device, e.g. after it was told to reboot.

        PyZK's ``restart`` leaves its socket open, so it is closed here
        directly instead of through ``disconnect``, which would send CMD_EXIT.
        """
        conn = self._conn
        self._conn = None
        self._capture_thread = None
        if conn is None:
            return
        sock = getattr(conn, "_ZK__sock", None)
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.warning(f"Error closing socket to device at {self.ip_address}: {str(e)}")

    def get_info(self) -> dict[str, Any]:
        """Get device identity and storage counters.

        Returns:
            dict: Serial number, firmware, name, platform, MAC address and
            user/record counts and capacities
        """
        conn = self._require_connection()
        with translate_zk_errors():
            conn.read_sizes()
            return {
                "serial_number": conn.get_serialnumber() or "",
                "device_name": conn.get_device_name() or "",
                "firmware_version": conn.get_firmware_version() or "",
                "platform": conn.get_platform() or "",
                "mac_address": conn.get_mac() or "",
                "user_count": conn.users,
                "user_capacity": conn.users_cap,
                "record_count": conn.records,
                "record_capacity": conn.rec_cap,
                "ip_address": self.ip_address,
                "port": self.port,
            }

    def get_users(self) -> list[Any]:
        conn = self._require_connection()
        with translate_zk_errors():
            return list(conn.get_users() or [])

    def set_user(
        self,
        uid: int,
        user_id: str,
        name: str,
        password: str = "",
        role: int = 0,
        card_number: int = 0,
    ) -> None:
        """Create or overwrite the user stored under ``uid``."""
        conn = self._require_connection()
        with translate_zk_errors():
            conn.set_user(
                uid=uid,
                name=name,
                privilege=role,
                password=password or "",
                user_id=str(user_id),
                card=card_number,
            )

    def delete_user(self, uid: int) -> None:
        conn = self._require_connection()
        with translate_zk_errors():
            conn.delete_user(uid=uid)

    def clear_admin_privilege(self) -> None:
        """Send the terminal's CMD_CLEAR_ADMIN command, the bulk user reset.

        PyZK has no public wrapper for it. ``clear_data`` is not an option:
        CMD_CLEAR_DATA also wipes the attendance log and fingerprint templates.

        Raises:
            DeviceRejected: If the device does not acknowledge the command
        """
        conn = self._require_connection()
        with translate_zk_errors():
            response = conn._ZK__send_command(const.CMD_CLEAR_ADMIN)
            if not response.get("status"):
                raise ZKErrorResponse("Can't clear admin privilege")

    def get_attendances(self) -> list[Any]:
        conn = self._require_connection()
        with translate_zk_errors():
            return list(conn.get_attendance() or [])

    def clear_attendance_log(self) -> None:
        conn = self._require_connection()
        with translate_zk_errors():
            conn.clear_attendance()

    def restart_device(self) -> None:
        """Ask the device to reboot. The device drops the link once it complies."""
        conn = self._require_connection()
        with translate_zk_errors():
            conn.restart()

    def get_realtime_logs(
        self,
        observer: Callable[[Any], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        """Register ``observer`` for attendance pushes and return once the device accepted it.

        The capture loop runs on its own thread and owns the socket until
        ``stop_realtime_logs`` is called. Each PyZK ``Attendance`` pushed by the
        device is handed to ``observer`` in arrival order. If the loop dies on a
        failure after registration, including an error raised by ``observer``,
        ``on_error`` receives it translated to a ``DeviceError``.

        Raises:
            TransportError: If registration fails on the link
            DeviceRejected: If the device refuses event registration
        """
        conn = self._require_connection()
        if self._capture_thread is not None:
            self._capture_thread.join()
            self._capture_thread = None

        registered = threading.Event()
        failure: list[Exception] = []

        def _capture():
            try:
                with translate_zk_errors():
                    for attendance in conn.live_capture(new_timeout=self.realtime_poll_timeout):
                        # The first yield, event or timeout, means registration is done
                        registered.set()
                        if attendance is None:
                            continue
                        observer(attendance)
            except DeviceError as e:
                if not registered.is_set():
                    failure.append(e)
                else:
                    logger.error(f"Live capture loop for device at {self.ip_address} failed: {str(e)}")
                    if on_error:
                        on_error(e)
            finally:
                registered.set()

        conn.end_live_capture = False
        self._capture_thread = threading.Thread(target=_capture, name="zk-live-capture", daemon=True)
        self._capture_thread.start()
        registered.wait()

        if failure:
            self._capture_thread.join()
            self._capture_thread = None
            raise failure[0]

        logger.info(f"Live capture registered on device at {self.ip_address}")

    def stop_realtime_logs(self) -> None:
        """Deregister the push callback and wait for the capture loop to exit.

        PyZK unregisters the event subscription on the device when its capture
        generator finishes, so once this returns the observer will not be called again.

        Raises:
            TransportError: If the capture loop does not stop in time
        """
        thread = self._capture_thread
        if thread is None:
            return
        if self._conn is not None:
            self._conn.end_live_capture = True
        thread.join(timeout=self.realtime_poll_timeout + self.timeout + 1)
        if thread.is_alive():
            raise TransportError("Live capture loop did not stop")
        self._capture_thread = None
        logger.info(f"Live capture stopped on device at {self.ip_address}")

    def _require_connection(self) -> ZK:
        if self._conn is None:
            raise TransportError("Protocol client is not connected")
        return self._conn
