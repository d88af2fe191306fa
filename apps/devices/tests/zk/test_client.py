"""Tests for the PyZK protocol client."""

import socket
import struct
import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from zk import const
from zk.exception import ZKErrorConnection, ZKErrorResponse, ZKNetworkError

from apps.devices.exceptions import DeviceRejected, TransportError
from apps.devices.zk import ZKProtocolClient


def make_client(mock_zk, **kwargs):
    conn = MagicMock()
    conn.end_live_capture = False
    mock_zk.return_value.connect.return_value = conn
    client = ZKProtocolClient("10.0.0.5", realtime_poll_timeout=0.05, **kwargs)
    return client, conn


@pytest.mark.unit
@patch("apps.devices.zk.client.ZK")
class TestZKProtocolClient:
    """Test suite for ZKProtocolClient."""

    def test_builds_pyzk_instance(self, mock_zk):
        ZKProtocolClient("10.0.0.5", port=4371, timeout=2.5, password=1234, force_udp=True)

        mock_zk.assert_called_once_with(
            "10.0.0.5", port=4371, timeout=2.5, password=1234, force_udp=True, ommit_ping=False
        )

    def test_connect(self, mock_zk):
        client, conn = make_client(mock_zk)

        client.connect()

        assert client.is_connected is True

    def test_connect_returning_nothing_is_transport_error(self, mock_zk):
        client = ZKProtocolClient("10.0.0.5")
        mock_zk.return_value.connect.return_value = None

        with pytest.raises(TransportError):
            client.connect()

        assert client.is_connected is False

    @pytest.mark.parametrize(
        "error, expected",
        [
            (ZKNetworkError("can't reach device (ping 10.0.0.5)"), TransportError),
            (ZKErrorConnection("instance are not connected."), TransportError),
            (socket.timeout("timed out"), TransportError),
            (ConnectionRefusedError("refused"), TransportError),
            (ZKErrorResponse("Unauthenticated"), DeviceRejected),
        ],
    )
    def test_connect_errors_are_translated(self, mock_zk, error, expected):
        client = ZKProtocolClient("10.0.0.5")
        mock_zk.return_value.connect.side_effect = error

        with pytest.raises(expected) as exc_info:
            client.connect()

        assert str(error) in str(exc_info.value)
        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize(
        "error",
        [
            struct.error("unpack requires a buffer of 8 bytes"),
            UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
        ],
    )
    def test_unexpected_errors_become_transport_errors(self, mock_zk, error):
        client, conn = make_client(mock_zk)
        conn.get_users.side_effect = error
        client.connect()

        with pytest.raises(TransportError) as exc_info:
            client.get_users()

        assert exc_info.value.__cause__ is error

    def test_commands_require_connection(self, mock_zk):
        client = ZKProtocolClient("10.0.0.5")

        with pytest.raises(TransportError):
            client.get_users()

    def test_get_info(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn.get_serialnumber.return_value = "SN0001"
        conn.get_device_name.return_value = "F18"
        conn.get_firmware_version.return_value = "Ver 6.60"
        conn.get_platform.return_value = "ZMM220_TFT"
        conn.get_mac.return_value = "00:17:61:00:00:01"
        conn.users, conn.users_cap, conn.records, conn.rec_cap = 12, 3000, 345, 100000
        client.connect()

        info = client.get_info()

        conn.read_sizes.assert_called_once()
        assert info == {
            "serial_number": "SN0001",
            "device_name": "F18",
            "firmware_version": "Ver 6.60",
            "platform": "ZMM220_TFT",
            "mac_address": "00:17:61:00:00:01",
            "user_count": 12,
            "user_capacity": 3000,
            "record_count": 345,
            "record_capacity": 100000,
            "ip_address": "10.0.0.5",
            "port": 4370,
        }

    def test_set_user_maps_fields(self, mock_zk):
        client, conn = make_client(mock_zk)
        client.connect()

        client.set_user(7, "emp007", "A. Smith", password="1234", role=14, card_number=998877)

        conn.set_user.assert_called_once_with(
            uid=7, name="A. Smith", privilege=14, password="1234", user_id="emp007", card=998877
        )

    def test_set_user_rejected(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn.set_user.side_effect = ZKErrorResponse("Can't set user")
        client.connect()

        with pytest.raises(DeviceRejected):
            client.set_user(7, "emp007", "A. Smith")

    def test_delete_user(self, mock_zk):
        client, conn = make_client(mock_zk)
        client.connect()

        client.delete_user(7)

        conn.delete_user.assert_called_once_with(uid=7)

    def test_clear_admin_privilege_sends_clear_admin_command(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn._ZK__send_command.return_value = {"status": True, "code": 2000}
        client.connect()

        client.clear_admin_privilege()

        conn._ZK__send_command.assert_called_once_with(20)
        assert const.CMD_CLEAR_ADMIN == 20
        conn.clear_data.assert_not_called()
        conn.clear_attendance.assert_not_called()

    def test_clear_admin_privilege_rejected(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn._ZK__send_command.return_value = {"status": False, "code": 2001}
        client.connect()

        with pytest.raises(DeviceRejected):
            client.clear_admin_privilege()

    def test_attendance_commands(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn.get_attendance.return_value = None
        client.connect()

        assert client.get_attendances() == []
        client.clear_attendance_log()

        conn.clear_attendance.assert_called_once_with()

    def test_restart_device(self, mock_zk):
        client, conn = make_client(mock_zk)
        client.connect()

        client.restart_device()

        conn.restart.assert_called_once_with()

    def test_disconnect_failure_still_drops_connection(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn.disconnect.side_effect = ZKNetworkError("broken pipe")
        client.connect()

        with pytest.raises(TransportError):
            client.disconnect()

        assert client.is_connected is False

    def test_close_tolerates_failure(self, mock_zk):
        client, conn = make_client(mock_zk)
        conn.disconnect.side_effect = ZKNetworkError("broken pipe")
        client.connect()

        client.close()

        assert client.is_connected is False

    def test_discard_does_not_talk_to_device(self, mock_zk):
        client, conn = make_client(mock_zk)
        client.connect()

        client.discard()

        conn.disconnect.assert_not_called()
        conn._ZK__sock.close.assert_called_once_with()
        assert client.is_connected is False


@pytest.mark.unit
@patch("apps.devices.zk.client.ZK")
class TestZKProtocolClientLiveCapture:
    """Test suite for live capture registration and teardown."""

    def test_live_capture_delivers_pushes_until_stopped(self, mock_zk):
        client, conn = make_client(mock_zk)
        pushes = [SimpleNamespace(uid=1), SimpleNamespace(uid=2)]

        def live_capture(new_timeout):
            yield None
            yield from pushes
            while not conn.end_live_capture:
                time.sleep(0.01)
                yield None

        conn.live_capture.side_effect = live_capture
        received = []
        client.connect()

        client.get_realtime_logs(received.append)
        client.stop_realtime_logs()

        conn.live_capture.assert_called_once_with(new_timeout=0.05)
        assert conn.end_live_capture is True
        assert received == pushes

    def test_registration_failure_is_raised(self, mock_zk):
        client, conn = make_client(mock_zk)

        def live_capture(new_timeout):
            raise ZKErrorResponse("Can't reg events 1")
            yield  # pragma: no cover

        conn.live_capture.side_effect = live_capture
        client.connect()

        with pytest.raises(DeviceRejected):
            client.get_realtime_logs(MagicMock())

        # Nothing left to stop
        client.stop_realtime_logs()

    def test_failure_after_registration_reaches_on_error(self, mock_zk):
        client, conn = make_client(mock_zk)

        def live_capture(new_timeout):
            yield None
            raise ZKNetworkError("connection reset")

        conn.live_capture.side_effect = live_capture
        on_error = MagicMock()
        client.connect()

        client.get_realtime_logs(MagicMock(), on_error=on_error)
        client.stop_realtime_logs()

        on_error.assert_called_once()
        assert isinstance(on_error.call_args.args[0], TransportError)

    def test_stop_without_capture_is_noop(self, mock_zk):
        client, conn = make_client(mock_zk)
        client.connect()

        client.stop_realtime_logs()

        assert conn.end_live_capture is False

    def test_unexpected_error_after_registration_reaches_on_error(self, mock_zk):
        client, conn = make_client(mock_zk)

        def live_capture(new_timeout):
            yield None
            raise ValueError("invalid literal for int() with base 10: 'emp007'")

        conn.live_capture.side_effect = live_capture
        on_error = MagicMock()
        client.connect()

        client.get_realtime_logs(MagicMock(), on_error=on_error)
        client.stop_realtime_logs()

        on_error.assert_called_once()
        error = on_error.call_args.args[0]
        assert isinstance(error, TransportError)
        assert "emp007" in str(error)

    def test_observer_error_reaches_on_error(self, mock_zk):
        client, conn = make_client(mock_zk)

        def live_capture(new_timeout):
            yield None
            yield SimpleNamespace(uid=1)
            while not conn.end_live_capture:
                time.sleep(0.01)
                yield None

        conn.live_capture.side_effect = live_capture
        on_error = MagicMock()
        client.connect()

        client.get_realtime_logs(MagicMock(side_effect=RuntimeError("queue closed")), on_error=on_error)
        client.stop_realtime_logs()

        on_error.assert_called_once()
        assert isinstance(on_error.call_args.args[0], TransportError)

    def test_unexpected_error_before_registration_is_raised(self, mock_zk):
        client, conn = make_client(mock_zk)

        def live_capture(new_timeout):
            raise struct.error("unpack requires a buffer of 8 bytes")
            yield  # pragma: no cover

        conn.live_capture.side_effect = live_capture
        on_error = MagicMock()
        client.connect()

        with pytest.raises(TransportError):
            client.get_realtime_logs(MagicMock(), on_error=on_error)

        on_error.assert_not_called()
