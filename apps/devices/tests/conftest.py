"""Shared pytest fixtures for device session tests.

The real protocol client is replaced by ``FakeZKClient``, an in-memory stand-in
that records every command it receives and lets tests push attendance events
as if the terminal had sent them.
"""

import threading
import time
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from apps.devices.exceptions import TransportError
from apps.devices.zk import ZKDeviceSession, ZKRealtimeEventBridge


class FakeZKClient:
    """In-memory protocol client backed by a dict of PyZK-like user objects."""

    def __init__(self):
        self.calls: list[str] = []
        self.users: dict[int, SimpleNamespace] = {}
        self.attendances: list[SimpleNamespace] = []
        self.info = {
            "serial_number": "SN0001",
            "device_name": "F18",
            "firmware_version": "Ver 6.60",
            "platform": "ZMM220_TFT",
            "mac_address": "00:17:61:00:00:01",
            "user_count": 0,
            "user_capacity": 3000,
            "record_count": 0,
            "record_capacity": 100000,
            "ip_address": "10.0.0.5",
            "port": 4370,
        }
        # Set an exception instance on one of these to make the command fail
        self.errors: dict[str, Exception] = {}
        # Seconds to block in a command, to widen race windows
        self.delays: dict[str, float] = {}
        self.observer = None
        self.on_error = None
        self.is_connected = False

    def _call(self, name: str) -> None:
        delay = self.delays.get(name)
        if delay:
            time.sleep(delay)
        self.calls.append(name)
        error = self.errors.get(name)
        if error is not None:
            raise error

    def connect(self):
        self._call("connect")
        self.is_connected = True

    def disconnect(self):
        self.is_connected = False
        self._call("disconnect")

    def close(self):
        self.calls.append("close")
        self.is_connected = False

    def discard(self):
        self.calls.append("discard")
        self.is_connected = False

    def get_info(self):
        self._call("get_info")
        return dict(self.info, user_count=len(self.users), record_count=len(self.attendances))

    def get_users(self):
        self._call("get_users")
        return list(self.users.values())

    def set_user(self, uid, user_id, name, password="", role=0, card_number=0):
        self._call("set_user")
        self.users[uid] = SimpleNamespace(
            uid=uid, user_id=user_id, name=name, password=password, privilege=role, card=card_number
        )

    def delete_user(self, uid):
        self._call("delete_user")
        self.users.pop(uid, None)

    def clear_admin_privilege(self):
        self._call("clear_admin_privilege")
        self.users.clear()

    def get_attendances(self):
        self._call("get_attendances")
        return list(self.attendances)

    def clear_attendance_log(self):
        self._call("clear_attendance_log")
        self.attendances.clear()

    def restart_device(self):
        self._call("restart_device")

    def get_realtime_logs(self, observer, on_error=None):
        self._call("get_realtime_logs")
        self.observer = observer
        self.on_error = on_error

    def stop_realtime_logs(self):
        self._call("stop_realtime_logs")
        self.observer = None
        self.on_error = None

    def push(self, attendance) -> bool:
        """Simulate an attendance push. Returns False if nothing is registered."""
        if self.observer is None:
            return False
        self.observer(attendance)
        return True

    def fail_stream(self, message="Connection reset by peer"):
        """Simulate the capture loop dying on a link failure."""
        on_error = self.on_error
        self.observer = None
        self.on_error = None
        if on_error:
            on_error(TransportError(message))


@pytest.fixture
def fake_client():
    return FakeZKClient()


@pytest.fixture
def client_factory(fake_client):
    """A ``client_factory`` that always hands out ``fake_client``."""
    return MagicMock(return_value=fake_client)


@pytest.fixture
def received_events():
    return []


@pytest.fixture
def realtime_bridge(received_events):
    return ZKRealtimeEventBridge(observers=[received_events.append])


@pytest.fixture
def session(client_factory, realtime_bridge):
    session = ZKDeviceSession(
        default_ip="10.0.0.5",
        default_port=4370,
        default_timeout_ms=5000,
        realtime_poll_timeout=0.05,
        client_factory=client_factory,
        realtime=realtime_bridge,
    )
    yield session
    session.close()


@pytest.fixture
def connected_session(session):
    session.connect()
    return session


@pytest.fixture
def make_attendance():
    """Build a PyZK-like ``Attendance`` object."""

    def _make(uid=1, user_id="1", timestamp=None, status=1, punch=0):
        return SimpleNamespace(
            uid=uid,
            user_id=user_id,
            timestamp=timestamp or datetime(2024, 3, 1, 8, 30, 0),
            status=status,
            punch=punch,
        )

    return _make


@pytest.fixture
def make_user():
    """Build a PyZK-like ``User`` object."""

    def _make(uid=1, user_id="1", name="User", password="", privilege=0, card=0):
        return SimpleNamespace(uid=uid, user_id=user_id, name=name, password=password, privilege=privilege, card=card)

    return _make


@pytest.fixture
def wait_until():
    """Poll ``predicate`` until it holds or ``timeout`` seconds pass."""

    def _wait(predicate, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait


@pytest.fixture
def blocking_observer():
    """An observer that blocks delivery until ``release`` is set."""
    release = threading.Event()
    entered = threading.Event()
    seen = []

    def _observer(event):
        entered.set()
        release.wait(timeout=2)
        seen.append(event)

    return SimpleNamespace(observer=_observer, release=release, entered=entered, seen=seen)


@pytest.fixture
def app_session(session, monkeypatch):
    """Install ``session`` as the session the devices app hands to its views."""
    from django.apps import apps

    monkeypatch.setattr(apps.get_app_config("devices"), "session", session)
    return session
