"""Management command to stream real-time attendance events to the console.

This command connects the device session, switches on real-time mode and
prints every pushed attendance event until it receives SIGINT or SIGTERM,
then disconnects cleanly.
"""

import logging
import signal
import threading

from django.core.management.base import BaseCommand, CommandError

from apps.devices.apps import get_device_session
from apps.devices.exceptions import DeviceError
from apps.devices.zk import ZKRealtimeEvent

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Django management command to watch real-time attendance events."""

    help = "Connect to the ZK device and print real-time attendance events until interrupted"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.stop_event = threading.Event()
        self.processed_count = 0

    def add_arguments(self, parser):
        parser.add_argument("--ip", help="Device IP address (default: ZK_DEVICE_IP)")
        parser.add_argument("--port", type=int, help="Device port (default: ZK_DEVICE_PORT)")
        parser.add_argument("--timeout", type=int, help="Connection timeout in milliseconds (default: ZK_DEVICE_TIMEOUT)")

    def handle(self, *args, **options):
        """Execute the command."""
        session = get_device_session()

        def signal_handler(signum, frame):
            logger.warning("Shutdown signal received, stopping listener...")
            self.stop_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        session.realtime.add_observer(self.on_event)
        try:
            session.connect(options.get("ip"), options.get("port"), options.get("timeout"))
            info = session.get_status().device_info or {}
            self.stdout.write(
                self.style.SUCCESS(
                    f"Connected to {info.get('device_name') or 'device'} "
                    f"(serial {info.get('serial_number') or 'unknown'})"
                )
            )

            session.enable_realtime()
            self.stdout.write("Listening for attendance events. Press Ctrl+C to stop.")

            while not self.stop_event.wait(timeout=1):
                if not session.realtime_active:
                    raise CommandError("Real-time stream ended unexpectedly")

        except DeviceError as e:
            raise CommandError(str(e)) from e

        finally:
            session.realtime.remove_observer(self.on_event)
            session.close()
            logger.info(f"Real-time listener stopped. Events received: {self.processed_count}")

    def on_event(self, event: ZKRealtimeEvent) -> None:
        self.processed_count += 1
        self.stdout.write(
            f"[{event.timestamp:%Y-%m-%d %H:%M:%S}] uid={event.uid} user_id={event.user_id} "
            f"status={event.status} punch={event.punch}"
        )
