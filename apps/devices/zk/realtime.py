"""Realtime attendance event bridge.

The protocol client pushes attendance events from its capture thread. The
bridge never runs observers on that thread: the push handler only converts
the event and puts it on a FIFO queue, and a single delivery thread drains
the queue and hands each event to the registered observers in push order.

Delivery is gated by the bridge's active flag, which is cleared at the start
of ``stop``. Events that were already in flight when real-time mode was
switched off are dropped rather than delivered late.
"""

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

from django.utils import timezone

from apps.devices.exceptions import DeviceError
from apps.devices.signals import realtime_event_received

from .records import ZKRealtimeEvent

logger = logging.getLogger(__name__)

RealtimeObserver = Callable[[ZKRealtimeEvent], Any]

_STOP = object()


def broadcast_realtime_event(event: ZKRealtimeEvent) -> None:
    """Default observer: log the event and send ``realtime_event_received``."""
    logger.info(
        f"Real-time attendance event - UID: {event.uid}, User: {event.user_id}, "
        f"Time: {event.timestamp}, Status: {event.status}, Punch: {event.punch}"
    )
    realtime_event_received.send(sender=ZKRealtimeEventBridge, event=event)


class ZKRealtimeEventBridge:
    """Turns the protocol client's push stream into ordered observer calls."""

    def __init__(self, observers: list[RealtimeObserver] | None = None):
        if observers is None:
            observers = [broadcast_realtime_event]
        self._observers: list[RealtimeObserver] = list(observers)
        self._observers_lock = threading.Lock()
        self._active = threading.Event()
        self._alive = threading.Event()
        self._queue: queue.Queue | None = None
        self._consumer: threading.Thread | None = None
        self.delivered_count = 0
        self.dropped_count = 0

    @property
    def is_active(self) -> bool:
        """True while a registered stream is delivering; false after stop or a capture failure."""
        return self._active.is_set() and self._alive.is_set()

    def add_observer(self, observer: RealtimeObserver) -> None:
        with self._observers_lock:
            self._observers.append(observer)

    def remove_observer(self, observer: RealtimeObserver) -> None:
        with self._observers_lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def start(self, client, on_failure: Callable[[Exception], None] | None = None) -> None:
        """Register the push callback with ``client`` and start delivering.

        Args:
            client: Connected protocol client
            on_failure: Called from the capture thread if the stream dies on a link failure

        Raises:
            DeviceError: If the client cannot register the callback; nothing is left running
        """
        events: queue.Queue = queue.Queue()
        active = threading.Event()
        active.set()
        alive = threading.Event()
        alive.set()
        consumer = threading.Thread(
            target=self._drain, args=(events, active), name="zk-realtime-delivery", daemon=True
        )
        self._queue = events
        self._consumer = consumer
        self._active = active
        self._alive = alive
        consumer.start()

        def _push(attendance: Any) -> None:
            events.put(ZKRealtimeEvent.from_pyzk(attendance, received_at=timezone.now()))

        def _failed(exc: Exception) -> None:
            # Events pushed before the failure are still delivered
            alive.clear()
            events.put(_STOP)
            if on_failure:
                on_failure(exc)

        try:
            client.get_realtime_logs(_push, on_error=_failed)
        except DeviceError:
            self._active.clear()
            self._join_consumer()
            raise

    def stop(self, client) -> None:
        """Deregister the push callback and wait until delivery has finished.

        No observer is called after this returns.
        """
        self._active.clear()
        client.stop_realtime_logs()
        self._join_consumer()

    def _join_consumer(self) -> None:
        if self._queue is not None:
            self._queue.put(_STOP)
        if self._consumer is not None:
            self._consumer.join()
        self._queue = None
        self._consumer = None

    def _drain(self, events: queue.Queue, active: threading.Event) -> None:
        while True:
            event = events.get()
            if event is _STOP:
                active.clear()
                break
            if not active.is_set():
                self.dropped_count += 1
                logger.debug(f"Dropped real-time event for UID {event.uid} received after real-time mode ended")
                continue
            self._deliver(event)

    def _deliver(self, event: ZKRealtimeEvent) -> None:
        with self._observers_lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(event)
            except Exception as e:
                name = getattr(observer, "__name__", repr(observer))
                logger.exception(f"Real-time observer {name} raised an exception: {e}")
        self.delivered_count += 1
