"""Signals sent by the devices app.

``realtime_event_received`` is sent once per attendance event pushed by the
terminal while real-time mode is on, with the ``ZKRealtimeEvent`` as ``event``.
Receivers run on the real-time delivery thread, in push order.
"""

from django.dispatch import Signal

realtime_event_received = Signal()
