"""Settings for the ZK attendance terminal served by this bridge."""

from .base import config

# Default device address; ``connect`` requests may override it
ZK_DEVICE_IP = config("ZK_DEVICE_IP", default="")
ZK_DEVICE_PORT = config("ZK_DEVICE_PORT", default=4370, cast=int)
# Milliseconds
ZK_DEVICE_TIMEOUT = config("ZK_DEVICE_TIMEOUT", default=5000, cast=int)
ZK_DEVICE_PASSWORD = config("ZK_DEVICE_PASSWORD", default=0, cast=int)
ZK_FORCE_UDP = config("ZK_FORCE_UDP", default=False, cast=bool)
ZK_OMMIT_PING = config("ZK_OMMIT_PING", default=False, cast=bool)
# Seconds the live capture loop blocks waiting for a push before checking for stop
ZK_REALTIME_POLL_TIMEOUT = config("ZK_REALTIME_POLL_TIMEOUT", default=1, cast=float)

# Shared secret for the /api/ endpoints; empty disables the check
BRIDGE_API_KEY = config("BRIDGE_API_KEY", default="")
