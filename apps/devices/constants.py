DEFAULT_DEVICE_PORT = 4370
DEFAULT_DEVICE_TIMEOUT_MS = 5000
DEFAULT_REALTIME_POLL_TIMEOUT = 1


class UserRole:
    """Privilege levels understood by ZK terminals."""

    NORMAL = 0
    ADMIN = 14
