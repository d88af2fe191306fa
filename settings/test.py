"""
This configuration file overrides some necessary configs
to allow running unittests.
"""

from .base import *  # noqa

import warnings


warnings.simplefilter("ignore", category=RuntimeWarning)

ENVIRONMENT = "test"

ALLOWED_HOSTS = ["*"]

# Use in-memory SQLite database for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

LANGUAGE_CODE = "en"

DEBUG = False

# Tests never reach a real terminal
ZK_DEVICE_IP = ""
ZK_DEVICE_PORT = 4370
ZK_DEVICE_TIMEOUT = 5000
ZK_REALTIME_POLL_TIMEOUT = 0.05
BRIDGE_API_KEY = ""

# Disable logging in tests to improve performance
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
    },
}
