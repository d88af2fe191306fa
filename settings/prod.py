"""
This configuration file overrides some necessary configs
to deploy the app to production.
"""

from decouple import Csv

from .base import *  # noqa
from .base import config

DEBUG = False

ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

# Production bridges must not run with an open API
BRIDGE_API_KEY = config("BRIDGE_API_KEY")

CORS_ALLOW_ALL_ORIGINS = False

SECURE_CONTENT_TYPE_NOSNIFF = True
