"""
This configuration file overrides some necessary configs
to deploy the app to the develop environment.
"""

from .base import *  # noqa

INSTALLED_APPS += [  # NOQA
    "django.contrib.staticfiles",  # for Swagger UI in local & develop
]

ALLOWED_HOSTS = ["*"]

STATIC_ROOT = "staticfiles"
