DJANGO_APPs = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
]

EXTERNAL_APPS = [
    "corsheaders",
    "rest_framework",
    "drf_standardized_errors",
    "drf_spectacular",
]

INTERNAL_APPS = [
    "apps.core",
    "apps.devices",
]

INSTALLED_APPS = DJANGO_APPs + EXTERNAL_APPS + INTERNAL_APPS
