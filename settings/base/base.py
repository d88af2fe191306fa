import os

from decouple import Csv, config

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

ENVIRONMENT = config("ENVIRONMENT", default="local")

SECRET_KEY = config("SECRET_KEY", default="django-insecure-zk-bridge-local-only")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

LOG_LEVEL = config("LOG_LEVEL", default="INFO")

ROOT_URLCONF = "urls"

WSGI_APPLICATION = "wsgi.application"
