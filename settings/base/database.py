import os

import dj_database_url

from .base import BASE_DIR, config

# The bridge stores nothing itself; a database is only needed by django.contrib.auth
DATABASES = {
    "default": dj_database_url.parse(
        config("DATABASE_URL", default="sqlite:///" + os.path.join(BASE_DIR, "db.sqlite3"))
    )
}
