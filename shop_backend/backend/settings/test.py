# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
Used by pytest (see pyproject.toml) and by `manage.py test --settings=backend.settings.test`.

- In-memory SQLite (row locks are no-ops there; ledger logic still runs the same path)
- Fast password hashing
- Throttling off so API tests never trip rate limits
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK

TESTING = True
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

LOW_STOCK_THRESHOLD = 5
STOCK_HISTORY_DEFAULT_LIMIT = 10
STOCK_HISTORY_MAX_LIMIT = 100
BULK_IMPORT_MAX_ITEMS = 500
