# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite; tables come from the committed migrations
- Fast password hashing
- No throttling
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = False
SECRET_KEY = "test-secret-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

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

LEDGER = {
    "DEFAULT_PAYMENT_TERM_DAYS": 30,
    "DUE_SOON_DAYS": 7,
    "EXPIRING_DAYS_AHEAD": 30,
    "EXPIRY_WARNING_DAYS": 7,
}

LOGGING = {**LOGGING, "root": {"handlers": ["console"], "level": "ERROR"}}
