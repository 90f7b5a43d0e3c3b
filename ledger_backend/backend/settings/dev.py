# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- SQLite by default (DATABASE_URL overrides); row locks are no-ops there,
  point DATABASE_URL at PostgreSQL to exercise concurrent FIFO consumption
- Ledger services log at DEBUG unless LOG_LEVEL says otherwise
- Browsable API enabled alongside JSON
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=["http://localhost:5173"])
CORS_ALLOW_CREDENTIALS = True

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_RENDERER_CLASSES": (
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ),
}

LEDGER_LOGGERS = ("inventory", "purchases", "payables", "audits", "common")

_ledger_level = env("LOG_LEVEL", default="DEBUG").strip().upper()
LOGGING = {
    **LOGGING,
    "loggers": {
        name: {**cfg, "level": _ledger_level} if name in LEDGER_LOGGERS else cfg
        for name, cfg in LOGGING["loggers"].items()
    },
}
