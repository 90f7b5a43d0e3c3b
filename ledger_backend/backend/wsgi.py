# backend/wsgi.py
"""
WSGI entry point. Uses dev settings unless DJANGO_SETTINGS_MODULE is set;
deployments must set it to backend.settings.prod.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
