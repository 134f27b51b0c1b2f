# backend/wsgi.py
"""
WSGI config for the clinic backend.

Production deployments MUST set DJANGO_SETTINGS_MODULE=backend.settings.prod;
otherwise dev settings are used.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
