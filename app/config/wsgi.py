"""
WSGI config for the conversation service.

Provided for traditional deployments (gunicorn, mod_wsgi). Exposes the
WSGI callable as a module-level variable named `application`.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
