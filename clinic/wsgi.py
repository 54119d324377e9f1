"""
WSGI config for the clinic project.

Serves the HTTP API only; the notification WebSocket needs the ASGI
application in :mod:`clinic.asgi`.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinic.settings')

application = get_wsgi_application()
