"""
WSGI config for the notifications service.

It exposes the WSGI callable as a module-level variable named
``application`` and starts the delivery worker thread alongside it, so
the worker shares the process (and the Redis connection pool) with the
request handlers.  ``manage.py runserver`` loads this module too.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'notification_service.settings')

application = get_wsgi_application()

from notifications.worker import start_background_worker  # noqa: E402

start_background_worker()
