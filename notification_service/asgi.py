"""
ASGI config for the notifications service.

Order matters: configure Django before importing any Django-dependent
modules.
"""
import os

# 1) Configure settings before any Django import
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_service.settings")

# 2) Build the HTTP app (this runs django.setup())
from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()

# 3) Start the delivery worker next to the server
from notifications.worker import start_background_worker  # noqa: E402

start_background_worker()
