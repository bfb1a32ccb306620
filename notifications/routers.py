"""
URL mappings for the notifications API.

Paths carry no trailing slash, matching the other services the web
client talks to.
"""
from django.urls import path

from .views import health
from .views.notifications import create_notification, notification_detail


urlpatterns = [
    path('health', health.health),
    path('healthz', health.healthz),
    path('notifications', create_notification),
    path('notifications/<str:notification_id>', notification_detail),
]
