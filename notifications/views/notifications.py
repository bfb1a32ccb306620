"""
Notification submission and status endpoints.

Submission is fire-and-forget: the response carries the new id as soon
as the notification is queued.  The status endpoint only knows about
notifications the worker has already delivered, so an id that is still
waiting in the queue answers 404 just like an unknown one.
"""
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from ..services import get_notification_status, submit_notification
from ..store import get_store


@api_view(['POST'])
def create_notification(request):
    """Queue a notification.  Body: ``recipient``, ``subject``, ``body`` and optional ``type``."""
    notification = submit_notification(get_store(), request.data)
    return Response(
        {'message': 'Notification queued successfully', 'notificationId': notification.id},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
def notification_detail(request, notification_id: str):
    """Return a delivered notification, including ``status`` and ``sentAt``."""
    return Response(get_notification_status(get_store(), notification_id))
