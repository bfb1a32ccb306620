import json
import logging
from typing import Any

from rest_framework.settings import api_settings

from .exceptions import InvalidRequest, NotFound
from .metrics import ENQUEUED, channel_label
from .models import Notification
from .serializers import NotificationCreateSerializer
from .store import NotificationStore

logger = logging.getLogger(__name__)

MISSING_CODES = {'required', 'null', 'blank'}


def _validation_error(errors) -> InvalidRequest:
    """Absent/null/empty fields keep the usual message; wrong values get their own."""
    codes = {
        e.code
        for field, errs in errors.items()
        if field != api_settings.NON_FIELD_ERRORS_KEY
        for e in errs
    }
    if codes - MISSING_CODES:
        return InvalidRequest('Invalid field values')
    return InvalidRequest()


def submit_notification(store: NotificationStore, data: Any) -> Notification:
    """Validate ``data`` and push a new pending notification onto the queue.

    Raises ``InvalidRequest`` before touching the store if a required
    field is missing, and ``StoreUnavailable`` if the push fails.  Each
    successful call adds exactly one queue entry; repeated submissions
    are not deduplicated.
    """
    s = NotificationCreateSerializer(data=data)
    if not s.is_valid():
        raise _validation_error(s.errors)
    notification = Notification.new(**s.validated_data)
    store.enqueue(notification.to_json())
    ENQUEUED.labels(type=channel_label(notification.type)).inc()
    logger.info('Notification queued: %s', notification.id)
    return notification


def get_notification_status(store: NotificationStore, notification_id: str) -> dict:
    """Return the stored record of a delivered notification.

    Raises ``NotFound`` when there is no record, which covers ids that were
    never submitted, are still waiting in the queue, or have expired.
    """
    raw = store.load_status(notification_id)
    if raw is None:
        raise NotFound()
    return json.loads(raw)
