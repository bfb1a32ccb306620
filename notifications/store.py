"""
Redis-backed queue and delivery status store.

Producers LPUSH serialized notifications onto a single list and the
worker RPOPs from the other end, so the list drains in FIFO order.
Delivered notifications are written to ``notification:<id>`` with an
expiry.  These three atomic commands are the only synchronisation the
service relies on.

Every ``redis.exceptions.RedisError`` is re-raised as
:class:`~notifications.exceptions.StoreUnavailable`.
"""
from __future__ import annotations

from functools import wraps
from typing import Optional

import redis
from django.apps import apps
from django.conf import settings

from .exceptions import StoreUnavailable

QUEUE_NAME = 'notification_queue'
KEY_PREFIX = 'notification:'
STATUS_TTL_SECONDS = 86400


def status_key(notification_id: str) -> str:
    return f'{KEY_PREFIX}{notification_id}'


def _translate_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except redis.exceptions.RedisError as e:
            raise StoreUnavailable() from e
    return wrapper


class NotificationStore:
    def __init__(self, client: redis.Redis, *, queue_name: str = QUEUE_NAME):
        self.client = client
        self.queue_name = queue_name

    @classmethod
    def from_settings(cls) -> 'NotificationStore':
        """Build a store with its own connection pool from the Django settings.

        No connection is opened until the first command.
        """
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
        return cls(client, queue_name=settings.NOTIFICATIONS_QUEUE_NAME)

    @_translate_errors
    def enqueue(self, payload: str) -> int:
        """Append ``payload`` to the tail of the queue; returns the new queue length."""
        return self.client.lpush(self.queue_name, payload)

    @_translate_errors
    def dequeue(self) -> Optional[str]:
        """Pop the oldest entry, or ``None`` if the queue is empty.  Never blocks."""
        return self.client.rpop(self.queue_name)

    @_translate_errors
    def queue_length(self) -> int:
        return self.client.llen(self.queue_name)

    @_translate_errors
    def save_status(self, notification_id: str, payload: str, ttl: int = STATUS_TTL_SECONDS) -> None:
        self.client.set(status_key(notification_id), payload, ex=ttl)

    @_translate_errors
    def load_status(self, notification_id: str) -> Optional[str]:
        return self.client.get(status_key(notification_id))

    @_translate_errors
    def ping(self) -> bool:
        return bool(self.client.ping())


def get_store() -> NotificationStore:
    """Return the store created when the app was loaded."""
    return apps.get_app_config('notifications').store
