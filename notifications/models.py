"""
Notification record as it travels through the queue and the status store.

Notifications are not database rows: they are serialized to JSON with
camelCase keys (the wire format shared with the web client) and kept in
Redis only.
"""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional

from django.db import models
from django.utils import timezone

DEFAULT_TYPE = 'email'


class NotificationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SENT = 'sent', 'Sent'


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as ISO-8601 UTC with milliseconds, e.g. ``2024-05-01T08:00:00.000Z``."""
    return value.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class Notification:
    id: str
    recipient: str
    subject: str
    body: str
    type: str = DEFAULT_TYPE
    status: str = NotificationStatus.PENDING
    created_at: str = ''
    sent_at: Optional[str] = None

    @classmethod
    def new(cls, *, recipient: str, subject: str, body: str, type: Optional[str] = None) -> 'Notification':
        """Build a fresh pending notification with a new id."""
        return cls(
            id=str(uuid.uuid4()),
            recipient=recipient,
            subject=subject,
            body=body,
            type=type or DEFAULT_TYPE,
            status=NotificationStatus.PENDING,
            created_at=format_timestamp(timezone.now()),
        )

    def mark_sent(self) -> None:
        self.status = NotificationStatus.SENT
        self.sent_at = format_timestamp(timezone.now())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            'id': self.id,
            'recipient': self.recipient,
            'subject': self.subject,
            'body': self.body,
            'type': self.type,
            'status': str(self.status),
            'createdAt': self.created_at,
        }
        if self.sent_at:
            data['sentAt'] = self.sent_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Notification':
        """Inverse of :meth:`to_dict`.  Raises ``KeyError`` if a required key is absent."""
        return cls(
            id=data['id'],
            recipient=data['recipient'],
            subject=data['subject'],
            body=data['body'],
            type=data.get('type') or DEFAULT_TYPE,
            status=data.get('status') or NotificationStatus.PENDING,
            created_at=data.get('createdAt', ''),
            sent_at=data.get('sentAt'),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> 'Notification':
        return cls.from_dict(json.loads(raw))
