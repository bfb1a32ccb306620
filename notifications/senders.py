"""
Delivery backends used by the worker.

The worker only calls ``send(notification)``; raising from it marks the
iteration as failed.  ``LogSender`` is the default and just writes the
message to the log.  Point ``NOTIFICATIONS_SENDER`` at another class to
plug in a real channel.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

from .models import Notification

logger = logging.getLogger(__name__)


class BaseSender:
    def send(self, notification: Notification) -> None:
        raise NotImplementedError


class LogSender(BaseSender):
    """Simulated delivery: log what would be sent."""

    def send(self, notification: Notification) -> None:
        logger.info('Sending %s to %s:', notification.type, notification.recipient)
        logger.info('Subject: %s', notification.subject)
        logger.info('Body: %s', notification.body)


def get_sender() -> BaseSender:
    return import_string(settings.NOTIFICATIONS_SENDER)()
