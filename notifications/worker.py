"""
Background delivery worker.

A single loop drains the Redis queue: pop one entry, hand it to the
sender, record it as ``sent`` under ``notification:<id>`` with a TTL,
then wait for the poll interval before polling again.

Delivery is at-most-once.  Once an entry is popped it is gone from the
queue, so a failure while parsing, sending or storing it loses that
notification; the failure is logged and the loop carries on.  There is
no retry and no dead-letter list.

The wait between polls is a ``threading.Event`` so :meth:`stop` wakes the
loop immediately instead of waiting out the interval.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from django.apps import apps
from django.conf import settings

from .exceptions import WorkerIterationError
from .metrics import SENT, WORKER_ERRORS, channel_label
from .models import Notification
from .senders import BaseSender, get_sender
from .store import STATUS_TTL_SECONDS, NotificationStore

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0


class DeliveryWorker:
    def __init__(
        self,
        store: NotificationStore,
        sender: BaseSender,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        ttl: int = STATUS_TTL_SECONDS,
    ):
        self.store = store
        self.sender = sender
        self.poll_interval = poll_interval
        self.ttl = ttl
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def process_next(self) -> Optional[Notification]:
        """Pop and deliver one queued notification.

        Returns the delivered notification, or ``None`` if the queue was
        empty.  Any failure is raised as ``WorkerIterationError``; the
        popped entry is not pushed back.
        """
        try:
            raw = self.store.dequeue()
        except Exception as e:
            raise WorkerIterationError(f'dequeue failed: {e}') from e
        if raw is None:
            return None
        notification = None
        try:
            notification = Notification.from_json(raw)
            self.sender.send(notification)
            notification.mark_sent()
            self.store.save_status(notification.id, notification.to_json(), ttl=self.ttl)
        except Exception as e:
            raise WorkerIterationError(
                f'processing failed: {e}',
                entry=raw,
                notification_id=notification.id if notification else None,
            ) from e
        SENT.labels(type=channel_label(notification.type)).inc()
        logger.info('Notification sent: %s', notification.id)
        return notification

    def run_forever(self) -> None:
        """Poll until :meth:`stop` is called."""
        logger.info(
            'Delivery worker started (queue=%s, interval=%ss)',
            self.store.queue_name, self.poll_interval,
        )
        while not self._stop_event.is_set():
            try:
                self.process_next()
            except WorkerIterationError as e:
                WORKER_ERRORS.inc()
                # The entry carries recipient and body; only the id is logged.
                logger.error(
                    'Error processing notification %s: %s',
                    e.notification_id or '<unparsed>', e, exc_info=e.__cause__,
                )
            self._stop_event.wait(self.poll_interval)
        logger.info('Delivery worker stopped')

    def start(self) -> None:
        """Run the loop in a daemon thread.  Does nothing if already running."""
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self.run_forever, name='notification-worker', daemon=True,
            )
            self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the loop to exit and wait for the thread.

        A notification already popped finishes its iteration first.
        """
        self._stop_event.set()
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)


def build_worker() -> DeliveryWorker:
    """Create a worker around the app's shared store, configured from settings."""
    return DeliveryWorker(
        apps.get_app_config('notifications').store,
        get_sender(),
        poll_interval=settings.NOTIFICATIONS_POLL_INTERVAL,
        ttl=settings.NOTIFICATIONS_TTL_SECONDS,
    )


def start_background_worker() -> Optional[DeliveryWorker]:
    """Start the process-wide worker thread once, if autostart is enabled."""
    if not settings.NOTIFICATIONS_WORKER_AUTOSTART:
        logger.info('Delivery worker autostart disabled')
        return None
    config = apps.get_app_config('notifications')
    if config.worker is None:
        config.worker = build_worker()
    config.worker.start()
    return config.worker
