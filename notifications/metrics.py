from prometheus_client import Counter

# Label values are limited to these; anything else is counted as "other".
KNOWN_CHANNELS = frozenset({'email', 'sms', 'push'})

ENQUEUED = Counter(
    'notifications_enqueued_total',
    'Notifications accepted and pushed onto the queue.',
    ['type'],
)
SENT = Counter(
    'notifications_sent_total',
    'Notifications delivered by the worker and recorded as sent.',
    ['type'],
)
WORKER_ERRORS = Counter(
    'notifications_worker_errors_total',
    'Worker iterations that failed; the popped entry is dropped.',
)


def channel_label(notification_type: str) -> str:
    return notification_type if notification_type in KNOWN_CHANNELS else 'other'
