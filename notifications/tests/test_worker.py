import json
import logging
import time
from unittest import mock

import pytest
import redis
from prometheus_client import REGISTRY

from notifications.exceptions import WorkerIterationError
from notifications.models import Notification
from notifications.services import submit_notification
from notifications.store import NotificationStore
from notifications.worker import DeliveryWorker, start_background_worker


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def queue(store, **overrides):
    data = {'recipient': 'a@x.com', 'subject': 'Hi', 'body': 'Test', **overrides}
    return submit_notification(store, data)


def test_empty_queue_yields_nothing(worker, sender):
    assert worker.process_next() is None
    assert sender.sent == []


def test_delivery_records_sent_status(worker, store, sender, redis_client):
    n = queue(store)
    delivered = worker.process_next()

    assert delivered.id == n.id
    assert [s.id for s in sender.sent] == [n.id]
    stored = json.loads(redis_client.get(f'notification:{n.id}'))
    assert stored['status'] == 'sent'
    assert stored['sentAt'].endswith('Z')
    assert stored['createdAt'] == n.created_at
    assert store.queue_length() == 0


def test_status_is_written_with_24h_ttl(worker, store, redis_client):
    n = queue(store)
    worker.process_next()
    assert 86300 < redis_client.ttl(f'notification:{n.id}') <= 86400


def test_ttl_is_passed_on_every_write(sender):
    store = mock.Mock(spec=NotificationStore)
    store.dequeue.return_value = Notification.new(recipient='r', subject='s', body='b').to_json()
    w = DeliveryWorker(store, sender)
    n = w.process_next()
    store.save_status.assert_called_once_with(n.id, mock.ANY, ttl=86400)


def test_queue_drains_in_submission_order(worker, store, sender):
    a = queue(store, subject='A')
    b = queue(store, subject='B')
    worker.process_next()
    worker.process_next()
    assert [s.id for s in sender.sent] == [a.id, b.id]


def test_malformed_entry_is_dropped(worker, store, redis_client):
    redis_client.lpush('notification_queue', 'not json')
    with pytest.raises(WorkerIterationError) as exc:
        worker.process_next()
    assert exc.value.entry == 'not json'
    assert store.queue_length() == 0
    assert redis_client.keys('notification:*') == []


def test_sender_failure_loses_entry_without_status(store, redis_client):
    class Broken:
        def send(self, notification):
            raise RuntimeError('smtp down')

    w = DeliveryWorker(store, Broken())
    n = queue(store)
    with pytest.raises(WorkerIterationError):
        w.process_next()
    assert store.queue_length() == 0
    assert redis_client.get(f'notification:{n.id}') is None


def test_dequeue_failure_is_an_iteration_error(sender):
    client = mock.Mock(spec=redis.Redis)
    client.rpop.side_effect = redis.exceptions.ConnectionError('gone')
    w = DeliveryWorker(NotificationStore(client), sender)
    with pytest.raises(WorkerIterationError) as exc:
        w.process_next()
    assert exc.value.entry is None


def test_loop_keeps_going_after_a_bad_entry(worker, store, sender, redis_client):
    redis_client.lpush('notification_queue', '{"broken": true}')
    good = queue(store)

    worker.start()
    assert wait_for(lambda: redis_client.get(f'notification:{good.id}') is not None)
    assert worker.is_running
    assert [s.id for s in sender.sent] == [good.id]


def test_stop_interrupts_the_poll_wait(store, sender):
    w = DeliveryWorker(store, sender, poll_interval=60)
    w.start()
    assert wait_for(lambda: w.is_running)
    started = time.monotonic()
    w.stop(timeout=5)
    assert not w.is_running
    assert time.monotonic() - started < 5


def test_start_twice_keeps_one_thread(worker):
    worker.start()
    first = worker._thread
    worker.start()
    assert worker._thread is first


def test_autostart_disabled(settings):
    settings.NOTIFICATIONS_WORKER_AUTOSTART = False
    assert start_background_worker() is None


def test_autostart_runs_one_shared_worker(settings, store):
    settings.NOTIFICATIONS_WORKER_AUTOSTART = True
    settings.NOTIFICATIONS_POLL_INTERVAL = 0.01
    w = start_background_worker()
    try:
        assert w is start_background_worker()
        assert w.store is store
        n = queue(store)
        assert wait_for(lambda: store.load_status(n.id) is not None)
    finally:
        w.stop(timeout=2)


def test_failure_log_names_the_id_not_the_content(store, caplog):
    class Broken:
        def send(self, notification):
            raise RuntimeError('smtp down')

    caplog.set_level(logging.ERROR, logger='notifications.worker')
    n = queue(store, recipient='patient@clinic.example', body='lab results attached')
    w = DeliveryWorker(store, Broken(), poll_interval=0.01)
    w.start()
    try:
        assert wait_for(lambda: 'Error processing notification' in caplog.text)
    finally:
        w.stop(timeout=2)
    assert n.id in caplog.text
    assert 'patient@clinic.example' not in caplog.text
    assert 'lab results attached' not in caplog.text


def test_sent_metric_label_is_bounded(worker, store):
    queue(store, type='carrier-pigeon')
    worker.process_next()
    labels = {
        sample.labels['type']
        for family in REGISTRY.collect()
        if family.name == 'notifications_sent'
        for sample in family.samples
        if sample.name == 'notifications_sent_total'
    }
    assert 'carrier-pigeon' not in labels
    assert 'other' in labels
