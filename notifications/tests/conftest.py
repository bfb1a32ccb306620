import fakeredis
import pytest
from django.apps import apps
from rest_framework.test import APIClient

from notifications.senders import BaseSender
from notifications.store import NotificationStore
from notifications.worker import DeliveryWorker


class RecordingSender(BaseSender):
    def __init__(self):
        self.sent = []

    def send(self, notification):
        self.sent.append(notification)


@pytest.fixture
def redis_client():
    # A private server per test; default FakeRedis instances share data.
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def store(redis_client):
    return NotificationStore(redis_client)


@pytest.fixture(autouse=True)
def app_store(monkeypatch, store):
    """Point the app's shared store at fakeredis for every test."""
    config = apps.get_app_config('notifications')
    monkeypatch.setattr(config, 'store', store)
    monkeypatch.setattr(config, 'worker', None)
    return store


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def worker(store, sender):
    w = DeliveryWorker(store, sender, poll_interval=0.01)
    yield w
    w.stop(timeout=2)
