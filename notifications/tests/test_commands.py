from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from notifications.services import submit_notification


def test_process_once_delivers_one(store):
    n = submit_notification(store, {'recipient': 'a@x.com', 'subject': 'Hi', 'body': 'Test'})
    out = StringIO()
    call_command('process_notifications', '--once', stdout=out)
    assert f'sent: {n.id}' in out.getvalue()
    assert store.load_status(n.id) is not None


def test_process_once_on_empty_queue(store):
    out = StringIO()
    call_command('process_notifications', '--once', stdout=out)
    assert 'queue empty' in out.getvalue()


def test_process_once_failure_exits_nonzero(redis_client):
    redis_client.lpush('notification_queue', 'not json')
    with pytest.raises(CommandError):
        call_command('process_notifications', '--once', stdout=StringIO())
