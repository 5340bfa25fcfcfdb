from unittest import mock

import pytest
from django.db import DatabaseError

from apps.board import activity as activity_module
from apps.board.activity import Actor, activity_recorder, classify_action
from apps.board.dispatch import dispatch_effects
from apps.board.events import ActivityEvent, EventKind
from apps.board.services import mutation_service
from apps.core.models import ActivityEntry, Member, Notification


@pytest.mark.parametrize('action, expected', [
    ('created task', 'create'),
    ('Created column', 'create'),
    ('deleted column', 'delete'),
    ('commented on', 'comment'),
    ('renamed column', 'update'),
    ('moved task', 'update'),
])
def test_classify_action(action, expected):
    assert classify_action(action) == expected


def test_record_writes_entry_and_notification_and_publishes(board, bus, recorder):
    received = recorder(str(board.pk))

    entry = activity_recorder.record(bus, board.pk, Actor(name='Ana'), 'created column', 'Review')

    assert ActivityEntry.objects.get() == entry
    notification = Notification.objects.get()
    assert (notification.actor_name, notification.type) == ('Ana', 'create')

    [event] = received
    assert isinstance(event, ActivityEvent)
    assert event.kind == EventKind.ACTIVITY_CREATE
    wire = event.to_dict()
    assert wire['type'] == 'activity:create'
    assert (wire['user'], wire['action'], wire['target']) == ('Ana', 'created column', 'Review')
    assert wire['payload']['activity']['id'] == entry.pk
    assert wire['payload']['notification']['type'] == 'create'


def test_record_stores_the_actor_reference(board, bus):
    member = Member.objects.create(board=board, name='Bruno')

    entry = activity_recorder.record(bus, board.pk, Actor(name='Bruno', member=member), 'renamed column', 'A → B')

    assert entry.actor == member
    member.name = 'Bruno Lima'
    member.save()
    assert ActivityEntry.objects.get(pk=entry.pk).actor.name == 'Bruno Lima'


def test_record_failure_is_logged_and_swallowed(board, bus, recorder):
    received = recorder(str(board.pk))

    with mock.patch.object(ActivityEntry.objects, 'create', side_effect=DatabaseError('fora do ar')), \
            mock.patch.object(activity_module.logger, 'exception') as log_exception:
        entry = activity_recorder.record(bus, board.pk, Actor(name='Ana'), 'created task', 'x')

    assert entry is None
    assert received == []
    log_exception.assert_called_once()


def test_primary_mutation_survives_activity_failure(board, todo, bus, recorder):
    received = recorder(str(board.pk))
    result = mutation_service.create_task(todo, {'title': 'Write spec'}, Actor(name='Ana'))

    with mock.patch.object(ActivityEntry.objects, 'create', side_effect=DatabaseError('fora do ar')):
        dispatch_effects(result.effects)

    assert todo.tasks.filter(title='Write spec').exists()
    assert [event.kind for event in received] == [EventKind.TASK_CREATE]


def test_dispatch_runs_publishes_and_activity(board, todo, bus, recorder):
    received = recorder(str(board.pk))
    result = mutation_service.create_task(todo, {'title': 'Write spec'}, Actor(name='Ana'))

    dispatch_effects(result.effects)

    assert [event.kind for event in received] == [EventKind.TASK_CREATE, EventKind.ACTIVITY_CREATE]
    assert ActivityEntry.objects.get().task_id == result.instance.pk
