import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from apps.board.activity import Actor
from apps.board.events import EventKind
from apps.board.services import ConflictError, Publish, RecordActivity, mutation_service
from apps.core.models import Board, Label, Member, Task

ACTOR = Actor(name='Ana')


def _publishes(result):
    return [(effect.channel, effect.event.kind) for effect in result.effects if isinstance(effect, Publish)]


def _activities(result):
    return [effect for effect in result.effects if isinstance(effect, RecordActivity)]


@pytest.fixture
def task(todo):
    return mutation_service.create_task(todo, {'title': 'Write spec'}, ACTOR).instance


def test_create_board_adds_default_columns_and_owner(db):
    result = mutation_service.create_board({'name': 'Sprint 1'}, ACTOR)

    board = result.instance
    assert [c['title'] for c in result.data['columns']] == ['To Do', 'In Progress', 'Done']
    assert [c['order'] for c in result.data['columns']] == [0, 1, 2]
    owner = board.members.get()
    assert (owner.name, owner.role) == ('Ana', 'Owner')
    assert result.effects == []


def test_create_board_without_default_columns(db):
    result = mutation_service.create_board({'name': 'Vazio', 'default_columns': False}, Actor())

    assert result.instance.columns.count() == 0
    assert result.instance.members.count() == 0


def test_task_mutations_publish_on_the_board_channel(board, todo):
    result = mutation_service.create_task(todo, {'title': 'Write spec'}, ACTOR)

    assert _publishes(result) == [(str(board.pk), EventKind.TASK_CREATE)]
    assert result.data['title'] == 'Write spec'
    [activity] = _activities(result)
    assert (activity.action, activity.target, activity.task_id) == ('created task', 'Write spec', result.instance.pk)


def test_task_assignees_must_belong_to_the_board(board, todo):
    other = Board.objects.create(name='Outro')
    stranger = Member.objects.create(board=other, name='Zé')

    with pytest.raises(ValidationError):
        mutation_service.create_task(todo, {'title': 'x', 'assignee_ids': [stranger.pk]}, ACTOR)
    assert not Task.objects.filter(title='x').exists()


def test_task_assignees_and_labels_are_replaced(board, task):
    ana = Member.objects.create(board=board, name='Ana')
    bruno = Member.objects.create(board=board, name='Bruno')
    bug = Label.objects.create(board=board, name='bug', color='#EF4444')

    mutation_service.update_task(task, {'assignee_ids': [ana.pk, bruno.pk], 'label_ids': [bug.pk]}, ACTOR)
    result = mutation_service.update_task(task, {'assignee_ids': [bruno.pk]}, ACTOR)

    assert result.data['assigneeIds'] == [bruno.pk]
    assert result.data['labelIds'] == [bug.pk]


def test_archive_is_a_plain_update(board, task):
    result = mutation_service.update_task(task, {'is_archived': True}, ACTOR)

    assert result.data['isArchived'] is True
    assert _publishes(result) == [(str(board.pk), EventKind.TASK_UPDATE)]


def test_comment_count_follows_creates_and_deletes(task):
    first = mutation_service.create_comment(task, {'content': 'um'}, ACTOR).instance
    mutation_service.create_comment(task, {'content': 'dois'}, ACTOR)
    task.refresh_from_db()
    assert task.comment_count == 2

    mutation_service.delete_comment(first)
    task.refresh_from_db()
    assert task.comment_count == 1


def test_comment_count_never_goes_negative(task):
    comment = mutation_service.create_comment(task, {'content': 'um'}, ACTOR).instance
    Task.objects.filter(pk=task.pk).update(comment_count=0)

    mutation_service.delete_comment(comment)

    task.refresh_from_db()
    assert task.comment_count == 0


def test_comment_events_go_only_to_the_task_channel(task):
    result = mutation_service.create_comment(task, {'content': 'Olá'}, ACTOR)

    assert _publishes(result) == [(f'task:{task.pk}', EventKind.COMMENT_CREATE)]
    [activity] = _activities(result)
    assert activity.action == 'commented on'
    assert activity.channel == f'task:{task.pk}'


def test_comment_keeps_a_stable_member_reference(board, task):
    member = Member.objects.create(board=board, name='Bruno')
    actor = Actor(name=member.name, member=member)

    result = mutation_service.create_comment(task, {'content': 'Olá'}, actor)

    assert result.instance.author == 'Bruno'
    assert result.data['authorMember']['id'] == member.pk


def test_checklist_publishes_on_board_and_task_channels(board, task):
    result = mutation_service.create_checklist_item(task, {'text': 'revisar'})

    assert _publishes(result) == [
        (str(board.pk), EventKind.CHECKLIST_CREATE),
        (f'task:{task.pk}', EventKind.CHECKLIST_CREATE),
    ]
    task.refresh_from_db()
    assert task.checklist_count == 1

    mutation_service.delete_checklist_item(result.instance)
    task.refresh_from_db()
    assert task.checklist_count == 0


def test_checklist_items_are_appended(task):
    first = mutation_service.create_checklist_item(task, {'text': 'a'}).instance
    second = mutation_service.create_checklist_item(task, {'text': 'b'}).instance

    assert (first.order, second.order) == (0, 1)


def test_label_create_is_an_upsert_by_name(board):
    created = mutation_service.create_label(board, {'name': 'bug', 'color': '#EF4444'})
    updated = mutation_service.create_label(board, {'name': 'bug', 'color': '#000000'})

    assert created.instance.pk == updated.instance.pk
    assert Label.objects.get(pk=created.instance.pk).color == '#000000'
    assert _publishes(created)[0][1] == EventKind.LABEL_CREATE
    assert _publishes(updated)[0][1] == EventKind.LABEL_UPDATE


def test_label_rename_conflict(board):
    mutation_service.create_label(board, {'name': 'bug', 'color': '#EF4444'})
    docs = mutation_service.create_label(board, {'name': 'docs', 'color': '#64748B'}).instance

    with pytest.raises(ConflictError):
        mutation_service.update_label(docs, {'name': 'bug'})


def test_member_invite_by_email(board):
    user = get_user_model().objects.create_user('bruno', email='bruno@example.com', password='x')

    result = mutation_service.create_member(board, {'email': 'bruno@example.com', 'role': 'Editor'})

    assert result.instance.user == user
    assert result.instance.role == 'Editor'
    assert _publishes(result) == [(str(board.pk), EventKind.MEMBER_CREATE)]

    with pytest.raises(ConflictError):
        mutation_service.create_member(board, {'email': 'BRUNO@example.com'})


def test_member_invite_unknown_email(board):
    with pytest.raises(get_user_model().DoesNotExist):
        mutation_service.create_member(board, {'email': 'ninguem@example.com'})


def test_member_direct_duplicate(board):
    mutation_service.create_member(board, {'name': 'Carla', 'role': 'Viewer'})

    with pytest.raises(ConflictError):
        mutation_service.create_member(board, {'name': 'Carla', 'role': 'Viewer'})


def test_delete_returns_the_last_state(board, task):
    result = mutation_service.delete_task(task)

    assert result.instance is None
    assert result.data['title'] == 'Write spec'
    assert _publishes(result) == [(str(board.pk), EventKind.TASK_DELETE)]
    assert not Task.objects.filter(pk=result.data['id']).exists()


def test_column_activity_effects(board, todo):
    created = mutation_service.create_column(board, {'title': 'Review'}, ACTOR)
    renamed = mutation_service.update_column(created.instance, {'title': 'QA'}, ACTOR)
    deleted = mutation_service.delete_column(renamed.instance, ACTOR)

    actions = [_activities(r)[0].action for r in (created, renamed, deleted)]
    assert actions == ['created column', 'renamed column', 'deleted column']
    assert _activities(renamed)[0].target == 'Review → QA'


def test_color_only_update_records_no_activity(todo):
    result = mutation_service.update_column(todo, {'color': '#000'}, ACTOR)

    assert _activities(result) == []
    assert [kind for _, kind in _publishes(result)] == [EventKind.COLUMN_UPDATE]
