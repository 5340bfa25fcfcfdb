from apps.board import ordering
from apps.board.activity import Actor
from apps.board.events import EventKind
from apps.board.services import Publish, mutation_service
from apps.core.models import Board, Column, Task, is_completion_title

ACTOR = Actor(name='Ana')


def _titles(board):
    return list(board.columns.values_list('title', flat=True))


def _orders(queryset):
    return [item.order for item in ordering.display_order(queryset)]


def _task(column, title):
    return mutation_service.create_task(column, {'title': title}, ACTOR).instance


def test_completion_title_matching():
    assert is_completion_title('Done')
    assert is_completion_title('completed this week')
    assert is_completion_title('DONE ✅')
    assert not is_completion_title('Doing')
    assert not is_completion_title('')


def test_columns_are_appended_in_creation_order(db):
    board = Board.objects.create(name='Sprint 1')

    first = mutation_service.create_column(board, {'title': 'To Do'}, ACTOR).instance
    second = mutation_service.create_column(board, {'title': 'Doing'}, ACTOR).instance

    assert (first.order, second.order) == (0, 1)
    assert _titles(board) == ['To Do', 'Doing']


def test_explicit_order_is_kept_and_ties_fall_back_to_creation(db):
    board = Board.objects.create(name='Sprint 1')
    mutation_service.create_column(board, {'title': 'A', 'order': 0}, ACTOR)
    mutation_service.create_column(board, {'title': 'B', 'order': 0}, ACTOR)

    assert _titles(board) == ['A', 'B']


def test_reordering_a_column_renumbers_all_siblings(board):
    column = mutation_service.create_column(board, {'title': 'Review'}, ACTOR).instance

    result = mutation_service.update_column(column, {'order': 0}, ACTOR)

    assert _titles(board) == ['Review', 'To Do', 'In Progress', 'Done']
    assert _orders(board.columns.all()) == [0, 1, 2, 3]
    moved = [e for e in result.effects if isinstance(e, Publish) and e.event.kind == EventKind.COLUMN_MOVED]
    assert len(moved) == 1
    assert [s['order'] for s in moved[0].event.payload['siblings']] == [0, 1, 2, 3]


def test_target_index_is_clamped(board, todo):
    result = mutation_service.update_column(todo, {'order': 99}, ACTOR)

    assert result.instance.order == 2
    assert _titles(board) == ['In Progress', 'Done', 'To Do']


def test_move_within_a_column_keeps_orders_contiguous(todo):
    tasks = [_task(todo, title) for title in ('a', 'b', 'c', 'd')]

    mutation_service.move_task(tasks[3], todo.pk, 1, ACTOR)

    titles = [task.title for task in ordering.display_order(todo.tasks.all())]
    assert titles == ['a', 'd', 'b', 'c']
    assert _orders(todo.tasks.all()) == [0, 1, 2, 3]


def test_move_across_columns_renumbers_source_and_destination(todo, done):
    a, b, c = (_task(todo, title) for title in ('a', 'b', 'c'))
    x = _task(done, 'x')

    result = mutation_service.move_task(b, done.pk, 0, ACTOR)

    assert [t.title for t in ordering.display_order(todo.tasks.all())] == ['a', 'c']
    assert _orders(todo.tasks.all()) == [0, 1]
    assert [t.title for t in ordering.display_order(done.tasks.all())] == ['b', 'x']
    assert _orders(done.tasks.all()) == [0, 1]

    payload = result.effects[0].event.payload
    assert result.effects[0].event.kind == EventKind.TASK_MOVED
    assert payload['fromColumnId'] == todo.pk
    assert payload['columnId'] == done.pk
    assert {s['id'] for s in payload['siblings']} == {b.pk, x.pk}


def test_move_without_order_appends_to_destination(todo, done):
    _task(done, 'x')
    task = _task(todo, 'a')

    mutation_service.move_task(task, done.pk, None, ACTOR)

    task.refresh_from_db()
    assert task.column_id == done.pk
    assert task.order == 1


def test_completed_at_follows_the_column(board, todo):
    doing = mutation_service.create_column(board, {'title': 'Doing'}, ACTOR).instance
    done = Column.objects.get(board=board, title='Done')
    task = _task(doing, 'Write spec')
    assert task.completed_at is None

    mutation_service.move_task(task, done.pk, 0, ACTOR)
    task.refresh_from_db()
    assert task.completed_at is not None

    mutation_service.move_task(task, doing.pk, 0, ACTOR)
    task.refresh_from_db()
    assert task.completed_at is None


def test_task_created_in_done_column_is_completed(done):
    assert _task(done, 'Já feito').completed_at is not None


def test_renaming_a_column_recomputes_completed_at(todo):
    task = _task(todo, 'a')

    mutation_service.update_column(todo, {'title': 'Completed'}, ACTOR)
    task.refresh_from_db()
    assert task.completed_at is not None

    mutation_service.update_column(todo, {'title': 'Backlog'}, ACTOR)
    task.refresh_from_db()
    assert task.completed_at is None


def test_task_update_with_column_id_moves_the_task(todo, done):
    task = _task(todo, 'a')

    result = mutation_service.update_task(task, {'column_id': done.pk, 'priority': 'High'}, ACTOR)

    kinds = [effect.event.kind for effect in result.effects]
    assert kinds == [EventKind.TASK_UPDATE, EventKind.TASK_MOVED]
    task = Task.objects.get(pk=task.pk)
    assert task.column_id == done.pk
    assert task.priority == 'High'
    assert task.completed_at is not None


def test_task_update_repeating_its_column_keeps_the_position(todo):
    first = _task(todo, 'a')
    _task(todo, 'b')
    _task(todo, 'c')

    result = mutation_service.update_task(first, {'title': 'a2', 'column_id': todo.pk}, ACTOR)

    assert [effect.event.kind for effect in result.effects] == [EventKind.TASK_UPDATE]
    titles = [task.title for task in ordering.display_order(Task.objects.filter(column=todo))]
    assert titles == ['a2', 'b', 'c']
