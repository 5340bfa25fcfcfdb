# apps/board/views.py

"""
API JSON do board

Cada mutação chama o BoardMutationService e, com a transação já
confirmada, despacha os efeitos (eventos e atividades). Remoções
devolvem o último estado da entidade removida.
"""

import logging

from django.conf import settings
from django.db.models import Prefetch
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from apps.core.forms import (
    ActivityForm, BoardForm, ChecklistItemForm, ColumnForm, CommentForm,
    LabelForm, MemberForm, MoveTaskForm, NotificationForm, TaskForm,
)
from apps.core.models import (
    ActivityEntry, Board, ChecklistItem, Column, Comment, Label, Member,
    Notification, Task,
)

from .activity import Actor, activity_recorder
from .channel_names import board_channel, task_channel
from .dispatch import dispatch_effects
from .http import json_endpoint, parse_json_body, query_int, resolve_actor
from .serializers import (
    serialize_activity, serialize_board, serialize_checklist_item,
    serialize_column, serialize_comment, serialize_label, serialize_member,
    serialize_notification, serialize_task,
)
from .services import Publish, mutation_service

logger = logging.getLogger(__name__)


def _respond(result, status=200):
    dispatch_effects(result.effects)
    return JsonResponse(result.data, status=status, safe=False)


def _task_queryset():
    return Task.objects.select_related('column').prefetch_related('assignees', 'labels')


# ----------------------------------------------------------------------
# Boards
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def boards(request):
    if request.method == 'GET':
        return JsonResponse([serialize_board(board) for board in Board.objects.all()], safe=False)

    payload = parse_json_body(request)
    changes = BoardForm(payload, creating=True).validated()
    actor = resolve_actor(request, None, payload)
    return _respond(mutation_service.create_board(changes, actor), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def board_detail(request, board_id):
    board = get_object_or_404(Board, pk=board_id)

    if request.method == 'GET':
        tasks = Prefetch('tasks', queryset=_task_queryset().filter(is_archived=False))
        columns = [
            serialize_column(column, tasks=column.tasks.all())
            for column in board.columns.prefetch_related(tasks)
        ]
        limit = getattr(settings, 'COLAB_ACTIVITY_LIMIT', 50)
        return JsonResponse(serialize_board(
            board,
            columns=columns,
            members=board.members.all(),
            labels=board.labels.all(),
            activities=board.activities.all()[:limit],
        ))

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_board(board))

    changes = BoardForm(parse_json_body(request)).validated()
    return _respond(mutation_service.update_board(board, changes))


# ----------------------------------------------------------------------
# Colunas
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def columns(request):
    if request.method == 'GET':
        board = get_object_or_404(Board, pk=query_int(request, 'boardId'))
        return JsonResponse([serialize_column(column) for column in board.columns.all()], safe=False)

    payload = parse_json_body(request)
    changes = ColumnForm(payload, creating=True).validated()
    board = get_object_or_404(Board, pk=changes['board_id'])
    actor = resolve_actor(request, board.pk, payload)
    return _respond(mutation_service.create_column(board, changes, actor), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def column_detail(request, column_id):
    column = get_object_or_404(Column, pk=column_id)

    if request.method == 'GET':
        return JsonResponse(serialize_column(column, tasks=_task_queryset().filter(column=column)))

    payload = parse_json_body(request)
    actor = resolve_actor(request, column.board_id, payload)

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_column(column, actor))

    changes = ColumnForm(payload).validated()
    return _respond(mutation_service.update_column(column, changes, actor))


# ----------------------------------------------------------------------
# Tarefas
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def tasks(request):
    if request.method == 'GET':
        queryset = _task_queryset()
        column_id = query_int(request, 'columnId', required=False)
        if column_id is not None:
            queryset = queryset.filter(column_id=column_id)
        else:
            queryset = queryset.filter(column__board_id=query_int(request, 'boardId'))
        if request.GET.get('archived') not in ('1', 'true'):
            queryset = queryset.filter(is_archived=False)
        return JsonResponse([serialize_task(task) for task in queryset], safe=False)

    payload = parse_json_body(request)
    changes = TaskForm(payload, creating=True).validated()
    column = get_object_or_404(Column, pk=changes['column_id'])
    actor = resolve_actor(request, column.board_id, payload)
    return _respond(mutation_service.create_task(column, changes, actor), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def task_detail(request, task_id):
    task = get_object_or_404(_task_queryset(), pk=task_id)

    if request.method == 'GET':
        data = serialize_task(task)
        data['checklist'] = [serialize_checklist_item(item) for item in task.checklist_items.all()]
        data['comments'] = [
            serialize_comment(comment)
            for comment in task.comments.select_related('author_member')
        ]
        return JsonResponse(data)

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_task(task))

    payload = parse_json_body(request)
    changes = TaskForm(payload).validated()
    actor = resolve_actor(request, task.column.board_id, payload)
    return _respond(mutation_service.update_task(task, changes, actor))


@json_endpoint
@require_http_methods(['POST'])
def task_move(request, task_id):
    task = get_object_or_404(_task_queryset(), pk=task_id)
    payload = parse_json_body(request)
    changes = MoveTaskForm(payload, creating=True).validated()
    actor = resolve_actor(request, task.column.board_id, payload)
    result = mutation_service.move_task(task, changes['column_id'], changes.get('order'), actor)
    return _respond(result)


# ----------------------------------------------------------------------
# Comentários
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def comments(request):
    if request.method == 'GET':
        task = get_object_or_404(Task, pk=query_int(request, 'taskId'))
        return JsonResponse(
            [serialize_comment(comment) for comment in task.comments.select_related('author_member')],
            safe=False,
        )

    payload = parse_json_body(request)
    changes = CommentForm(payload, creating=True).validated()
    task = get_object_or_404(Task.objects.select_related('column'), pk=changes['task_id'])
    actor = resolve_actor(request, task.column.board_id, payload)
    return _respond(mutation_service.create_comment(task, changes, actor), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def comment_detail(request, comment_id):
    comment = get_object_or_404(Comment.objects.select_related('task__column', 'author_member'), pk=comment_id)

    if request.method == 'GET':
        return JsonResponse(serialize_comment(comment))

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_comment(comment))

    changes = CommentForm(parse_json_body(request)).validated()
    return _respond(mutation_service.update_comment(comment, changes))


# ----------------------------------------------------------------------
# Checklist
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def checklist(request):
    if request.method == 'GET':
        task = get_object_or_404(Task, pk=query_int(request, 'taskId'))
        return JsonResponse(
            [serialize_checklist_item(item) for item in task.checklist_items.all()], safe=False
        )

    changes = ChecklistItemForm(parse_json_body(request), creating=True).validated()
    task = get_object_or_404(Task.objects.select_related('column'), pk=changes['task_id'])
    return _respond(mutation_service.create_checklist_item(task, changes), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def checklist_detail(request, item_id):
    item = get_object_or_404(ChecklistItem.objects.select_related('task__column'), pk=item_id)

    if request.method == 'GET':
        return JsonResponse(serialize_checklist_item(item))

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_checklist_item(item))

    changes = ChecklistItemForm(parse_json_body(request)).validated()
    return _respond(mutation_service.update_checklist_item(item, changes))


# ----------------------------------------------------------------------
# Labels
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def labels(request):
    if request.method == 'GET':
        board = get_object_or_404(Board, pk=query_int(request, 'boardId'))
        return JsonResponse([serialize_label(label) for label in board.labels.all()], safe=False)

    changes = LabelForm(parse_json_body(request), creating=True).validated()
    board = get_object_or_404(Board, pk=changes['board_id'])
    return _respond(mutation_service.create_label(board, changes), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def label_detail(request, label_id):
    label = get_object_or_404(Label, pk=label_id)

    if request.method == 'GET':
        return JsonResponse(serialize_label(label))

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_label(label))

    changes = LabelForm(parse_json_body(request)).validated()
    return _respond(mutation_service.update_label(label, changes))


# ----------------------------------------------------------------------
# Membros
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def members(request):
    if request.method == 'GET':
        board = get_object_or_404(Board, pk=query_int(request, 'boardId'))
        return JsonResponse([serialize_member(member) for member in board.members.all()], safe=False)

    changes = MemberForm(parse_json_body(request), creating=True).validated()
    board = get_object_or_404(Board, pk=changes['board_id'])
    return _respond(mutation_service.create_member(board, changes), status=201)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
def member_detail(request, member_id):
    member = get_object_or_404(Member, pk=member_id)

    if request.method == 'GET':
        return JsonResponse(serialize_member(member))

    if request.method == 'DELETE':
        return _respond(mutation_service.delete_member(member))

    changes = MemberForm(parse_json_body(request)).validated()
    return _respond(mutation_service.update_member(member, changes))


# ----------------------------------------------------------------------
# Atividades e notificações
# ----------------------------------------------------------------------

@json_endpoint
@require_http_methods(['GET', 'POST'])
def activity(request):
    if request.method == 'GET':
        board = get_object_or_404(Board, pk=query_int(request, 'boardId'))
        limit = query_int(request, 'limit', required=False) or getattr(settings, 'COLAB_ACTIVITY_LIMIT', 50)
        entries = board.activities.all()[:max(limit, 1)]
        return JsonResponse([serialize_activity(entry) for entry in entries], safe=False)

    # Registro explícito: a gravação é a mutação principal, então erros sobem
    payload = parse_json_body(request)
    changes = ActivityForm(payload, creating=True).validated()
    board = get_object_or_404(Board, pk=changes['board_id'])
    member = resolve_actor(request, board.pk, payload).member
    actor = Actor(name=changes['user'], member=member)
    task_id = changes.get('task_id')
    if task_id is not None:
        get_object_or_404(Task, pk=task_id, column__board=board)

    entry, notification = activity_recorder.append(
        board.pk, actor, changes['action'], changes['target'],
        task_id=task_id, project_id=changes.get('project_id', ''),
    )
    event = activity_recorder.build_event(entry, notification)
    channel = task_channel(task_id) if task_id and 'comment' in entry.action.lower() else board_channel(board)
    dispatch_effects([Publish(channel, event)])
    return JsonResponse(serialize_activity(entry), status=201)


@json_endpoint
@require_http_methods(['GET'])
def activity_detail(request, activity_id):
    """Atividades só crescem; removidas apenas junto com o board"""
    entry = get_object_or_404(ActivityEntry, pk=activity_id)
    return JsonResponse(serialize_activity(entry))


@json_endpoint
@require_http_methods(['GET', 'DELETE'])
def notifications(request):
    board = get_object_or_404(Board, pk=query_int(request, 'boardId'))

    if request.method == 'DELETE':
        deleted, _ = board.notifications.all().delete()
        logger.info(f"🧹 {deleted} notificação(ões) removida(s) do board {board.pk}")
        return JsonResponse({'deleted': deleted})

    limit = getattr(settings, 'COLAB_NOTIFICATION_LIMIT', 20)
    items = board.notifications.all()[:limit]
    return JsonResponse([serialize_notification(item) for item in items], safe=False)


@json_endpoint
@require_http_methods(['GET', 'PUT', 'PATCH'])
def notification_detail(request, notification_id):
    notification = get_object_or_404(Notification, pk=notification_id)

    if request.method != 'GET':
        changes = NotificationForm(parse_json_body(request)).validated()
        notification.is_read = changes.get('is_read', True)
        notification.save(update_fields=['is_read'])

    return JsonResponse(serialize_notification(notification))
