# apps/board/services.py

"""
BoardMutationService - regras de negócio das entidades do board

Cada operação grava no banco (dentro de uma transação) e devolve um
MutationResult com a representação da entidade e a lista de efeitos
(publicações e atividades). Os efeitos são executados depois, pelo
dispatcher, só quando a gravação deu certo.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from apps.core.models import (
    Board, ChecklistItem, Column, Comment, Label, Member, Task,
)

from . import ordering
from .activity import Actor
from .channel_names import board_channel, channels_for, task_channel
from .events import BoardEvent, EventKind
from .serializers import (
    serialize_board, serialize_checklist_item, serialize_column,
    serialize_comment, serialize_label, serialize_member, serialize_siblings,
    serialize_task,
)

logger = logging.getLogger(__name__)


class ConflictError(Exception):
    """Recurso já existe (ex.: membro duplicado)"""


@dataclass(frozen=True)
class Publish:
    channel: str
    event: BoardEvent


@dataclass(frozen=True)
class RecordActivity:
    board_id: int
    actor: Actor
    action: str
    target: str
    task_id: Optional[int] = None
    channel: Optional[str] = None


@dataclass
class MutationResult:
    instance: Any
    data: dict
    effects: List[Any] = field(default_factory=list)


def _publish_all(entity, action, payload, board_id, task_id=None):
    kind = EventKind.of(entity, action)
    return [
        Publish(channel, BoardEvent(kind, payload))
        for channel in channels_for(entity, board_id, task_id)
    ]


def _apply(instance, changes, fields):
    """Copia para a instância só os campos permitidos presentes em `changes`"""
    touched = []
    for name in fields:
        if name in changes:
            setattr(instance, name, changes[name])
            touched.append(name)
    return touched


def _members_of(board_id, ids):
    members = list(Member.objects.filter(board_id=board_id, pk__in=ids))
    if len(members) != len(set(ids)):
        raise ValidationError({'assignee_ids': ['Membro não pertence a este board.']})
    return members


def _labels_of(board_id, ids):
    labels = list(Label.objects.filter(board_id=board_id, pk__in=ids))
    if len(labels) != len(set(ids)):
        raise ValidationError({'label_ids': ['Label não pertence a este board.']})
    return labels


class BoardMutationService:

    BOARD_FIELDS = ('name', 'description', 'color', 'visibility')
    COLUMN_FIELDS = ('title', 'color')
    TASK_FIELDS = (
        'title', 'description', 'tag', 'tag_color', 'priority',
        'due_date', 'start_date', 'end_date', 'is_archived',
    )
    LABEL_FIELDS = ('name', 'color', 'bg_color', 'text_color')
    MEMBER_FIELDS = ('name', 'email', 'role', 'avatar', 'color')

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    def create_board(self, changes, actor):
        """
        Cria o board com as colunas padrão e o criador como Owner

        Ninguém pode estar assinando o canal de um board que ainda não
        existe, então não há eventos.
        """
        with transaction.atomic():
            board = Board(name=changes['name'])
            _apply(board, changes, self.BOARD_FIELDS)
            board.save()
            if changes.get('default_columns') is not False:
                board.create_default_columns()
            if actor.user is not None or actor.name != Actor().name:
                Member.objects.create(
                    board=board,
                    user=actor.user,
                    name=actor.name,
                    email=getattr(actor.user, 'email', '') or '',
                    role='Owner',
                )

        logger.info(f"✅ Board criado: {board.name} (ID: {board.pk})")
        data = serialize_board(
            board,
            columns=[serialize_column(column) for column in board.columns.all()],
            members=board.members.all(),
        )
        return MutationResult(board, data)

    def update_board(self, board, changes):
        with transaction.atomic():
            _apply(board, changes, self.BOARD_FIELDS)
            board.save()

        data = serialize_board(board)
        return MutationResult(board, data, [
            Publish(board_channel(board), BoardEvent(EventKind.BOARD_UPDATE, data)),
        ])

    def delete_board(self, board):
        data = serialize_board(board)
        channel = board_channel(board)
        with transaction.atomic():
            board.delete()

        logger.info(f"🗑️ Board removido: {data['name']} (ID: {data['id']})")
        return MutationResult(None, data, [
            Publish(channel, BoardEvent(EventKind.BOARD_DELETE, data)),
        ])

    # ------------------------------------------------------------------
    # Colunas
    # ------------------------------------------------------------------

    def create_column(self, board, changes, actor):
        with transaction.atomic():
            column = Column(board=board, title=changes['title'])
            _apply(column, changes, self.COLUMN_FIELDS)
            siblings = Column.objects.filter(board=board)
            if changes.get('order') is None:
                column.order = ordering.next_order(siblings)
            else:
                column.order = changes['order']
            column.save()

        data = serialize_column(column)
        effects = _publish_all('column', 'create', data, board.pk)
        effects.append(RecordActivity(board.pk, actor, 'created column', column.title))
        return MutationResult(column, data, effects)

    def update_column(self, column, changes, actor):
        """
        Atualiza título/cor e, se vier `order`, reposiciona a coluna

        Renomear para (ou de) um título de conclusão recalcula o
        completed_at das tarefas da coluna.
        """
        old_title = column.title
        siblings = None
        with transaction.atomic():
            touched = _apply(column, changes, self.COLUMN_FIELDS)
            if changes.get('order') is not None:
                siblings = ordering.place(
                    Column.objects.filter(board_id=column.board_id), column, changes['order']
                )
                touched.append('order')
            if touched:
                column.save(update_fields=touched)
            renamed = column.title != old_title
            if renamed:
                ordering.refresh_completion(column)

        data = serialize_column(column)
        effects = []
        if siblings is None or set(touched) - {'order'}:
            effects += _publish_all('column', 'update', data, column.board_id)
        if siblings is not None:
            moved = dict(data, siblings=serialize_siblings(siblings))
            effects += _publish_all('column', 'moved', moved, column.board_id)
        if renamed:
            effects.append(RecordActivity(
                column.board_id, actor, 'renamed column', f"{old_title} → {column.title}"
            ))
        return MutationResult(column, data, effects)

    def delete_column(self, column, actor):
        data = serialize_column(column)
        board_id = column.board_id
        with transaction.atomic():
            column.delete()

        effects = _publish_all('column', 'delete', data, board_id)
        effects.append(RecordActivity(board_id, actor, 'deleted column', data['title']))
        return MutationResult(None, data, effects)

    # ------------------------------------------------------------------
    # Tarefas
    # ------------------------------------------------------------------

    def create_task(self, column, changes, actor):
        board_id = column.board_id
        with transaction.atomic():
            task = Task(column=column, title=changes['title'])
            _apply(task, changes, self.TASK_FIELDS)
            siblings = Task.objects.filter(column=column)
            if changes.get('order') is None:
                task.order = ordering.next_order(siblings)
            else:
                task.order = changes['order']
            task.completed_at = ordering.completion_for(column.title)
            task.save()
            if changes.get('assignee_ids'):
                task.assignees.set(_members_of(board_id, changes['assignee_ids']))
            if changes.get('label_ids'):
                task.labels.set(_labels_of(board_id, changes['label_ids']))

        data = serialize_task(task)
        effects = _publish_all('task', 'create', data, board_id)
        effects.append(RecordActivity(board_id, actor, 'created task', task.title, task_id=task.pk))
        return MutationResult(task, data, effects)

    def update_task(self, task, changes, actor):
        """
        Atualiza campos da tarefa

        Se vier outra `column_id` ou um `order` o movimento é delegado a move_task
        e o evento publicado é `task:moved`.
        """
        board_id = task.column.board_id
        with transaction.atomic():
            touched = _apply(task, changes, self.TASK_FIELDS)
            if touched:
                task.save(update_fields=touched + ['updated_at'])
            if 'assignee_ids' in changes:
                task.assignees.set(_members_of(board_id, changes['assignee_ids'] or []))
                touched.append('assignee_ids')
            if 'label_ids' in changes:
                task.labels.set(_labels_of(board_id, changes['label_ids'] or []))
                touched.append('label_ids')

            column_id = changes.get('column_id') or task.column_id
            index = changes.get('order')
            # repetir a coluna atual sem `order` não é movimento
            moving = column_id != task.column_id or index is not None
            if moving:
                moved = self.move_task(task, column_id, index, actor)

        if moving:
            effects = []
            if touched:
                effects += _publish_all('task', 'update', serialize_task(task), board_id)
            effects += moved.effects
            return MutationResult(task, moved.data, effects)

        data = serialize_task(task)
        return MutationResult(task, data, _publish_all('task', 'update', data, board_id))

    def move_task(self, task, column_id, index, actor):
        """Move a tarefa entre colunas (ou dentro da mesma) numa única transação"""
        board_id = task.column.board_id
        column = Column.objects.filter(pk=column_id, board_id=board_id).first()
        if column is None:
            raise ValidationError({'column_id': ['Coluna não pertence a este board.']})
        if index is None:
            index = ordering.next_order(Task.objects.filter(column=column).exclude(pk=task.pk))

        source, destination, source_siblings = ordering.move_task(task, column, index)

        data = serialize_task(task)
        payload = dict(
            data,
            fromColumnId=source.pk,
            siblings=serialize_siblings(destination),
            sourceSiblings=serialize_siblings(source_siblings),
        )
        return MutationResult(task, data, _publish_all('task', 'moved', payload, board_id))

    def delete_task(self, task):
        board_id = task.column.board_id
        data = serialize_task(task)
        with transaction.atomic():
            task.delete()
        return MutationResult(None, data, _publish_all('task', 'delete', data, board_id))

    # ------------------------------------------------------------------
    # Comentários
    # ------------------------------------------------------------------

    def create_comment(self, task, changes, actor):
        """Cria o comentário e incrementa o contador em cache da tarefa"""
        board_id = task.column.board_id
        with transaction.atomic():
            comment = Comment.objects.create(
                task=task,
                author=changes.get('author') or actor.name,
                author_member=actor.member,
                content=changes['content'],
            )
            Task.objects.filter(pk=task.pk).update(comment_count=F('comment_count') + 1)

        data = serialize_comment(comment)
        effects = _publish_all('comment', 'create', data, board_id, task.pk)
        effects.append(RecordActivity(
            board_id, actor, 'commented on', task.title,
            task_id=task.pk, channel=task_channel(task),
        ))
        return MutationResult(comment, data, effects)

    def update_comment(self, comment, changes):
        board_id = comment.task.column.board_id
        with transaction.atomic():
            if 'content' in changes:
                comment.content = changes['content']
                comment.save(update_fields=['content', 'updated_at'])

        data = serialize_comment(comment)
        return MutationResult(
            comment, data, _publish_all('comment', 'update', data, board_id, comment.task_id)
        )

    def delete_comment(self, comment):
        task_id = comment.task_id
        board_id = comment.task.column.board_id
        data = serialize_comment(comment)
        with transaction.atomic():
            comment.delete()
            Task.objects.filter(pk=task_id).update(
                comment_count=Greatest(F('comment_count') - 1, 0)
            )
        return MutationResult(None, data, _publish_all('comment', 'delete', data, board_id, task_id))

    # ------------------------------------------------------------------
    # Checklist
    # ------------------------------------------------------------------

    def create_checklist_item(self, task, changes):
        board_id = task.column.board_id
        with transaction.atomic():
            item = ChecklistItem(task=task, text=changes['text'])
            item.is_checked = bool(changes.get('is_checked'))
            siblings = ChecklistItem.objects.filter(task=task)
            if changes.get('order') is None:
                item.order = ordering.next_order(siblings)
            else:
                item.order = changes['order']
            item.save()
            Task.objects.filter(pk=task.pk).update(checklist_count=F('checklist_count') + 1)

        data = serialize_checklist_item(item)
        return MutationResult(
            item, data, _publish_all('checklist', 'create', data, board_id, task.pk)
        )

    def update_checklist_item(self, item, changes):
        board_id = item.task.column.board_id
        with transaction.atomic():
            touched = _apply(item, changes, ('text', 'is_checked'))
            if changes.get('order') is not None:
                ordering.place(ChecklistItem.objects.filter(task_id=item.task_id), item, changes['order'])
                touched.append('order')
            if touched:
                item.save(update_fields=touched)

        data = serialize_checklist_item(item)
        return MutationResult(
            item, data, _publish_all('checklist', 'update', data, board_id, item.task_id)
        )

    def delete_checklist_item(self, item):
        task_id = item.task_id
        board_id = item.task.column.board_id
        data = serialize_checklist_item(item)
        with transaction.atomic():
            item.delete()
            Task.objects.filter(pk=task_id).update(
                checklist_count=Greatest(F('checklist_count') - 1, 0)
            )
        return MutationResult(
            None, data, _publish_all('checklist', 'delete', data, board_id, task_id)
        )

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def create_label(self, board, changes):
        """Cria a label ou atualiza a existente com o mesmo nome no board"""
        defaults = {name: changes[name] for name in self.LABEL_FIELDS if name in changes and name != 'name'}
        with transaction.atomic():
            label, created = Label.objects.update_or_create(
                board=board, name=changes['name'], defaults=defaults
            )

        data = serialize_label(label)
        action = 'create' if created else 'update'
        return MutationResult(label, data, _publish_all('label', action, data, board.pk))

    def update_label(self, label, changes):
        with transaction.atomic():
            touched = _apply(label, changes, self.LABEL_FIELDS)
            if 'name' in touched and Label.objects.filter(
                board_id=label.board_id, name=label.name
            ).exclude(pk=label.pk).exists():
                raise ConflictError(f"Já existe uma label '{label.name}' neste board")
            if touched:
                label.save(update_fields=touched)

        data = serialize_label(label)
        return MutationResult(label, data, _publish_all('label', 'update', data, label.board_id))

    def delete_label(self, label):
        board_id = label.board_id
        data = serialize_label(label)
        with transaction.atomic():
            label.delete()
        return MutationResult(None, data, _publish_all('label', 'delete', data, board_id))

    # ------------------------------------------------------------------
    # Membros
    # ------------------------------------------------------------------

    def create_member(self, board, changes):
        """
        Adiciona um membro pelo email de um usuário existente ou pelo nome

        Convidar alguém que já é membro levanta ConflictError.
        """
        with transaction.atomic():
            email = changes.get('email')
            if email and not changes.get('name'):
                user = get_user_model().objects.filter(email__iexact=email).first()
                if user is None:
                    raise get_user_model().DoesNotExist(f"Usuário com email {email} não encontrado")
                if board.members.filter(user=user).exists() or board.members.filter(email__iexact=email).exists():
                    raise ConflictError(f"{email} já é membro deste board")
                member = Member(
                    board=board,
                    user=user,
                    name=user.get_full_name() or user.get_username(),
                    email=user.email,
                )
                _apply(member, changes, ('role', 'avatar', 'color'))
            else:
                if not changes.get('name'):
                    raise ValidationError({'name': ['Informe o nome ou o email do membro.']})
                if board.members.filter(name=changes['name'], role=changes.get('role') or 'Viewer').exists():
                    raise ConflictError(f"{changes['name']} já é membro deste board")
                member = Member(board=board, name=changes['name'])
                _apply(member, changes, self.MEMBER_FIELDS)
            if not member.role:
                member.role = 'Viewer'
            member.save()

        data = serialize_member(member)
        logger.info(f"👤 Membro adicionado ao board {board.pk}: {member.name}")
        return MutationResult(member, data, _publish_all('member', 'create', data, board.pk))

    def update_member(self, member, changes):
        with transaction.atomic():
            touched = _apply(member, changes, self.MEMBER_FIELDS)
            if touched:
                member.save(update_fields=touched)

        data = serialize_member(member)
        return MutationResult(member, data, _publish_all('member', 'update', data, member.board_id))

    def delete_member(self, member):
        board_id = member.board_id
        data = serialize_member(member)
        with transaction.atomic():
            member.delete()
        return MutationResult(None, data, _publish_all('member', 'delete', data, board_id))


mutation_service = BoardMutationService()
