# apps/board/activity.py

"""
ActivityRecorder - histórico e notificações do board

Para cada mutação relevante grava um ActivityEntry e uma Notification
e publica um evento composto `activity:create`. Falhas aqui nunca
derrubam a mutação principal: são registradas no log e ignoradas.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.db import transaction

from apps.core.models import ActivityEntry, Member, Notification

from .channel_names import board_channel
from .events import ActivityEvent, EventKind
from .serializers import serialize_activity, serialize_notification

logger = logging.getLogger(__name__)

DEFAULT_ACTOR_NAME = 'System'


@dataclass(frozen=True)
class Actor:
    """Quem executou a ação: nome exibido e, quando existem, o membro e o usuário"""

    name: str = DEFAULT_ACTOR_NAME
    member: Optional[Member] = None
    user: Optional[Any] = None

    @property
    def member_id(self):
        return self.member.pk if self.member else None


def classify_action(action):
    """Tipo da notificação a partir do texto da ação"""
    lowered = (action or '').lower()
    if 'create' in lowered:
        return 'create'
    if 'delete' in lowered:
        return 'delete'
    if 'comment' in lowered:
        return 'comment'
    return 'update'


class ActivityRecorder:

    def append(self, board_id, actor, action, target, task_id=None, project_id=''):
        """Grava atividade e notificação juntas; levanta exceção se falhar"""
        with transaction.atomic():
            entry = ActivityEntry.objects.create(
                board_id=board_id,
                actor=actor.member,
                user=actor.name,
                action=action,
                target=target,
                task_id=task_id,
                project_id=project_id or '',
            )
            notification = Notification.objects.create(
                board_id=board_id,
                actor_name=actor.name,
                action=action,
                target=target,
                type=classify_action(action),
            )
        return entry, notification

    def build_event(self, entry, notification):
        return ActivityEvent(
            kind=EventKind.ACTIVITY_CREATE,
            payload={
                'activity': serialize_activity(entry),
                'notification': serialize_notification(notification) if notification else None,
            },
            user=entry.user,
            action=entry.action,
            target=entry.target,
        )

    def record(self, bus, board_id, actor, action, target, task_id=None, channel=None):
        """
        Grava e publica a atividade

        Retorna o ActivityEntry criado ou None se a gravação falhou.
        """
        try:
            entry, notification = self.append(board_id, actor, action, target, task_id=task_id)
        except Exception:
            logger.exception(f"❌ Falha ao registrar atividade '{action}' no board {board_id}")
            return None

        bus.publish(channel or board_channel(board_id), self.build_event(entry, notification))
        logger.info(f"📝 Atividade: {actor.name} {action} {target}")
        return entry


activity_recorder = ActivityRecorder()
