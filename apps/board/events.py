# apps/board/events.py

"""
Eventos de domínio publicados no EventBus

Conjunto fechado: um tipo por `<entidade>:<ação>`. O formato no fio é
`{"type": ..., "payload": {...}}`; eventos de atividade levam também
`user`, `action` e `target` no nível de cima.
"""

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    BOARD_UPDATE = 'board:update'
    BOARD_DELETE = 'board:delete'

    COLUMN_CREATE = 'column:create'
    COLUMN_UPDATE = 'column:update'
    COLUMN_DELETE = 'column:delete'
    COLUMN_MOVED = 'column:moved'

    TASK_CREATE = 'task:create'
    TASK_UPDATE = 'task:update'
    TASK_DELETE = 'task:delete'
    TASK_MOVED = 'task:moved'

    COMMENT_CREATE = 'comment:create'
    COMMENT_UPDATE = 'comment:update'
    COMMENT_DELETE = 'comment:delete'

    CHECKLIST_CREATE = 'checklist:create'
    CHECKLIST_UPDATE = 'checklist:update'
    CHECKLIST_DELETE = 'checklist:delete'

    LABEL_CREATE = 'label:create'
    LABEL_UPDATE = 'label:update'
    LABEL_DELETE = 'label:delete'

    MEMBER_CREATE = 'member:create'
    MEMBER_UPDATE = 'member:update'
    MEMBER_DELETE = 'member:delete'

    ACTIVITY_CREATE = 'activity:create'

    @property
    def entity(self):
        return self.value.split(':', 1)[0]

    @property
    def action(self):
        return self.value.split(':', 1)[1]

    @classmethod
    def of(cls, entity, action):
        return cls(f'{entity}:{action}')


@dataclass(frozen=True)
class BoardEvent:
    """Evento primário de uma entidade; `payload` vem dos serializers"""

    kind: EventKind
    payload: dict

    @property
    def type(self):
        return self.kind.value

    def to_dict(self):
        return {'type': self.kind.value, 'payload': self.payload}


@dataclass(frozen=True)
class ActivityEvent(BoardEvent):
    """Evento composto publicado pelo ActivityRecorder"""

    user: str = ''
    action: str = ''
    target: str = ''

    def to_dict(self):
        data = super().to_dict()
        data.update({'user': self.user, 'action': self.action, 'target': self.target})
        return data
