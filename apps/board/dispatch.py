# apps/board/dispatch.py

"""
Execução dos efeitos de uma mutação

Chamado pelas views depois que o serviço retornou, ou seja, com a
transação já confirmada. Publicações vão direto para o EventBus;
atividades passam pelo ActivityRecorder.
"""

import logging

from django.apps import apps

from .activity import activity_recorder
from .services import Publish, RecordActivity

logger = logging.getLogger(__name__)


def current_bus():
    return apps.get_app_config('board').event_bus


def dispatch_effects(effects, bus=None, recorder=None):
    bus = bus or current_bus()
    recorder = recorder or activity_recorder

    for effect in effects:
        if isinstance(effect, Publish):
            bus.publish(effect.channel, effect.event)
        elif isinstance(effect, RecordActivity):
            recorder.record(
                bus,
                effect.board_id,
                effect.actor,
                effect.action,
                effect.target,
                task_id=effect.task_id,
                channel=effect.channel,
            )
        else:
            raise TypeError(f"Efeito desconhecido: {effect!r}")

    if effects:
        logger.debug(f"📡 {len(effects)} efeito(s) despachado(s)")
