# apps/board/bus.py

"""
EventBus - pub/sub em memória para as atualizações em tempo real

Sem persistência e sem replay: o evento é entregue apenas aos listeners
registrados no momento do publish. Escopo de um único processo.
"""

import logging
import sys
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """
    Roteador publish/subscribe por nome de canal

    O fan-out é síncrono: todo listener registrado no canal é chamado antes
    de `publish` retornar. Views síncronas do Django rodam em threads, então
    o registro é protegido por um lock.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def publish(self, channel: str, event: Any) -> None:
        """Entrega `event` a todos os listeners atuais do canal; nunca levanta exceção"""
        with self._lock:
            listeners = list(self._listeners.get(channel, ()))

        if not listeners:
            logger.debug(f"Evento descartado, canal {channel} sem assinantes")
            return

        logger.debug(f"📡 Publicando {getattr(event, 'type', event)} em {channel} ({len(listeners)} assinante(s))")
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"❌ Listener falhou no canal {channel}")

    def subscribe(self, channel: str, listener: Listener) -> Callable[[], None]:
        """
        Registra o listener e devolve a função que o remove

        A função devolvida remove exatamente este registro e pode ser
        chamada várias vezes sem efeito extra.
        """
        # Embrulhar garante identidade única mesmo se o mesmo callable
        # for registrado duas vezes
        def registration(event):
            listener(event)

        with self._lock:
            self._listeners[channel].append(registration)

        state = {'active': True}

        def unsubscribe():
            with self._lock:
                if not state['active']:
                    return
                state['active'] = False
                registrations = self._listeners[channel]
                registrations.remove(registration)
                if not registrations:
                    del self._listeners[channel]

        return unsubscribe

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._listeners.get(channel, ()))

    def channels(self) -> List[str]:
        with self._lock:
            return list(self._listeners)


# Slot do processo: um único bus mesmo que o módulo seja recarregado.
# Em um reload o dicionário do módulo é reaproveitado, então os valores
# já existentes são mantidos em vez de voltarem a None.
_module = sys.modules[__name__]
_bus_lock = getattr(_module, '_bus_lock', None) or threading.Lock()
_bus = getattr(_module, '_bus', None)


def get_event_bus() -> EventBus:
    """Retorna o bus do processo, criando-o na primeira chamada"""
    global _bus
    if _bus is None:
        with _bus_lock:
            if _bus is None:
                _bus = EventBus()
                logger.info("🔌 EventBus criado")
    return _bus
