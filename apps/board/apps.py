# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Tempo real'

    event_bus = None

    def ready(self):
        """
        Inicialização da app
        Instala o EventBus do processo, usado pelas views e pelo stream
        """
        from .bus import get_event_bus

        self.event_bus = get_event_bus()
        logger.info("🔌 Board App inicializada - stream em tempo real habilitado")
