# config/asgi.py

import os
from django.core.asgi import get_asgi_application
from django.urls import re_path
from channels.routing import ProtocolTypeRouter, URLRouter

# Configurar Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Importar rotas do Channels depois de configurar Django
django_asgi_app = get_asgi_application()

from apps.board.routing import http_urlpatterns  # noqa: E402

# Configuração ASGI
application = ProtocolTypeRouter({
    # Stream SSE pelo Channels, o resto pelo Django tradicional
    "http": URLRouter(http_urlpatterns + [
        re_path(r'', django_asgi_app),
    ]),
})
