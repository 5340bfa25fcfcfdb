# apps/board/routing.py

from channels.auth import AuthMiddlewareStack
from django.urls import path
from . import consumers

# Rotas HTTP atendidas pelo Channels (respostas de longa duração)
http_urlpatterns = [
    # Stream SSE de um canal: ?channel=<boardId> ou ?channel=task:<taskId>
    path('api/realtime/stream', AuthMiddlewareStack(consumers.BoardStreamConsumer.as_asgi())),
]
