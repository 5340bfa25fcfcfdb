# apps/board/consumers.py

import asyncio
import json
import logging
from urllib.parse import parse_qs

from channels.exceptions import StopConsumer
from channels.generic.http import AsyncHttpConsumer
from django.apps import apps
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = b': keepalive\n\n'

SSE_HEADERS = [
    (b'Content-Type', b'text/event-stream'),
    (b'Cache-Control', b'no-cache'),
    (b'Connection', b'keep-alive'),
    (b'X-Accel-Buffering', b'no'),
]

OVERFLOW_DROP_OLDEST = 'drop-oldest'
OVERFLOW_DISCONNECT = 'disconnect'

# Marca de fim do stream na fila
_CLOSE = object()


def encode_event(event):
    """Frame SSE de um evento: `data: <json>\\n\\n`"""
    data = event.to_dict() if hasattr(event, 'to_dict') else event
    return f"data: {json.dumps(data, cls=DjangoJSONEncoder)}\n\n".encode('utf-8')


class BoardStreamConsumer(AsyncHttpConsumer):
    """
    Stream SSE de um canal do EventBus (GET /api/realtime/stream?channel=...)

    Funcionalidades:
    - Assina o canal enquanto a conexão estiver aberta
    - Encaminha cada evento como um frame `data:`
    - Envia um comentário de keepalive quando o canal fica em silêncio
    - Cancela a assinatura quando o cliente desconecta

    O publish acontece na thread de quem chamou (views síncronas rodam
    em threads), então o listener só agenda o frame no event loop.
    """

    def __init__(self, *args, event_bus=None, keepalive_interval=None,
                 queue_size=None, overflow=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_bus = event_bus
        self.keepalive_interval = (
            keepalive_interval if keepalive_interval is not None
            else getattr(settings, 'COLAB_STREAM_KEEPALIVE_SECONDS', 20.0)
        )
        self.queue_size = (
            queue_size if queue_size is not None
            else getattr(settings, 'COLAB_STREAM_QUEUE_SIZE', 0)
        )
        self.overflow = overflow or getattr(settings, 'COLAB_STREAM_OVERFLOW', OVERFLOW_DROP_OLDEST)

        self.channel = None
        self.queue = None
        self.loop = None
        self.unsubscribe = None
        self.pump_task = None
        self.closed = False

    def get_bus(self):
        if self.event_bus is None:
            self.event_bus = apps.get_app_config('board').event_bus
        return self.event_bus

    def get_channel(self):
        query = parse_qs(self.scope.get('query_string', b'').decode('latin-1'))
        values = query.get('channel') or ['']
        return values[0].strip()

    async def http_request(self, message):
        """
        Acumula o corpo e chama handle

        Diferente do AsyncHttpConsumer padrão, não encerra o consumer
        depois do handle: a resposta continua aberta até o
        http.disconnect do cliente.
        """
        if 'body' in message:
            self.body.append(message['body'])
        if not message.get('more_body'):
            await self.handle(b''.join(self.body))

    async def handle(self, body):
        channel = self.get_channel()
        if not channel:
            logger.warning("❌ Stream rejeitado - parâmetro channel ausente")
            await self.send_response(
                400,
                json.dumps({'message': 'channel is required'}).encode('utf-8'),
                headers=[(b'Content-Type', b'application/json')],
            )
            await self.disconnect()
            raise StopConsumer()

        self.channel = channel
        self.queue = asyncio.Queue()
        self.loop = asyncio.get_running_loop()

        await self.send_headers(status=200, headers=SSE_HEADERS)
        await self.send_body(b'', more_body=True)

        self.unsubscribe = self.get_bus().subscribe(channel, self.on_event)
        self.pump_task = asyncio.ensure_future(self.pump())
        logger.info(f"✅ Stream conectado no canal {channel}")

    def on_event(self, event):
        """Listener do EventBus; pode rodar em qualquer thread"""
        frame = encode_event(event)
        self.loop.call_soon_threadsafe(self.enqueue, frame)

    def enqueue(self, frame):
        if self.closed:
            return

        if self.queue_size and self.queue.qsize() >= self.queue_size:
            if self.overflow == OVERFLOW_DISCONNECT:
                logger.warning(f"⚠️ Cliente lento no canal {self.channel} - encerrando stream")
                self.close_stream()
                return
            self.queue.get_nowait()
            logger.warning(f"⚠️ Cliente lento no canal {self.channel} - evento mais antigo descartado")

        self.queue.put_nowait(frame)

    def close_stream(self):
        """Para de receber eventos e pede ao pump para fechar a resposta"""
        self.closed = True
        if self.unsubscribe:
            self.unsubscribe()
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(_CLOSE)

    async def pump(self):
        """Escreve os frames da fila na resposta; keepalive quando ocioso"""
        try:
            while True:
                try:
                    frame = await asyncio.wait_for(self.queue.get(), timeout=self.keepalive_interval)
                except asyncio.TimeoutError:
                    frame = KEEPALIVE_FRAME

                if frame is _CLOSE:
                    await self.send_body(b'', more_body=False)
                    return

                await self.send_body(frame, more_body=True)
        except Exception:
            # cliente já foi embora; para de receber eventos
            logger.exception(f"❌ Falha ao escrever no stream do canal {self.channel}")
            self.closed = True
            if self.unsubscribe:
                self.unsubscribe()

    async def disconnect(self):
        """Cliente saiu: cancela a assinatura e o pump"""
        self.closed = True
        if self.unsubscribe:
            self.unsubscribe()
        if self.pump_task and not self.pump_task.done():
            self.pump_task.cancel()
        if self.channel:
            logger.info(f"🔌 Stream desconectado do canal {self.channel}")
