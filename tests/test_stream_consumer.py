import asyncio
import json
from unittest import mock

import pytest
from channels.testing import ApplicationCommunicator

from apps.board import consumers as consumers_module
from apps.board.bus import EventBus
from apps.board.consumers import KEEPALIVE_FRAME, BoardStreamConsumer, encode_event
from apps.board.events import BoardEvent, EventKind

pytestmark = pytest.mark.asyncio


def _scope(query_string):
    return {
        'type': 'http',
        'http_version': '1.1',
        'method': 'GET',
        'path': '/api/realtime/stream',
        'query_string': query_string,
        'headers': [],
    }


async def _open(bus, query_string=b'channel=1', **kwargs):
    kwargs.setdefault('keepalive_interval', 5)
    app = BoardStreamConsumer.as_asgi(event_bus=bus, **kwargs)
    communicator = ApplicationCommunicator(app, _scope(query_string))
    await communicator.send_input({'type': 'http.request', 'body': b'', 'more_body': False})
    return communicator


async def _open_stream(bus, channel='1', **kwargs):
    """Abre o stream e consome os cabeçalhos e o primeiro corpo vazio"""
    communicator = await _open(bus, f'channel={channel}'.encode(), **kwargs)
    start = await communicator.receive_output(1)
    assert start['status'] == 200
    opening = await communicator.receive_output(1)
    assert opening['more_body'] is True
    for _ in range(50):
        if bus.subscriber_count(channel):
            break
        await asyncio.sleep(0.01)
    return communicator, start


def _task_event(title):
    return BoardEvent(EventKind.TASK_CREATE, {'title': title})


async def _close(communicator):
    await communicator.send_input({'type': 'http.disconnect'})
    await communicator.wait(1)


async def test_missing_channel_returns_400():
    bus = EventBus()
    communicator = await _open(bus, b'')

    start = await communicator.receive_output(1)
    body = await communicator.receive_output(1)
    await communicator.wait(1)

    assert start['status'] == 400
    assert json.loads(body['body']) == {'message': 'channel is required'}
    assert bus.channels() == []


async def test_blank_channel_returns_400():
    communicator = await _open(EventBus(), b'channel=%20%20')

    start = await communicator.receive_output(1)
    await communicator.receive_output(1)
    await communicator.wait(1)

    assert start['status'] == 400


async def test_stream_headers():
    bus = EventBus()
    communicator, start = await _open_stream(bus)

    headers = dict(start['headers'])
    assert headers[b'Content-Type'] == b'text/event-stream'
    assert headers[b'Cache-Control'] == b'no-cache'
    assert headers[b'X-Accel-Buffering'] == b'no'
    assert bus.subscriber_count('1') == 1

    await _close(communicator)


async def test_events_are_forwarded_as_data_frames():
    bus = EventBus()
    communicator, _ = await _open_stream(bus)

    bus.publish('1', _task_event('Write spec'))
    bus.publish('2', _task_event('Outro board'))
    bus.publish('1', _task_event('Review'))

    first = await communicator.receive_output(1)
    second = await communicator.receive_output(1)
    assert first['body'] == encode_event(_task_event('Write spec'))
    assert json.loads(second['body'][len(b'data: '):]) == {
        'type': 'task:create',
        'payload': {'title': 'Review'},
    }
    assert second['body'].endswith(b'\n\n')

    await _close(communicator)


async def test_keepalive_when_channel_is_idle():
    communicator, _ = await _open_stream(EventBus(), keepalive_interval=0.05)

    frame = await communicator.receive_output(1)

    assert frame['body'] == KEEPALIVE_FRAME
    assert frame['more_body'] is True
    await _close(communicator)


async def test_disconnect_unsubscribes_and_later_publishes_are_harmless():
    bus = EventBus()
    communicator, _ = await _open_stream(bus)

    await _close(communicator)
    for idx in range(10):
        bus.publish('1', _task_event(f'evento {idx}'))

    assert bus.subscriber_count('1') == 0
    assert bus.channels() == []
    assert await communicator.receive_nothing()


async def test_two_streams_on_the_same_channel():
    bus = EventBus()
    first, _ = await _open_stream(bus)
    second, _ = await _open_stream(bus)
    assert bus.subscriber_count('1') == 2

    await _close(first)
    bus.publish('1', _task_event('segundo'))

    frame = await second.receive_output(1)
    assert frame['body'] == encode_event(_task_event('segundo'))
    assert bus.subscriber_count('1') == 1
    await _close(second)


async def test_bounded_queue_drops_oldest():
    bus = EventBus()
    communicator, _ = await _open_stream(bus, queue_size=2, overflow='drop-oldest')

    for title in ('a', 'b', 'c'):
        bus.publish('1', _task_event(title))

    first = await communicator.receive_output(1)
    second = await communicator.receive_output(1)
    assert first['body'] == encode_event(_task_event('b'))
    assert second['body'] == encode_event(_task_event('c'))

    await _close(communicator)


async def test_bounded_queue_disconnects_slow_client():
    bus = EventBus()
    communicator, _ = await _open_stream(bus, queue_size=1, overflow='disconnect')

    bus.publish('1', _task_event('a'))
    bus.publish('1', _task_event('b'))

    final = await communicator.receive_output(1)
    assert final['more_body'] is False
    assert bus.subscriber_count('1') == 0

    await _close(communicator)


async def test_write_failure_is_logged_and_unsubscribes():
    bus = EventBus()
    consumer = BoardStreamConsumer(event_bus=bus, keepalive_interval=5)
    consumer.channel = '1'
    consumer.queue = asyncio.Queue()
    consumer.unsubscribe = bus.subscribe('1', consumer.on_event)
    consumer.send_body = mock.AsyncMock(side_effect=OSError('conexão fechada'))
    consumer.queue.put_nowait(encode_event(_task_event('a')))

    with mock.patch.object(consumers_module.logger, 'exception') as log_exception:
        await consumer.pump()

    log_exception.assert_called_once()
    assert consumer.closed is True
    assert bus.subscriber_count('1') == 0
