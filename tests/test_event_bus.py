import importlib
import threading
from unittest import mock

from django.apps import apps

from apps.board import bus as bus_module
from apps.board.bus import EventBus, get_event_bus


def test_publish_delivers_to_every_subscriber_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe('1', lambda event: calls.append(('a', event)))
    bus.subscribe('1', lambda event: calls.append(('b', event)))

    bus.publish('1', 'primeiro')
    bus.publish('1', 'segundo')

    assert calls == [('a', 'primeiro'), ('b', 'primeiro'), ('a', 'segundo'), ('b', 'segundo')]


def test_channels_are_isolated():
    bus = EventBus()
    board_events, task_events = [], []
    bus.subscribe('1', board_events.append)
    bus.subscribe('task:1', task_events.append)

    bus.publish('task:1', 'comentario')

    assert board_events == []
    assert task_events == ['comentario']


def test_publish_without_subscribers_is_a_noop():
    bus = EventBus()
    bus.publish('vazio', {'type': 'task:create'})
    assert bus.channels() == []


def test_unsubscribe_is_idempotent_and_removes_only_its_registration():
    bus = EventBus()
    received = []
    unsubscribe_first = bus.subscribe('1', received.append)
    bus.subscribe('1', received.append)

    unsubscribe_first()
    unsubscribe_first()

    assert bus.subscriber_count('1') == 1
    bus.publish('1', 'evento')
    assert received == ['evento']


def test_unsubscribing_last_listener_drops_the_channel():
    bus = EventBus()
    unsubscribe = bus.subscribe('1', lambda event: None)
    unsubscribe()

    assert bus.subscriber_count('1') == 0
    assert '1' not in bus.channels()


def test_failing_listener_does_not_block_the_others():
    bus = EventBus()
    received = []

    def quebra(event):
        raise RuntimeError('listener quebrado')

    bus.subscribe('1', quebra)
    bus.subscribe('1', received.append)

    with mock.patch.object(bus_module.logger, 'exception') as log_exception:
        bus.publish('1', 'evento')

    assert received == ['evento']
    log_exception.assert_called_once()


def test_publish_from_another_thread():
    bus = EventBus()
    received = []
    bus.subscribe('1', received.append)

    worker = threading.Thread(target=bus.publish, args=('1', 'da-thread'))
    worker.start()
    worker.join()

    assert received == ['da-thread']


def test_process_bus_is_shared_with_the_board_app():
    assert get_event_bus() is get_event_bus()
    assert apps.get_app_config('board').event_bus is get_event_bus()


def test_process_bus_survives_module_reload():
    before = get_event_bus()

    importlib.reload(bus_module)

    assert bus_module.get_event_bus() is before
