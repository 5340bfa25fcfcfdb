import json

import pytest
from django.apps import apps

from apps.board.bus import EventBus
from apps.core.models import Board, Column


@pytest.fixture
def bus(monkeypatch):
    """EventBus novo por teste, instalado no lugar do bus do processo"""
    fresh = EventBus()
    monkeypatch.setattr(apps.get_app_config('board'), 'event_bus', fresh)
    return fresh


@pytest.fixture
def recorder(bus):
    """Assina um canal e devolve a lista que acumula os eventos recebidos"""

    def _subscribe(channel):
        received = []
        bus.subscribe(channel, received.append)
        return received

    return _subscribe


@pytest.fixture
def board(db):
    board = Board.objects.create(name='Sprint 1')
    board.create_default_columns()
    return board


@pytest.fixture
def todo(board):
    return Column.objects.get(board=board, title='To Do')


@pytest.fixture
def done(board):
    return Column.objects.get(board=board, title='Done')


@pytest.fixture
def api(client):
    """Cliente JSON para a API em /api/workspace/"""

    class Api:
        base = '/api/workspace/'

        def _send(self, method, path, data=None):
            body = json.dumps(data) if data is not None else ''
            response = getattr(client, method)(
                self.base + path, data=body, content_type='application/json'
            )
            return response

        def get(self, path, **params):
            return client.get(self.base + path, params)

        def post(self, path, data=None):
            return self._send('post', path, data)

        def put(self, path, data=None):
            return self._send('put', path, data)

        def delete(self, path, data=None):
            return self._send('delete', path, data)

    return Api()
