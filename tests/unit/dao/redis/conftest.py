from unittest.mock import MagicMock

import pytest
import redis

from lil.dao.redis import BoundedConnectionPool, PooledStoreClient


class FakeConnection(redis.Connection):
    """redis.Connection whose socket I/O is simulated.

    Class attributes steer the behaviour of every new instance:
        connect_error: exception raised by connect()
        read_error: exception raised by read_response()
        reply: value returned by read_response()
    """

    connect_error: Exception | None = None
    read_error: Exception | None = None
    reply = b'PONG'
    created: list['FakeConnection'] = []

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.unread_data = False
        FakeConnection.created.append(self)

    def connect(self):
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        if self._sock is None:
            self._sock = object()

    def disconnect(self, *args):
        if self._sock is not None:
            self.disconnect_calls += 1
        self._sock = None

    def can_read(self, timeout=0):
        return self.unread_data

    def send_command(self, *args, **kwargs):
        if self._sock is None:
            raise redis.exceptions.ConnectionError('Not connected.')

    def read_response(self, *args, **kwargs):
        if self.read_error is not None:
            self.disconnect()
            raise self.read_error
        return self.reply


@pytest.fixture
def connection_class():
    """Fresh FakeConnection subclass per test, so class-level knobs never leak."""

    class _Connection(FakeConnection):
        connect_error = None
        read_error = None
        reply = b'PONG'

    FakeConnection.created = []
    return _Connection


@pytest.fixture
def make_pool(connection_class):
    def _make_pool(**kwargs):
        options = {'max_active': 2, 'max_idle': 1, 'timeout': 0.5, 'host': 'redis.test', 'port': 6379, 'db': 0}
        options.update(kwargs)
        return BoundedConnectionPool(connection_class=connection_class, **options)

    return _make_pool


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def store_client() -> PooledStoreClient:
    """Mock a PooledStoreClient bound to a pool at redis.test:6379/0."""
    client = MagicMock(spec=PooledStoreClient)
    client.pool = MagicMock(spec=BoundedConnectionPool, address='redis.test:6379/0', timeout=0.5)
    client.ping.return_value = True
    return client
