"""Bounded, wait-based Redis connection pool and the client built on top of it

Responsibilities:
    - Cap the number of simultaneously open connections (`max_active`);
    - Make callers wait for a free connection instead of failing fast when the
      cap is reached (backpressure);
    - Keep up to `max_idle` connections warm and reap those idle for too long;
    - Apply one timeout to the connect, read and write phases of every operation;
    - Discard connections after a timeout or error instead of reusing them.

Classes:
    PoolStats:
        Point-in-time snapshot of the pool's counters.

    BoundedConnectionPool:
        `redis.ConnectionPool` implementing the rules above.

    PooledStoreClient:
        `redis.Redis` bound to a BoundedConnectionPool, translating redis-py
        timeout/connection errors into transport exceptions.

Example:
    >>> pool = BoundedConnectionPool(host='localhost', max_active=10, max_idle=2, timeout=0.5)
    >>> client = PooledStoreClient(pool)
    >>> client.execute('set', 'key', 'value', nx=True)
    True
    >>> pool.stats()
    PoolStats(active=1, idle=1, in_use=0, waiting=0)

NOTE:
    - Admission is wait-based: with `wait_timeout=None` callers block until a
      connection is released.
    - The pool holds no domain state. Retries are disabled on every connection;
      retry policy belongs to the callers.
"""

import os
import time
import logging
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional
from collections.abc import Iterator

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from lil.dao.redis.exceptions import ConnectTimeout, OperationTimeout, PoolTimeout, StoreConnectionError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolStats:
    """Snapshot of the pool counters.

    Attributes:
        active (int): open connections, idle or in use.
        idle (int): connections waiting in the idle stack.
        in_use (int): connections currently checked out.
        waiting (int): callers blocked waiting for a connection.
    """

    active: int
    idle: int
    in_use: int
    waiting: int


class BoundedConnectionPool(redis.ConnectionPool):
    """Connection pool with a hard cap, blocking admission and idle reaping.

    Idle connections are reused LIFO so that the least recently used ones age
    out and get reaped once `idle_timeout` elapses.

    Attributes:
        max_active (int):
            Hard cap on open connections.
        max_idle (int):
            Maximum number of idle connections kept open.
        timeout (float):
            Seconds allowed for connect, read and write.
        wait_timeout (Optional[float]):
            Seconds a caller may wait for admission. None waits forever.
        idle_timeout (Optional[float]):
            Seconds an idle connection may stay open. None (or 0) never reaps.
    """

    def __init__(
        self,
        max_active: int,
        max_idle: int,
        timeout: float,
        wait_timeout: Optional[float] = None,
        idle_timeout: Optional[float] = None,
        host: str = 'localhost',
        port: int = 6379,
        db: int = 0,
        username: Optional[str] = None,
        password: Optional[str] = None,
        decode_responses: bool = True,
        connection_class: type[redis.Connection] = redis.Connection,
        **connection_kwargs: Any,
    ):
        if max_active < 1:
            raise ValueError(f'max_active must be a positive integer (given value: {max_active}).')
        if not 0 <= max_idle <= max_active:
            raise ValueError(f'max_idle must be between 0 and max_active (given value: {max_idle}).')
        if timeout <= 0:
            raise ValueError(f'timeout must be positive (given value: {timeout}).')

        self.max_active = max_active
        self.max_idle = max_idle
        self.timeout = timeout
        self.wait_timeout = wait_timeout
        self.idle_timeout = idle_timeout or None

        # Same timeout for the connect phase and for every socket read/write
        connection_kwargs.update(
            host=host,
            port=int(port),
            db=int(db),
            username=username,
            password=password,
            decode_responses=decode_responses,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
            retry=Retry(NoBackoff(), 0),
        )
        super().__init__(connection_class=connection_class, max_connections=max_active, **connection_kwargs)

    def reset(self) -> None:
        # Called by redis.ConnectionPool.__init__
        self._condition = threading.Condition()
        self._idle: deque[tuple[redis.Connection, float]] = deque()
        self._in_use: set[redis.Connection] = set()
        self._created = 0
        self._waiting = 0
        self.pid = os.getpid()

    @property
    def address(self) -> str:
        kwargs = self.connection_kwargs
        return f"{kwargs.get('host')}:{kwargs.get('port')}/{kwargs.get('db')}"

    def acquire(self) -> redis.Connection:
        """Check out a connected connection

        Blocks while `max_active` connections are open.

        Returns:
            redis.Connection: a connection ready for use.

        Raises:
            PoolTimeout:
                If no connection became available within `wait_timeout`.
            ConnectTimeout:
                If establishing a new connection exceeded `timeout`.
            StoreConnectionError:
                If the connection could not be established.
        """
        connection = self._checkout()
        try:
            self._ensure_connected(connection)
        except BaseException:
            self._discard(connection)
            raise
        return connection

    def get_connection(self, *args: Any, **kwargs: Any) -> redis.Connection:
        """redis-py entry point. Command name and options are irrelevant here."""
        return self.acquire()

    def release(self, connection: redis.Connection) -> None:
        """Return a connection to the idle stack

        Disconnected connections (redis-py disconnects after a timeout or
        protocol error) and connections beyond `max_idle` are closed instead.
        """
        with self._condition:
            if connection not in self._in_use:
                # Released twice, or already dropped by disconnect()
                return
            self._in_use.remove(connection)

            # redis-py clears _sock whenever it disconnects a connection
            broken = getattr(connection, '_sock', None) is None
            if broken or len(self._idle) >= self.max_idle:
                self._created -= 1
                close = True
            else:
                self._idle.append((connection, time.monotonic()))
                close = False
            self._condition.notify()

        if close:
            connection.disconnect()

    @contextmanager
    def connection(self) -> Iterator[redis.Connection]:
        """Acquire a connection for the duration of a `with` block

        The connection is always released, including when the block is
        interrupted. After any error the connection is disconnected first so
        that a half-read reply is never handed to the next caller.

        Example:
            >>> with pool.connection() as conn:
            ...     conn.send_command('PING')
            ...     conn.read_response()
            'PONG'
        """
        connection = self.acquire()
        try:
            yield connection
        except BaseException:
            connection.disconnect()
            raise
        finally:
            self.release(connection)

    def disconnect(self, inuse_connections: bool = True) -> None:
        """Close idle connections (and checked out ones if `inuse_connections`)"""
        with self._condition:
            idle = [connection for connection, _ in self._idle]
            self._idle.clear()
            self._created -= len(idle)
            in_use = list(self._in_use) if inuse_connections else []
            self._condition.notify_all()

        for connection in idle + in_use:
            connection.disconnect()
        logger.debug('Disconnected connection pool.', extra={'address': self.address, 'closed': len(idle) + len(in_use)})

    def close(self) -> None:
        self.disconnect()

    def stats(self) -> PoolStats:
        with self._condition:
            return PoolStats(
                active=self._created,
                idle=len(self._idle),
                in_use=len(self._in_use),
                waiting=self._waiting,
            )

    def _checkout(self) -> redis.Connection:
        deadline = None if self.wait_timeout is None else time.monotonic() + self.wait_timeout

        with self._condition:
            while True:
                self._reap_idle()

                if self._idle:
                    connection, _ = self._idle.pop()
                    self._in_use.add(connection)
                    return connection

                if self._created < self.max_active:
                    # No I/O happens until connect(), so this is safe under the lock
                    connection = self.connection_class(**self.connection_kwargs)
                    self._created += 1
                    self._in_use.add(connection)
                    return connection

                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    raise PoolTimeout(f'No Redis connection available within {self.wait_timeout}s ({self.max_active} in use).')

                self._waiting += 1
                try:
                    self._condition.wait(remaining)
                finally:
                    self._waiting -= 1

    def _reap_idle(self) -> None:
        # Oldest idle connections sit at the left of the deque
        if self.idle_timeout is None:
            return
        now = time.monotonic()
        while self._idle and now - self._idle[0][1] > self.idle_timeout:
            connection, _ = self._idle.popleft()
            self._created -= 1
            connection.disconnect()

    def _ensure_connected(self, connection: redis.Connection) -> None:
        try:
            connection.connect()
            try:
                if connection.can_read():
                    raise redis.exceptions.ConnectionError('Connection has unread data.')
            except (redis.exceptions.ConnectionError, OSError):
                # Stale idle connection: the server closed it or left data behind
                connection.disconnect()
                connection.connect()
        except redis.exceptions.TimeoutError as e:
            raise ConnectTimeout(f'Timed out connecting to Redis at {self.address} after {self.timeout}s.') from e
        except redis.exceptions.ConnectionError as e:
            raise StoreConnectionError(f"Can't connect to Redis at {self.address}.") from e

    def _discard(self, connection: redis.Connection) -> None:
        with self._condition:
            if connection in self._in_use:
                self._in_use.remove(connection)
                self._created -= 1
            self._condition.notify()
        connection.disconnect()


class PooledStoreClient:
    """Redis client whose every command runs on a BoundedConnectionPool connection.

    Attributes:
        pool (BoundedConnectionPool):
            Pool lending connections to each command.
        redis (redis.Redis):
            redis-py client bound to `pool`.

    Methods:
        execute(command: str, *args, **kwargs) -> Any:
            Run a redis-py command method.
            Raises OperationTimeout if a read or write exceeded the timeout.
            Raises ConnectTimeout, PoolTimeout or StoreConnectionError on admission failures.

        ping() -> bool:
            Healthcheck the Redis server.

        close() -> None:
            Close every pooled connection.
    """

    def __init__(self, pool: BoundedConnectionPool):
        self.pool = pool
        self.redis = redis.Redis(connection_pool=pool)

    @classmethod
    def from_settings(cls, settings) -> 'PooledStoreClient':
        """Build a client from `lil.utils.config.CacheSettings`"""
        pool = BoundedConnectionPool(
            host=settings.host,
            port=settings.port,
            db=settings.db,
            username=settings.username,
            password=settings.password,
            max_active=settings.max_active,
            max_idle=settings.max_idle,
            timeout=settings.timeout,
            wait_timeout=settings.wait_timeout,
            idle_timeout=settings.idle_timeout,
        )
        return cls(pool)

    def execute(self, command: str, *args: Any, **kwargs: Any) -> Any:
        method = getattr(self.redis, command)
        try:
            return method(*args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise OperationTimeout(f'Redis {command.upper()} at {self.pool.address} exceeded {self.pool.timeout}s.') from e
        except redis.exceptions.ConnectionError as e:
            raise StoreConnectionError(f'Redis connection to {self.pool.address} failed during {command.upper()}.') from e

    def ping(self) -> bool:
        return bool(self.execute('ping'))

    def close(self) -> None:
        self.pool.disconnect()
