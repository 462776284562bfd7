"""Transport-level exceptions raised by the pooled Redis client.

These never leave the DAO layer: `handle_redis_errors` wraps them into
`lil.dao.exceptions.DataStoreError`.
"""


class TransportError(Exception):
    """Generic base class for connection pool and transport errors."""


class ConnectTimeout(TransportError):
    """Establishing a new connection exceeded the configured timeout."""


class OperationTimeout(TransportError):
    """Reading or writing on an acquired connection exceeded the configured timeout."""


class PoolTimeout(TransportError):
    """No connection became available within the configured wait timeout."""


class StoreConnectionError(TransportError):
    """The connection could not be established or broke mid-operation."""
