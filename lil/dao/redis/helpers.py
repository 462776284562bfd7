import functools
import logging
from typing import TypeVar, Any
from collections.abc import Callable

from lil.dao.exceptions import DataStoreError
from lil.dao.redis.exceptions import TransportError, ConnectTimeout, OperationTimeout, PoolTimeout


__all__ = []

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate transport errors

    Callers above the DAO never see pool internals: connect/operation/pool
    timeouts and connection failures all surface as DataStoreError, with the
    transport exception chained as `__cause__`.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations through `self.client`.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on transport failures.

    Example:
        >>> @handle_redis_errors
        ... def get(self, shortcode):
        ...     return self.client.execute('get', shortcode)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except TransportError as e:
            address = self.client.pool.address
            if isinstance(e, ConnectTimeout):
                reason = 'connect timeout'
            elif isinstance(e, OperationTimeout):
                reason = 'operation timeout'
            elif isinstance(e, PoolTimeout):
                reason = 'connection pool exhausted'
            else:
                reason = 'connection error'
            logger.warning(
                'Redis unavailable.',
                extra={'address': address, 'reason': reason, 'operation': method.__name__},
            )
            raise DataStoreError(f"Can't reach Redis at {address} ({reason}).") from e

    return wrapper
