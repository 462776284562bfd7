"""Redis mixin providing shared pooled client initialization and connectivity checks.

Responsibilities:
    - Initialize (or accept) a PooledStoreClient
    - Healthcheck the Redis server

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
        ...     pass
        ...
        >>> dao = ShortLinkRedisDAO(cache_settings=CacheSettings(host='redis'), prefix='lil:prod')
        >>> dao._healthcheck()
        True
"""

import logging
from typing import Optional

from lil.dao.redis.pool import PooledStoreClient
from lil.dao.redis.redis_key_schema import RedisKeySchema
from lil.dao.redis.exceptions import TransportError
from lil.dao.exceptions import DataStoreError
from lil.utils.config import CacheSettings


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Mixin pooled Redis client setup and health check for Redis-backed DAOs.

    Attributes:
        client (PooledStoreClient):
            Pooled client shared by every operation of the DAO.

        keys (RedisKeySchema):
            Helper class for generating namespaced Redis key names.

    Methods:
        _healthcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
            Optionally raise a DataStoreError if unreachable.
    """

    def __init__(
        self,
        client: Optional[PooledStoreClient] = None,
        cache_settings: Optional[CacheSettings] = None,
        prefix: Optional[str] = None,
        healthcheck: bool = True,
    ):
        """Initialize a Redis-based DAO

        The option is given to either share an existing PooledStoreClient (and
        therefore its connection pool) or create one from CacheSettings.

        Args:
            client (Optional[PooledStoreClient]):
                Pre-initialized pooled client. If None, a new one is created.

            cache_settings (Optional[CacheSettings]):
                Connection pool settings used when no client is given.
                Defaults to CacheSettings().

            prefix (Optional[str]):
                Namespace prefix for all Redis keys, e.g. 'lil:prod'.

            healthcheck (bool):
                PING Redis on initialization. Defaults to True.

        Raises:
            DataStoreError:
                If the Redis healthcheck fails (connectivity issues).
        """
        if client is None:
            client = PooledStoreClient.from_settings(cache_settings or CacheSettings())

        self.client = client
        self.keys = RedisKeySchema(prefix=prefix)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis cannot be reached and raise_error=True.
        """
        try:
            self.client.ping()
        except TransportError as e:
            address = self.client.pool.address
            if raise_error:
                raise DataStoreError(f"Can't connect to Redis at {address}. Check the provided configuration parameters.") from e
            logger.warning('Redis healthcheck failed.', extra={'address': address})
            return False
        else:
            return True
