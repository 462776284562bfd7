from lil.dao.redis.redis_key_schema import RedisKeySchema
from lil.dao.redis.pool import BoundedConnectionPool, PooledStoreClient, PoolStats
from lil.dao.redis.mixins import RedisClientMixin
from lil.dao.redis.short_link_redis_dao import ShortLinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'BoundedConnectionPool',
    'PooledStoreClient',
    'PoolStats',
    'RedisClientMixin',
    'ShortLinkRedisDAO',
]
