"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO. Every
command runs on a connection borrowed from the shared BoundedConnectionPool.

Responsibilities:
    - Insert short links with a single atomic check-and-set (SET NX);
    - Delegate expiry to Redis (PXAT) while hiding expired records on read;
    - Retrieve, delete and search short links;
    - Translate transport failures into DataStoreError.

Persisted layout:
    <prefix>:links:<shortcode> -> '{"target": ..., "created_at": ..., "expires_at": ...}'

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from lil.dao.redis import ShortLinkRedisDAO
    >>> dao = ShortLinkRedisDAO(cache_settings=CacheSettings(host='localhost'), prefix='lil:dev')
    >>> dao.insert('abc12345', 'https://example.com/page', ttl=3600)
    ShortLinkModel(shortcode='abc12345', target='https://example.com/page', ...)
    >>> dao.get('abc12345').target
    'https://example.com/page'
"""

import json
import logging
from typing import Any, Optional

from beartype import beartype

from lil.constants import Defaults
from lil.models import ShortLinkModel, SearchPage
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.redis.mixins import RedisClientMixin
from lil.dao.redis.helpers import handle_redis_errors
from lil.dao.exceptions import DataStoreError, InvalidCursorError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError


logger = logging.getLogger(__name__)

# SCAN cursors are unsigned 64-bit integers
MAX_SCAN_CURSOR = 2**64


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link mappings

    Attributes (see RedisClientMixin):
        client (PooledStoreClient):
            Pooled client used to communicate with Redis.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        search_scan_count (int):
            COUNT hint passed to every SCAN issued by search().

    Methods:
        insert(shortcode: str, target: str, ttl: int | None = None) -> ShortLinkModel:
            SET <key> <value> NX [PXAT <expiry>].
            Raises ShortLinkAlreadyExistsError when the shortcode is taken.

        get(shortcode: str) -> ShortLinkModel:
            GET <key>. Raises ShortLinkNotFoundError when missing or expired.

        delete(shortcode: str) -> None:
            DEL <key>. Raises ShortLinkNotFoundError when nothing was deleted.

        search(query: str = '', cursor: str | None = None, limit: int | None = None) -> SearchPage:
            SCAN <cursor> MATCH <prefix>:links:* COUNT <n> + MGET, filtered by query.

    All methods raise DataStoreError on connectivity issues, timeouts or pool exhaustion.
    """

    def __init__(
        self,
        *args: Any,
        search_default_limit: int = Defaults.SEARCH_DEFAULT_LIMIT,
        search_max_limit: int = Defaults.SEARCH_MAX_LIMIT,
        search_scan_count: int = Defaults.SEARCH_SCAN_COUNT,
        **kwargs: Any,
    ):
        self.search_default_limit = search_default_limit
        self.search_max_limit = search_max_limit
        self.search_scan_count = search_scan_count
        super().__init__(*args, **kwargs)

    @handle_redis_errors
    @beartype
    def insert(self, shortcode: str, target: str, ttl: Optional[int] = None) -> ShortLinkModel:
        """Insert a short link mapping into Redis

        The existence check and the write are one command (SET NX), so two
        concurrent inserts of the same shortcode can never both succeed and a
        failed insert leaves nothing behind.

        Args:
            shortcode (str):
                The shortcode to claim.
            target (str):
                Destination URL.
            ttl (Optional[int]):
                Lifetime in seconds, enforced by Redis through PXAT.

        Returns:
            ShortLinkModel: the stored link.

        Raises:
            ShortLinkAlreadyExistsError:
                If a short link with the same shortcode already exists.
            DataStoreError:
                If Redis is unreachable or timed out.

        Example:
            >>> dao.insert('abc12345', 'https://example.com')
            ShortLinkModel(shortcode='abc12345', target='https://example.com', ...)
        """
        link = self.new_link(shortcode, target, ttl)

        options = {}
        if link.expires_at is not None:
            # PXAT in the past is accepted by Redis and evicts the key at once
            options['pxat'] = max(1, int(link.expires_at.timestamp() * 1000))

        stored = self.client.execute('set', self.keys.link_key(shortcode), self._encode(link), nx=True, **options)
        if not stored:
            raise ShortLinkAlreadyExistsError(f"Short link with code '{shortcode}' already exists.")

        logger.debug('Inserted short link.', extra={'shortcode': shortcode, 'ttl': ttl})
        return link

    @handle_redis_errors
    @beartype
    def get(self, shortcode: str) -> ShortLinkModel:
        """Retrieve a stored short link by shortcode

        Raises:
            ShortLinkNotFoundError:
                If the short link does not exist or has expired.
            DataStoreError:
                If Redis is unreachable or timed out.

        Example:
            >>> dao.get('abc12345')
            ShortLinkModel(shortcode='abc12345', target='https://example.com', ...)
        """
        value = self.client.execute('get', self.keys.link_key(shortcode))
        link = None if value is None else self._decode(shortcode, value)

        if link is None or link.is_expired():
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
        return link

    @handle_redis_errors
    @beartype
    def delete(self, shortcode: str) -> None:
        """Delete a short link

        Raises:
            ShortLinkNotFoundError:
                If the short link does not exist (deleting twice is not fatal,
                the second call just reports the miss).
            DataStoreError:
                If Redis is unreachable or timed out.
        """
        deleted = self.client.execute('delete', self.keys.link_key(shortcode))
        if not deleted:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
        logger.debug('Deleted short link.', extra={'shortcode': shortcode})

    @handle_redis_errors
    @beartype
    def search(self, query: str = '', cursor: Optional[str] = None, limit: Optional[int] = None) -> SearchPage:
        """Retrieve one page of short links matching `query`

        Pages follow Redis' native SCAN order. The cursor is
        '<scan cursor>:<matches to skip>': a page may end in the middle of a
        SCAN batch, in which case the next page replays that batch and skips
        what was already returned.

        NOTE:
            - SCAN guarantees every key present for the whole iteration is
              returned, but a key may be returned more than once if the keyspace
              is resized between pages.

        Raises:
            InvalidLimitError:
                If `limit` is not a positive integer.
            InvalidCursorError:
                If `cursor` is malformed.
            DataStoreError:
                If Redis is unreachable or timed out.

        Example:
            >>> page = dao.search('example', limit=2)
            >>> [link.shortcode for link in page.links], page.next_cursor
            (['abc12345', 'Xk7mQp2z'], '1536:0')
        """
        limit = self.clamp_limit(limit)
        scan_cursor, skip = self._decode_cursor(cursor)
        links: list[ShortLinkModel] = []

        while True:
            next_scan_cursor, keys = self.client.execute(
                'scan',
                cursor=scan_cursor,
                match=self.keys.link_pattern(),
                count=self.search_scan_count,
            )
            batch = [link for link in self._load(keys) if self.matches(link, query)][skip:]

            room = limit - len(links)
            if len(batch) > room:
                links.extend(batch[:room])
                return SearchPage(links=links, next_cursor=f'{scan_cursor}:{skip + room}')

            links.extend(batch)
            skip = 0
            if int(next_scan_cursor) == 0:
                return SearchPage(links=links, next_cursor=None)
            scan_cursor = int(next_scan_cursor)
            if len(links) == limit:
                return SearchPage(links=links, next_cursor=f'{scan_cursor}:0')

    def _load(self, keys: list[str]) -> list[ShortLinkModel]:
        if not keys:
            return []
        values = self.client.execute('mget', keys)
        links = []
        for key, value in zip(keys, values):
            # Expired or deleted between SCAN and MGET
            if value is None:
                continue
            link = self._decode(self.keys.shortcode_from_key(key), value)
            if not link.is_expired():
                links.append(link)
        return links

    @staticmethod
    def _encode(link: ShortLinkModel) -> str:
        return json.dumps(
            {
                'target': link.target,
                'created_at': link.created_at.isoformat(),
                'expires_at': link.expires_at.isoformat() if link.expires_at else None,
            }
        )

    @staticmethod
    def _decode(shortcode: str, value: str) -> ShortLinkModel:
        try:
            data = json.loads(value)
            if not isinstance(data, dict):
                raise TypeError(f'expected a JSON object, got {type(data).__name__}')
            return ShortLinkModel.from_dict({**data, 'shortcode': shortcode})
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise DataStoreError(f"Malformed short link record for code '{shortcode}'.") from e

    @staticmethod
    def _decode_cursor(cursor: Optional[str]) -> tuple[int, int]:
        if not cursor:
            return 0, 0
        try:
            scan_cursor, skip = (int(part) for part in cursor.split(':'))
        except ValueError as e:
            raise InvalidCursorError(f'Malformed search cursor {cursor!r}.') from e
        if not 0 <= scan_cursor < MAX_SCAN_CURSOR or skip < 0:
            raise InvalidCursorError(f'Malformed search cursor {cursor!r}.')
        return scan_cursor, skip
