"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all ShortLink DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-memory).

Responsibilities:
    - Provide an interface for inserting, retrieving, deleting and searching short links.
    - Standardize error handling across multiple data store implementations.
    - Share limit clamping and expiry computation between implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from lil.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)
        >>> dao.insert('abc12345', 'https://example.com/blog/article-123')
        ShortLinkModel(shortcode='abc12345', target='https://example.com/blog/article-123', ...)

        >>> retrieved = dao.get('abc12345')
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> dao.delete('abc12345')
        >>> dao.get('abc12345')
        ShortLinkNotFoundError: Short link with code 'abc12345' not found.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, UTC
from typing import Optional

from lil.constants import Defaults
from lil.exceptions import InvalidLimitError
from lil.models import ShortLinkModel, SearchPage


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        insert(shortcode: str, target: str, ttl: int | None = None) -> ShortLinkModel:
            Atomically insert a new short link if the shortcode is free.
            Raises ShortLinkAlreadyExistsError if the shortcode already exists.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str) -> ShortLinkModel:
            Retrieve a live short link by shortcode.
            Raises ShortLinkNotFoundError if the entry is missing or expired.
            Raises DataStoreError on connection or read failure.

        delete(shortcode: str) -> None:
            Delete a short link.
            Raises ShortLinkNotFoundError if nothing was deleted.
            Raises DataStoreError on connection or write failure.

        search(query: str = '', cursor: str | None = None, limit: int | None = None) -> SearchPage:
            Return one page of links whose shortcode or target contains `query`.
            Raises InvalidLimitError for non-positive limits.
            Raises InvalidCursorError for malformed cursors.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortLinkRedisDAO or
        ShortLinkMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - A record whose expiry has passed must be invisible to every read,
          even if the data store has not physically evicted it yet.
        - There is no update operation: shortcode, target and created_at of
          a stored link never change.
    """

    search_default_limit: int = Defaults.SEARCH_DEFAULT_LIMIT
    search_max_limit: int = Defaults.SEARCH_MAX_LIMIT

    @abstractmethod
    def insert(self, shortcode: str, target: str, ttl: Optional[int] = None) -> ShortLinkModel:
        """Insert a new short link into the data store.

        Args:
            shortcode (str):
                The shortcode to claim.

            target (str):
                Destination URL.

            ttl (Optional[int]):
                Lifetime in seconds. None never expires. Zero or negative
                values produce an already expired link.

        Returns:
            ShortLinkModel: the stored link.

        Raises:
            ShortLinkAlreadyExistsError:
                If the shortcode is already taken.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str) -> ShortLinkModel:
        """Retrieve a short link from the data store by its shortcode.

        Raises:
            ShortLinkNotFoundError:
                If no live short link with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str) -> None:
        """Delete a short link from the data store.

        Raises:
            ShortLinkNotFoundError:
                If no short link with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def search(self, query: str = '', cursor: Optional[str] = None, limit: Optional[int] = None) -> SearchPage:
        """Retrieve one page of short links matching `query`.

        Args:
            query (str):
                Case-insensitive substring of the shortcode or target. Empty matches all.

            cursor (Optional[str]):
                Opaque cursor returned by the previous page. None starts over.

            limit (Optional[int]):
                Maximum page size, clamped to `search_max_limit`.

        Returns:
            SearchPage: matching links and the cursor of the next page.
        """
        pass

    def clamp_limit(self, limit: Optional[int]) -> int:
        """Resolve the effective page size

        Raises:
            InvalidLimitError: for limits below 1.
        """
        if limit is None:
            return self.search_default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidLimitError(f'Search limit must be a positive integer (given value: {limit!r}).')
        return min(limit, self.search_max_limit)

    @staticmethod
    def matches(link: ShortLinkModel, query: str) -> bool:
        if not query:
            return True
        query = query.lower()
        return query in link.shortcode.lower() or query in link.target.lower()

    @staticmethod
    def new_link(shortcode: str, target: str, ttl: Optional[int] = None) -> ShortLinkModel:
        now = datetime.now(UTC)
        expires_at = None if ttl is None else now + timedelta(seconds=ttl)
        return ShortLinkModel(shortcode=shortcode, target=target, created_at=now, expires_at=expires_at)
