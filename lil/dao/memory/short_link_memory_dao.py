"""In-memory implementation of ShortLinkBaseDAO.

Meant for local development and tests. Expired links are dropped when they
are read, and every insert or search purges all expired links from the store.
"""

import threading
from datetime import datetime, UTC
from typing import Optional

from beartype import beartype

from lil.constants import Defaults
from lil.models import ShortLinkModel, SearchPage
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import InvalidCursorError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkMemoryDAO(ShortLinkBaseDAO):
    """Thread-safe dict-backed short link store.

    Search pages follow insertion order; the cursor is the number of matching
    links already returned.
    """

    def __init__(
        self,
        search_default_limit: int = Defaults.SEARCH_DEFAULT_LIMIT,
        search_max_limit: int = Defaults.SEARCH_MAX_LIMIT,
    ):
        self.search_default_limit = search_default_limit
        self.search_max_limit = search_max_limit
        self._links: dict[str, ShortLinkModel] = {}
        self._lock = threading.Lock()

    @beartype
    def insert(self, shortcode: str, target: str, ttl: Optional[int] = None) -> ShortLinkModel:
        link = self.new_link(shortcode, target, ttl)
        with self._lock:
            self._purge_expired()
            if shortcode in self._links:
                raise ShortLinkAlreadyExistsError(f"Short link with code '{shortcode}' already exists.")
            self._links[shortcode] = link
        return link

    @beartype
    def get(self, shortcode: str) -> ShortLinkModel:
        with self._lock:
            link = self._live(shortcode)
        if link is None:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
        return link

    @beartype
    def delete(self, shortcode: str) -> None:
        with self._lock:
            link = self._live(shortcode)
            if link is None:
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
            del self._links[shortcode]

    @beartype
    def search(self, query: str = '', cursor: Optional[str] = None, limit: Optional[int] = None) -> SearchPage:
        limit = self.clamp_limit(limit)
        offset = self._decode_cursor(cursor)

        with self._lock:
            self._purge_expired()
            matching = [link for link in self._links.values() if self.matches(link, query)]

        links = matching[offset : offset + limit]
        next_offset = offset + len(links)
        next_cursor = str(next_offset) if next_offset < len(matching) else None
        return SearchPage(links=links, next_cursor=next_cursor)

    def _live(self, shortcode: str) -> Optional[ShortLinkModel]:
        # Caller must hold self._lock
        link = self._links.get(shortcode)
        if link is not None and link.is_expired():
            del self._links[shortcode]
            return None
        return link

    def _purge_expired(self) -> None:
        # Caller must hold self._lock
        now = datetime.now(UTC)
        expired = [shortcode for shortcode, link in self._links.items() if link.is_expired(now)]
        for shortcode in expired:
            del self._links[shortcode]

    @staticmethod
    def _decode_cursor(cursor: Optional[str]) -> int:
        if not cursor:
            return 0
        if not (cursor.isascii() and cursor.isdecimal()):
            raise InvalidCursorError(f'Malformed search cursor {cursor!r}.')
        return int(cursor)
