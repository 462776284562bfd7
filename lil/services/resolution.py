"""Resolution of shortcodes on the redirect path

Classes:
    RedirectMode:
        DIRECT (302 redirect) or INTERSTITIAL (confirmation page first).

    Hit, Miss:
        Outcomes of ResolutionService.lookup().

    ResolutionService:
        Map a shortcode (or request path) to a redirect outcome.

Example:
    >>> resolver = ResolutionService(dao, generator)
    >>> resolver.resolve_path('/p/abc12345')
    Hit(target='https://example.com/a', mode=<RedirectMode.INTERSTITIAL: 'interstitial'>, shortcode='abc12345')
    >>> resolver.lookup('zzzzzzzz')
    Miss(shortcode='zzzzzzzz')
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

from lil.constants import Shortcode
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import ShortLinkNotFoundError
from lil.utils.shortener import ShortcodeGenerator


logger = logging.getLogger(__name__)


class RedirectMode(StrEnum):
    DIRECT = 'direct'
    INTERSTITIAL = 'interstitial'


@dataclass(frozen=True)
class Hit:
    target: str
    mode: RedirectMode
    shortcode: str


@dataclass(frozen=True)
class Miss:
    shortcode: str


class ResolutionService:
    """Stateless routing decision over ShortLinkBaseDAO.get()

    Attributes:
        dao (ShortLinkBaseDAO):
            Link store queried for every lookup.
        generator (ShortcodeGenerator):
            Used to reject malformed codes before touching the store.

    NOTE:
        - DataStoreError propagates: an unreachable store is a server error,
          never a Miss.
    """

    def __init__(self, dao: ShortLinkBaseDAO, generator: ShortcodeGenerator):
        self.dao = dao
        self.generator = generator

    def lookup(self, shortcode: str, interstitial: bool = False) -> Hit | Miss:
        if not self.generator.is_valid(shortcode):
            logger.debug('Rejected malformed shortcode without lookup.', extra={'shortcode': shortcode})
            return Miss(shortcode=shortcode)

        try:
            link = self.dao.get(shortcode)
        except ShortLinkNotFoundError:
            return Miss(shortcode=shortcode)

        mode = RedirectMode.INTERSTITIAL if interstitial else RedirectMode.DIRECT
        return Hit(target=link.target, mode=mode, shortcode=shortcode)

    def resolve_path(self, path: str) -> Hit | Miss:
        """Resolve a request path: '/<code>' is direct, '/p/<code>' is interstitial"""
        segments = [segment for segment in path.split('/') if segment]

        if len(segments) == 1:
            return self.lookup(segments[0])
        if len(segments) == 2 and segments[0] == Shortcode.PAGE_REDIRECT_PREFIX:
            return self.lookup(segments[1], interstitial=True)
        return Miss(shortcode='/'.join(segments))
