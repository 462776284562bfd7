"""Management facade behind the /api routes

Classes:
    ManagementFacade:
        Create, get, search and delete short links.

Example:
    >>> facade = ManagementFacade(dao, generator, create_retries=5)
    >>> facade.create_link('https://example.com/a', shortcode='abc12345')
    ShortLinkModel(shortcode='abc12345', target='https://example.com/a', ...)
    >>> facade.create_link('https://example.com/b').shortcode
    'Xk7mQp2z'
"""

import logging
from typing import Optional

from lil.constants import Defaults
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import ShortLinkAlreadyExistsError
from lil.exceptions import CreateExhaustedError
from lil.models import ShortLinkModel, SearchPage
from lil.utils.shortener import ShortcodeGenerator, validate_target_url


logger = logging.getLogger(__name__)


class ManagementFacade:
    """Thin orchestration over ShortLinkBaseDAO

    Attributes:
        dao (ShortLinkBaseDAO):
            Link store every call delegates to.
        generator (ShortcodeGenerator):
            Generates codes and validates custom ones.
        create_retries (int):
            Insert attempts made with generated codes before giving up.

    Methods:
        create_link(target: str, shortcode: str | None = None, ttl: int | None = None) -> ShortLinkModel:
            Raises InvalidTargetURLError, InvalidShortcodeError,
            ShortLinkAlreadyExistsError (custom code taken) or
            CreateExhaustedError (every generated code collided).

        get_link(shortcode: str) -> ShortLinkModel
        search_links(query: str = '', cursor: str | None = None, limit: int | None = None) -> SearchPage
        delete_link(shortcode: str) -> None
            Delegate to the DAO; its exceptions propagate unchanged.
    """

    def __init__(self, dao: ShortLinkBaseDAO, generator: ShortcodeGenerator, create_retries: int = Defaults.CREATE_RETRIES):
        if create_retries < 1:
            raise ValueError(f'create_retries must be a positive integer (given value: {create_retries}).')
        self.dao = dao
        self.generator = generator
        self.create_retries = create_retries

    def create_link(self, target: str, shortcode: Optional[str] = None, ttl: Optional[int] = None) -> ShortLinkModel:
        target = validate_target_url(target)

        # Caller-chosen codes are attempted once: a collision is the caller's to resolve
        if shortcode:
            self.generator.validate(shortcode)
            link = self.dao.insert(shortcode, target, ttl)
            logger.info('Created short link with custom shortcode.', extra={'shortcode': shortcode})
            return link

        for attempt in range(1, self.create_retries + 1):
            candidate = self.generator.generate()
            try:
                link = self.dao.insert(candidate, target, ttl)
            except ShortLinkAlreadyExistsError:
                logger.warning(
                    'Generated shortcode collided with an existing one.',
                    extra={'shortcode': candidate, 'attempt': attempt},
                )
                continue
            logger.info('Created short link.', extra={'shortcode': candidate, 'attempt': attempt})
            return link

        raise CreateExhaustedError(f'Could not generate a free shortcode after {self.create_retries} attempts.')

    def get_link(self, shortcode: str) -> ShortLinkModel:
        return self.dao.get(shortcode)

    def search_links(self, query: str = '', cursor: Optional[str] = None, limit: Optional[int] = None) -> SearchPage:
        return self.dao.search(query=query, cursor=cursor, limit=limit)

    def delete_link(self, shortcode: str) -> None:
        self.dao.delete(shortcode)
        logger.info('Deleted short link.', extra={'shortcode': shortcode})
