"""Application wiring

Builds every component once from immutable Settings. Handlers obtain the
shared instance through `get_app()`; the connection pool inside it is the
only shared mutable resource.

Example:
    >>> app = create_app(Settings(base_url='https://lil.example.com'))
    >>> app.facade.create_link('https://example.com').shortcode
    'Xk7mQp2z'
"""

import logging
import threading
from dataclasses import dataclass
from string import Template
from typing import Optional

import lil
from lil.constants import Datastore
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.memory import ShortLinkMemoryDAO
from lil.dao.redis import ShortLinkRedisDAO
from lil.handlers.templates import load_redirect_template
from lil.services import ManagementFacade, ResolutionService
from lil.utils import ShortcodeGenerator, Settings, initialize_logging, load_settings


logger = logging.getLogger(__name__)

_app: Optional['Application'] = None
_app_lock = threading.Lock()


@dataclass(frozen=True)
class Application:
    settings: Settings
    dao: ShortLinkBaseDAO
    generator: ShortcodeGenerator
    resolver: ResolutionService
    facade: ManagementFacade
    redirect_page: Template


def create_dao(settings: Settings) -> ShortLinkBaseDAO:
    """Instantiate the configured link store backend"""
    if settings.datastore == Datastore.MEMORY:
        return ShortLinkMemoryDAO(
            search_default_limit=settings.search_default_limit,
            search_max_limit=settings.search_max_limit,
        )
    return ShortLinkRedisDAO(
        cache_settings=settings.cache,
        prefix=settings.prefix,
        search_default_limit=settings.search_default_limit,
        search_max_limit=settings.search_max_limit,
        search_scan_count=settings.search_scan_count,
    )


def create_app(settings: Settings, dao: Optional[ShortLinkBaseDAO] = None) -> Application:
    generator = ShortcodeGenerator(length=settings.url_length)
    dao = dao or create_dao(settings)
    return Application(
        settings=settings,
        dao=dao,
        generator=generator,
        resolver=ResolutionService(dao, generator),
        facade=ManagementFacade(dao, generator, create_retries=settings.create_retries),
        redirect_page=load_redirect_template(settings.redirect_template_path),
    )


def get_app() -> Application:
    """Return the process-wide Application, building it on first use"""
    global _app

    if _app is None:
        with _app_lock:
            if _app is None:
                initialize_logging()
                settings = load_settings()
                logger.info('Starting lil.', extra={'version': lil.__version__, 'datastore': str(settings.datastore)})
                _app = create_app(settings)
    return _app
