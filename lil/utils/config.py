"""Application configuration.

Configuration is resolved once at start-up into immutable `Settings` which are
passed explicitly to every component. Nothing reads configuration at request
time and there is no process-wide mutable state.

Settings come either from environment variables (`load_settings()`) or from an
already parsed configuration document (`Settings.from_dict()`):

    {
        "base_url": "https://lil.example.com",
        "url_length": 8,
        "redirect_template_path": "./templates/redirect_page.html",
        "datastore": "redis",
        "cache": {
            "host": "localhost",
            "port": 6379,
            "password": "secret",
            "max_active": 50,
            "max_idle": 10,
            "timeout": 1000
        }
    }

Durations (`timeout`, `wait_timeout`, `idle_timeout`) are given in
milliseconds and stored in seconds.

Functions:
    load_settings(environ: Mapping[str, str] | None = None) -> Settings
        Build Settings from `LIL_*` environment variables.

Example:
    >>> os.environ['LIL_BASE_URL'] = 'https://lil.example.com'
    >>> settings = load_settings()
    >>> settings.cache.max_active
    50
"""

import os
import logging
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any, Optional

from lil.constants import ENV, Datastore, Defaults, Shortcode
from lil.exceptions import BadConfigurationError
from lil.types import ConfigDocument
from lil.utils.helpers import require_environment


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheSettings:
    """Connection settings for the Redis connection pool.

    Attributes:
        host, port, db, username, password:
            Redis server address and credentials.
        max_active (int):
            Hard cap on simultaneously open connections.
        max_idle (int):
            Number of idle connections kept warm.
        timeout (float):
            Seconds allowed for each of the connect, read and write phases.
        wait_timeout (Optional[float]):
            Seconds a caller may wait for a free connection. None waits forever.
        idle_timeout (Optional[float]):
            Seconds after which idle connections are closed. None keeps them.
    """

    host: str = Defaults.CACHE_HOST
    port: int = Defaults.CACHE_PORT
    db: int = Defaults.CACHE_DB
    username: Optional[str] = None
    password: Optional[str] = None
    max_active: int = Defaults.CACHE_MAX_ACTIVE
    max_idle: int = Defaults.CACHE_MAX_IDLE
    timeout: float = Defaults.CACHE_TIMEOUT_MS / 1000
    wait_timeout: Optional[float] = None
    idle_timeout: Optional[float] = Defaults.CACHE_IDLE_TIMEOUT_MS / 1000

    def __post_init__(self):
        if self.max_active < 1:
            raise BadConfigurationError(f'cache.max_active must be at least 1 (given value: {self.max_active}).')
        if self.max_idle < 0 or self.max_idle > self.max_active:
            raise BadConfigurationError(f'cache.max_idle must be between 0 and max_active (given value: {self.max_idle}).')
        if self.timeout <= 0:
            raise BadConfigurationError(f'cache.timeout must be positive (given value: {self.timeout}).')

    @classmethod
    def from_dict(cls, data: ConfigDocument) -> 'CacheSettings':
        return cls(
            host=data.get('host', Defaults.CACHE_HOST),
            port=_as_int('cache.port', data.get('port', Defaults.CACHE_PORT)),
            db=_as_int('cache.db', data.get('db', Defaults.CACHE_DB)),
            username=data.get('username') or None,
            password=data.get('password') or None,
            max_active=_as_int('cache.max_active', data.get('max_active', Defaults.CACHE_MAX_ACTIVE)),
            max_idle=_as_int('cache.max_idle', data.get('max_idle', Defaults.CACHE_MAX_IDLE)),
            timeout=_ms_to_seconds('cache.timeout', data.get('timeout', Defaults.CACHE_TIMEOUT_MS)),
            wait_timeout=_ms_to_seconds('cache.wait_timeout', data.get('wait_timeout')),
            idle_timeout=_ms_to_seconds('cache.idle_timeout', data.get('idle_timeout', Defaults.CACHE_IDLE_TIMEOUT_MS)),
        )


@dataclass(frozen=True)
class Settings:
    """Immutable application settings.

    Attributes:
        base_url (str):
            Public base URL used to render short URLs.
        url_length (int):
            Length of generated and custom shortcodes.
        redirect_template_path (Optional[str]):
            Template for the interstitial page. None uses the built-in page.
        prefix (Optional[str]):
            Namespace prefix for data store keys.
        datastore (Datastore):
            Link store backend.
        create_retries (int):
            Attempts made when inserting generated shortcodes.
        search_default_limit, search_max_limit (int):
            Default and maximum search page sizes.
        search_scan_count (int):
            COUNT hint given to Redis SCAN while searching.
        cache (CacheSettings):
            Redis connection pool settings.
    """

    base_url: str
    url_length: int = Shortcode.DEFAULT_LENGTH
    redirect_template_path: Optional[str] = None
    prefix: Optional[str] = None
    datastore: Datastore = Datastore.REDIS
    create_retries: int = Defaults.CREATE_RETRIES
    search_default_limit: int = Defaults.SEARCH_DEFAULT_LIMIT
    search_max_limit: int = Defaults.SEARCH_MAX_LIMIT
    search_scan_count: int = Defaults.SEARCH_SCAN_COUNT
    cache: CacheSettings = field(default_factory=CacheSettings)

    def __post_init__(self):
        if not self.base_url:
            raise BadConfigurationError('base_url must be set.')
        if self.url_length < 1:
            raise BadConfigurationError(f'url_length must be at least 1 (given value: {self.url_length}).')
        if self.create_retries < 1:
            raise BadConfigurationError(f'create_retries must be at least 1 (given value: {self.create_retries}).')
        if not 1 <= self.search_default_limit <= self.search_max_limit:
            raise BadConfigurationError('search_default_limit must be between 1 and search_max_limit.')

    @classmethod
    def from_dict(cls, data: ConfigDocument) -> 'Settings':
        """Build Settings from a parsed configuration document

        Raises:
            BadConfigurationError: on missing or invalid values.
        """
        if not data.get('base_url'):
            raise BadConfigurationError("Missing 'base_url' in configuration.")

        # A zero or empty value keeps the default, as in the flag/file config merge
        return cls(
            base_url=data['base_url'],
            url_length=_as_int('url_length', data.get('url_length') or Shortcode.DEFAULT_LENGTH),
            redirect_template_path=data.get('redirect_template_path') or None,
            prefix=data.get('prefix') or None,
            datastore=_as_datastore(data.get('datastore') or Datastore.REDIS),
            create_retries=_as_int('create_retries', data.get('create_retries') or Defaults.CREATE_RETRIES),
            search_max_limit=_as_int('search_max_limit', data.get('search_max_limit') or Defaults.SEARCH_MAX_LIMIT),
            cache=CacheSettings.from_dict(data.get('cache') or {}),
        )


@require_environment(ENV.App.BASE_URL)
def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load Settings from `LIL_*` environment variables

    Args:
        environ (Optional[Mapping[str, str]]):
            Environment to read from. Defaults to `os.environ`.

    Returns:
        Settings: immutable application settings.

    Raises:
        MissingEnvironmentVariableError:
            If `LIL_BASE_URL` is not set.
        BadConfigurationError:
            If any variable holds an invalid value.
    """
    if environ is None:
        environ = os.environ

    def get(name: str) -> Optional[str]:
        return environ.get(name) or None

    document: dict[str, Any] = {
        'base_url': get(ENV.App.BASE_URL),
        'url_length': get(ENV.App.URL_LENGTH),
        'redirect_template_path': get(ENV.App.REDIRECT_TEMPLATE_PATH),
        'prefix': get(ENV.App.PREFIX),
        'datastore': get(ENV.App.DATASTORE),
        'create_retries': get(ENV.App.CREATE_RETRIES),
        'search_max_limit': get(ENV.App.SEARCH_MAX_LIMIT),
        'cache': {
            key: value
            for key, value in {
                'host': get(ENV.Cache.HOST),
                'port': get(ENV.Cache.PORT),
                'db': get(ENV.Cache.DB),
                'username': get(ENV.Cache.USERNAME),
                'password': get(ENV.Cache.PASSWORD),
                'max_active': get(ENV.Cache.MAX_ACTIVE),
                'max_idle': get(ENV.Cache.MAX_IDLE),
                'timeout': get(ENV.Cache.TIMEOUT_MS),
                'wait_timeout': get(ENV.Cache.WAIT_TIMEOUT_MS),
                'idle_timeout': get(ENV.Cache.IDLE_TIMEOUT_MS),
            }.items()
            if value is not None
        },
    }
    settings = Settings.from_dict(document)
    logger.debug(
        'Loaded settings from environment.',
        extra={'datastore': str(settings.datastore), 'cacheHost': settings.cache.host, 'cachePort': settings.cache.port},
    )
    return settings


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f'{name} must be an integer (given value: {value!r}).') from e


def _ms_to_seconds(name: str, value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    return _as_int(name, value) / 1000


def _as_datastore(value: Any) -> Datastore:
    try:
        return Datastore(str(value).lower())
    except ValueError as e:
        choices = ', '.join(d.value for d in Datastore)
        raise BadConfigurationError(f'datastore must be one of {choices} (given value: {value!r}).') from e
