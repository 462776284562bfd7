import string
from enum import StrEnum


class Shortcode:
    """Shortcode generation and validation parameters."""

    DEFAULT_LENGTH = 8
    # Base62 without the look-alikes 0/O/o and 1/l/I
    ALPHABET = '23456789abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ'
    # Custom shortcodes may use the full base62 range
    VALID_CHARS = string.ascii_letters + string.digits
    # Path segment selecting the interstitial page: /p/<shortcode>
    PAGE_REDIRECT_PREFIX = 'p'
    RESERVED = frozenset({PAGE_REDIRECT_PREFIX, 'api'})


class Defaults:
    """Default tunables, overridable through Settings."""

    CREATE_RETRIES = 5
    SEARCH_DEFAULT_LIMIT = 20
    SEARCH_MAX_LIMIT = 100
    SEARCH_SCAN_COUNT = 100

    CACHE_HOST = 'localhost'
    CACHE_PORT = 6379
    CACHE_DB = 0
    CACHE_MAX_ACTIVE = 50
    CACHE_MAX_IDLE = 10
    CACHE_TIMEOUT_MS = 1_000
    CACHE_IDLE_TIMEOUT_MS = 300_000  # 5 minutes


class Datastore(StrEnum):
    REDIS = 'redis'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'LIL_ENV'
        BASE_URL = 'LIL_BASE_URL'
        URL_LENGTH = 'LIL_URL_LENGTH'
        REDIRECT_TEMPLATE_PATH = 'LIL_REDIRECT_TEMPLATE_PATH'
        PREFIX = 'LIL_PREFIX'
        DATASTORE = 'LIL_DATASTORE'
        CREATE_RETRIES = 'LIL_CREATE_RETRIES'
        SEARCH_MAX_LIMIT = 'LIL_SEARCH_MAX_LIMIT'
        LOG_LEVEL = 'LOG_LEVEL'

    class Cache(StrEnum):
        HOST = 'LIL_CACHE_HOST'
        PORT = 'LIL_CACHE_PORT'
        DB = 'LIL_CACHE_DB'
        USERNAME = 'LIL_CACHE_USERNAME'
        PASSWORD = 'LIL_CACHE_PASSWORD'  # noqa: S105
        MAX_ACTIVE = 'LIL_CACHE_MAX_ACTIVE'
        MAX_IDLE = 'LIL_CACHE_MAX_IDLE'
        TIMEOUT_MS = 'LIL_CACHE_TIMEOUT_MS'
        WAIT_TIMEOUT_MS = 'LIL_CACHE_WAIT_TIMEOUT_MS'
        IDLE_TIMEOUT_MS = 'LIL_CACHE_IDLE_TIMEOUT_MS'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
