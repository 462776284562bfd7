"""Unit tests for the configuration layer in config.py.

Test coverage includes:

1. CacheSettings
   - Ensures defaults and millisecond to second conversion.
   - Ensures invalid pool bounds raise BadConfigurationError.

2. Settings.from_dict()
   - Ensures a full document is parsed.
   - Ensures zero or empty values fall back to defaults.
   - Ensures missing base_url, bad integers and unknown datastores are rejected.

3. load_settings()
   - Ensures LIL_* environment variables are read.
   - Ensures a missing LIL_BASE_URL raises MissingEnvironmentVariableError.
"""

import pytest

from lil.constants import Datastore, Defaults, Shortcode
from lil.exceptions import BadConfigurationError, MissingEnvironmentVariableError
from lil.utils.config import CacheSettings, Settings, load_settings


# -------------------------------
# 1. CacheSettings
# -------------------------------


def test_cache_settings_defaults():
    cache = CacheSettings()
    assert cache.host == 'localhost'
    assert cache.port == 6379
    assert cache.timeout == 1.0
    assert cache.wait_timeout is None
    assert cache.idle_timeout == 300.0


def test_cache_settings_from_dict_converts_milliseconds():
    cache = CacheSettings.from_dict(
        {
            'host': 'redis.test',
            'port': '6380',
            'max_active': 4,
            'max_idle': 2,
            'timeout': 250,
            'wait_timeout': '1500',
            'idle_timeout': 0,
        }
    )
    assert cache.host == 'redis.test'
    assert cache.port == 6380
    assert cache.max_active == 4
    assert cache.max_idle == 2
    assert cache.timeout == 0.25
    assert cache.wait_timeout == 1.5
    assert cache.idle_timeout == 0.0


@pytest.mark.parametrize(
    'kwargs',
    [
        {'max_active': 0},
        {'max_active': 2, 'max_idle': 3},
        {'max_idle': -1},
        {'timeout': 0},
    ],
)
def test_cache_settings_rejects_invalid_bounds(kwargs):
    with pytest.raises(BadConfigurationError):
        CacheSettings(**kwargs)


def test_cache_settings_rejects_non_integer():
    with pytest.raises(BadConfigurationError, match='cache.port'):
        CacheSettings.from_dict({'port': 'redis'})


# -------------------------------
# 2. Settings.from_dict()
# -------------------------------


def test_settings_from_dict():
    settings = Settings.from_dict(
        {
            'base_url': 'https://lil.example.com',
            'url_length': 6,
            'prefix': 'lil:test',
            'datastore': 'MEMORY',
            'create_retries': 3,
            'search_max_limit': 50,
            'cache': {'host': 'redis.test'},
        }
    )
    assert settings.base_url == 'https://lil.example.com'
    assert settings.url_length == 6
    assert settings.prefix == 'lil:test'
    assert settings.datastore == Datastore.MEMORY
    assert settings.create_retries == 3
    assert settings.search_max_limit == 50
    assert settings.cache.host == 'redis.test'


def test_settings_zero_values_keep_defaults():
    settings = Settings.from_dict({'base_url': 'https://lil.example.com', 'url_length': 0, 'create_retries': 0, 'datastore': ''})
    assert settings.url_length == Shortcode.DEFAULT_LENGTH
    assert settings.create_retries == Defaults.CREATE_RETRIES
    assert settings.datastore == Datastore.REDIS


def test_settings_missing_base_url():
    with pytest.raises(BadConfigurationError, match='base_url'):
        Settings.from_dict({'url_length': 8})


def test_settings_unknown_datastore():
    with pytest.raises(BadConfigurationError, match='datastore'):
        Settings.from_dict({'base_url': 'https://lil.example.com', 'datastore': 'postgres'})


def test_settings_are_immutable():
    settings = Settings(base_url='https://lil.example.com')
    with pytest.raises(AttributeError):
        settings.base_url = 'https://other.example.com'


# -------------------------------
# 3. load_settings()
# -------------------------------


def test_load_settings_from_environ():
    environ = {
        'LIL_BASE_URL': 'https://lil.example.com',
        'LIL_URL_LENGTH': '10',
        'LIL_DATASTORE': 'memory',
        'LIL_CACHE_HOST': 'redis.test',
        'LIL_CACHE_MAX_ACTIVE': '8',
        'LIL_CACHE_MAX_IDLE': '1',
        'LIL_CACHE_TIMEOUT_MS': '500',
        'LIL_CACHE_WAIT_TIMEOUT_MS': '2000',
    }
    settings = load_settings(environ=environ)

    assert settings.url_length == 10
    assert settings.datastore == Datastore.MEMORY
    assert settings.cache.host == 'redis.test'
    assert settings.cache.max_active == 8
    assert settings.cache.max_idle == 1
    assert settings.cache.timeout == 0.5
    assert settings.cache.wait_timeout == 2.0


def test_load_settings_from_os_environ(monkeypatch):
    monkeypatch.setenv('LIL_BASE_URL', 'https://lil.example.com')
    monkeypatch.delenv('LIL_DATASTORE', raising=False)
    settings = load_settings()
    assert settings.base_url == 'https://lil.example.com'
    assert settings.datastore == Datastore.REDIS


def test_load_settings_missing_base_url():
    with pytest.raises(MissingEnvironmentVariableError, match='LIL_BASE_URL'):
        load_settings(environ={'LIL_URL_LENGTH': '8'})
