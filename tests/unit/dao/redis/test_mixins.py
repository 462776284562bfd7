"""Unit tests for RedisClientMixin.

Test coverage includes:

1. Initialization
   - Ensures a provided client is reused and a key schema is built from the prefix.
   - Ensures a client is created from CacheSettings when none is given.

2. Healthcheck
   - Ensures successful pings return True.
   - Ensures failures raise DataStoreError or return False with raise_error=False.
"""

from unittest.mock import patch

import pytest

from lil.dao.exceptions import DataStoreError
from lil.dao.redis.exceptions import ConnectTimeout
from lil.dao.redis.mixins import RedisClientMixin
from lil.utils.config import CacheSettings


# -------------------------------
# 1. Initialization
# -------------------------------


def test_init_with_client(store_client, app_prefix):
    mixin = RedisClientMixin(client=store_client, prefix=app_prefix)

    assert mixin.client is store_client
    assert mixin.keys.prefix == app_prefix
    store_client.ping.assert_called_once()


def test_init_from_cache_settings(store_client):
    settings = CacheSettings(host='redis.test')
    with patch('lil.dao.redis.mixins.PooledStoreClient.from_settings', return_value=store_client) as from_settings:
        mixin = RedisClientMixin(cache_settings=settings, healthcheck=False)

    from_settings.assert_called_once_with(settings)
    assert mixin.client is store_client
    assert mixin.keys.prefix is None


# -------------------------------
# 2. Healthcheck
# -------------------------------


def test_healthcheck_success(store_client):
    mixin = RedisClientMixin(client=store_client, healthcheck=False)
    assert mixin._healthcheck() is True


def test_healthcheck_failure_raises(store_client):
    store_client.ping.side_effect = ConnectTimeout('timeout')
    mixin = RedisClientMixin(client=store_client, healthcheck=False)

    with pytest.raises(DataStoreError, match='redis.test:6379/0'):
        mixin._healthcheck()


def test_healthcheck_failure_without_raising(store_client):
    store_client.ping.side_effect = ConnectTimeout('timeout')
    mixin = RedisClientMixin(client=store_client, healthcheck=False)

    assert mixin._healthcheck(raise_error=False) is False
