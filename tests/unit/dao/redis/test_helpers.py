"""Unit tests for handle_redis_errors decorator.

This test suite verifies that the decorator properly handles transport
failures and preserves the original method's behavior.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Transport error handling
       - Ensures every transport error is converted into DataStoreError.
       - Ensures non-transport exceptions propagate unchanged.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
"""

import pytest
from unittest.mock import MagicMock

from lil.dao.redis.helpers import handle_redis_errors
from lil.dao.redis.exceptions import ConnectTimeout, OperationTimeout, PoolTimeout, StoreConnectionError
from lil.dao.exceptions import DataStoreError, ShortLinkNotFoundError


class DummyDAO:
    def __init__(self, error=None):
        self.client = MagicMock()
        self.client.pool.address = 'localhost:6379/0'
        self.error = error

    @handle_redis_errors
    def run(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    assert DummyDAO().run() == 'OK'


# -------------------------------
# 2. Transport error handling
# -------------------------------


@pytest.mark.parametrize(
    'error, reason',
    [
        (ConnectTimeout(), 'connect timeout'),
        (OperationTimeout(), 'operation timeout'),
        (PoolTimeout(), 'connection pool exhausted'),
        (StoreConnectionError(), 'connection error'),
    ],
)
def test_decorator_transforms_transport_errors(error, reason):
    with pytest.raises(DataStoreError, match=rf"Can't reach Redis at localhost:6379/0 \({reason}\)\.") as exc_info:
        DummyDAO(error).run()
    assert exc_info.value.__cause__ is error


def test_decorator_lets_domain_errors_through():
    with pytest.raises(ShortLinkNotFoundError):
        DummyDAO(ShortLinkNotFoundError('missing')).run()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    @handle_redis_errors
    def sample_function():
        """This is a sample docstring."""

    assert sample_function.__name__ == 'sample_function'
    assert sample_function.__doc__ == 'This is a sample docstring.'
